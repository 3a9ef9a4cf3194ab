from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional, Union, Callable, Tuple, Mapping, Sequence
import copy
import functools
import random as _random
import urllib.parse

from fluentkit.Exceptions import InvalidArgumentException
from fluentkit.Support.Helpers import adapt_callback, compare, data_get, enum_value, value

ArrayLike = Union[Dict[Any, Any], List[Any], Tuple[Any, ...], Mapping[Any, Any]]


class Arr:
    """Laravel-style array helper class with dot notation support.

    "Arrays" are Python dicts (ordered maps) and lists. Helpers that keep keys
    return a list when the resulting keys are ``0..n-1`` in order and a dict
    otherwise, mirroring how a PHP array serializes.
    """

    # Container primitives
    @staticmethod
    def accessible(target: Any) -> bool:
        """Determine whether the given value is array accessible."""
        return isinstance(target, (Mapping, list, tuple)) or (
            not isinstance(target, type)
            and callable(getattr(target, 'offset_exists', None))
            and callable(getattr(target, 'offset_get', None))
        )

    @staticmethod
    def _lookup_key(data: Any, key: Any) -> Any:
        """Resolve the concrete key stored in a container for a possibly stringified key."""
        if isinstance(data, Mapping):
            if key in data:
                return key
            if isinstance(key, str) and key.lstrip('-').isdigit() and int(key) in data:
                return int(key)
            if isinstance(key, int) and not isinstance(key, bool) and str(key) in data:
                return str(key)
            if isinstance(key, float) and str(key) in data:
                return str(key)
            return key
        if isinstance(data, (list, tuple)) and isinstance(key, str) and key.isdigit():
            return int(key)
        return key

    @staticmethod
    def exists(data: Any, key: Any) -> bool:
        """Determine if the given key exists in the provided array."""
        if isinstance(data, Mapping):
            return Arr._lookup_key(data, key) in data
        if isinstance(data, (list, tuple)):
            key = Arr._lookup_key(data, key)
            return isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(data)
        if hasattr(data, 'offset_exists'):
            return bool(data.offset_exists(key))
        return False

    @staticmethod
    def offset(data: Any, key: Any) -> Any:
        """Read the value stored at a key, assuming it exists."""
        if isinstance(data, (Mapping, list, tuple)):
            return data[Arr._lookup_key(data, key)]
        return data.offset_get(key)

    @staticmethod
    def offset_set(data: Any, key: Any, new_value: Any) -> None:
        """Write a value at a key, appending when the key is None."""
        if isinstance(data, list):
            if key is None or Arr._lookup_key(data, key) == len(data):
                data.append(new_value)
            else:
                data[Arr._lookup_key(data, key)] = new_value
        elif isinstance(data, dict):
            if key is None:
                key = Arr.next_index(data)
            elif Arr._lookup_key(data, key) in data:
                key = Arr._lookup_key(data, key)
            data[key] = new_value
        else:
            data.offset_set(key, new_value)

    @staticmethod
    def offset_unset(data: Any, key: Any) -> None:
        """Remove the value stored at a key if present."""
        if not Arr.exists(data, key):
            return
        if isinstance(data, (dict, list)):
            del data[Arr._lookup_key(data, key)]
        else:
            data.offset_unset(key)

    @staticmethod
    def items_of(data: Any) -> Iterator[Tuple[Any, Any]]:
        """Iterate over the (key, value) pairs of an array-like value."""
        if isinstance(data, Mapping):
            return iter(list(data.items()))
        if isinstance(data, (list, tuple)):
            return enumerate(data)
        if hasattr(data, 'items') and callable(data.items):
            return iter(data.items())
        return enumerate(data)

    @staticmethod
    def keys_of(data: Any) -> List[Any]:
        """Get the keys of an array-like value."""
        return [key for key, _ in Arr.items_of(data)]

    @staticmethod
    def values_of(data: Any) -> List[Any]:
        """Get the values of an array-like value."""
        return [item for _, item in Arr.items_of(data)]

    @staticmethod
    def to_dict(data: Any) -> Dict[Any, Any]:
        """Convert an array-like value into an ordered dict."""
        return dict(Arr.items_of(data))

    @staticmethod
    def next_index(data: Mapping[Any, Any]) -> int:
        """Next integer key PHP would assign when appending to this map."""
        int_keys = [key for key in data if isinstance(key, int) and not isinstance(key, bool)]
        return max(int_keys) + 1 if int_keys else 0

    @staticmethod
    def normalize(data: Mapping[Any, Any]) -> Union[List[Any], Dict[Any, Any]]:
        """Return a list when the keys are 0..n-1 in order, otherwise a dict copy."""
        if Arr.is_list(data):
            return list(data.values())
        return dict(data)

    @staticmethod
    def is_list(data: Any) -> bool:
        """Determines if an array is a list (sequential integer keys starting from 0)."""
        if isinstance(data, (list, tuple)):
            return True
        if isinstance(data, Mapping):
            for position, key in enumerate(data):
                if isinstance(key, bool) or key != position:
                    return False
            return True
        return False

    @staticmethod
    def is_assoc(data: Any) -> bool:
        """Determine if an array is associative."""
        return not Arr.is_list(data)

    # Dot notation
    @staticmethod
    def get(data: Any, key: Any, default: Any = None) -> Any:
        """Get an item from an array using dot notation."""
        if not Arr.accessible(data):
            return value(default)

        if key is None:
            return data

        if isinstance(key, (list, tuple)):
            key = '.'.join(str(segment) for segment in key)

        if Arr.exists(data, key):
            return Arr.offset(data, key)

        if not isinstance(key, str) or '.' not in key:
            return value(default)

        for segment in key.split('.'):
            if Arr.accessible(data) and Arr.exists(data, segment):
                data = Arr.offset(data, segment)
            else:
                return value(default)

        return data

    @staticmethod
    def set(data: Any, key: Any, new_value: Any) -> Any:
        """Set an array item to a given value using dot notation."""
        if key is None:
            return new_value

        keys = str(key).split('.') if isinstance(key, str) else [key]
        current = data

        for segment in keys[:-1]:
            if not Arr.exists(current, segment) or not Arr.accessible(Arr.offset(current, segment)):
                Arr.offset_set(current, segment, {})
            current = Arr.offset(current, segment)

        Arr.offset_set(current, keys[-1], new_value)
        return data

    @staticmethod
    def has(data: Any, keys: Union[str, int, List[Any]]) -> bool:
        """Check if an item or items exist in an array using dot notation."""
        keys = list(keys) if isinstance(keys, (list, tuple)) else [keys]

        if not data or not keys:
            return False

        for key in keys:
            if Arr.exists(data, key):
                continue

            current = data
            for segment in str(key).split('.'):
                if Arr.accessible(current) and Arr.exists(current, segment):
                    current = Arr.offset(current, segment)
                else:
                    return False

        return True

    @staticmethod
    def has_any(data: Any, keys: Union[str, int, List[Any], None]) -> bool:
        """Determine if any of the keys exist in an array using dot notation."""
        if keys is None:
            return False

        keys = list(keys) if isinstance(keys, (list, tuple)) else [keys]

        if not data or not keys:
            return False

        return any(Arr.has(data, key) for key in keys)

    @staticmethod
    def forget(data: Any, keys: Union[str, int, List[Any]]) -> None:
        """Remove one or many array items using dot notation."""
        keys = list(keys) if isinstance(keys, (list, tuple)) else [keys]

        if isinstance(data, list):
            # Remove from the end so earlier positions stay valid.
            positions = sorted(
                (Arr._lookup_key(data, key) for key in keys if Arr.exists(data, key)),
                reverse=True,
            )
            for position in positions:
                del data[position]
            keys = [key for key in keys if isinstance(key, str) and '.' in key]

        for key in keys:
            if Arr.exists(data, key):
                Arr.offset_unset(data, key)
                continue

            parts = str(key).split('.')
            current = data

            while len(parts) > 1:
                part = parts.pop(0)
                if Arr.exists(current, part) and Arr.accessible(Arr.offset(current, part)):
                    current = Arr.offset(current, part)
                else:
                    current = None
                    break

            if current is not None:
                Arr.offset_unset(current, parts[0])

    @staticmethod
    def pull(data: Any, key: Any, default: Any = None) -> Any:
        """Get a value from the array, and remove it."""
        found = Arr.get(data, key, default)
        Arr.forget(data, key)
        return found

    @staticmethod
    def add(data: Any, key: Any, new_value: Any) -> Any:
        """Add an element to an array using dot notation if it doesn't exist."""
        if Arr.get(data, key) is None:
            Arr.set(data, key, new_value)
        return data

    @staticmethod
    def dot(data: Any, prepend: str = '') -> Dict[str, Any]:
        """Flatten a multi-dimensional associative array with dots."""
        results: Dict[str, Any] = {}

        for key, item in Arr.items_of(data):
            if isinstance(item, (Mapping, list)) and item:
                results.update(Arr.dot(item, f"{prepend}{key}."))
            else:
                results[f"{prepend}{key}"] = item

        return results

    @staticmethod
    def undot(data: Any) -> Dict[str, Any]:
        """Convert a flattened "dot" notation array back into an expanded array."""
        result: Dict[str, Any] = {}
        for key, item in Arr.items_of(data):
            Arr.set(result, key, item)
        return result

    # Subsets
    @staticmethod
    def only(data: Any, keys: Union[Any, List[Any]]) -> Union[List[Any], Dict[Any, Any]]:
        """Get a subset of the items from the given array."""
        keys = list(keys) if isinstance(keys, (list, tuple)) else [keys]
        wanted = {str(key) for key in keys}
        return Arr.normalize({key: item for key, item in Arr.items_of(data) if str(key) in wanted})

    @staticmethod
    def except_(data: Any, keys: Union[Any, List[Any]]) -> Union[List[Any], Dict[Any, Any]]:
        """Get all of the given array except for a specified array of keys."""
        result = copy.deepcopy(Arr.to_dict(data))
        Arr.forget(result, keys)
        return Arr.normalize(result)

    @staticmethod
    def select(data: Any, keys: Union[Any, List[Any]]) -> List[Dict[Any, Any]]:
        """Select an array of values from an array."""
        keys = list(keys) if isinstance(keys, (list, tuple)) else [keys]
        results = []

        for item in Arr.values_of(data):
            selected: Dict[Any, Any] = {}
            for key in keys:
                if Arr.accessible(item) and Arr.exists(item, key):
                    selected[key] = Arr.offset(item, key)
                elif isinstance(key, str) and getattr(item, key, None) is not None:
                    selected[key] = getattr(item, key)
            results.append(selected)

        return results

    @staticmethod
    def where(data: Any, callback: Callable[..., bool]) -> Union[List[Any], Dict[Any, Any]]:
        """Filter the array using the given callback."""
        callback = adapt_callback(callback)
        return Arr.normalize({key: item for key, item in Arr.items_of(data) if callback(item, key)})

    @staticmethod
    def where_not_null(data: Any) -> Union[List[Any], Dict[Any, Any]]:
        """Filter items where the value is not None."""
        return Arr.where(data, lambda item: item is not None)

    @staticmethod
    def first(data: Iterable[Any], callback: Optional[Callable[..., bool]] = None, default: Any = None) -> Any:
        """Return the first element in an array passing a given truth test."""
        pairs = Arr.items_of(data) if Arr.accessible(data) else enumerate(data)

        if callback is None:
            for _, item in pairs:
                return item
            return value(default)

        callback = adapt_callback(callback)
        for key, item in pairs:
            if callback(item, key):
                return item

        return value(default)

    @staticmethod
    def last(data: Any, callback: Optional[Callable[..., bool]] = None, default: Any = None) -> Any:
        """Return the last element in an array passing a given truth test."""
        pairs = list(Arr.items_of(data))

        if callback is None:
            return pairs[-1][1] if pairs else value(default)

        callback = adapt_callback(callback)
        for key, item in reversed(pairs):
            if callback(item, key):
                return item

        return value(default)

    # Reshaping
    @staticmethod
    def _nested_values(item: Any) -> Optional[List[Any]]:
        """Values of a nested array or collection, None for scalars."""
        from fluentkit.Iterable.EnumeratesValues import EnumeratesValues

        if isinstance(item, EnumeratesValues):
            return list(item.values().all())
        if isinstance(item, (Mapping, list, tuple)):
            return Arr.values_of(item)
        return None

    @staticmethod
    def collapse(data: Any) -> List[Any]:
        """Collapse an array of arrays into a single array."""
        result: List[Any] = []
        for item in Arr.values_of(data):
            nested = Arr._nested_values(item)
            if nested is not None:
                result.extend(nested)
        return result

    @staticmethod
    def flatten(data: Any, depth: Union[int, float] = float('inf')) -> List[Any]:
        """Flatten a multi-dimensional array into a single level."""
        result: List[Any] = []

        for item in Arr.values_of(data):
            nested = Arr._nested_values(item)
            if nested is None:
                result.append(item)
            elif depth == 1:
                result.extend(nested)
            else:
                result.extend(Arr.flatten(nested, depth - 1))

        return result

    @staticmethod
    def dimensions(data: Any) -> int:
        """Count the dimensions of an array, following the first element."""
        if not data:
            return 0

        depth = 1
        current = Arr.values_of(data)

        while current:
            element = current[0]
            if Arr.accessible(element) and element:
                depth += 1
                current = Arr.values_of(element)
            else:
                break

        return depth

    @staticmethod
    def divide(data: Any) -> Tuple[List[Any], List[Any]]:
        """Divide an array into two arrays: keys and values."""
        pairs = list(Arr.items_of(data))
        return [key for key, _ in pairs], [item for _, item in pairs]

    @staticmethod
    def cross_join(*arrays: Any) -> List[List[Any]]:
        """Cross join the given arrays, returning all possible permutations."""
        results: List[List[Any]] = [[]]

        for array in arrays:
            appended: List[List[Any]] = []
            for product in results:
                for item in Arr.values_of(array):
                    appended.append(product + [item])
            results = appended

        return results

    @staticmethod
    def map(data: Any, callback: Callable[..., Any]) -> Union[List[Any], Dict[Any, Any]]:
        """Run a map over each of the items in the array, preserving keys."""
        callback = adapt_callback(callback)
        return Arr.normalize({key: callback(item, key) for key, item in Arr.items_of(data)})

    @staticmethod
    def map_with_keys(data: Any, callback: Callable[..., Any]) -> Union[List[Any], Dict[Any, Any]]:
        """Run an associative map over each of the items.

        The callback returns a mapping or a ``(key, value)`` pair.
        """
        callback = adapt_callback(callback)
        result: Dict[Any, Any] = {}

        for key, item in Arr.items_of(data):
            pairs = callback(item, key)
            if isinstance(pairs, Mapping):
                result.update(pairs)
            else:
                new_key, new_value = pairs
                result[new_key] = new_value

        return Arr.normalize(result)

    @staticmethod
    def key_by(data: Any, key_by: Any) -> Union[List[Any], Dict[Any, Any]]:
        """Key an associative array by a field or using a callback."""
        from fluentkit.Iterable.Collection import Collection

        return Collection.make(data).key_by(key_by).all()

    @staticmethod
    def prepend_keys_with(data: Any, prefix: str) -> Union[List[Any], Dict[Any, Any]]:
        """Prepend the key names of an associative array."""
        return Arr.map_with_keys(data, lambda item, key: {f"{prefix}{key}": item})

    @staticmethod
    def pluck(data: Any, target: Any, key: Any = None) -> Union[List[Any], Dict[Any, Any]]:
        """Pluck an array of values from an array."""
        results: Dict[Any, Any] = {}

        for item in Arr.values_of(data):
            item_value = target(item) if callable(target) else data_get(item, target)

            if key is None:
                results[Arr.next_index(results)] = item_value
            else:
                item_key = key(item) if callable(key) else data_get(item, key)
                item_key = enum_value(item_key)
                if not isinstance(item_key, (str, int, float, bool)) and item_key is not None:
                    item_key = str(item_key)
                results[item_key] = item_value

        return Arr.normalize(results)

    @staticmethod
    def prepend(data: Any, new_value: Any, key: Any = None) -> Union[List[Any], Dict[Any, Any]]:
        """Push an item onto the beginning of an array."""
        if key is None:
            if Arr.is_list(data):
                return [new_value] + Arr.values_of(data)
            result: Dict[Any, Any] = {0: new_value}
            position = 1
            for item_key, item in Arr.items_of(data):
                if isinstance(item_key, int) and not isinstance(item_key, bool):
                    result[position] = item
                    position += 1
                else:
                    result[item_key] = item
            return Arr.normalize(result)

        result = {key: new_value}
        for item_key, item in Arr.items_of(data):
            if item_key != key:
                result[item_key] = item
        return Arr.normalize(result)

    @staticmethod
    def wrap(target: Any) -> Union[List[Any], Dict[Any, Any]]:
        """Wrap the given value in an array if it's not already an array."""
        if target is None:
            return []
        if isinstance(target, (list, dict)):
            return target
        if isinstance(target, tuple):
            return list(target)
        return [target]

    @staticmethod
    def join(data: Any, glue: str, final_glue: str = '') -> str:
        """Join all items using a string. The final items can use a separate glue string."""
        items = [str(item) for item in Arr.values_of(data)]

        if final_glue == '':
            return glue.join(items)

        if not items:
            return ''

        if len(items) == 1:
            return items[0]

        return glue.join(items[:-1]) + final_glue + items[-1]

    # Merging
    @staticmethod
    def merge(*arrays: Any) -> Union[List[Any], Dict[Any, Any]]:
        """Merge arrays: integer keys are renumbered, string keys overwrite."""
        result: Dict[Any, Any] = {}
        for array in arrays:
            for key, item in Arr.items_of(array):
                if isinstance(key, int) and not isinstance(key, bool):
                    result[Arr.next_index(result)] = item
                else:
                    result[key] = item
        return Arr.normalize(result)

    @staticmethod
    def merge_recursive(first: Any, second: Any) -> Union[List[Any], Dict[Any, Any]]:
        """Recursively merge two arrays, collecting colliding string keys into lists."""
        result = copy.deepcopy(Arr.to_dict(first))

        for key, item in Arr.items_of(second):
            if isinstance(key, int) and not isinstance(key, bool):
                result[Arr.next_index(result)] = item
            elif key in result:
                existing = result[key]
                left = existing if Arr.accessible(existing) else [existing]
                right = item if Arr.accessible(item) else [item]
                result[key] = Arr.merge_recursive(left, right)
            else:
                result[key] = item

        return Arr.normalize(result)

    @staticmethod
    def replace_recursive(first: Any, second: Any) -> Union[List[Any], Dict[Any, Any]]:
        """Recursively replace values of the first array with those of the second by key."""
        result = copy.deepcopy(Arr.to_dict(first))

        for key, item in Arr.items_of(second):
            existing = result.get(key)
            if key in result and Arr.accessible(existing) and Arr.accessible(item):
                result[key] = Arr.replace_recursive(existing, item)
            else:
                result[key] = item

        return Arr.normalize(result)

    @staticmethod
    def diff_recursive(original: Any, compare_with: Any) -> Dict[Any, Any]:
        """Recursively compute the entries of the original missing from the other array."""
        difference: Dict[Any, Any] = {}

        if not original:
            return {}

        if not compare_with:
            return Arr.to_dict(original)

        for key, item in Arr.items_of(original):
            if Arr.accessible(item) and not item:
                continue

            if Arr.accessible(item):
                if Arr.exists(compare_with, key) and Arr.accessible(Arr.offset(compare_with, key)):
                    nested = Arr.diff_recursive(item, Arr.offset(compare_with, key))
                    if nested:
                        difference[key] = nested
                else:
                    difference[key] = item
            elif isinstance(item, str) and not Arr.exists(compare_with, key):
                difference[key] = item

        return difference

    @staticmethod
    def count_recursive(data: Any, counter: int = 0) -> int:
        """Count every element of a multi-dimensional array."""
        for item in Arr.values_of(data):
            if Arr.accessible(item):
                counter = Arr.count_recursive(item, counter)
            counter += 1
        return counter

    # Randomness
    @staticmethod
    def random(data: Any, number: Optional[int] = None, preserve_keys: bool = False) -> Any:
        """Get one or a specified number of random values from an array."""
        pairs = list(Arr.items_of(data))
        requested = 1 if number is None else number

        if requested > len(pairs):
            raise InvalidArgumentException(
                f"You requested {requested} items, but there are only {len(pairs)} items available."
            )

        if number is None:
            return _random.choice(pairs)[1]

        if int(number) == 0:
            return []

        positions = sorted(_random.sample(range(len(pairs)), number))

        if preserve_keys:
            return Arr.normalize({pairs[position][0]: pairs[position][1] for position in positions})

        return [pairs[position][1] for position in positions]

    @staticmethod
    def shuffle(data: Any, seed: Optional[int] = None) -> List[Any]:
        """Shuffle the given array and return the result."""
        result = Arr.values_of(data)
        generator = _random.Random(seed) if seed is not None else _random
        generator.shuffle(result)
        return result

    # Sorting
    @staticmethod
    def sort(data: Any, callback: Any = None) -> Union[List[Any], Dict[Any, Any]]:
        """Sort the array using the given callback or key path."""
        from fluentkit.Iterable.Collection import Collection

        return Collection.make(data).sort_by(callback).all()

    @staticmethod
    def sort_desc(data: Any, callback: Any = None) -> Union[List[Any], Dict[Any, Any]]:
        """Sort the array in descending order using the given callback or key path."""
        from fluentkit.Iterable.Collection import Collection

        return Collection.make(data).sort_by_desc(callback).all()

    @staticmethod
    def sort_recursive(data: Any, descending: bool = False) -> Union[List[Any], Dict[Any, Any]]:
        """Recursively sort an array by keys and values."""
        items = {
            key: Arr.sort_recursive(item, descending) if isinstance(item, (Mapping, list)) else item
            for key, item in Arr.items_of(data)
        }

        if Arr.is_assoc(items):
            ordered = sorted(items.items(), key=functools.cmp_to_key(lambda a, b: compare(a[0], b[0])), reverse=descending)
            return dict(ordered)

        return sorted(items.values(), key=functools.cmp_to_key(compare), reverse=descending)

    # Conversion
    @staticmethod
    def query(data: Any) -> str:
        """Convert the array into a query string."""
        def _build_query(obj: Any, prefix: str = '') -> List[Tuple[str, str]]:
            pairs = []
            for key, item in Arr.items_of(obj):
                new_key = f"{prefix}[{key}]" if prefix else str(key)
                if isinstance(item, (Mapping, list, tuple)):
                    pairs.extend(_build_query(item, new_key))
                elif item is not None:
                    pairs.append((new_key, str(int(item)) if isinstance(item, bool) else str(item)))
            return pairs

        return urllib.parse.urlencode(_build_query(data), quote_via=urllib.parse.quote)
