from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union, TYPE_CHECKING
from enum import Enum, IntEnum
import functools
import math
import re

from fluentkit.Exceptions import InvalidArgumentException, ItemNotFoundException, MultipleItemsFoundException
from fluentkit.Iterable.Arr import Arr
from fluentkit.Iterable.EnumeratesValues import EnumeratesValues, in_array
from fluentkit.Support.Helpers import (
    _MISSING,
    adapt_callback,
    compare,
    data_get,
    enum_value,
    is_blank,
    loose_equals,
    strict_equals,
    value as resolve_value,
)
from fluentkit.Support.Types import K, V, is_stringable

if TYPE_CHECKING:
    from fluentkit.Iterable.LazyCollection import LazyCollection


class SortFlag(IntEnum):
    """Sorting behaviours understood by the sort family, combinable with ``|``."""

    REGULAR = 0
    NUMERIC = 1
    STRING = 2
    NATURAL = 6
    FLAG_CASE = 8


def _to_number(target: Any) -> Union[int, float]:
    """Leading numeric value of a string, the way a numeric sort reads it."""
    if isinstance(target, bool):
        return int(target)
    if isinstance(target, (int, float)):
        return target
    match = re.match(r'\s*[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?', str(target) if target is not None else '')
    if not match:
        return 0
    number = float(match.group(0))
    return int(number) if number.is_integer() else number


def _natural_key(target: Any) -> List[Tuple[int, Any]]:
    return [(0, int(part)) if part.isdigit() else (1, part) for part in re.split(r'(\d+)', str(target)) if part != '']


def sort_comparator(options: int = SortFlag.REGULAR) -> Callable[[Any, Any], int]:
    """Build a three-way comparator for the given sort flags."""
    options = int(options)
    case_insensitive = bool(options & SortFlag.FLAG_CASE)
    base = options & ~SortFlag.FLAG_CASE

    def as_string(target: Any) -> str:
        text = '' if target is None else str(target)
        return text.lower() if case_insensitive else text

    def comparator(left: Any, right: Any) -> int:
        if base == SortFlag.NUMERIC:
            return compare(_to_number(left), _to_number(right))
        if base == SortFlag.NATURAL:
            return compare(_natural_key(as_string(left)), _natural_key(as_string(right)))
        if base == SortFlag.STRING or case_insensitive:
            return compare(as_string(left), as_string(right))
        return compare(left, right)

    return comparator


def _slice_bounds(count: int, offset: int, length: Optional[int]) -> Tuple[int, int]:
    """Start and stop positions of an offset/length slice, negative values counting from the end."""
    start = offset if offset >= 0 else max(0, count + offset)
    start = min(start, count)

    if length is None:
        stop = count
    elif length < 0:
        stop = max(start, count + length)
    else:
        stop = min(count, start + length)

    return start, stop


def _reindex(pairs: Iterable[Tuple[Any, Any]]) -> Dict[Any, Any]:
    """Rebuild a map renumbering integer keys and keeping string keys."""
    result: Dict[Any, Any] = {}
    position = 0
    for key, item in pairs:
        if key is None or (isinstance(key, int) and not isinstance(key, bool)):
            result[position] = item
            position += 1
        else:
            result[key] = item
    return result


class Collection(EnumeratesValues[K, V]):
    """Laravel-style collection backed by an ordered map of keys to values."""

    def __init__(self, items: Any = None):
        self._items: Dict[Any, Any] = self._get_arrayable_items(items)

    @classmethod
    def range(cls, start: int, end: int, step: int = 1) -> 'Collection[int, int]':
        """Create a collection with the given range, inclusive of both ends."""
        if step == 0:
            raise InvalidArgumentException("Step value cannot be zero.")

        step = abs(step)
        if start <= end:
            return cls(list(range(start, end + 1, step)))
        return cls(list(range(start, end - 1, -step)))

    # Core methods
    def all(self) -> Union[List[V], Dict[K, V]]:
        """Get all of the items in the collection."""
        return Arr.normalize(self._items)

    def items(self) -> List[Tuple[K, V]]:
        """Get the (key, value) pairs of the collection."""
        return list(self._items.items())

    def lazy(self) -> 'LazyCollection[K, V]':
        """Get a lazy collection for the items in this collection."""
        from fluentkit.Iterable.LazyCollection import LazyCollection

        return LazyCollection(self._items)

    def count(self) -> int:
        """Count the number of items in the collection."""
        return len(self._items)

    def is_empty(self) -> bool:
        """Determine if the collection is empty or not."""
        return not self._items

    def contains_one_item(self, callback: Optional[Callable[..., bool]] = None) -> bool:
        """Determine if the collection contains exactly one item."""
        if callback is not None:
            return self.filter(callback).count() == 1

        return self.count() == 1

    def to_base(self) -> 'Collection[K, V]':
        """Get a base collection instance from this collection."""
        return Collection(self)

    # Key access
    def get(self, key: Any, default: Any = None) -> Any:
        """Get an item from the collection by key."""
        if key is not None and Arr.exists(self._items, key):
            return Arr.offset(self._items, key)

        return resolve_value(default)

    def get_or_put(self, key: Any, new_value: Any) -> Any:
        """Get an item from the collection by key or add it to collection if it does not exist."""
        if key is not None and Arr.exists(self._items, key):
            return Arr.offset(self._items, key)

        new_value = resolve_value(new_value)
        self.offset_set(key, new_value)

        return new_value

    def has(self, key: Any, *keys: Any) -> bool:
        """Determine if an item exists in the collection by key."""
        wanted = list(key) if isinstance(key, (list, tuple)) else [key, *keys]

        return all(Arr.exists(self._items, item) for item in wanted)

    def has_any(self, key: Any, *keys: Any) -> bool:
        """Determine if any of the keys exist in the collection."""
        if self.is_empty():
            return False

        wanted = list(key) if isinstance(key, (list, tuple)) else [key, *keys]

        return any(Arr.exists(self._items, item) for item in wanted)

    def keys(self) -> 'Collection[int, K]':
        """Get the keys of the collection items."""
        return Collection(list(self._items.keys()))

    def values(self) -> 'Collection[int, V]':
        """Reset the keys on the underlying array."""
        return Collection(list(self._items.values()))

    # Adding/Removing items
    def push(self, *values: V) -> 'Collection[K, V]':
        """Push one or more items onto the end of the collection."""
        for item in values:
            self.offset_set(None, item)
        return self

    def add(self, item: V) -> 'Collection[K, V]':
        """Add an item to the collection."""
        self.offset_set(None, item)
        return self

    def put(self, key: K, item: V) -> 'Collection[K, V]':
        """Put an item in the collection by key."""
        self.offset_set(key, item)
        return self

    def prepend(self, item: V, key: Any = None) -> 'Collection[K, V]':
        """Push an item onto the beginning of the collection."""
        self._items = Arr.to_dict(Arr.prepend(self._items, item, key))
        return self

    def unshift(self, *values: V) -> 'Collection[K, V]':
        """Push one or more items onto the beginning of the collection."""
        self._items = _reindex([*((None, item) for item in values), *self._items.items()])
        return self

    def concat(self, source: Iterable[Any]) -> 'Collection[Any, Any]':
        """Push all of the given items onto the collection."""
        result = Collection(self)

        for item in (source.all() if isinstance(source, EnumeratesValues) else source):
            result.push(item)

        return result

    def pop(self, count: int = 1) -> Any:
        """Get and remove the last N items from the collection."""
        if count < 1:
            return Collection()

        if count == 1:
            if not self._items:
                return None
            return self._items.pop(next(reversed(self._items)))

        if self.is_empty():
            return Collection()

        results = []
        for _ in range(min(count, self.count())):
            results.append(self._items.pop(next(reversed(self._items))))

        return Collection(results)

    def shift(self, count: int = 1) -> Any:
        """Get and remove the first N items from the collection."""
        if count < 0:
            raise InvalidArgumentException("Number of shifted items may not be less than zero.")

        if self.is_empty():
            return None

        if count == 0:
            return Collection()

        pairs = list(self._items.items())
        taken = min(count, len(pairs))
        self._items = _reindex(pairs[taken:])

        if count == 1:
            return pairs[0][1]

        return Collection([item for _, item in pairs[:taken]])

    def pull(self, key: Any, default: Any = None) -> Any:
        """Get and remove an item from the collection."""
        return Arr.pull(self._items, key, default)

    def forget(self, keys: Any) -> 'Collection[K, V]':
        """Remove an item from the collection by key."""
        for key in self._get_arrayable_items(keys).values():
            self.offset_unset(key)

        return self

    def splice(self, offset: int, length: Any = _MISSING, replacement: Any = None) -> 'Collection[int, V]':
        """Splice a portion of the underlying collection array."""
        pairs = list(self._items.items())
        start, stop = _slice_bounds(len(pairs), offset, None if length is _MISSING else length)
        inserted = [(None, item) for item in self._get_arrayable_items(replacement).values()]

        removed = pairs[start:stop]
        self._items = _reindex(pairs[:start] + inserted + pairs[stop:])

        return Collection([item for _, item in removed])

    def transform(self, callback: Callable[..., V]) -> 'Collection[K, V]':
        """Transform each item in the collection using a callback."""
        self._items = self.map(callback)._items
        return self

    # Filtering and searching
    def filter(self, callback: Optional[Callable[..., bool]] = None) -> 'Collection[K, V]':
        """Run a filter over each of the items."""
        if callback is None:
            return Collection({key: item for key, item in self._items.items() if not is_blank(item)})

        callback = adapt_callback(callback)
        return Collection({key: item for key, item in self._items.items() if callback(item, key)})

    def only(self, keys: Any, *more: Any) -> 'Collection[K, V]':
        """Get the items with the specified keys."""
        if keys is None:
            return Collection(self._items)

        if isinstance(keys, EnumeratesValues):
            keys = keys.all()

        keys = list(keys) if isinstance(keys, (list, tuple)) else [keys, *more]

        return Collection(Arr.to_dict(Arr.only(self._items, keys)))

    def except_(self, keys: Any, *more: Any) -> 'Collection[K, V]':
        """Get all items except for those with the specified keys."""
        if keys is None:
            return Collection(self._items)

        if isinstance(keys, EnumeratesValues):
            keys = keys.all()

        keys = list(keys) if isinstance(keys, (list, tuple)) else [keys, *more]

        return Collection(Arr.to_dict(Arr.except_(self._items, keys)))

    def select(self, keys: Any, *more: Any) -> 'Collection[int, Dict[Any, Any]]':
        """Select specific values from the items within the collection."""
        if keys is None:
            return Collection(self._items)

        if isinstance(keys, EnumeratesValues):
            keys = keys.all()

        keys = list(keys) if isinstance(keys, (list, tuple)) else [keys, *more]

        return Collection(Arr.select(self._items, keys))

    def sole(self, key: Any = None, operator: Any = _MISSING, value: Any = _MISSING) -> V:
        """Get the first item in the collection, but only if exactly one item exists."""
        criteria = self._criteria(key, operator, value)
        items = self if criteria is None else self.filter(criteria)
        count = items.count()

        if count == 0:
            raise ItemNotFoundException()

        if count > 1:
            raise MultipleItemsFoundException(count)

        return items.first()

    def random(self, number: Any = None, preserve_keys: bool = False) -> Any:
        """Get one or a specified number of items randomly from the collection."""
        if number is None:
            return Arr.random(self._items)

        if callable(number):
            number = number(self)

        return Collection(Arr.random(self._items, number, preserve_keys))

    # Slicing
    def slice(self, offset: int, length: Optional[int] = None) -> 'Collection[K, V]':
        """Slice the underlying collection array, preserving keys."""
        pairs = list(self._items.items())
        start, stop = _slice_bounds(len(pairs), offset, length)

        return Collection(dict(pairs[start:stop]))

    def skip(self, count: int) -> 'Collection[K, V]':
        """Skip the first {count} items."""
        return self.slice(count)

    def skip_until(self, target: Any) -> 'Collection[K, V]':
        """Skip items in the collection until the given condition is met."""
        return Collection(self.lazy().skip_until(target))

    def skip_while(self, target: Any) -> 'Collection[K, V]':
        """Skip items in the collection while the given condition is met."""
        return Collection(self.lazy().skip_while(target))

    def take(self, limit: int) -> 'Collection[K, V]':
        """Take the first or last {limit} items."""
        if limit < 0:
            return self.slice(limit, abs(limit))

        return self.slice(0, limit)

    def take_until(self, target: Any) -> 'Collection[K, V]':
        """Take items in the collection until the given condition is met."""
        return Collection(self.lazy().take_until(target))

    def take_while(self, target: Any) -> 'Collection[K, V]':
        """Take items in the collection while the given condition is met."""
        return Collection(self.lazy().take_while(target))

    def nth(self, step: int, offset: int = 0) -> 'Collection[int, V]':
        """Create a new collection consisting of every n-th element."""
        return Collection([
            item for position, item in enumerate(self.slice(offset)._items.values()) if position % step == 0
        ])

    def split(self, number_of_groups: int) -> 'Collection[int, Collection[Any, V]]':
        """Split a collection into a certain number of groups."""
        if self.is_empty():
            return Collection()

        groups: Collection[int, Collection[Any, V]] = Collection()
        group_size, remain = divmod(self.count(), number_of_groups)
        pairs = list(self._items.items())
        start = 0

        for index in range(number_of_groups):
            size = group_size + 1 if index < remain else group_size

            if size:
                groups.push(Collection(_reindex(pairs[start:start + size])))
                start += size

        return groups

    def split_in(self, number_of_groups: int) -> 'Collection[int, Collection[Any, V]]':
        """Split a collection into a certain number of groups, and fill the first groups completely."""
        return self.chunk(math.ceil(self.count() / number_of_groups))

    def chunk(self, size: int, preserve_keys: bool = True) -> 'Collection[int, Collection[Any, V]]':
        """Chunk the collection into chunks of the given size."""
        if size <= 0:
            return Collection()

        pairs = list(self._items.items())
        chunks = []

        for start in range(0, len(pairs), size):
            portion = pairs[start:start + size]
            chunks.append(Collection(dict(portion) if preserve_keys else [item for _, item in portion]))

        return Collection(chunks)

    def chunk_while(self, callback: Callable[..., bool]) -> 'Collection[int, Collection[Any, V]]':
        """Chunk the collection into chunks with a callback."""
        return Collection(self.lazy().chunk_while(callback).map_into(Collection))

    def sliding(self, size: int = 2, step: int = 1) -> 'Collection[int, Collection[K, V]]':
        """Create chunks representing a "sliding window" view of the items in the collection."""
        chunks = (self.count() - size) // step + 1

        return Collection.times(chunks, lambda number: self.slice((number - 1) * step, size))

    # Transforming
    def map(self, callback: Callable[..., Any]) -> 'Collection[K, Any]':
        """Run a map over each of the items."""
        callback = adapt_callback(callback)
        return Collection({key: callback(item, key) for key, item in self._items.items()})

    def map_with_keys(self, callback: Callable[..., Any]) -> 'Collection[Any, Any]':
        """Run an associative map over each of the items."""
        return Collection(Arr.to_dict(Arr.map_with_keys(self._items, callback)))

    def map_to_dictionary(self, callback: Callable[..., Any]) -> 'Collection[Any, List[Any]]':
        """Run a dictionary map over the items."""
        callback = adapt_callback(callback)
        dictionary: Dict[Any, List[Any]] = {}

        for key, item in self._items.items():
            pair = callback(item, key)
            group, mapped = next(iter(pair.items())) if isinstance(pair, dict) else pair
            dictionary.setdefault(group, []).append(mapped)

        return Collection(dictionary)

    def collapse(self) -> 'Collection[int, Any]':
        """Collapse the collection of items into a single array."""
        return Collection(Arr.collapse(self._items))

    def collapse_with_keys(self) -> 'Collection[Any, Any]':
        """Collapse the collection of items into a single array while preserving its keys."""
        results: Dict[Any, Any] = {}

        for nested in self._items.values():
            if isinstance(nested, EnumeratesValues):
                results.update(nested.items())
            elif isinstance(nested, (dict, list, tuple)):
                results.update(Arr.items_of(nested))

        return Collection(results)

    def flatten(self, depth: Union[int, float] = float('inf')) -> 'Collection[int, Any]':
        """Get a flattened array of the items in the collection."""
        return Collection(Arr.flatten(self._items, depth))

    def flip(self) -> 'Collection[Any, K]':
        """Flip the items in the collection."""
        return Collection({item: key for key, item in self._items.items()})

    def pluck(self, target: Any, key: Any = None) -> 'Collection[Any, Any]':
        """Get the values of a given key."""
        return Collection(Arr.pluck(self._items, target, key))

    def key_by(self, key_by: Any) -> 'Collection[Any, V]':
        """Key an associative array by a field or using a callback."""
        retriever = self._value_retriever(key_by)
        results: Dict[Any, Any] = {}

        for key, item in self._items.items():
            resolved = enum_value(retriever(item, key))

            if is_stringable(resolved):
                resolved = str(resolved)

            results[resolved] = item

        return Collection(results)

    def group_by(self, group_by: Any, preserve_keys: bool = False) -> 'Collection[Any, Collection[Any, V]]':
        """Group an associative array by a field or using a callback."""
        next_groups: List[Any] = []

        if not self._use_as_callable(group_by) and isinstance(group_by, (list, tuple)):
            next_groups = list(group_by)
            group_by = next_groups.pop(0)

        retriever = self._value_retriever(group_by)
        results: Dict[Any, Collection[Any, V]] = {}

        for key, item in self._items.items():
            group_keys = retriever(item, key)

            if isinstance(group_keys, EnumeratesValues):
                group_keys = list(group_keys)
            elif not isinstance(group_keys, (list, tuple)):
                group_keys = [group_keys]

            for group_key in group_keys:
                group_key = self._normalize_group_key(group_key)

                if group_key not in results:
                    results[group_key] = Collection()

                results[group_key].offset_set(key if preserve_keys else None, item)

        result = Collection(results)

        if next_groups:
            return result.map(lambda group: group.group_by(next_groups, preserve_keys))

        return result

    @staticmethod
    def _normalize_group_key(group_key: Any) -> Any:
        """Turn a grouping value into a usable array key."""
        if isinstance(group_key, bool):
            return int(group_key)
        if isinstance(group_key, Enum):
            return enum_value(group_key)
        if group_key is None:
            return ''
        if is_stringable(group_key):
            return str(group_key)
        return group_key

    def count_by(self, count_by: Any = None) -> 'Collection[Any, int]':
        """Count the number of items in the collection by a field or using a callback."""
        return Collection(self.lazy().count_by(count_by))

    def cross_join(self, *lists: Any) -> 'Collection[int, List[Any]]':
        """Cross join with the given lists, returning all possible permutations."""
        return Collection(Arr.cross_join(self._items, *(self._get_arrayable_items(items) for items in lists)))

    def dot(self) -> 'Collection[str, Any]':
        """Flatten a multi-dimensional associative array with dots."""
        return Collection(Arr.dot(self.all()))

    def undot(self) -> 'Collection[str, Any]':
        """Convert a flatten "dot" notation array into an expanded array."""
        return Collection(Arr.undot(self.all()))

    def multiply(self, multiplier: int) -> 'Collection[int, V]':
        """Create a new collection with the items repeated the given number of times."""
        result: Collection[int, V] = Collection()

        for _ in range(multiplier):
            result.push(*self._items.values())

        return result

    def zip(self, *items: Any) -> 'Collection[int, Collection[int, Any]]':
        """Zip the collection together with one or more arrays."""
        sources = [list(self._items.values())] + [list(self._get_arrayable_items(source).values()) for source in items]
        longest = max(len(source) for source in sources)

        return Collection([
            Collection([source[index] if index < len(source) else None for source in sources])
            for index in range(longest)
        ])

    def pad(self, size: int, pad_value: Any) -> 'Collection[Any, Any]':
        """Pad collection to the specified length with a value."""
        missing = abs(size) - self.count()
        pairs = list(self._items.items())

        if missing <= 0:
            return Collection(self._items)

        padding = [(None, pad_value)] * missing

        return Collection(_reindex(pairs + padding if size > 0 else padding + pairs))

    def unique(self, key: Any = None, strict: bool = False) -> 'Collection[K, V]':
        """Return only unique items from the collection array, keeping the first occurrence."""
        retriever = self._value_retriever(key)
        exists: List[Any] = []
        results: Dict[Any, Any] = {}

        for item_key, item in self._items.items():
            identifier = retriever(item, item_key)

            if not in_array(identifier, exists, strict):
                exists.append(identifier)
                results[item_key] = item

        return Collection(results)

    def duplicates(self, callback: Any = None, strict: bool = False) -> 'Collection[K, Any]':
        """Retrieve duplicate items from the collection."""
        items = self.map(self._value_retriever(callback))
        unique_items = items.unique(None, strict)
        equals = self._duplicate_comparator(strict)
        duplicates: Collection[K, Any] = Collection()

        for key, item in items._items.items():
            if unique_items.is_not_empty() and equals(item, unique_items.first()):
                unique_items.shift()
            else:
                duplicates.offset_set(key, item)

        return duplicates

    def duplicates_strict(self, callback: Any = None) -> 'Collection[K, Any]':
        """Retrieve duplicate items from the collection using strict comparison."""
        return self.duplicates(callback, True)

    @staticmethod
    def _duplicate_comparator(strict: bool) -> Callable[[Any, Any], bool]:
        """Get the comparison function to detect duplicates."""
        return strict_equals if strict else loose_equals

    # Set operations
    def diff(self, items: Any) -> 'Collection[K, V]':
        """Get the items in the collection that are not present in the given items."""
        others = list(self._get_arrayable_items(items).values())
        return self.filter(lambda item: not in_array(item, others))

    def diff_using(self, items: Any, callback: Callable[[Any, Any], int]) -> 'Collection[K, V]':
        """Get the items that are not present in the given items, using the callback."""
        others = list(self._get_arrayable_items(items).values())
        return self.filter(lambda item: all(callback(item, other) != 0 for other in others))

    def diff_assoc(self, items: Any) -> 'Collection[K, V]':
        """Get the items whose keys and values are not present in the given items."""
        others = self._get_arrayable_items(items)
        return self.filter(lambda item, key: not (key in others and loose_equals(others[key], item)))

    def diff_assoc_using(self, items: Any, callback: Callable[[Any, Any], int]) -> 'Collection[K, V]':
        """Get the items whose keys and values are not present in the given items, comparing keys with the callback."""
        others = self._get_arrayable_items(items)
        return self.filter(lambda item, key: not any(
            callback(key, other_key) == 0 and loose_equals(other, item) for other_key, other in others.items()
        ))

    def diff_keys(self, items: Any) -> 'Collection[K, V]':
        """Get the items whose keys are not present in the given items."""
        others = self._get_arrayable_items(items)
        return self.filter(lambda item, key: key not in others)

    def diff_keys_using(self, items: Any, callback: Callable[[Any, Any], int]) -> 'Collection[K, V]':
        """Get the items whose keys are not present in the given items, using the callback."""
        others = list(self._get_arrayable_items(items).keys())
        return self.filter(lambda item, key: all(callback(key, other) != 0 for other in others))

    def intersect(self, items: Any) -> 'Collection[K, V]':
        """Intersect the collection with the given items."""
        others = list(self._get_arrayable_items(items).values())
        return self.filter(lambda item: in_array(item, others))

    def intersect_using(self, items: Any, callback: Callable[[Any, Any], int]) -> 'Collection[K, V]':
        """Intersect the collection with the given items, using the callback."""
        others = list(self._get_arrayable_items(items).values())
        return self.filter(lambda item: any(callback(item, other) == 0 for other in others))

    def intersect_assoc(self, items: Any) -> 'Collection[K, V]':
        """Intersect the collection with the given items with additional index check."""
        others = self._get_arrayable_items(items)
        return self.filter(lambda item, key: key in others and loose_equals(others[key], item))

    def intersect_assoc_using(self, items: Any, callback: Callable[[Any, Any], int]) -> 'Collection[K, V]':
        """Intersect the collection with the given items with additional index check, comparing keys with the callback."""
        others = self._get_arrayable_items(items)
        return self.filter(lambda item, key: any(
            callback(key, other_key) == 0 and loose_equals(other, item) for other_key, other in others.items()
        ))

    def intersect_by_keys(self, items: Any) -> 'Collection[K, V]':
        """Intersect the collection with the given items by key."""
        others = self._get_arrayable_items(items)
        return self.filter(lambda item, key: key in others)

    def merge(self, items: Any) -> 'Collection[Any, Any]':
        """Merge the collection with the given items."""
        return Collection(Arr.to_dict(Arr.merge(self._items, self._get_arrayable_items(items))))

    def merge_recursive(self, items: Any) -> 'Collection[Any, Any]':
        """Recursively merge the collection with the given items."""
        return Collection(Arr.to_dict(Arr.merge_recursive(self._items, self._get_arrayable_items(items))))

    def replace(self, items: Any) -> 'Collection[Any, Any]':
        """Replace the collection items with the given items."""
        return Collection({**self._items, **self._get_arrayable_items(items)})

    def replace_recursive(self, items: Any) -> 'Collection[Any, Any]':
        """Recursively replace the collection items with the given items."""
        return Collection(Arr.to_dict(Arr.replace_recursive(self._items, self._get_arrayable_items(items))))

    def union(self, items: Any) -> 'Collection[Any, Any]':
        """Union the collection with the given items."""
        others = self._get_arrayable_items(items)
        return Collection({**self._items, **{key: item for key, item in others.items() if key not in self._items}})

    def combine(self, values: Any) -> 'Collection[Any, Any]':
        """Create a collection by using this collection for keys and another for its values."""
        keys = list(self._items.values())
        combined = list(self._get_arrayable_items(values).values())

        if len(keys) != len(combined):
            raise InvalidArgumentException("Both parameters should have an equal number of elements.")

        return Collection(dict(zip(keys, combined)))

    # Ordering
    def reverse(self) -> 'Collection[K, V]':
        """Reverse items order, preserving keys."""
        return Collection(dict(reversed(list(self._items.items()))))

    def shuffle(self, seed: Optional[int] = None) -> 'Collection[int, V]':
        """Shuffle the items in the collection."""
        return Collection(Arr.shuffle(self._items, seed))

    def sort(self, callback: Union[Callable[[Any, Any], int], int, None] = None) -> 'Collection[K, V]':
        """Sort through each item with a comparator callback or sort flags, preserving keys."""
        if callable(callback):
            comparator = callback
        else:
            comparator = sort_comparator(SortFlag.REGULAR if callback is None else callback)

        ordered = sorted(self._items.items(), key=functools.cmp_to_key(lambda a, b: comparator(a[1], b[1])))

        return Collection(dict(ordered))

    def sort_desc(self, options: int = SortFlag.REGULAR) -> 'Collection[K, V]':
        """Sort items in descending order."""
        comparator = sort_comparator(options)
        ordered = sorted(
            self._items.items(), key=functools.cmp_to_key(lambda a, b: comparator(a[1], b[1])), reverse=True
        )

        return Collection(dict(ordered))

    def sort_by(self, callback: Any, options: int = SortFlag.REGULAR, descending: bool = False) -> 'Collection[K, V]':
        """Sort the collection using the given callback, key path or list of comparisons."""
        if isinstance(callback, (list, tuple)) and not callable(callback):
            return self._sort_by_many(callback, options)

        retriever = self._value_retriever(callback)
        comparator = sort_comparator(options)
        results = [(key, retriever(item, key)) for key, item in self._items.items()]
        results.sort(key=functools.cmp_to_key(lambda a, b: comparator(a[1], b[1])), reverse=descending)

        return Collection({key: self._items[key] for key, _ in results})

    def _sort_by_many(self, comparisons: Iterable[Any], options: int = SortFlag.REGULAR) -> 'Collection[K, V]':
        """Sort the collection using multiple comparisons."""
        comparator = sort_comparator(options)
        rules = []

        for comparison in comparisons:
            comparison = Arr.wrap(comparison)
            direction = comparison[1] if len(comparison) > 1 else True
            rules.append((comparison[0], direction is True or direction == 'asc'))

        def compare_items(left: Any, right: Any) -> int:
            for prop, ascending in rules:
                if callable(prop) and not isinstance(prop, str):
                    result = prop(left, right)
                else:
                    values = [data_get(left, prop), data_get(right, prop)]
                    if not ascending:
                        values.reverse()
                    result = comparator(values[0], values[1])

                if result:
                    return result

            return 0

        ordered = sorted(self._items.items(), key=functools.cmp_to_key(lambda a, b: compare_items(a[1], b[1])))

        return Collection(dict(ordered))

    def sort_by_desc(self, callback: Any, options: int = SortFlag.REGULAR) -> 'Collection[K, V]':
        """Sort the collection in descending order using the given callback."""
        if isinstance(callback, (list, tuple)) and not callable(callback):
            return self._sort_by_many([[Arr.wrap(rule)[0], 'desc'] for rule in callback], options)

        return self.sort_by(callback, options, True)

    def sort_keys(self, options: int = SortFlag.REGULAR, descending: bool = False) -> 'Collection[K, V]':
        """Sort the collection keys."""
        comparator = sort_comparator(options)
        ordered = sorted(
            self._items.items(), key=functools.cmp_to_key(lambda a, b: comparator(a[0], b[0])), reverse=descending
        )

        return Collection(dict(ordered))

    def sort_keys_desc(self, options: int = SortFlag.REGULAR) -> 'Collection[K, V]':
        """Sort the collection keys in descending order."""
        return self.sort_keys(options, True)

    def sort_keys_using(self, callback: Callable[[Any, Any], int]) -> 'Collection[K, V]':
        """Sort the collection keys using a callback."""
        ordered = sorted(self._items.items(), key=functools.cmp_to_key(lambda a, b: callback(a[0], b[0])))

        return Collection(dict(ordered))

    # Array access
    def offset_exists(self, key: Any) -> bool:
        """Determine if an item exists at an offset and is not None."""
        return Arr.exists(self._items, key) and Arr.offset(self._items, key) is not None

    def offset_get(self, key: Any) -> Any:
        """Get an item at a given offset."""
        return Arr.offset(self._items, key) if Arr.exists(self._items, key) else None

    def offset_set(self, key: Any, item: Any) -> None:
        """Set the item at a given offset, appending when the key is None."""
        Arr.offset_set(self._items, key, item)

    def offset_unset(self, key: Any) -> None:
        """Unset the item at a given offset."""
        Arr.offset_unset(self._items, key)

    def __getitem__(self, key: Any) -> V:
        if not Arr.exists(self._items, key):
            raise KeyError(key)
        return Arr.offset(self._items, key)

    def __setitem__(self, key: Any, item: V) -> None:
        self.offset_set(key, item)

    def __delitem__(self, key: Any) -> None:
        self.offset_unset(key)

    def __contains__(self, item: Any) -> bool:
        """Check if the value is in the collection."""
        return in_array(item, self._items.values())

    def __iter__(self) -> Iterator[V]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return self.count()


def collect(items: Any = None) -> Collection[Any, Any]:
    """Create a collection from the given value."""
    return Collection(items)


__all__ = ["Collection", "SortFlag", "collect", "sort_comparator"]
