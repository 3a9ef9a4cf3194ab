from __future__ import annotations

from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, Tuple, Type, Union, Mapping, TYPE_CHECKING
from enum import Enum
import json
import statistics

from pydantic_core import to_jsonable_python

from fluentkit.Exceptions import InvalidArgumentException, ItemNotFoundException
from fluentkit.Iterable.Arr import Arr
from fluentkit.Support.Conditionable import Conditionable
from fluentkit.Support.Helpers import (
    _MISSING,
    adapt_callback,
    compare,
    data_get,
    enum_value,
    is_callable_value,
    loose_equals,
    strict_equals,
    value as resolve_value,
)
from fluentkit.Support.Macroable import Macroable
from fluentkit.Support.Types import K, V, is_arrayable, is_json_serializable, is_jsonable, is_stringable

if TYPE_CHECKING:
    from fluentkit.Iterable.Collection import Collection

_SCALARS = (type(None), bool, int, float, str, bytes, list, tuple, dict, set, frozenset)


def _is_object(target: Any) -> bool:
    return not isinstance(target, _SCALARS)


def _compare_with(retrieved: Any, operator: str, target: Any) -> bool:
    """Compare two values using a where() operator."""
    if operator in ('!=', '<>'):
        return not loose_equals(retrieved, target)
    if operator == '===':
        return strict_equals(retrieved, target)
    if operator == '!==':
        return not strict_equals(retrieved, target)
    if operator == '<=>':
        return bool(compare(retrieved, target))

    try:
        if operator == '<':
            return retrieved < target
        if operator == '>':
            return retrieved > target
        if operator == '<=':
            return retrieved <= target
        if operator == '>=':
            return retrieved >= target
    except TypeError:
        return False

    return loose_equals(retrieved, target)


def in_array(needle: Any, haystack: Iterable[Any], strict: bool = False) -> bool:
    """Check if a value is present in the haystack, loosely or strictly."""
    equals = strict_equals if strict else loose_equals
    return any(equals(needle, candidate) for candidate in haystack)


class EnumeratesValues(Conditionable, Macroable, Generic[K, V]):
    """
    Behaviour shared by Collection and LazyCollection.

    Subclasses provide items() yielding ``(key, value)`` pairs along with the
    structural operations (filter, map, take, ...). Everything here is
    expressed in terms of those primitives so it stays lazy where they are.
    """

    def __init__(self, items: Any = None) -> None:
        raise NotImplementedError

    # Construction
    @classmethod
    def make(cls, items: Any = None) -> Any:
        """Create a new collection instance if the value isn't one already."""
        return cls(items)

    @classmethod
    def wrap(cls, target: Any) -> Any:
        """Wrap the given value in a collection if applicable."""
        if isinstance(target, EnumeratesValues):
            return cls(target)
        return cls(Arr.wrap(target))

    @staticmethod
    def unwrap(target: Any) -> Any:
        """Get the underlying items from the given collection if applicable."""
        return target.all() if isinstance(target, EnumeratesValues) else target

    @classmethod
    def empty(cls) -> Any:
        """Create a new instance with no items."""
        return cls([])

    @classmethod
    def times(cls, number: int, callback: Optional[Callable[[int], Any]] = None) -> Any:
        """Create a new collection by invoking the callback a given amount of times."""
        if number < 1:
            return cls()

        return cls.range(1, number).unless(callback is None, lambda collection: collection.map(callback))

    @classmethod
    def from_json(cls, payload: str) -> Any:
        """Create a collection from a JSON string."""
        return cls(json.loads(payload))

    @classmethod
    def _get_arrayable_items(cls, items: Any) -> Dict[Any, Any]:
        """Results array of items from Collection or Arrayable."""
        if items is None:
            return {}
        if isinstance(items, dict):
            return dict(items)
        if isinstance(items, (list, tuple)):
            return dict(enumerate(items))
        if isinstance(items, EnumeratesValues):
            return dict(items.items())
        if isinstance(items, Mapping):
            return dict(items.items())
        if is_arrayable(items):
            return Arr.to_dict(items.to_array())
        if is_jsonable(items):
            return Arr.to_dict(json.loads(items.to_json()))
        if is_json_serializable(items):
            return Arr.to_dict(items.json_serialize())
        if isinstance(items, (str, bytes)) or not isinstance(items, Iterable):
            return {0: items}
        return dict(enumerate(items))

    # Structure primitives provided by subclasses
    def items(self) -> Iterable[Tuple[Any, Any]]:
        raise NotImplementedError

    def all(self) -> Union[List[Any], Dict[Any, Any]]:
        raise NotImplementedError

    def __iter__(self) -> Iterator[Any]:
        """Iterate over the values."""
        for _, item in self.items():
            yield item

    def __bool__(self) -> bool:
        return self.is_not_empty()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.all()!r})"

    def __str__(self) -> str:
        return self.to_json()

    # Inspection
    def is_empty(self) -> bool:
        """Determine if the collection is empty or not."""
        for _ in self.items():
            return False
        return True

    def is_not_empty(self) -> bool:
        """Determine if the collection is not empty."""
        return not self.is_empty()

    def contains_one_item(self) -> bool:
        """Determine if the collection contains a single item."""
        return self.take(2).count() == 1

    def contains(self, key: Any, operator: Any = _MISSING, value: Any = _MISSING) -> bool:
        """Determine if an item exists in the enumerable."""
        if operator is _MISSING and value is _MISSING:
            if self._use_as_callable(key):
                callback = adapt_callback(key)
                return any(callback(item, item_key) for item_key, item in self.items())

            return in_array(key, self)

        return self.contains(self._operator_for_where(key, operator, value))

    def contains_strict(self, key: Any, value: Any = _MISSING) -> bool:
        """Determine if an item exists, using strict comparison."""
        if value is not _MISSING:
            return self.contains(lambda item: strict_equals(data_get(item, key), value))

        if self._use_as_callable(key):
            return self.first(key) is not None

        return in_array(key, self, strict=True)

    def doesnt_contain(self, key: Any, operator: Any = _MISSING, value: Any = _MISSING) -> bool:
        """Determine if an item is not contained in the collection."""
        return not self.contains(key, operator, value)

    def every(self, key: Any, operator: Any = _MISSING, value: Any = _MISSING) -> bool:
        """Determine if all items pass the given truth test."""
        if operator is _MISSING and value is _MISSING:
            callback = self._value_retriever(key)
            for item_key, item in self.items():
                if not callback(item, item_key):
                    return False
            return True

        return self.every(self._operator_for_where(key, operator, value))

    def search(self, needle: Any, strict: bool = False) -> Any:
        """Search the collection for a given value and return the corresponding key, or None."""
        if self._use_as_callable(needle):
            callback = adapt_callback(needle)
            for key, item in self.items():
                if callback(item, key):
                    return key
            return None

        equals = strict_equals if strict else loose_equals
        for key, item in self.items():
            if equals(item, needle):
                return key
        return None

    def before(self, needle: Any, strict: bool = False) -> Any:
        """Get the item before the given item."""
        previous = None
        matches = self._matcher(needle, strict)

        for key, item in self.items():
            if matches(item, key):
                return previous
            previous = item

        return None

    def after(self, needle: Any, strict: bool = False) -> Any:
        """Get the item after the given item."""
        found = False
        matches = self._matcher(needle, strict)

        for key, item in self.items():
            if found:
                return item
            if matches(item, key):
                found = True

        return None

    def _matcher(self, needle: Any, strict: bool) -> Callable[[Any, Any], bool]:
        if self._use_as_callable(needle):
            return adapt_callback(needle)
        equals = strict_equals if strict else loose_equals
        return lambda item, key: equals(item, needle)

    # Retrieval
    def first(self, callback: Optional[Callable[..., bool]] = None, default: Any = None) -> Any:
        """Get the first item from the enumerable passing the given truth test."""
        callback = adapt_callback(callback) if callback is not None else None

        for key, item in self.items():
            if callback is None or callback(item, key):
                return item

        return resolve_value(default)

    def last(self, callback: Optional[Callable[..., bool]] = None, default: Any = None) -> Any:
        """Get the last item from the collection."""
        matched = _MISSING
        callback = adapt_callback(callback) if callback is not None else None

        for key, item in self.items():
            if callback is None or callback(item, key):
                matched = item

        return resolve_value(default) if matched is _MISSING else matched

    def first_where(self, key: Any, operator: Any = _MISSING, value: Any = _MISSING) -> Any:
        """Get the first item by the given key value pair."""
        return self.first(self._operator_for_where(key, operator, value))

    def first_or_fail(self, key: Any = None, operator: Any = _MISSING, value: Any = _MISSING) -> Any:
        """Get the first item in the collection but throw an exception if no matching items exist."""
        criteria = self._criteria(key, operator, value)

        for item_key, item in self.items():
            if criteria is None or criteria(item, item_key):
                return item

        raise ItemNotFoundException()

    def _criteria(self, key: Any, operator: Any, value: Any) -> Optional[Callable[..., bool]]:
        """Resolve the filter used by sole() and first_or_fail()."""
        if operator is not _MISSING or value is not _MISSING:
            return self._operator_for_where(key, operator, value)
        if key is None:
            return None
        if self._use_as_callable(key):
            return adapt_callback(key)
        return self._operator_for_where(key)

    def value(self, key: Any, default: Any = None) -> Any:
        """Get a single key's value from the first matching item in the collection."""
        found = self.first_where(key, '!==', None)

        if found is not None:
            return data_get(found, key, default)

        return resolve_value(default)

    # Aggregates
    def sum(self, callback: Any = None) -> Union[int, float]:
        """Get the sum of the given values."""
        retriever = self._identity() if callback is None else self._value_retriever(callback)
        total: Union[int, float] = 0
        for key, item in self.items():
            total += retriever(item, key)
        return total

    def avg(self, callback: Any = None) -> Optional[float]:
        """Get the average value of a given key."""
        retriever = self._value_retriever(callback)
        found = [retriever(item, key) for key, item in self.items()]
        found = [item for item in found if item is not None]

        if not found:
            return None

        return sum(found) / len(found)

    def average(self, callback: Any = None) -> Optional[float]:
        """Alias for the "avg" method."""
        return self.avg(callback)

    def median(self, key: Any = None) -> Optional[Union[int, float]]:
        """Get the median of a given key."""
        retriever = self._value_retriever(key)
        found = sorted(
            retrieved for retrieved in (retriever(item, item_key) for item_key, item in self.items())
            if retrieved is not None
        )

        if not found:
            return None

        return statistics.median(found)

    def mode(self, key: Any = None) -> Optional[List[Any]]:
        """Get the mode of a given key."""
        if self.is_empty():
            return None

        retriever = self._value_retriever(key)
        counts: Dict[Any, int] = {}
        for item_key, item in self.items():
            retrieved = retriever(item, item_key)
            counts[retrieved] = counts.get(retrieved, 0) + 1

        highest = max(counts.values())
        return [retrieved for retrieved, count in counts.items() if count == highest]

    def min(self, callback: Any = None) -> Any:
        """Get the min value of a given key."""
        retriever = self._value_retriever(callback)
        found = _MISSING
        for key, item in self.items():
            retrieved = retriever(item, key)
            if retrieved is not None and (found is _MISSING or compare(retrieved, found) < 0):
                found = retrieved
        return None if found is _MISSING else found

    def max(self, callback: Any = None) -> Any:
        """Get the max value of a given key."""
        retriever = self._value_retriever(callback)
        found = _MISSING
        for key, item in self.items():
            retrieved = retriever(item, key)
            if retrieved is not None and (found is _MISSING or compare(retrieved, found) > 0):
                found = retrieved
        return None if found is _MISSING else found

    def percentage(self, callback: Callable[..., bool], precision: int = 2) -> Optional[float]:
        """Calculate the percentage of items that pass a given truth test."""
        if self.is_empty():
            return None

        return round(self.filter(callback).count() / self.count() * 100, precision)

    def reduce(self, callback: Callable[..., Any], initial: Any = None) -> Any:
        """Reduce the collection to a single value."""
        callback = adapt_callback(callback, 3)
        result = initial

        for key, item in self.items():
            result = callback(result, item, key)

        return result

    def reduce_spread(self, callback: Callable[..., Any], *initial: Any) -> Tuple[Any, ...]:
        """Reduce the collection to multiple aggregate values."""
        result = tuple(initial)
        reducer = adapt_callback(callback, len(result) + 2)

        for key, item in self.items():
            result = reducer(*result, item, key)

            if not isinstance(result, (list, tuple)):
                raise InvalidArgumentException(
                    f"{self.__class__.__name__}.reduce_spread expects reducer to return a tuple, "
                    f"but got a '{type(result).__name__}' instead."
                )

            result = tuple(result)

        return result

    def reduce_with_keys(self, callback: Callable[..., Any], initial: Any = None) -> Any:
        """Reduce an associative collection to a single value."""
        return self.reduce(callback, initial)

    # Iteration
    def each(self, callback: Callable[..., Any]) -> Any:
        """Execute a callback over each item. Returning False stops the loop."""
        callback = adapt_callback(callback)

        for key, item in self.items():
            if callback(item, key) is False:
                break

        return self

    def each_spread(self, callback: Callable[..., Any]) -> Any:
        """Execute a callback over each nested chunk of items."""
        def spread(chunk: Any, key: Any) -> Any:
            values = Arr.values_of(chunk) + [key]
            return adapt_callback(callback, len(values))(*values)

        return self.each(spread)

    def map_spread(self, callback: Callable[..., Any]) -> Any:
        """Run a map over each nested chunk of items."""
        def spread(chunk: Any, key: Any) -> Any:
            values = Arr.values_of(chunk) + [key]
            return adapt_callback(callback, len(values))(*values)

        return self.map(spread)

    def map_to_groups(self, callback: Callable[..., Any]) -> Any:
        """Run a grouping map over the items, returning a collection of collections."""
        groups = self.map_to_dictionary(callback)

        return groups.map(self.make)

    def flat_map(self, callback: Callable[..., Any]) -> Any:
        """Map a collection and flatten the result by a single level."""
        return self.map(callback).collapse()

    def map_into(self, target: Type[Any]) -> Any:
        """Map the values into a new class."""
        if isinstance(target, type) and issubclass(target, Enum):
            return self.map(lambda item: target(item))

        return self.map(target)

    def for_page(self, page: int, per_page: int) -> Any:
        """"Paginate" the collection by slicing it into a smaller collection."""
        offset = max(0, (page - 1) * per_page)

        return self.slice(offset, per_page)

    def partition(self, key: Any, operator: Any = _MISSING, value: Any = _MISSING) -> Any:
        """Partition the collection into two arrays using the given callback or key."""
        passed: Dict[Any, Any] = {}
        failed: Dict[Any, Any] = {}

        if operator is _MISSING and value is _MISSING:
            callback = self._value_retriever(key)
        else:
            callback = self._operator_for_where(key, operator, value)

        for item_key, item in self.items():
            if callback(item, item_key):
                passed[item_key] = item
            else:
                failed[item_key] = item

        return self.__class__([self.__class__(passed), self.__class__(failed)])

    def ensure(self, types: Union[type, List[type], Tuple[type, ...]]) -> Any:
        """Ensure that every item in the collection is of the expected type."""
        allowed = tuple(types) if isinstance(types, (list, tuple)) else (types,)

        def check(item: Any, key: Any) -> Any:
            if not isinstance(item, allowed):
                expected = ', '.join(getattr(kind, '__name__', str(kind)) for kind in allowed)
                raise InvalidArgumentException(
                    f"Collection should only include [{expected}] items, but '{type(item).__name__}' found at position {key}."
                )
            return item

        return self.each(check)

    # Filtering with where clauses
    def where(self, key: Any, operator: Any = _MISSING, value: Any = _MISSING) -> Any:
        """Filter items by the given key value pair."""
        return self.filter(self._operator_for_where(key, operator, value))

    def where_null(self, key: Any = None) -> Any:
        """Filter items where the value for the given key is None."""
        return self.where_strict(key, None)

    def where_not_null(self, key: Any = None) -> Any:
        """Filter items where the value for the given key is not None."""
        return self.where(key, '!==', None)

    def where_strict(self, key: Any, value: Any) -> Any:
        """Filter items by the given key value pair using strict comparison."""
        return self.where(key, '===', value)

    def where_in(self, key: Any, values: Any, strict: bool = False) -> Any:
        """Filter items by the given key value pair."""
        values = list(self._get_arrayable_items(values).values())

        return self.filter(lambda item: in_array(enum_value(data_get(item, key)), values, strict))

    def where_in_strict(self, key: Any, values: Any) -> Any:
        """Filter items by the given key value pair using strict comparison."""
        return self.where_in(key, values, True)

    def where_between(self, key: Any, values: Any) -> Any:
        """Filter items such that the value of the given key is between the given values."""
        values = list(self._get_arrayable_items(values).values())

        return self.where(key, '>=', values[0]).where(key, '<=', values[-1])

    def where_not_between(self, key: Any, values: Any) -> Any:
        """Filter items such that the value of the given key is not between the given values."""
        values = list(self._get_arrayable_items(values).values())

        def outside(item: Any) -> bool:
            retrieved = enum_value(data_get(item, key))
            return _compare_with(retrieved, '<', values[0]) or _compare_with(retrieved, '>', values[-1])

        return self.filter(outside)

    def where_not_in(self, key: Any, values: Any, strict: bool = False) -> Any:
        """Filter items by the given key value pair."""
        values = list(self._get_arrayable_items(values).values())

        return self.reject(lambda item: in_array(enum_value(data_get(item, key)), values, strict))

    def where_not_in_strict(self, key: Any, values: Any) -> Any:
        """Filter items by the given key value pair using strict comparison."""
        return self.where_not_in(key, values, True)

    def where_instance_of(self, types: Union[type, List[type], Tuple[type, ...]]) -> Any:
        """Filter the items, removing any items that don't match the given type(s)."""
        allowed = tuple(types) if isinstance(types, (list, tuple)) else (types,)

        return self.filter(lambda item: isinstance(item, allowed))

    def reject(self, callback: Any = True) -> Any:
        """Create a collection of all elements that do not pass a given truth test."""
        if self._use_as_callable(callback):
            use = adapt_callback(callback)
            return self.filter(lambda item, key: not use(item, key))

        return self.filter(lambda item: not loose_equals(item, callback))

    def unique_strict(self, key: Any = None) -> Any:
        """Return only unique items from the collection array using strict comparison."""
        return self.unique(key, True)

    # Pipes and taps
    def pipe(self, callback: Callable[[Any], Any]) -> Any:
        """Pass the collection to the given callback and return the result."""
        return callback(self)

    def pipe_into(self, target: Type[Any]) -> Any:
        """Pass the collection into a new class."""
        return target(self)

    def pipe_through(self, callbacks: Iterable[Callable[[Any], Any]]) -> Any:
        """Pass the collection through a series of callable pipes and return the result."""
        carry = self
        for callback in callbacks:
            carry = callback(carry)
        return carry

    def tap(self, callback: Callable[[Any], Any]) -> Any:
        """Pass the collection to the given callback and then return it."""
        callback(self)
        return self

    def when_empty(self, callback: Callable[..., Any], default: Optional[Callable[..., Any]] = None) -> Any:
        """Apply the callback if the collection is empty."""
        return self.when(self.is_empty(), callback, default)

    def when_not_empty(self, callback: Callable[..., Any], default: Optional[Callable[..., Any]] = None) -> Any:
        """Apply the callback if the collection is not empty."""
        return self.when(self.is_not_empty(), callback, default)

    def unless_empty(self, callback: Callable[..., Any], default: Optional[Callable[..., Any]] = None) -> Any:
        """Apply the callback unless the collection is empty."""
        return self.when_not_empty(callback, default)

    def unless_not_empty(self, callback: Callable[..., Any], default: Optional[Callable[..., Any]] = None) -> Any:
        """Apply the callback unless the collection is not empty."""
        return self.when_empty(callback, default)

    # Strings
    def implode(self, target: Any, glue: Optional[str] = None) -> str:
        """Concatenate values of a given key as a string."""
        if self._use_as_callable(target):
            return (glue or '').join(str(item) for item in self.map(target))

        first = self.first()

        if Arr.accessible(first) or (_is_object(first) and not is_stringable(first)):
            return (glue or '').join(str(item) for item in self.pluck(target))

        return str(target).join(_to_string(item) for item in self)

    def join(self, glue: str, final_glue: str = '') -> str:
        """Join all items from the collection using a string. The final items can use a separate glue string."""
        return Arr.join(list(self), glue, final_glue)

    # Serialization
    def collect(self) -> 'Collection[Any, Any]':
        """Collect the values into an eager collection."""
        from fluentkit.Iterable.Collection import Collection

        return Collection(dict(self.items()))

    def to_array(self) -> Union[List[Any], Dict[Any, Any]]:
        """Get the collection of items as a plain array."""
        return self.map(lambda item: item.to_array() if is_arrayable(item) else item).all()

    def json_serialize(self) -> Union[List[Any], Dict[Any, Any]]:
        """Convert the object into something JSON serializable."""
        def serialize(item: Any) -> Any:
            if is_json_serializable(item):
                return item.json_serialize()
            if is_jsonable(item):
                return json.loads(item.to_json())
            if is_arrayable(item):
                return item.to_array()
            return item

        return self.map(serialize).all()

    def to_json(self, **options: Any) -> str:
        """Get the collection of items as JSON."""
        return json.dumps(self.json_serialize(), default=to_jsonable_python, **options)

    def to_pretty_json(self, **options: Any) -> str:
        """Get the collection of items as pretty print formatted JSON."""
        return self.to_json(indent=4, **options)

    # Callback helpers
    @staticmethod
    def _use_as_callable(target: Any) -> bool:
        """Determine if the given value is callable, but not a string."""
        return is_callable_value(target)

    def _value_retriever(self, target: Any) -> Callable[..., Any]:
        """Get a value retrieving callback."""
        if self._use_as_callable(target):
            return adapt_callback(target)

        return lambda item, *_: data_get(item, target)

    def _operator_for_where(self, key: Any, operator: Any = _MISSING, value: Any = _MISSING) -> Callable[..., bool]:
        """Get an operator checker callback."""
        if self._use_as_callable(key):
            return adapt_callback(key)

        if operator is _MISSING and value is _MISSING:
            value, operator = True, '='
        elif value is _MISSING:
            value, operator = operator, '='

        def check(item: Any, *_: Any) -> bool:
            retrieved = enum_value(data_get(item, key))
            target = enum_value(value)

            strings = [v for v in (retrieved, target) if isinstance(v, str) or is_stringable(v)]
            objects = [v for v in (retrieved, target) if _is_object(v)]

            if len(strings) < 2 and len(objects) == 1:
                return operator in ('!=', '<>', '!==')

            return _compare_with(retrieved, operator, target)

        return check

    @staticmethod
    def _equality(target: Any) -> Callable[..., bool]:
        """Make a function to check an item's equality."""
        return lambda item, *_: loose_equals(item, target)

    @staticmethod
    def _negate(callback: Callable[..., bool]) -> Callable[..., bool]:
        """Make a function using another function, by negating its result."""
        callback = adapt_callback(callback)
        return lambda *args: not callback(*args)

    @staticmethod
    def _identity() -> Callable[..., Any]:
        """Make a function that returns what's passed to it."""
        return lambda item, *_: item


def _to_string(item: Any) -> str:
    if item is True:
        return '1'
    if item is False or item is None:
        return ''
    return str(item)


__all__ = ["EnumeratesValues", "in_array"]
