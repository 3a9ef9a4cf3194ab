from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union, Mapping
from collections.abc import Iterator as IteratorABC
from datetime import datetime, timedelta
import itertools
import math
import time

from fluentkit.Exceptions import InvalidArgumentException
from fluentkit.Iterable.Arr import Arr
from fluentkit.Iterable.Collection import Collection
from fluentkit.Iterable.EnumeratesValues import EnumeratesValues, in_array
from fluentkit.Log.Logger import get_logger
from fluentkit.Support.Helpers import (
    _MISSING,
    adapt_callback,
    data_get,
    enum_value,
    is_blank,
    strict_equals,
    value as resolve_value,
)
from fluentkit.Support.Types import K, V, is_stringable

logger = get_logger('lazy')

PairFactory = Callable[[], Iterable[Tuple[Any, Any]]]


class LazyCollection(EnumeratesValues[K, V]):
    """
    Lazy collection for memory-efficient operations.

    The source is either an array (a dict snapshot), another LazyCollection,
    or a zero-argument callable producing a fresh iterable on every call, so
    the collection can be iterated any number of times. One-shot iterators
    such as generator objects are rejected: pass the generator function.
    """

    def __init__(self, source: Any = None):
        self._keyed = False

        if isinstance(source, LazyCollection):
            self._source: Any = source
        elif source is None:
            self._source = {}
        elif isinstance(source, IteratorABC):
            raise InvalidArgumentException(
                "Generators should not be passed directly to LazyCollection. Instead, pass a generator function."
            )
        elif callable(source):
            self._source = source
        else:
            self._source = self._get_arrayable_items(source)

    @classmethod
    def from_pairs(cls, factory: PairFactory) -> 'LazyCollection[Any, Any]':
        """Create a lazy collection from a factory yielding (key, value) pairs."""
        instance = cls(factory)
        instance._keyed = True
        return instance

    @classmethod
    def _from_values(cls, factory: Callable[[], Iterable[Any]]) -> 'LazyCollection[int, Any]':
        return cls.from_pairs(lambda: enumerate(factory()))

    @classmethod
    def range(cls, start: int, end: int, step: int = 1) -> 'LazyCollection[int, int]':
        """Create a collection with the given range, inclusive of both ends."""
        if step == 0:
            raise InvalidArgumentException("Step value cannot be zero.")

        step = abs(step)

        def generator() -> Iterator[int]:
            current = start
            if start <= end:
                while current <= end:
                    yield current
                    current += step
            else:
                while current >= end:
                    yield current
                    current -= step

        return cls(generator)

    # Core methods
    def items(self) -> Iterator[Tuple[Any, Any]]:
        """Iterate over the (key, value) pairs of the source."""
        source = self._source

        if isinstance(source, dict):
            return iter(list(source.items()))

        if isinstance(source, LazyCollection):
            return source.items()

        produced = source()

        if self._keyed:
            return iter(produced)

        if isinstance(produced, EnumeratesValues):
            return iter(produced.items())

        if isinstance(produced, Mapping):
            return iter(list(produced.items()))

        if isinstance(produced, (str, bytes)) or not isinstance(produced, Iterable):
            return enumerate(Arr.wrap(produced))

        return enumerate(produced)

    def all(self) -> Union[List[V], Dict[K, V]]:
        """Get all items in the enumerable."""
        if isinstance(self._source, dict):
            return Collection(self._source).all()

        return Collection(dict(self.items())).all()

    def count(self) -> int:
        """Count the number of items in the collection."""
        if isinstance(self._source, dict):
            return len(self._source)

        return sum(1 for _ in self.items())

    def eager(self) -> 'LazyCollection[K, V]':
        """Eager load all items into a new lazy collection backed by an array."""
        return self.__class__(dict(self.items()))

    def remember(self) -> 'LazyCollection[K, V]':
        """Cache values as they're enumerated."""
        cache: List[Tuple[Any, Any]] = []
        iterator: Optional[Iterator[Tuple[Any, Any]]] = None
        exhausted = False

        def factory() -> Iterator[Tuple[Any, Any]]:
            nonlocal iterator, exhausted
            index = 0

            while True:
                if index < len(cache):
                    yield cache[index]
                    index += 1
                    continue

                if exhausted:
                    return

                if iterator is None:
                    iterator = self.items()

                pair = next(iterator, _MISSING)
                if pair is _MISSING:
                    exhausted = True
                    return

                cache.append(pair)

        return self.from_pairs(factory)

    def _passthru(self, method: str, *args: Any, **kwargs: Any) -> 'LazyCollection[Any, Any]':
        """Run an eager-only method on the collected items and wrap the result lazily."""
        def factory() -> Iterator[Tuple[Any, Any]]:
            logger.debug("Materializing lazy collection", {'method': method})
            return iter(getattr(self.collect(), method)(*args, **kwargs).items())

        return self.from_pairs(factory)

    # Key access
    def get(self, key: Any, default: Any = None) -> Any:
        """Get an item by key."""
        if key is None:
            return None

        for outer_key, outer_value in self.items():
            if strict_equals(outer_key, key):
                return outer_value

        return resolve_value(default)

    def has(self, key: Any, *keys: Any) -> bool:
        """Determine if an item exists in the collection by key."""
        wanted = set(key) if isinstance(key, (list, tuple)) else {key, *keys}
        remaining = len(wanted)

        for item_key, _ in self.items():
            if item_key in wanted:
                wanted.discard(item_key)
                remaining -= 1
                if remaining == 0:
                    return True

        return False

    def has_any(self, key: Any, *keys: Any) -> bool:
        """Determine if any of the given keys exist in the collection."""
        wanted = set(key) if isinstance(key, (list, tuple)) else {key, *keys}

        return any(item_key in wanted for item_key, _ in self.items())

    def keys(self) -> 'LazyCollection[int, K]':
        """Get the keys of the collection items."""
        return self._from_values(lambda: (key for key, _ in self.items()))

    def values(self) -> 'LazyCollection[int, V]':
        """Reset the keys on the underlying array."""
        return self._from_values(lambda: (item for _, item in self.items()))

    def sole(self, key: Any = None, operator: Any = _MISSING, value: Any = _MISSING) -> V:
        """Get the first item in the collection, but only if exactly one item exists."""
        criteria = self._criteria(key, operator, value)
        items = self if criteria is None else self.filter(criteria)

        return items.take(2).collect().sole()

    def random(self, number: Any = None, preserve_keys: bool = False) -> Any:
        """Get one or a specified number of items randomly from the collection."""
        result = self.collect().random(number, preserve_keys)

        return result if number is None else self.__class__(result)

    # Lazy transformations
    def filter(self, callback: Optional[Callable[..., bool]] = None) -> 'LazyCollection[K, V]':
        """Run a filter over each of the items."""
        check = adapt_callback(callback) if callback is not None else (lambda item, key: not is_blank(item))

        return self.from_pairs(lambda: ((key, item) for key, item in self.items() if check(item, key)))

    def map(self, callback: Callable[..., Any]) -> 'LazyCollection[K, Any]':
        """Run a map over each of the items."""
        callback = adapt_callback(callback)

        return self.from_pairs(lambda: ((key, callback(item, key)) for key, item in self.items()))

    def map_with_keys(self, callback: Callable[..., Any]) -> 'LazyCollection[Any, Any]':
        """Run an associative map over each of the items."""
        callback = adapt_callback(callback)

        def factory() -> Iterator[Tuple[Any, Any]]:
            for key, item in self.items():
                pairs = callback(item, key)
                if isinstance(pairs, Mapping):
                    yield from pairs.items()
                else:
                    yield tuple(pairs)

        return self.from_pairs(factory)

    def collapse(self) -> 'LazyCollection[int, Any]':
        """Collapse the collection of items into a single array."""
        def generator() -> Iterator[Any]:
            for nested in self:
                if isinstance(nested, EnumeratesValues):
                    yield from nested
                elif isinstance(nested, Mapping):
                    yield from nested.values()
                elif isinstance(nested, (list, tuple)):
                    yield from nested

        return self._from_values(generator)

    def collapse_with_keys(self) -> 'LazyCollection[Any, Any]':
        """Collapse the collection of items into a single array while preserving its keys."""
        def factory() -> Iterator[Tuple[Any, Any]]:
            for nested in self:
                if isinstance(nested, EnumeratesValues):
                    yield from nested.items()
                elif isinstance(nested, Mapping):
                    yield from nested.items()
                elif isinstance(nested, (list, tuple)):
                    yield from enumerate(nested)

        return self.from_pairs(factory)

    def flatten(self, depth: Union[int, float] = float('inf')) -> 'LazyCollection[int, Any]':
        """Get a flattened list of the items in the collection."""
        def generator() -> Iterator[Any]:
            for item in self:
                if not isinstance(item, (Mapping, list, tuple, EnumeratesValues)):
                    yield item
                elif depth == 1:
                    yield from self.__class__(item)
                else:
                    yield from self.__class__(item).flatten(depth - 1)

        return self._from_values(generator)

    def flip(self) -> 'LazyCollection[Any, K]':
        """Flip the values with their keys."""
        return self.from_pairs(lambda: ((item, key) for key, item in self.items()))

    def key_by(self, key_by: Any) -> 'LazyCollection[Any, V]':
        """Key an associative array by a field or using a callback."""
        retriever = self._value_retriever(key_by)

        def factory() -> Iterator[Tuple[Any, Any]]:
            for key, item in self.items():
                resolved = enum_value(retriever(item, key))
                if is_stringable(resolved):
                    resolved = str(resolved)
                yield resolved, item

        return self.from_pairs(factory)

    def pluck(self, target: Any, key: Any = None) -> 'LazyCollection[Any, Any]':
        """Get the values of a given key."""
        def factory() -> Iterator[Tuple[Any, Any]]:
            position = 0
            for item in self:
                item_value = target(item) if callable(target) else data_get(item, target)

                if key is None:
                    yield position, item_value
                    position += 1
                else:
                    item_key = enum_value(key(item) if callable(key) else data_get(item, key))
                    if is_stringable(item_key):
                        item_key = str(item_key)
                    yield item_key, item_value

        return self.from_pairs(factory)

    def count_by(self, count_by: Any = None) -> 'LazyCollection[Any, int]':
        """Count the number of items in the collection by a field or using a callback."""
        retriever = self._identity() if count_by is None else self._value_retriever(count_by)

        def factory() -> Iterator[Tuple[Any, int]]:
            counts: Dict[Any, int] = {}
            for key, item in self.items():
                group = enum_value(retriever(item, key))
                counts[group] = counts.get(group, 0) + 1
            yield from counts.items()

        return self.from_pairs(factory)

    def combine(self, values: Any) -> 'LazyCollection[Any, Any]':
        """Create a collection by using this collection for keys and another for its values."""
        message = "Both parameters should have an equal number of elements."

        def factory() -> Iterator[Tuple[Any, Any]]:
            value_iterator = _values_iterator(values)

            for key in self:
                combined = next(value_iterator, _MISSING)
                if combined is _MISSING:
                    raise InvalidArgumentException(message)
                yield key, combined

            if next(value_iterator, _MISSING) is not _MISSING:
                raise InvalidArgumentException(message)

        return self.from_pairs(factory)

    def nth(self, step: int, offset: int = 0) -> 'LazyCollection[int, V]':
        """Create a new collection consisting of every n-th element."""
        return self._from_values(
            lambda: (item for position, item in enumerate(self.slice(offset)) if position % step == 0)
        )

    def only(self, keys: Any, *more: Any) -> 'LazyCollection[K, V]':
        """Get the items with the specified keys."""
        if isinstance(keys, EnumeratesValues):
            keys = keys.all()
        elif keys is not None:
            keys = list(keys) if isinstance(keys, (list, tuple)) else [keys, *more]

        def factory() -> Iterator[Tuple[Any, Any]]:
            if keys is None:
                yield from self.items()
                return

            wanted = {str(key) for key in keys}
            for key, item in self.items():
                if str(key) in wanted:
                    yield key, item
                    wanted.discard(str(key))
                    if not wanted:
                        break

        return self.from_pairs(factory)

    def select(self, keys: Any, *more: Any) -> 'LazyCollection[Any, Any]':
        """Select specific values from the items within the collection."""
        if isinstance(keys, EnumeratesValues):
            keys = keys.all()
        elif keys is not None:
            keys = list(keys) if isinstance(keys, (list, tuple)) else [keys, *more]

        if keys is None:
            return self.from_pairs(self.items)

        return self._from_values(lambda: (Arr.select([item], keys)[0] for item in self))

    def concat(self, source: Iterable[Any]) -> 'LazyCollection[int, Any]':
        """Push all of the given items onto the collection."""
        return self._from_values(lambda: itertools.chain(iter(self), _values_iterator(source)))

    def replace(self, items: Any) -> 'LazyCollection[Any, Any]':
        """Replace the collection items with the given items."""
        def factory() -> Iterator[Tuple[Any, Any]]:
            replacements = self._get_arrayable_items(items)

            for key, item in self.items():
                if key in replacements:
                    yield key, replacements.pop(key)
                else:
                    yield key, item

            yield from replacements.items()

        return self.from_pairs(factory)

    def unique(self, key: Any = None, strict: bool = False) -> 'LazyCollection[K, V]':
        """Return only unique items from the collection array."""
        retriever = self._value_retriever(key)

        def factory() -> Iterator[Tuple[Any, Any]]:
            exists: List[Any] = []
            for item_key, item in self.items():
                identifier = retriever(item, item_key)
                if not in_array(identifier, exists, strict):
                    exists.append(identifier)
                    yield item_key, item

        return self.from_pairs(factory)

    def zip(self, *items: Any) -> 'LazyCollection[int, LazyCollection[int, Any]]':
        """Zip the collection together with one or more arrays."""
        def generator() -> Iterator[Any]:
            iterators = [iter(self)] + [_values_iterator(source) for source in items]
            for values in itertools.zip_longest(*iterators, fillvalue=None):
                yield self.__class__(list(values))

        return self._from_values(generator)

    def pad(self, size: int, pad_value: Any) -> 'LazyCollection[Any, Any]':
        """Pad collection to the specified length with a value."""
        if size < 0:
            return self._passthru('pad', size, pad_value)

        def factory() -> Iterator[Tuple[Any, Any]]:
            yielded = 0
            next_key = 0

            for key, item in self.items():
                yield key, item
                yielded += 1
                if isinstance(key, int) and not isinstance(key, bool):
                    next_key = max(next_key, key + 1)

            while yielded < size:
                yield next_key, pad_value
                next_key += 1
                yielded += 1

        return self.from_pairs(factory)

    # Windows
    def skip(self, count: int) -> 'LazyCollection[K, V]':
        """Skip the first {count} items."""
        return self.from_pairs(lambda: itertools.islice(self.items(), max(count, 0), None))

    def skip_until(self, target: Any) -> 'LazyCollection[K, V]':
        """Skip items in the collection until the given condition is met."""
        callback = adapt_callback(target) if self._use_as_callable(target) else self._equality(target)

        return self.skip_while(self._negate(callback))

    def skip_while(self, target: Any) -> 'LazyCollection[K, V]':
        """Skip items in the collection while the given condition is met."""
        callback = adapt_callback(target) if self._use_as_callable(target) else self._equality(target)

        return self.from_pairs(lambda: itertools.dropwhile(lambda pair: callback(pair[1], pair[0]), self.items()))

    def slice(self, offset: int, length: Optional[int] = None) -> 'LazyCollection[K, V]':
        """Get a slice of items from the enumerable."""
        if offset < 0 or (length is not None and length < 0):
            return self._passthru('slice', offset, length)

        instance = self.skip(offset)

        return instance if length is None else instance.take(length)

    def take(self, limit: int) -> 'LazyCollection[K, V]':
        """Take the first or last {limit} items."""
        if limit < 0:
            capacity = abs(limit)

            def tail() -> Iterator[Tuple[Any, Any]]:
                ring: List[Tuple[Any, Any]] = []
                position = 0

                for pair in self.items():
                    if len(ring) < capacity:
                        ring.append(pair)
                    else:
                        ring[position] = pair
                    position = (position + 1) % capacity

                for index in range(len(ring)):
                    yield ring[(position + index) % len(ring)] if len(ring) == capacity else ring[index]

            return self.from_pairs(tail)

        return self.from_pairs(lambda: itertools.islice(self.items(), limit))

    def take_until(self, target: Any) -> 'LazyCollection[K, V]':
        """Take items in the collection until the given condition is met."""
        callback = adapt_callback(target) if self._use_as_callable(target) else self._equality(target)

        def factory() -> Iterator[Tuple[Any, Any]]:
            for key, item in self.items():
                if callback(item, key):
                    break
                yield key, item

        return self.from_pairs(factory)

    def take_while(self, target: Any) -> 'LazyCollection[K, V]':
        """Take items in the collection while the given condition is met."""
        callback = adapt_callback(target) if self._use_as_callable(target) else self._equality(target)

        return self.take_until(lambda item, key: not callback(item, key))

    def take_until_timeout(self, timeout: datetime, callback: Optional[Callable[..., Any]] = None) -> 'LazyCollection[K, V]':
        """Take items in the collection until a given point in time."""
        deadline = timeout.timestamp()
        notify = adapt_callback(callback) if callback is not None else None

        def factory() -> Iterator[Tuple[Any, Any]]:
            if self._now() >= deadline:
                logger.info("Timeout reached before enumeration", {'deadline': timeout.isoformat()})
                if notify is not None:
                    notify(None, None)
                return

            for key, item in self.items():
                yield key, item

                if self._now() >= deadline:
                    logger.info("Timeout reached during enumeration", {'deadline': timeout.isoformat(), 'key': key})
                    if notify is not None:
                        notify(item, key)
                    break

        return self.from_pairs(factory)

    def sliding(self, size: int = 2, step: int = 1) -> 'LazyCollection[int, LazyCollection[K, V]]':
        """Create chunks representing a "sliding window" view of the items in the collection."""
        def generator() -> Iterator[Any]:
            iterator = self.items()
            chunk: List[Tuple[Any, Any]] = []

            for pair in iterator:
                chunk.append(pair)

                if len(chunk) == size:
                    yield self.__class__(dict(chunk))
                    chunk = chunk[step:]

                    if step > size:
                        for _ in itertools.islice(iterator, step - size):
                            pass

        return self._from_values(generator)

    def chunk(self, size: int, preserve_keys: bool = True) -> 'LazyCollection[int, LazyCollection[Any, V]]':
        """Chunk the collection into chunks of the given size."""
        if size <= 0:
            return self.empty()

        def generator() -> Iterator[Any]:
            iterator = self.items()
            while True:
                portion = list(itertools.islice(iterator, size))
                if not portion:
                    return
                yield self.__class__(dict(portion) if preserve_keys else [item for _, item in portion])

        return self._from_values(generator)

    def split_in(self, number_of_groups: int) -> 'LazyCollection[int, LazyCollection[Any, V]]':
        """Split a collection into a certain number of groups, and fill the first groups completely."""
        return self.chunk(math.ceil(self.count() / number_of_groups))

    def chunk_while(self, callback: Callable[..., bool]) -> 'LazyCollection[int, LazyCollection[Any, V]]':
        """Split the collection into chunks while the callback returns true."""
        callback = adapt_callback(callback, 3)

        def generator() -> Iterator[Any]:
            chunk: Collection[Any, Any] = Collection()

            for key, item in self.items():
                if chunk.is_not_empty() and not callback(item, key, chunk):
                    yield self.__class__(chunk)
                    chunk = Collection()
                chunk.offset_set(key, item)

            if chunk.is_not_empty():
                yield self.__class__(chunk)

        return self._from_values(generator)

    # Side effects and pacing
    def tap_each(self, callback: Callable[..., Any]) -> 'LazyCollection[K, V]':
        """Pass each item in the collection to the given callback, lazily."""
        callback = adapt_callback(callback)

        def factory() -> Iterator[Tuple[Any, Any]]:
            for key, item in self.items():
                callback(item, key)
                yield key, item

        return self.from_pairs(factory)

    def throttle(self, seconds: float) -> 'LazyCollection[K, V]':
        """Throttle the values, releasing them at most once per the given seconds."""
        def factory() -> Iterator[Tuple[Any, Any]]:
            for key, item in self.items():
                fetched_at = self._precise_now()
                yield key, item
                self._sleep(seconds - (self._precise_now() - fetched_at))

        return self.from_pairs(factory)

    def with_heartbeat(self, interval: Union[int, float, timedelta], callback: Callable[[], Any]) -> 'LazyCollection[K, V]':
        """Invoke the given callback every time the interval elapses while enumerating."""
        seconds = interval.total_seconds() if isinstance(interval, timedelta) else interval

        def factory() -> Iterator[Tuple[Any, Any]]:
            start = self._now()

            for key, item in self.items():
                now = self._now()
                if now - start >= seconds:
                    callback()
                    start = now
                yield key, item

        return self.from_pairs(factory)

    def _now(self) -> float:
        """Get the current time in seconds."""
        return time.time()

    def _precise_now(self) -> float:
        """Get a monotonic clock reading in seconds."""
        return time.monotonic()

    def _sleep(self, seconds: float) -> None:
        """Sleep for the given number of seconds."""
        if seconds <= 0:
            return
        time.sleep(seconds)

    # Eager-only operations
    def median(self, key: Any = None) -> Any:
        return self.collect().median(key)

    def mode(self, key: Any = None) -> Any:
        return self.collect().mode(key)

    def cross_join(self, *lists: Any) -> 'LazyCollection[Any, Any]':
        return self._passthru('cross_join', *lists)

    def diff(self, items: Any) -> 'LazyCollection[K, V]':
        return self._passthru('diff', items)

    def diff_using(self, items: Any, callback: Callable[[Any, Any], int]) -> 'LazyCollection[K, V]':
        return self._passthru('diff_using', items, callback)

    def diff_assoc(self, items: Any) -> 'LazyCollection[K, V]':
        return self._passthru('diff_assoc', items)

    def diff_assoc_using(self, items: Any, callback: Callable[[Any, Any], int]) -> 'LazyCollection[K, V]':
        return self._passthru('diff_assoc_using', items, callback)

    def diff_keys(self, items: Any) -> 'LazyCollection[K, V]':
        return self._passthru('diff_keys', items)

    def diff_keys_using(self, items: Any, callback: Callable[[Any, Any], int]) -> 'LazyCollection[K, V]':
        return self._passthru('diff_keys_using', items, callback)

    def duplicates(self, callback: Any = None, strict: bool = False) -> 'LazyCollection[K, Any]':
        return self._passthru('duplicates', callback, strict)

    def duplicates_strict(self, callback: Any = None) -> 'LazyCollection[K, Any]':
        return self._passthru('duplicates_strict', callback)

    def except_(self, keys: Any, *more: Any) -> 'LazyCollection[K, V]':
        return self._passthru('except_', keys, *more)

    def group_by(self, group_by: Any, preserve_keys: bool = False) -> 'LazyCollection[Any, Collection[Any, V]]':
        return self._passthru('group_by', group_by, preserve_keys)

    def intersect(self, items: Any) -> 'LazyCollection[K, V]':
        return self._passthru('intersect', items)

    def intersect_using(self, items: Any, callback: Callable[[Any, Any], int]) -> 'LazyCollection[K, V]':
        return self._passthru('intersect_using', items, callback)

    def intersect_assoc(self, items: Any) -> 'LazyCollection[K, V]':
        return self._passthru('intersect_assoc', items)

    def intersect_assoc_using(self, items: Any, callback: Callable[[Any, Any], int]) -> 'LazyCollection[K, V]':
        return self._passthru('intersect_assoc_using', items, callback)

    def intersect_by_keys(self, items: Any) -> 'LazyCollection[K, V]':
        return self._passthru('intersect_by_keys', items)

    def map_to_dictionary(self, callback: Callable[..., Any]) -> 'LazyCollection[Any, List[Any]]':
        return self._passthru('map_to_dictionary', callback)

    def merge(self, items: Any) -> 'LazyCollection[Any, Any]':
        return self._passthru('merge', items)

    def merge_recursive(self, items: Any) -> 'LazyCollection[Any, Any]':
        return self._passthru('merge_recursive', items)

    def multiply(self, multiplier: int) -> 'LazyCollection[int, V]':
        return self._passthru('multiply', multiplier)

    def replace_recursive(self, items: Any) -> 'LazyCollection[Any, Any]':
        return self._passthru('replace_recursive', items)

    def reverse(self) -> 'LazyCollection[K, V]':
        return self._passthru('reverse')

    def shuffle(self, seed: Optional[int] = None) -> 'LazyCollection[int, V]':
        return self._passthru('shuffle', seed)

    def sort(self, callback: Any = None) -> 'LazyCollection[K, V]':
        return self._passthru('sort', callback)

    def sort_desc(self, options: int = 0) -> 'LazyCollection[K, V]':
        return self._passthru('sort_desc', options)

    def sort_by(self, callback: Any, options: int = 0, descending: bool = False) -> 'LazyCollection[K, V]':
        return self._passthru('sort_by', callback, options, descending)

    def sort_by_desc(self, callback: Any, options: int = 0) -> 'LazyCollection[K, V]':
        return self._passthru('sort_by_desc', callback, options)

    def sort_keys(self, options: int = 0, descending: bool = False) -> 'LazyCollection[K, V]':
        return self._passthru('sort_keys', options, descending)

    def sort_keys_desc(self, options: int = 0) -> 'LazyCollection[K, V]':
        return self._passthru('sort_keys_desc', options)

    def sort_keys_using(self, callback: Callable[[Any, Any], int]) -> 'LazyCollection[K, V]':
        return self._passthru('sort_keys_using', callback)

    def split(self, number_of_groups: int) -> 'LazyCollection[int, Collection[Any, V]]':
        return self._passthru('split', number_of_groups)

    def union(self, items: Any) -> 'LazyCollection[Any, Any]':
        return self._passthru('union', items)

    def dot(self) -> 'LazyCollection[str, Any]':
        return self._passthru('dot')

    def undot(self) -> 'LazyCollection[str, Any]':
        return self._passthru('undot')


def _values_iterator(source: Any) -> Iterator[Any]:
    """Iterate over the values of an array, collection or iterable."""
    if isinstance(source, EnumeratesValues):
        return iter(source)
    if isinstance(source, Mapping):
        return iter(list(source.values()))
    if callable(source):
        return _values_iterator(source())
    return iter(source)


def lazy(source: Any = None) -> LazyCollection[Any, Any]:
    """Create a lazy collection from the given source."""
    return LazyCollection(source)


__all__ = ["LazyCollection", "lazy"]
