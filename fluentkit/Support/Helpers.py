from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Union, Mapping, Sequence
from enum import Enum
import inspect

_MISSING = object()


# Value Helpers
def value(target: Any, *args: Any) -> Any:
    """Return the default value of the given value, calling it when it is a closure."""
    if callable(target) and not isinstance(target, type):
        return target(*args)
    return target


def enum_value(target: Any, default: Any = None) -> Any:
    """Return the scalar value of an enum case, or the value itself."""
    if isinstance(target, Enum):
        return target.value
    if target is None:
        return value(default)
    return target


def is_callable_value(target: Any) -> bool:
    """Determine if the given value should be used as a callback."""
    return callable(target) and not isinstance(target, str)


def is_blank(target: Any) -> bool:
    """Determine if a value is "empty" the way a PHP array value would be."""
    if target is None or target is False:
        return True
    if isinstance(target, bool):
        return False
    if isinstance(target, (int, float)):
        return target == 0
    if isinstance(target, str):
        return target in ('', '0')
    if isinstance(target, (bytes, list, tuple, dict, set, frozenset)):
        return len(target) == 0
    return False


# Callback Helpers
def _positional_capacity(callback: Callable[..., Any]) -> Optional[int]:
    """Number of positional arguments a callback accepts, None when unbounded."""
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        return 1

    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def adapt_callback(callback: Callable[..., Any], max_args: int = 2) -> Callable[..., Any]:
    """
    Wrap a callback so it can always be invoked as ``callback(value, key, ...)``.

    Extra arguments are dropped when the callback declares fewer positional
    parameters, so ``lambda value: ...`` and ``lambda value, key: ...`` both
    work wherever a ``(value, key)`` callback is expected.
    """
    capacity = _positional_capacity(callback)
    if capacity is None or capacity >= max_args:
        return callback

    def adapted(*args: Any) -> Any:
        return callback(*args[:capacity])

    return adapted


# Comparison Helpers
def loose_equals(left: Any, right: Any) -> bool:
    """Compare two values with ``==``, comparing truthiness when either side is a bool."""
    if isinstance(left, bool) or isinstance(right, bool):
        return (not is_blank(left)) == (not is_blank(right))
    return bool(left == right)


def strict_equals(left: Any, right: Any) -> bool:
    """Compare two values requiring the same type and equality."""
    return type(left) is type(right) and bool(left == right)


def compare(left: Any, right: Any) -> int:
    """Three-way comparison returning -1, 0 or 1."""
    if left is None or right is None:
        if left is None and right is None:
            return 0
        return -1 if left is None else 1
    try:
        return int(left > right) - int(left < right)
    except TypeError:
        left_str, right_str = str(left), str(right)
        return int(left_str > right_str) - int(left_str < right_str)


# Data Access Helpers
def _segments(key: Any) -> List[Any]:
    """Split a key path into its segments."""
    if isinstance(key, (list, tuple)):
        return list(key)
    if isinstance(key, str):
        return key.split('.')
    return [key]


def _access(target: Any, segment: Any) -> Any:
    """Read a single segment from a target, returning _MISSING when absent."""
    from fluentkit.Iterable.Arr import Arr

    if Arr.accessible(target):
        if Arr.exists(target, segment):
            return Arr.offset(target, segment)
        return _MISSING

    if isinstance(segment, str) and not segment.startswith('_'):
        found = getattr(target, segment, _MISSING)
        if found is not None and found is not _MISSING and not inspect.ismethod(found):
            return found

    return _MISSING


def data_get(target: Any, key: Any, default: Any = None) -> Any:
    """Get an item from an array or object using "dot" notation."""
    from fluentkit.Iterable.Arr import Arr
    from fluentkit.Iterable.EnumeratesValues import EnumeratesValues

    if key is None:
        return target

    segments = _segments(key)

    for index, segment in enumerate(segments):
        if segment is None:
            return target

        if segment == '*':
            if isinstance(target, EnumeratesValues):
                target = target.all()
            if isinstance(target, Mapping):
                target = list(target.values())
            elif isinstance(target, (str, bytes)) or not isinstance(target, (Sequence, set)):
                return value(default)

            remaining = segments[index + 1:]
            result = [data_get(item, remaining) for item in target]

            return Arr.collapse(result) if '*' in remaining else result

        if segment in ('{first}', '{last}'):
            keys = list(Arr.keys_of(target))
            if not keys:
                return value(default)
            segment = keys[0] if segment == '{first}' else keys[-1]
        elif segment in ('\\*', '\\{first}', '\\{last}'):
            segment = segment[1:]

        found = _access(target, segment)
        if found is _MISSING:
            return value(default)
        target = found

    return target


def data_set(target: Any, key: Any, new_value: Any, overwrite: bool = True) -> Any:
    """Set an item on an array or object using "dot" notation."""
    from fluentkit.Iterable.Arr import Arr

    segments = _segments(key)
    segment = segments.pop(0)

    if segment == '*':
        if not Arr.accessible(target):
            target = {}

        if segments:
            for inner in Arr.values_of(target):
                data_set(inner, list(segments), new_value, overwrite)
        elif overwrite:
            for inner_key in list(Arr.keys_of(target)):
                Arr.offset_set(target, inner_key, new_value)
    elif Arr.accessible(target):
        if segments:
            if not Arr.exists(target, segment):
                Arr.offset_set(target, segment, {})
            data_set(Arr.offset(target, segment), list(segments), new_value, overwrite)
        elif overwrite or not Arr.exists(target, segment):
            Arr.offset_set(target, segment, new_value)
    elif target is not None and not isinstance(target, (str, int, float, bool)):
        if segments:
            if getattr(target, segment, None) is None:
                setattr(target, segment, {})
            data_set(getattr(target, segment), list(segments), new_value, overwrite)
        elif overwrite or getattr(target, segment, None) is None:
            setattr(target, segment, new_value)
    else:
        target = {}
        if segments:
            target[segment] = data_set(target.get(segment), list(segments), new_value, overwrite)
        elif overwrite:
            target[segment] = new_value

    return target


def data_forget(target: Any, key: Any) -> Any:
    """Remove an item from an array or object using "dot" notation."""
    from fluentkit.Iterable.Arr import Arr

    segments = _segments(key)
    segment = segments.pop(0)

    if segment == '*' and Arr.accessible(target):
        if segments:
            for inner in Arr.values_of(target):
                data_forget(inner, list(segments))
    elif Arr.accessible(target):
        if segments and Arr.exists(target, segment):
            data_forget(Arr.offset(target, segment), list(segments))
        elif not segments and Arr.exists(target, segment):
            Arr.forget(target, segment)
    elif isinstance(segment, str) and hasattr(target, segment):
        if segments:
            data_forget(getattr(target, segment), list(segments))
        else:
            delattr(target, segment)

    return target


__all__ = [
    "value",
    "enum_value",
    "is_callable_value",
    "is_blank",
    "adapt_callback",
    "loose_equals",
    "strict_equals",
    "compare",
    "data_get",
    "data_set",
    "data_forget",
]
