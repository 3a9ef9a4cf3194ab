from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, Mapping
import json

from pydantic_core import to_jsonable_python

from fluentkit.Iterable.Arr import Arr
from fluentkit.Support.Conditionable import Conditionable
from fluentkit.Support.Helpers import data_get, data_set, value as resolve_value
from fluentkit.Support.Macroable import Macroable


class Fluent(Conditionable, Macroable):
    """
    Attribute container with dot-notation access.

    Attributes live in a plain dict; attribute syntax, item syntax and the
    offset_* methods are three views over the same storage. Registered
    macros take precedence over attribute reads.
    """

    def __init__(self, attributes: Any = None):
        object.__setattr__(self, '_attributes', {})
        self.fill(attributes or {})

    @classmethod
    def make(cls, attributes: Any = None) -> 'Fluent':
        """Create a new fluent instance."""
        return cls(attributes)

    def get(self, key: Any, default: Any = None) -> Any:
        """Get an attribute from the fluent instance using "dot" notation."""
        return data_get(self._attributes, key, default)

    def set(self, key: Any, new_value: Any) -> 'Fluent':
        """Set an attribute on the fluent instance using "dot" notation."""
        data_set(self._attributes, key, new_value)
        return self

    def fill(self, attributes: Any) -> 'Fluent':
        """Fill the fluent instance with an array of attributes."""
        pairs: Iterable[Any] = attributes.items() if isinstance(attributes, Mapping) else Arr.items_of(attributes)

        for key, item in pairs:
            self._attributes[key] = item

        return self

    def value(self, key: Any, default: Any = None) -> Any:
        """Get an attribute from the fluent instance."""
        if key in self._attributes:
            return self._attributes[key]

        return resolve_value(default)

    def scope(self, key: Any, default: Any = None) -> 'Fluent':
        """Get the value of the given key as a new Fluent instance."""
        return self.__class__(Arr.wrap(self.get(key, default)))

    def all(self, keys: Any = None, *more: Any) -> Dict[Any, Any]:
        """Get all of the attributes, or only the given dot-notation keys."""
        if not keys:
            return dict(self._attributes)

        keys = list(keys) if isinstance(keys, (list, tuple)) else [keys, *more]
        results: Dict[Any, Any] = {}

        for key in keys:
            Arr.set(results, key, Arr.get(self._attributes, key))

        return results

    def get_attributes(self) -> Dict[Any, Any]:
        """Get the attributes from the fluent instance."""
        return self._attributes

    def to_array(self) -> Dict[Any, Any]:
        """Convert the fluent instance to an array."""
        return self._attributes

    def json_serialize(self) -> Dict[Any, Any]:
        """Convert the object into something JSON serializable."""
        return self.to_array()

    def to_json(self, **options: Any) -> str:
        """Convert the fluent instance to JSON."""
        return json.dumps(self.json_serialize(), default=to_jsonable_python, **options)

    def to_pretty_json(self, **options: Any) -> str:
        """Convert the fluent instance to pretty print formatted JSON."""
        return self.to_json(indent=4, **options)

    def is_empty(self) -> bool:
        return not self._attributes

    def is_not_empty(self) -> bool:
        return not self.is_empty()

    # Array access
    def offset_exists(self, key: Any) -> bool:
        return self._attributes.get(key) is not None

    def offset_get(self, key: Any) -> Any:
        return self.value(key)

    def offset_set(self, key: Any, new_value: Any) -> None:
        self._attributes[key] = new_value

    def offset_unset(self, key: Any) -> None:
        self._attributes.pop(key, None)

    def __getitem__(self, key: Any) -> Any:
        return self.offset_get(key)

    def __setitem__(self, key: Any, new_value: Any) -> None:
        self.offset_set(key, new_value)

    def __delitem__(self, key: Any) -> None:
        self.offset_unset(key)

    def __contains__(self, key: Any) -> bool:
        return self.offset_exists(key)

    def items(self) -> Iterator[Any]:
        return iter(list(self._attributes.items()))

    def __iter__(self) -> Iterator[Any]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Fluent):
            return self._attributes == other._attributes
        return NotImplemented

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._attributes!r})"

    # Dynamic attributes
    def __getattr__(self, name: str) -> Any:
        """Resolve macros first, then attributes."""
        if name.startswith('_'):
            raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")

        if type(self).has_macro(name):
            return super().__getattr__(name)

        return self.value(name)

    def __setattr__(self, name: str, new_value: Any) -> None:
        if name.startswith('_'):
            object.__setattr__(self, name, new_value)
        else:
            self.offset_set(name, new_value)

    def __delattr__(self, name: str) -> None:
        if name.startswith('_'):
            object.__delattr__(self, name)
        else:
            self.offset_unset(name)


__all__ = ["Fluent"]
