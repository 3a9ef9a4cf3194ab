"""
Shared type definitions

This module provides the typing vocabulary used across fluentkit:
- Type variables for keys and values of the containers
- Protocol-based capabilities consumed during serialization
- Type guards for those capabilities
"""

from __future__ import annotations

from enum import Enum
from typing import (
    Any,
    Hashable,
    Protocol,
    TypeVar,
    runtime_checkable,
)

from typing_extensions import TypeGuard

# Type Variables
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

# Protocol Definitions
@runtime_checkable
class Arrayable(Protocol):
    """Protocol for objects that can be converted to arrays."""

    def to_array(self) -> Any:
        """Convert to array representation."""
        ...


@runtime_checkable
class Jsonable(Protocol):
    """Protocol for objects that can be converted to JSON."""

    def to_json(self, **kwargs: Any) -> str:
        """Convert to JSON string."""
        ...


@runtime_checkable
class JsonSerializable(Protocol):
    """Protocol for objects that describe their own JSON payload."""

    def json_serialize(self) -> Any:
        """Get the data which should be serialized to JSON."""
        ...


# Type Guards
def is_arrayable(obj: Any) -> TypeGuard[Arrayable]:
    """Type guard to check if object implements Arrayable protocol."""
    return not isinstance(obj, type) and hasattr(obj, "to_array") and callable(obj.to_array)


def is_jsonable(obj: Any) -> TypeGuard[Jsonable]:
    """Type guard to check if object implements Jsonable protocol."""
    return not isinstance(obj, type) and hasattr(obj, "to_json") and callable(obj.to_json)


def is_json_serializable(obj: Any) -> TypeGuard[JsonSerializable]:
    """Type guard to check if object implements JsonSerializable protocol."""
    return (
        not isinstance(obj, type)
        and hasattr(obj, "json_serialize")
        and callable(obj.json_serialize)
    )


def is_stringable(obj: Any) -> bool:
    """Check if object defines its own string conversion."""
    if obj is None or isinstance(obj, (str, bytes, int, float, bool, Enum, type)):
        return False
    return type(obj).__str__ is not object.__str__


__all__ = [
    "K",
    "V",
    "Arrayable",
    "Jsonable",
    "JsonSerializable",
    "is_arrayable",
    "is_jsonable",
    "is_json_serializable",
    "is_stringable",
]
