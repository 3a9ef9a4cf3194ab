"""
Data transfer objects with declarative property casting

A DataTransferObject subclass declares its properties as class annotations.
Constructor input is cast to the declared types; keys that do not match a
declared property are kept in a separate attribute bag that is never
serialized.

    class UserData(DataTransferObject):
        name: str
        age: Optional[int] = None
        tags: Annotated[list, Var('string[]')] = []
        address: Optional[AddressData] = None

    UserData({'name': 'Ada', 'age': '42', 'extra': 'x'}).to_array()
    # {'name': 'Ada', 'age': 42, 'tags': [], 'address': None}
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, TypeVar, Union, Mapping
from datetime import date, datetime, time
from enum import Enum
import builtins
import copy
import json
import re
import sys
import types
import typing

from pydantic import BaseModel
from pydantic_core import to_jsonable_python
from typing_extensions import Annotated, get_args, get_origin, get_type_hints

from fluentkit.Exceptions import InvalidArgumentException
from fluentkit.Iterable.Arr import Arr
from fluentkit.Iterable.Collection import Collection
from fluentkit.Iterable.EnumeratesValues import EnumeratesValues
from fluentkit.Log.Logger import get_logger
from fluentkit.Support.Config import config
from fluentkit.Support.Helpers import is_blank
from fluentkit.Support.Types import is_arrayable, is_json_serializable, is_jsonable, is_stringable

logger = get_logger('dto')

TDto = TypeVar('TDto', bound='DataTransferObject')
TypeSpec = Union[str, type]

_MIXED = 'mixed'
_SCALAR_NAMES = {
    'int', 'integer', 'string', 'str', 'float', 'number', 'double',
    'object', 'bool', 'boolean', 'array', _MIXED,
}
_BUILTIN_NAMES: Dict[type, str] = {
    int: 'int',
    str: 'string',
    float: 'float',
    bool: 'bool',
    object: 'object',
    list: 'array',
    tuple: 'array',
    dict: 'array',
    set: 'array',
}
_NUMERIC_PREFIX = re.compile(r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?')
_RESERVED = {'visible', 'hidden', 'appends', 'attributes', 'original'}


class Var:
    """
    Element type marker for a property, used inside ``Annotated``.

    ``Var('int[]')`` and ``Var(int, many=True)`` both declare a list of ints;
    ``Var('AddressData')`` names a class resolved from the module defining
    the DTO.
    """

    def __init__(self, type: TypeSpec, many: bool = False):
        if isinstance(type, str) and type.endswith('[]'):
            type, many = type[:-2], True

        self.type = type
        self.many = many

    def __repr__(self) -> str:
        name = self.type if isinstance(self.type, str) else self.type.__name__
        return f"Var('{name}{'[]' if self.many else ''}')"


class PropertyInfo:
    """Resolved typing metadata of a declared property."""

    def __init__(self, name: str, declared: Optional[TypeSpec], nullable: bool,
                 annotation: Optional[Var], has_default: bool, default: Any = None):
        self.name = name
        self.declared = declared
        self.nullable = nullable
        self.annotation = annotation
        self.has_default = has_default
        self.default = default


class DataTransferObject:
    """
    Base class for data transfer objects.

    Values passed to the constructor are cast once, at construction, to the
    types declared on the subclass. ``to_array()`` and ``to_json()`` honour
    the ``visible``/``hidden`` lists and append the computed attributes
    named in ``appends`` (``get_<name>_attribute`` accessors).
    """

    visible: ClassVar[List[str]] = []
    hidden: ClassVar[List[str]] = []
    appends: ClassVar[List[str]] = []

    _properties_cache: ClassVar[Optional[Dict[str, PropertyInfo]]] = None

    def __init__(self, attributes: Optional[Mapping[str, Any]] = None):
        object.__setattr__(self, '_attributes', dict(attributes or {}))
        object.__setattr__(self, '_original', {})
        object.__setattr__(self, '_only', list(self.visible))
        object.__setattr__(self, '_except', list(self.hidden))
        object.__setattr__(self, '_appends', list(self.appends))

        for key, item in list(self._attributes.items()):
            self._parse_property(key, item)

        # Every instance owns its defaults
        for name, info in self._declared_properties().items():
            if info.has_default and name not in self.__dict__:
                object.__setattr__(self, name, copy.deepcopy(info.default))

    # Construction
    @classmethod
    def make(cls: Type[TDto], attributes: Optional[Mapping[str, Any]] = None) -> TDto:
        """Create an instance of the DTO."""
        return cls(attributes)

    @classmethod
    def collection(cls: Type[TDto], items: Any) -> Collection[Any, TDto]:
        """Create a collection of DTOs from a two dimensional array."""
        if Arr.dimensions(items) < 2:
            raise InvalidArgumentException(
                f"{cls.__name__}.collection() expects a list of attribute mappings."
            )

        return Collection(items).map(lambda attributes: cls.make(attributes))

    @classmethod
    def array_of(cls: Type[TDto], items: Any) -> Union[List[TDto], Dict[Any, TDto]]:
        """Create a list of DTOs from a two dimensional array."""
        return cls.collection(items).all()

    def clone(self: TDto, **overrides: Any) -> TDto:
        """Clone the DTO data into a new DTO, overriding the given values."""
        return self.make({**self.to_array(), **overrides})

    def only(self: TDto, *keys: str) -> TDto:
        """Restrict the serialized data to the given keys."""
        dto = copy.copy(self)
        dto._only = [*self._only, *keys]
        return dto

    def except_(self: TDto, *keys: str) -> TDto:
        """Exclude the given keys from the serialized data."""
        dto = copy.copy(self)
        dto._except = [*self._except, *keys]
        return dto

    def __copy__(self: TDto) -> TDto:
        dto = self.__class__.__new__(self.__class__)
        dto.__dict__.update(self.__dict__)
        object.__setattr__(dto, '_attributes', dict(self._attributes))
        object.__setattr__(dto, '_only', list(self._only))
        object.__setattr__(dto, '_except', list(self._except))
        object.__setattr__(dto, '_appends', list(self._appends))
        return dto

    # Accessors
    @property
    def attributes(self) -> Dict[str, Any]:
        """Values received for keys that are not declared properties."""
        return self._attributes

    @property
    def original(self) -> Mapping[str, Any]:
        """Read-only view of the constructor input."""
        return types.MappingProxyType(self._original)

    def get_original(self, key: Optional[str] = None, default: Any = None) -> Any:
        """Get the unaltered constructor input, or a single key of it."""
        if key is None:
            return dict(self._original)

        return self._original.get(key, default)

    def all(self) -> Dict[str, Any]:
        """Get every value of the DTO, including the attribute bag."""
        data = dict(self._attributes)

        for name, info in self._declared_properties().items():
            if name in self.__dict__ or info.has_default:
                data[name] = getattr(self, name)

        return data

    # Serialization
    def to_array(self) -> Dict[str, Any]:
        """Convert the instance into a dict for serialization."""
        if self._only:
            data = Arr.to_dict(Arr.only(self.all(), self._only))
        else:
            data = {key: item for key, item in self.all().items() if key not in self._except}

        data = {key: item for key, item in data.items() if key not in self._attributes}

        for name in self._appends:
            data[name] = getattr(self, f'get_{name}_attribute')()

        return {key: self.format(item) for key, item in data.items()}

    def json_serialize(self) -> Dict[str, Any]:
        return self.to_array()

    def to_json(self, **options: Any) -> str:
        """Convert the instance into its JSON representation."""
        options = {**config('dto.json_options', {}), **options}

        return json.dumps(self.to_array(), default=to_jsonable_python, **options)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.all()!r})"

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.all() == other.all()

    __hash__ = None  # type: ignore[assignment]

    # Dynamic attributes
    def __getattr__(self, name: str) -> Any:
        """Read undeclared values from the attribute bag or a computed accessor."""
        if name.startswith('_'):
            raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")

        if name in self._attributes:
            return self._attributes[name]

        accessor = f'get_{name}_attribute'
        if callable(getattr(type(self), accessor, None)):
            return getattr(self, accessor)()

        raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")

    def __setattr__(self, name: str, new_value: Any) -> None:
        if name.startswith('_') or name in self._declared_properties():
            object.__setattr__(self, name, new_value)
        else:
            self._attributes[name] = new_value

    # Extension points
    def transform(self, attribute: str, value: Any) -> Any:
        """Transform a value before it is cast into its property."""
        return value

    def cast(self, value: Any, type: TypeSpec) -> Any:
        """Cast a value to the requested type."""
        if value is None:
            return None

        if isinstance(type, str):
            if type in ('int', 'integer'):
                return _to_int(value)
            if type in ('string', 'str'):
                return _to_str(value)
            if type in ('float', 'number', 'double'):
                return _to_float(value)
            if type == 'object':
                return _to_object(value)
            if type in ('bool', 'boolean'):
                return not is_blank(value)
            if type not in (_MIXED, 'array'):
                logger.debug("Unknown cast type, value passed through", {'dto': self.__class__.__name__, 'type': type})
            return value

        return _to_class(value, type)

    def format(self, value: Any) -> Any:
        """Format a value for serialization."""
        if isinstance(value, (list, tuple, dict)):
            value = Collection(value)

        if isinstance(value, EnumeratesValues):
            return value.map(lambda item: self.format(item)).all()

        if isinstance(value, (datetime, date)):
            return value.strftime(config('dto.date_format', '%Y-%m-%d %H:%M:%S'))
        if isinstance(value, BaseModel):
            return value.model_dump()
        if is_arrayable(value):
            return value.to_array()
        if is_jsonable(value):
            return value.to_json()
        if is_stringable(value):
            return str(value)
        if is_json_serializable(value):
            return value.json_serialize()

        return value

    # Property casting
    def _parse_property(self, key: str, value: Any) -> None:
        """Cast an input value into its declared property, if the key is declared."""
        self._original[key] = value

        info = self._declared_properties().get(key)
        if info is None:
            logger.debug("Undeclared key kept in attribute bag", {'dto': self.__class__.__name__, 'key': key})
            return

        del self._attributes[key]

        if is_blank(value) and info.has_default:
            value = copy.deepcopy(info.default)

        value = self.transform(key, value)

        declared = None if info.declared == _MIXED else info.declared
        annotation = info.annotation

        if declared is None and annotation is None:
            object.__setattr__(self, key, value)
            return

        if value is None and info.nullable:
            object.__setattr__(self, key, None)
            return

        subtype: Optional[TypeSpec] = declared
        annotation_type: TypeSpec = annotation.type if annotation is not None else _MIXED

        if isinstance(declared, type) and issubclass(declared, EnumeratesValues):
            subtype = 'collection'
            if annotation is not None:
                declared = annotation_type
        elif annotation is not None and annotation.many:
            if declared is None:
                subtype = 'collection'
            else:
                subtype = 'array'
                declared = annotation_type

        if declared is None:
            declared = annotation_type

        if isinstance(declared, type) and subtype not in ('array', 'collection'):
            object.__setattr__(self, key, self.cast(value, declared))
            return

        result = Collection(value).map(lambda item: self.cast(item, declared))

        if subtype == 'collection':
            object.__setattr__(self, key, result)
        elif subtype == 'array':
            object.__setattr__(self, key, result.all())
        else:
            object.__setattr__(self, key, result.first())

    @classmethod
    def _declared_properties(cls) -> Dict[str, PropertyInfo]:
        """Get the typing metadata of every declared property, keyed by name."""
        cached = cls.__dict__.get('_properties_cache')
        if cached is not None:
            return cached

        properties: Dict[str, PropertyInfo] = {}

        for name, hint in cls._type_hints().items():
            if name.startswith('_') or name in _RESERVED or get_origin(hint) is ClassVar:
                continue
            has_default, default = cls._default_for(name)
            declared, nullable, annotation = cls._describe(hint)
            properties[name] = PropertyInfo(name, declared, nullable, annotation, has_default, default)

        for klass in reversed(cls.__mro__):
            if not issubclass(klass, DataTransferObject) or klass is DataTransferObject:
                continue
            for name, member in vars(klass).items():
                if name in properties or name.startswith('_') or name in _RESERVED:
                    continue
                if callable(member) or isinstance(member, (property, classmethod, staticmethod)):
                    continue
                properties[name] = PropertyInfo(name, None, True, None, True, member)

        cls._properties_cache = properties
        return properties

    @classmethod
    def _type_hints(cls) -> Dict[str, Any]:
        try:
            return get_type_hints(cls, include_extras=True)
        except NameError:
            hints: Dict[str, Any] = {}
            for klass in reversed(cls.__mro__):
                for name, hint in vars(klass).get('__annotations__', {}).items():
                    hints[name] = cls._resolve_name(hint) if isinstance(hint, str) else hint
            return hints

    @classmethod
    def _default_for(cls, name: str) -> Tuple[bool, Any]:
        for klass in cls.__mro__:
            if name in vars(klass):
                return True, vars(klass)[name]
        return False, None

    @classmethod
    def _describe(cls, hint: Any) -> Tuple[Optional[TypeSpec], bool, Optional[Var]]:
        """Split a type hint into (declared type, nullable, element annotation)."""
        annotation: Optional[Var] = None
        nullable = False

        if get_origin(hint) is Annotated:
            hint, *metadata = get_args(hint)
            annotation = next((item for item in metadata if isinstance(item, Var)), None)

        if get_origin(hint) is Union or _is_union_type(hint):
            members = [member for member in get_args(hint) if member is not type(None)]
            nullable = len(members) < len(get_args(hint))
            hint = members[0] if len(members) == 1 else Any

            if get_origin(hint) is Annotated and annotation is None:
                hint, *metadata = get_args(hint)
                annotation = next((item for item in metadata if isinstance(item, Var)), None)

        if hint is Any or hint is None:
            declared = None
        else:
            origin = get_origin(hint) or hint
            declared = cls._type_spec(origin)

            args = get_args(hint)
            if annotation is None and args:
                if origin in (list, set, List, typing.Set) or (origin is tuple and len(args) == 2 and args[1] is Ellipsis):
                    annotation = Var(cls._type_spec(get_origin(args[0]) or args[0]), many=True)
                elif isinstance(origin, type) and issubclass(origin, EnumeratesValues):
                    annotation = Var(cls._type_spec(get_origin(args[-1]) or args[-1]), many=True)

        if annotation is not None and isinstance(annotation.type, str):
            annotation = Var(cls._resolve_name(annotation.type), many=annotation.many)

        return declared, nullable, annotation

    @classmethod
    def _type_spec(cls, hint: Any) -> Optional[TypeSpec]:
        if hint is Any:
            return _MIXED
        if isinstance(hint, str):
            return cls._resolve_name(hint)
        if hint in _BUILTIN_NAMES:
            return _BUILTIN_NAMES[hint]
        if isinstance(hint, type):
            return hint
        return _MIXED

    @classmethod
    def _resolve_name(cls, name: str) -> TypeSpec:
        """Resolve a type name against the module and namespace of the DTO class."""
        if name in _SCALAR_NAMES:
            return name

        module = sys.modules.get(cls.__module__)
        for namespace in (vars(cls), vars(module) if module else {}, vars(builtins)):
            found = namespace.get(name)
            if isinstance(found, type):
                return _BUILTIN_NAMES.get(found, found)

        if name == 'Collection':
            return Collection

        return name


DataTransfertObject = DataTransferObject


def _is_union_type(hint: Any) -> bool:
    return isinstance(hint, types.UnionType)


def _numeric_prefix(value: str) -> Optional[float]:
    match = _NUMERIC_PREFIX.match(value)
    return float(match.group(0)) if match else None


def _to_int(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value and value not in (float('inf'), float('-inf')) else 0
    if isinstance(value, Enum):
        return _to_int(value.value)
    if isinstance(value, (str, bytes)):
        text = value.decode() if isinstance(value, bytes) else value
        number = _numeric_prefix(text)
        return _to_int(number) if number is not None else 0
    return 0 if is_blank(value) else 1


def _to_float(value: Any) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, Enum):
        return _to_float(value.value)
    if isinstance(value, (str, bytes)):
        text = value.decode() if isinstance(value, bytes) else value
        number = _numeric_prefix(text)
        return number if number is not None else 0.0
    return 0.0 if is_blank(value) else 1.0


def _to_str(value: Any) -> str:
    if value is True:
        return '1'
    if value is False:
        return ''
    if isinstance(value, Enum):
        return _to_str(value.value)
    if isinstance(value, bytes):
        return value.decode()
    return str(value)


def _to_object(value: Any) -> Any:
    if isinstance(value, Mapping):
        return types.SimpleNamespace(**{str(key): item for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return types.SimpleNamespace(**{str(key): item for key, item in enumerate(value)})
    if isinstance(value, (str, bytes, int, float, bool)):
        return types.SimpleNamespace(scalar=value)
    return value


def _to_class(value: Any, target: type) -> Any:
    """Cast a value into an instance of the given class."""
    if isinstance(value, target):
        return value

    if issubclass(target, (datetime, date, time)) and isinstance(value, str):
        return target.fromisoformat(value)
    if issubclass(target, datetime) and isinstance(value, (int, float)) and not isinstance(value, bool):
        return target.fromtimestamp(value)
    if issubclass(target, BaseModel):
        return target.model_validate(value)

    return target(value)


__all__ = ["DataTransferObject", "DataTransfertObject", "PropertyInfo", "Var"]
