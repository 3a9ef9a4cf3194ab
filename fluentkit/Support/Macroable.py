from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from fluentkit.Exceptions import BadMethodCallException
from fluentkit.Log.Logger import get_logger

logger = get_logger('macros')


class Macro:
    """A named callable registered on a Macroable class."""

    def __init__(self, name: str, method: Callable[..., Any]):
        self.name = name
        self.method = method


class Macroable:
    """
    Mixin allowing classes to be extended at runtime with named callables.

    Every subclass owns its registry; lookups walk the MRO so a macro
    registered on a base class is visible from its subclasses. A macro
    receives the instance as its first argument.
    """

    _macros: Dict[str, Macro] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._macros = {}

    @classmethod
    def macro(cls, name: str, method: Callable[..., Any]) -> None:
        """Register a custom macro."""
        cls._macros[name] = Macro(name, method)
        logger.debug("Macro registered", {'class': cls.__name__, 'name': name})

    @classmethod
    def mixin(cls, mixin: Any, replace: bool = True) -> None:
        """Register every public function of a class or object as a macro."""
        source = mixin if isinstance(mixin, type) else type(mixin)

        for name, member in vars(source).items():
            if name.startswith('_') or not callable(member):
                continue
            if replace or not cls.has_macro(name):
                cls.macro(name, member)

    @classmethod
    def has_macro(cls, name: str) -> bool:
        """Checks if macro is registered."""
        return cls._find_macro(name) is not None

    @classmethod
    def flush_macros(cls) -> None:
        """Flush the existing macros of this class."""
        cls._macros.clear()

    @classmethod
    def _find_macro(cls, name: str) -> Optional[Macro]:
        for klass in cls.__mro__:
            registry = vars(klass).get('_macros')
            if registry and name in registry:
                return registry[name]
        return None

    def call_macro(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Dynamically call a registered macro."""
        macro = type(self)._find_macro(name)

        if macro is None:
            raise BadMethodCallException(type(self).__name__, name)

        return macro.method(self, *args, **kwargs)

    def __getattr__(self, name: str) -> Any:
        """Handle macro calls."""
        if name.startswith('_'):
            raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")

        macro = type(self)._find_macro(name)

        if macro is None:
            raise BadMethodCallException(type(self).__name__, name)

        def macro_method(*args: Any, **kwargs: Any) -> Any:
            return macro.method(self, *args, **kwargs)

        return macro_method
