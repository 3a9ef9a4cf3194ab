from __future__ import annotations

from typing import Any, Callable, Optional

from fluentkit.Support.Helpers import adapt_callback


class Conditionable:
    """Mixin providing when() / unless() conditional chaining."""

    def when(self, condition: Any, callback: Optional[Callable[..., Any]] = None, default: Optional[Callable[..., Any]] = None) -> Any:
        """Apply the callback if the given condition is truthy."""
        condition = condition(self) if callable(condition) else condition

        if condition:
            return self if callback is None else _fallback(adapt_callback(callback)(self, condition), self)
        elif default is not None:
            return _fallback(adapt_callback(default)(self, condition), self)

        return self

    def unless(self, condition: Any, callback: Optional[Callable[..., Any]] = None, default: Optional[Callable[..., Any]] = None) -> Any:
        """Apply the callback if the given condition is falsy."""
        condition = condition(self) if callable(condition) else condition

        if not condition:
            return self if callback is None else _fallback(adapt_callback(callback)(self, condition), self)
        elif default is not None:
            return _fallback(adapt_callback(default)(self, condition), self)

        return self


def _fallback(result: Any, target: Any) -> Any:
    return target if result is None else result
