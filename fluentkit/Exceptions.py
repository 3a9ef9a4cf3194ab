from __future__ import annotations

from typing import Optional


class FluentKitException(Exception):
    """Base exception for fluentkit"""
    pass


class InvalidArgumentException(FluentKitException, ValueError):
    """Exception raised when an argument is not acceptable for an operation"""
    pass


class ItemNotFoundException(FluentKitException, LookupError):
    """Exception raised when no item matches a lookup"""

    def __init__(self, message: str = "No items were found.") -> None:
        super().__init__(message)


class MultipleItemsFoundException(FluentKitException):
    """Exception raised when a lookup expected a single item but found several"""

    def __init__(self, count: int, message: Optional[str] = None) -> None:
        self.count = count

        super().__init__(message or f"{count} items were found.")

    def get_count(self) -> int:
        """Get the number of items found."""
        return self.count


class BadMethodCallException(FluentKitException, AttributeError):
    """Exception raised when calling a method or macro that does not exist"""

    def __init__(self, class_name: str, method: str) -> None:
        self.class_name = class_name
        self.method = method

        super().__init__(f"Method {class_name}.{method} does not exist.")
