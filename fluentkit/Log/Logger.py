from __future__ import annotations

import logging
import sys
from typing import Any, Dict, Optional

from fluentkit.Support.Config import config

LogContext = Dict[str, Any]


class LaravelStyleLogger:
    """Laravel-style logger implementation."""

    def __init__(self, name: str = 'fluentkit') -> None:
        self.name = name
        self.logger = logging.getLogger(name)

        if not self.logger.handlers and not self._has_configured_parent():
            self._setup_default_handler()

    def _has_configured_parent(self) -> bool:
        """Check whether an ancestor logger already owns a handler."""
        parent = self.logger.parent
        while parent is not None and parent is not logging.root:
            if parent.handlers:
                return True
            parent = parent.parent
        return False

    def _setup_default_handler(self) -> None:
        """Set up default logging handler."""
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            config('logging.format', '[%(asctime)s] %(levelname)s in %(name)s: %(message)s'),
            datefmt=config('logging.date_format', '%Y-%m-%d %H:%M:%S')
        )
        handler.setFormatter(formatter)
        self.logger.addHandler(handler)
        self.logger.setLevel(str(config('logging.level', 'warning')).upper())

    def debug(self, message: str, context: Optional[LogContext] = None) -> None:
        """Log debug message."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(self._format_message(message, context))

    def info(self, message: str, context: Optional[LogContext] = None) -> None:
        """Log info message."""
        self.logger.info(self._format_message(message, context))

    def _format_message(self, message: str, context: Optional[LogContext] = None) -> str:
        """Format message with context."""
        if context:
            context_str = " | ".join(f"{k}={v}" for k, v in context.items())
            return f"{message} | {context_str}"
        return message


_loggers: Dict[str, LaravelStyleLogger] = {}


def get_logger(name: Optional[str] = None) -> LaravelStyleLogger:
    """Get a Laravel-style logger instance for a child of the fluentkit channel."""
    channel = config('logging.channel', 'fluentkit')
    full_name = channel if name is None else f"{channel}.{name}"

    if full_name not in _loggers:
        if name is not None:
            get_logger()
        _loggers[full_name] = LaravelStyleLogger(full_name)

    return _loggers[full_name]
