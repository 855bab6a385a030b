"""Registry of handler classes and payload routing."""

from __future__ import annotations

from typing import Any

from .handlers.base import Handler


class Router:
    """Holds handler classes in registration order."""

    def __init__(self) -> None:
        self._handlers: list[type[Handler]] = []

    def register(self, handler_cls: type[Handler]) -> type[Handler]:
        """Add ``handler_cls``; registering the same class twice is a no-op."""

        if handler_cls not in self._handlers:
            self._handlers.append(handler_cls)
        return handler_cls

    def route(self, payload: dict[str, Any]) -> list[type[Handler]]:
        return [handler for handler in self._handlers if handler.matches(payload)]

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    @property
    def handlers(self) -> tuple[type[Handler], ...]:
        return tuple(self._handlers)

    def clear(self) -> None:
        self._handlers.clear()
