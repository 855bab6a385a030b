"""Ordered execution of middleware stages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Sequence, Union

from .base import Middleware

if TYPE_CHECKING:
    from socketbolt.context import Context

MiddlewareLike = Union[Middleware, type[Middleware]]


def _instantiate(middleware: MiddlewareLike) -> Middleware:
    if isinstance(middleware, type):
        return middleware()
    return middleware


class MiddlewareChain:
    """Runs stages in order, then ``final`` once every stage continued."""

    def __init__(self, middleware: Sequence[MiddlewareLike]) -> None:
        self._middleware = list(middleware)

    def __len__(self) -> int:
        return len(self._middleware)

    def call(self, context: Context, final: Callable[[], None]) -> None:
        stages = [_instantiate(item) for item in self._middleware]

        def run(index: int) -> None:
            if index >= len(stages):
                final()
                return
            stages[index].call(context, lambda: run(index + 1))

        run(0)
