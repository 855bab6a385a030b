"""Middleware contract."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from socketbolt.context import Context

NextFn = Callable[[], None]


class Middleware:
    """A stage wrapped around handler execution.

    Subclasses override :meth:`call` and invoke ``next_`` to continue the
    chain. A stage that returns without calling ``next_`` stops processing.
    """

    def call(self, context: Context, next_: NextFn) -> None:
        next_()
