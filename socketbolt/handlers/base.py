"""Base handler class and matching helpers."""

from __future__ import annotations

import re
from typing import Any, ClassVar, Optional, Sequence, Union

from socketbolt.context import Context, Message
from socketbolt.middleware import MiddlewareChain, MiddlewareLike

Matcher = Union[str, "re.Pattern[str]"]


def match_value(expected: Optional[Matcher], actual: Optional[str]) -> bool:
    """Compare ``actual`` with an exact string or a compiled pattern."""

    if expected is None or actual is None:
        return False
    if isinstance(expected, re.Pattern):
        return expected.search(actual) is not None
    return actual == expected


class Handler:
    """Base class for payload handlers.

    Subclasses declare their matching criteria as class attributes, override
    :meth:`matches` where the criteria need custom logic and implement
    :meth:`handle`. ``middleware`` lists stages run around ``handle`` for this
    handler only, after the app-wide middleware.
    """

    middleware: ClassVar[Sequence[MiddlewareLike]] = ()

    def __init__(self, context: Context) -> None:
        self.context = context

    @classmethod
    def matches(cls, payload: dict[str, Any]) -> bool:
        return False

    @property
    def payload(self) -> dict[str, Any]:
        return self.context.payload

    @property
    def client(self) -> Any:
        return self.context.client

    @property
    def user(self) -> Optional[str]:
        return self.context.user

    @property
    def channel(self) -> Optional[str]:
        return self.context.channel

    def say(self, message: Message) -> dict[str, Any]:
        return self.context.say(message)

    def ack(self, response: Optional[Any] = None) -> None:
        self.context.ack(response)

    def respond(self, message: Message) -> Any:
        return self.context.respond(message)

    def call(self) -> None:
        MiddlewareChain(self.middleware).call(self.context, self.handle)

    def handle(self) -> None:
        raise NotImplementedError(f"{type(self).__name__} must implement handle()")
