"""Handlers for Events API callbacks."""

from __future__ import annotations

import re
from typing import Any, ClassVar, Optional, Union

from .base import Handler


class EventHandler(Handler):
    """Matches ``event.type``, optionally filtered by a regex on the event text.

    Example::

        class GreetingHandler(EventHandler):
            event_type = "message"
            pattern = re.compile(r"hello", re.IGNORECASE)

            def handle(self):
                self.say(f"Hey <@{self.user}>!")
    """

    event_type: ClassVar[Optional[str]] = None
    pattern: ClassVar[Optional[Union[str, "re.Pattern[str]"]]] = None

    @classmethod
    def matches(cls, payload: dict[str, Any]) -> bool:
        if cls.event_type is None:
            return False
        event = payload.get("event")
        if not isinstance(event, dict):
            return False
        if str(event.get("type")) != str(cls.event_type):
            return False
        if cls.pattern is None:
            return True
        text = event.get("text")
        if text is None:
            return False
        return re.search(cls.pattern, text) is not None

    @property
    def event(self) -> Optional[dict[str, Any]]:
        return self.payload.get("event")

    @property
    def text(self) -> Optional[str]:
        return (self.event or {}).get("text")

    @property
    def ts(self) -> Optional[str]:
        return (self.event or {}).get("ts")

    @property
    def thread_ts(self) -> Optional[str]:
        return (self.event or {}).get("thread_ts")
