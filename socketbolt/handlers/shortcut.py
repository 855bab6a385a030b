"""Handlers for global and message shortcuts."""

from __future__ import annotations

import re
from typing import Any, ClassVar, Optional, Union

from .base import Handler, match_value

SHORTCUT_TYPES = frozenset({"shortcut", "message_action"})


class ShortcutHandler(Handler):
    """Matches ``shortcut`` and ``message_action`` payloads by ``callback_id``."""

    callback_id: ClassVar[Optional[Union[str, "re.Pattern[str]"]]] = None

    @classmethod
    def matches(cls, payload: dict[str, Any]) -> bool:
        if cls.callback_id is None or payload.get("type") not in SHORTCUT_TYPES:
            return False
        return match_value(cls.callback_id, payload.get("callback_id"))

    @property
    def received_callback_id(self) -> Optional[str]:
        return self.payload.get("callback_id")

    @property
    def trigger_id(self) -> Optional[str]:
        return self.payload.get("trigger_id")

    @property
    def shortcut_type(self) -> str:
        return "message" if self.payload.get("type") == "message_action" else "global"

    @property
    def message(self) -> Optional[dict[str, Any]]:
        return self.payload.get("message")

    @property
    def message_text(self) -> Optional[str]:
        return (self.message or {}).get("text")
