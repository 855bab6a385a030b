"""Handlers for interactive block actions."""

from __future__ import annotations

import re
from typing import Any, ClassVar, Optional, Union

from .base import Handler, match_value


class ActionHandler(Handler):
    """Matches ``block_actions`` payloads by ``action_id`` and optional ``block_id``.

    Both matchers accept an exact string or a compiled pattern, so
    ``action_id = re.compile(r"^approve_request_")`` serves a family of
    buttons. The payload matches when any of its actions satisfies both.
    """

    action_id: ClassVar[Optional[Union[str, "re.Pattern[str]"]]] = None
    block_id: ClassVar[Optional[Union[str, "re.Pattern[str]"]]] = None

    @classmethod
    def matches(cls, payload: dict[str, Any]) -> bool:
        if cls.action_id is None or payload.get("type") != "block_actions":
            return False
        return any(cls._action_matches(action) for action in payload.get("actions") or [])

    @classmethod
    def _action_matches(cls, action: dict[str, Any]) -> bool:
        if not match_value(cls.action_id, action.get("action_id")):
            return False
        if cls.block_id is None:
            return True
        return match_value(cls.block_id, action.get("block_id"))

    @property
    def action(self) -> Optional[dict[str, Any]]:
        actions = self.payload.get("actions") or []
        return actions[0] if actions else None

    @property
    def received_action_id(self) -> Optional[str]:
        return (self.action or {}).get("action_id")

    @property
    def received_block_id(self) -> Optional[str]:
        return (self.action or {}).get("block_id")

    @property
    def action_value(self) -> Optional[str]:
        return (self.action or {}).get("value")

    @property
    def trigger_id(self) -> Optional[str]:
        return self.payload.get("trigger_id")
