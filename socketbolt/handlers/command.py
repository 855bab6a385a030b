"""Handlers for slash commands."""

from __future__ import annotations

from typing import Any, ClassVar, Optional

from .base import Handler


class CommandHandler(Handler):
    """Matches a slash command by name, e.g. ``command = "/deploy"``."""

    command: ClassVar[Optional[str]] = None

    @classmethod
    def matches(cls, payload: dict[str, Any]) -> bool:
        if cls.command is None:
            return False
        return payload.get("command") == cls.command

    @property
    def command_name(self) -> Optional[str]:
        return self.payload.get("command")

    @property
    def command_text(self) -> Optional[str]:
        """Text typed after the command: ``production --force`` for ``/deploy production --force``."""

        return self.payload.get("text")

    @property
    def params(self) -> dict[str, Optional[str]]:
        return {"text": self.command_text}

    @property
    def trigger_id(self) -> Optional[str]:
        return self.payload.get("trigger_id")

    @property
    def user(self) -> Optional[str]:
        return self.payload.get("user_id") or super().user

    @property
    def channel(self) -> Optional[str]:
        return self.payload.get("channel_id") or super().channel
