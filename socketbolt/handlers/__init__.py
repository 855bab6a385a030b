"""Handler types matched against inbound payloads."""

from .action import ActionHandler
from .base import Handler, match_value
from .command import CommandHandler
from .event import EventHandler
from .shortcut import SHORTCUT_TYPES, ShortcutHandler
from .view import ViewClosedHandler, ViewSubmissionHandler

HANDLER_BASES = (
    Handler,
    EventHandler,
    CommandHandler,
    ActionHandler,
    ShortcutHandler,
    ViewSubmissionHandler,
    ViewClosedHandler,
)

__all__ = [
    "ActionHandler",
    "CommandHandler",
    "EventHandler",
    "HANDLER_BASES",
    "Handler",
    "SHORTCUT_TYPES",
    "ShortcutHandler",
    "ViewClosedHandler",
    "ViewSubmissionHandler",
    "match_value",
]
