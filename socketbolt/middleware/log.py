"""Middleware that logs each processed payload and its duration."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from .base import Middleware, NextFn

if TYPE_CHECKING:
    from socketbolt.context import Context

LOGGER = logging.getLogger(__name__)


def describe_payload(payload: dict[str, Any]) -> str:
    """Short label such as ``event:message`` or ``command:/deploy``."""

    event = payload.get("event")
    if event:
        return f"event:{event.get('type')}"
    if payload.get("command"):
        return f"command:{payload['command']}"
    payload_type = payload.get("type")
    if payload_type == "block_actions":
        action_ids = ",".join(str(action.get("action_id")) for action in payload.get("actions") or [])
        return f"action:{action_ids}"
    if payload_type in ("shortcut", "message_action"):
        return f"shortcut:{payload.get('callback_id')}"
    if payload_type in ("view_submission", "view_closed"):
        view = payload.get("view") or {}
        return f"{payload_type}:{view.get('callback_id')}"
    return "unknown"


class LoggingMiddleware(Middleware):
    def call(self, context: Context, next_: NextFn) -> None:
        label = describe_payload(context.payload)
        LOGGER.info("Processing %s", label)
        started = time.perf_counter()
        next_()
        elapsed_ms = (time.perf_counter() - started) * 1000
        LOGGER.info("Completed %s in %.2fms", label, elapsed_ms)
