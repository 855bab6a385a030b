"""Classification of inbound Socket Mode frames."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional, Protocol

from socketbolt.errors import short_trace

from .transport.base import Frame, FrameKind, FramePayload

LOGGER = logging.getLogger(__name__)

_LOG_PREVIEW_CHARS = 200


class SessionLink(Protocol):
    """The processor's view of the current Session Handle."""

    @property
    def connected(self) -> bool:
        ...

    async def send(self, data: FramePayload, kind: FrameKind = FrameKind.TEXT) -> None:
        ...

    async def disconnect(self, reason: str) -> None:
        ...


def encode_message(message: dict[str, Any]) -> str:
    return json.dumps(message, separators=(",", ":"))


class EnvelopeProcessor:
    """Answers pings, handles control messages, acks and forwards events."""

    def __init__(
        self,
        link: SessionLink,
        dispatch: Callable[[dict[str, Any]], Awaitable[None]],
    ) -> None:
        self._link = link
        self._dispatch = dispatch

    async def process(self, frame: Frame) -> None:
        try:
            await self._process(frame)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Error handling message: %s\n%s", exc, short_trace(exc))

    async def _process(self, frame: Frame) -> None:
        if frame.kind is FrameKind.PING:
            await self._answer_transport_ping(frame.data())
            return
        if frame.kind is FrameKind.PONG:
            return
        try:
            raw = frame.text()
        except UnicodeDecodeError as exc:
            LOGGER.error("Failed to decode frame as UTF-8: %s", exc)
            return
        LOGGER.debug(
            "Raw message received (type=%s): %s",
            frame.kind.value,
            "(none)" if raw is None else raw[:_LOG_PREVIEW_CHARS],
        )
        if not raw or not raw.startswith("{"):
            return
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            LOGGER.error("Failed to parse message: %s", exc)
            return
        await self._handle_envelope(data)

    async def _handle_envelope(self, data: dict[str, Any]) -> None:
        message_type = data.get("type")
        if message_type == "hello":
            LOGGER.debug("Received hello (connections=%s)", data.get("num_connections"))
            return
        if message_type == "disconnect":
            reason = str(data.get("reason") or "")
            LOGGER.info("Disconnect requested: %s", reason)
            await self._link.disconnect(reason)
            return
        if message_type == "ping":
            await self._answer_ping(data.get("num"))
            return

        envelope_id = data.get("envelope_id")
        if envelope_id:
            await self._acknowledge(envelope_id)
        await self._dispatch(data)

    async def _acknowledge(self, envelope_id: str) -> None:
        if not self._link.connected:
            return
        await self._link.send(encode_message({"envelope_id": envelope_id}))
        LOGGER.debug("Acknowledged envelope: %s", envelope_id)

    async def _answer_ping(self, num: Optional[Any]) -> None:
        if not self._link.connected:
            return
        pong: dict[str, Any] = {"type": "pong"}
        if num is not None:
            pong["num"] = num
        await self._link.send(encode_message(pong))
        LOGGER.debug("Sent pong response (num: %s)", num)

    async def _answer_transport_ping(self, payload: bytes) -> None:
        if not self._link.connected:
            return
        LOGGER.debug("WebSocket ping received: %r", payload)
        await self._link.send(payload, FrameKind.PONG)
        LOGGER.debug("Sent WebSocket pong frame: %r", payload)
