"""In-memory transport for offline runs and tests."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from socketbolt.errors import TransportConnectError, TransportNotReady

from .base import BaseTransport, Frame, FrameKind, FramePayload, TransportListener

LOGGER = logging.getLogger(__name__)


class DummyTransport(BaseTransport):
    """Records outbound frames and lets callers inject inbound ones."""

    def __init__(self, settings=None, *, fail_open: Optional[BaseException] = None) -> None:
        self._settings = settings
        self._fail_open = fail_open
        self._listener: Optional[TransportListener] = None
        self._open = False
        self.url: Optional[str] = None
        self.sent: list[tuple[FramePayload, FrameKind]] = []
        self.close_calls = 0

    async def open(self, url: str, listener: TransportListener) -> None:
        LOGGER.debug("Dummy transport open(%s)", url)
        if self._fail_open is not None:
            raise TransportConnectError(str(self._fail_open)) from self._fail_open
        self.url = url
        self._listener = listener
        self._open = True
        await listener.on_open()

    async def send(self, data: FramePayload, kind: FrameKind = FrameKind.TEXT) -> None:
        if not self._open:
            raise TransportNotReady("Dummy transport not open")
        LOGGER.debug("Dummy transport send(%s): %s", kind.value, data)
        self.sent.append((data, kind))

    def is_open(self) -> bool:
        return self._open

    async def close(self) -> None:
        self.close_calls += 1
        if not self._open:
            return
        self._open = False
        if self._listener is not None:
            await self._listener.on_close(1000, "closed by client")

    async def feed(self, frame: Frame | str) -> None:
        """Deliver an inbound frame as if it arrived on the wire."""

        if isinstance(frame, str):
            frame = Frame(FrameKind.TEXT, frame)
        if self._listener is None:
            raise TransportNotReady("Dummy transport was never opened")
        await self._listener.on_frame(frame)

    def drop(self) -> None:
        """Lose the connection without any close event."""

        self._open = False

    def sent_messages(self) -> list[Any]:
        return [json.loads(data) for data, kind in self.sent if kind is FrameKind.TEXT]
