"""WebSocket transport implementation."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections import deque
from typing import Callable, Deque, Optional
from urllib.parse import urlparse

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed
from websockets.frames import Frame as WireFrame, Opcode
from websockets.protocol import State

from socketbolt.config import BotSettings
from socketbolt.errors import TransportConnectError, TransportNotReady

from .base import BaseTransport, Frame, FrameKind, FramePayload, TransportListener

LOGGER = logging.getLogger(__name__)

_ANSWERED_PINGS_MAX = 64


class PingObservingConnection(ClientConnection):
    """Client connection that reports protocol-level ping frames.

    The websockets protocol layer answers every ping with a pong echoing the
    ping payload before the frame reaches ``process_event``.
    """

    ping_observer: Optional[Callable[[bytes], None]] = None

    def process_event(self, event) -> None:  # type: ignore[override]
        super().process_event(event)
        # the handshake response arrives here before any frame
        if isinstance(event, WireFrame) and event.opcode is Opcode.PING and self.ping_observer is not None:
            self.ping_observer(bytes(event.data))


class WebSocketTransport(BaseTransport):
    """WebSocket-based Socket Mode transport."""

    def __init__(self, settings: BotSettings) -> None:
        self._settings = settings
        self._ws: Optional[PingObservingConnection] = None
        self._listener: Optional[TransportListener] = None
        self._inbox: Optional[asyncio.Queue[Optional[Frame]]] = None
        self._reader_task: Optional[asyncio.Task[None]] = None
        self._deliver_task: Optional[asyncio.Task[None]] = None
        self._answered_pings: Deque[bytes] = deque(maxlen=_ANSWERED_PINGS_MAX)

    async def open(self, url: str, listener: TransportListener) -> None:
        LOGGER.info("Connecting to WebSocket host %s", urlparse(url).netloc)
        try:
            ws = await connect(
                url,
                create_connection=PingObservingConnection,
                open_timeout=self._settings.open_timeout_seconds,
                close_timeout=self._settings.close_timeout_seconds,
                # liveness is tracked by the supervisor from inbound traffic
                ping_interval=None,
                max_size=None,
            )
        except Exception as exc:  # noqa: BLE001
            raise TransportConnectError(f"WebSocket connect failed: {exc}") from exc
        self._inbox = asyncio.Queue()
        ws.ping_observer = self._observe_ping
        self._ws = ws
        self._listener = listener
        await listener.on_open()
        self._reader_task = asyncio.create_task(self._read_loop(ws), name="socket-mode-read")
        self._deliver_task = asyncio.create_task(self._deliver_loop(ws, listener), name="socket-mode-deliver")

    async def send(self, data: FramePayload, kind: FrameKind = FrameKind.TEXT) -> None:
        ws = self._ws
        if ws is None:
            raise TransportNotReady("WebSocket transport not connected")
        if kind is FrameKind.PONG:
            payload = data.encode("utf-8") if isinstance(data, str) else data
            if self._consume_answered_ping(payload):
                LOGGER.debug("Pong for ping %r already written by the protocol layer", payload)
                return
            await ws.pong(payload)
            return
        if kind is FrameKind.PING:
            payload = data.encode("utf-8") if isinstance(data, str) else data
            await ws.ping(payload)
            return
        LOGGER.debug("WebSocket send: %s", data)
        await ws.send(data)

    def is_open(self) -> bool:
        ws = self._ws
        return ws is not None and ws.protocol.state is State.OPEN

    async def close(self) -> None:
        ws = self._ws
        self._ws = None
        if ws is not None:
            LOGGER.info("Closing WebSocket transport")
            try:
                await ws.close()
            except Exception:  # noqa: BLE001
                LOGGER.debug("Suppress WebSocket close error", exc_info=True)
        current = asyncio.current_task()
        for task in (self._reader_task, self._deliver_task):
            if task is None or task is current or task.done():
                continue
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def _observe_ping(self, payload: bytes) -> None:
        self._answered_pings.append(payload)
        if self._inbox is not None:
            self._inbox.put_nowait(Frame(FrameKind.PING, payload))

    def _consume_answered_ping(self, payload: bytes) -> bool:
        try:
            self._answered_pings.remove(payload)
        except ValueError:
            return False
        return True

    async def _read_loop(self, ws: PingObservingConnection) -> None:
        assert self._inbox is not None
        inbox = self._inbox
        try:
            async for message in ws:
                kind = FrameKind.TEXT if isinstance(message, str) else FrameKind.BINARY
                await inbox.put(Frame(kind, message))
        except ConnectionClosed:
            pass
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("WebSocket read failed: %s", exc)
            if self._listener is not None:
                await self._listener.on_error(exc)
        finally:
            inbox.put_nowait(None)

    async def _deliver_loop(self, ws: PingObservingConnection, listener: TransportListener) -> None:
        assert self._inbox is not None
        inbox = self._inbox
        while True:
            frame = await inbox.get()
            if frame is None:
                break
            try:
                await listener.on_frame(frame)
            except asyncio.CancelledError:
                raise
            except Exception:  # noqa: BLE001
                LOGGER.exception("Frame listener failed")
        await listener.on_close(ws.close_code, ws.close_reason or "")
