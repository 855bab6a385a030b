"""Connection supervisor that keeps one Socket Mode connection alive."""

from __future__ import annotations

import asyncio
import contextlib
import enum
import logging
import time
from typing import Callable, Optional

from socketbolt.config import BotSettings
from socketbolt.errors import ConfigurationError, TransportNotReady

from .dispatch import Consumer, ConsumerRegistry, EventDispatcher
from .liveness import LivenessMarker
from .processor import EnvelopeProcessor
from .resolver import EndpointResolver
from .transport.base import BaseTransport, Frame, FrameKind, FramePayload
from .transport.dummy import DummyTransport
from .transport.websocket import WebSocketTransport

LOGGER = logging.getLogger(__name__)

TransportFactory = Callable[[BotSettings], BaseTransport]


class ConnectionState(enum.Enum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"


def default_transport_factory(settings: BotSettings) -> BaseTransport:
    if settings.transport == "websocket":
        return WebSocketTransport(settings)
    return DummyTransport(settings)


class _SessionListener:
    """Routes the events of one transport instance back to its supervisor."""

    def __init__(self, supervisor: ConnectionSupervisor, transport: BaseTransport) -> None:
        self._supervisor = supervisor
        self._transport = transport

    async def on_open(self) -> None:
        await self._supervisor._on_open(self._transport)

    async def on_frame(self, frame: Frame) -> None:
        await self._supervisor._on_frame(self._transport, frame)

    async def on_error(self, exc: BaseException) -> None:
        LOGGER.error("WebSocket error: %s", exc)

    async def on_close(self, code: Optional[int], reason: str) -> None:
        LOGGER.info("WebSocket closed: code=%s reason=%s", code, reason or "-")


class ConnectionSupervisor:
    """Owns the Socket Mode connection lifecycle.

    ``start`` resolves a fresh endpoint, opens the transport with bounded
    retries and then polls connection health until a stop is requested:
    connections that report open but have carried no traffic for
    ``stale_threshold_seconds`` are closed, and lost connections are
    re-established after ``reconnect_delay_seconds``.

    ``request_stop`` only clears the running flag and is safe to call from a
    signal handler; the run loop performs the close on its next iteration.
    """

    def __init__(
        self,
        settings: BotSettings,
        *,
        resolver: Optional[EndpointResolver] = None,
        transport_factory: Optional[TransportFactory] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._app_token = settings.app_token
        self._resolver = resolver or EndpointResolver(
            url=settings.connections_open_url,
            timeout_seconds=settings.http_timeout_seconds,
        )
        self._transport_factory = transport_factory or default_transport_factory
        self._clock = clock
        self._liveness = LivenessMarker(clock)
        self._consumers = ConsumerRegistry()
        self._dispatcher = EventDispatcher(
            self._consumers,
            queue_max=settings.dispatch_queue_max,
            overflow=settings.dispatch_queue_overflow,
            drain_timeout=settings.dispatch_drain_timeout_seconds,
        )
        self._processor = EnvelopeProcessor(self, self._dispatcher.submit)
        self._transport: Optional[BaseTransport] = None
        self._state = ConnectionState.DISCONNECTED
        self._running = False
        self._started = False

    # Public surface -----------------------------------------------------

    def on_message(self, consumer: Consumer) -> Consumer:
        """Register a consumer for decoded event envelopes."""

        return self._consumers.register(consumer)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def connected(self) -> bool:
        transport = self._transport
        return transport is not None and transport.is_open()

    @property
    def state(self) -> ConnectionState:
        if self._state is ConnectionState.STOPPED:
            return self._state
        if self._started and not self._running:
            return ConnectionState.STOPPING
        if self._state is ConnectionState.CONNECTED and not self.connected:
            return ConnectionState.DISCONNECTED
        return self._state

    @property
    def liveness(self) -> LivenessMarker:
        return self._liveness

    @property
    def dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    async def start(self) -> None:
        """Connect and supervise until stopped. Not restartable."""

        if self._started:
            raise RuntimeError("ConnectionSupervisor cannot be restarted")
        if not self._app_token:
            raise ConfigurationError("app_token is required for Socket Mode")
        self._started = True
        self._running = True
        self._dispatcher.start()
        try:
            await self._connect_with_retry()
            await self._run_loop()
        finally:
            await self._release_transport()
            await self._dispatcher.stop()
            self._running = False
            self._state = ConnectionState.STOPPED
            LOGGER.info("Socket Mode supervisor stopped")

    async def stop(self) -> None:
        self._running = False
        await self._release_transport()

    def request_stop(self) -> None:
        self._running = False

    # SessionLink --------------------------------------------------------

    async def send(self, data: FramePayload, kind: FrameKind = FrameKind.TEXT) -> None:
        transport = self._transport
        if transport is None or not transport.is_open():
            raise TransportNotReady("No open Socket Mode connection")
        await transport.send(data, kind)

    async def disconnect(self, reason: str = "") -> None:
        transport = self._transport
        if transport is not None:
            await transport.close()
        self._liveness.clear()

    # Run loop -----------------------------------------------------------

    async def _run_loop(self) -> None:
        heartbeat_interval = self._settings.heartbeat_log_interval_seconds
        last_heartbeat = self._clock()
        while self._running:
            await asyncio.sleep(self._settings.poll_interval_seconds)
            await self._check_staleness()
            await self._reconnect_if_needed()
            now = self._clock()
            if now - last_heartbeat >= heartbeat_interval:
                LOGGER.debug(
                    "Heartbeat: connected=%s, state=%s, last_msg=%s",
                    self.connected,
                    self.state.value,
                    self._liveness.describe(),
                )
                last_heartbeat = now

    def _is_stale(self) -> bool:
        if not self.connected:
            return False
        return self._liveness.is_stale(self._settings.stale_threshold_seconds)

    async def _check_staleness(self) -> bool:
        if not self._is_stale():
            return False
        LOGGER.warning(
            "Connection stale (no messages in %ss), forcing reconnect",
            self._settings.stale_threshold_seconds,
        )
        await self._force_reconnect()
        return True

    async def _force_reconnect(self) -> None:
        transport = self._transport
        if transport is not None:
            await transport.close()
        self._liveness.clear()

    async def _reconnect_if_needed(self) -> None:
        if not self._running or self.connected:
            return
        LOGGER.info("Connection lost, reconnecting...")
        self._state = ConnectionState.DISCONNECTED
        await self._pause(self._settings.reconnect_delay_seconds)
        if not self._running:
            return
        await self._connect_with_retry()

    async def _connect_with_retry(self) -> None:
        max_retries = self._settings.connect_max_retries
        retries = 0
        while self._running:
            self._state = ConnectionState.CONNECTING
            try:
                await self._connect()
                return
            except Exception as exc:  # noqa: BLE001
                retries += 1
                self._state = ConnectionState.DISCONNECTED
                if retries > max_retries:
                    LOGGER.error("Max retries exceeded, giving up: %s", exc)
                    self._running = False
                    return
                LOGGER.warning("Connection failed (attempt %s/%s): %s", retries, max_retries, exc)
                await self._pause(self._settings.reconnect_delay_seconds)

    async def _connect(self) -> None:
        url = await asyncio.to_thread(self._resolver.resolve, self._app_token)
        LOGGER.info("Connecting to Slack...")
        transport = self._transport_factory(self._settings)
        await self._install_transport(transport)
        try:
            await self._open(transport, url)
        except BaseException:
            with contextlib.suppress(Exception):
                await transport.close()
            raise
        if transport is not self._transport:
            # released by stop() while the open was in flight
            await transport.close()
            return
        if transport.is_open():
            self._state = ConnectionState.CONNECTED

    async def _open(self, transport: BaseTransport, url: str) -> None:
        task = asyncio.create_task(transport.open(url, _SessionListener(self, transport)), name="socket-mode-open")
        while not task.done():
            if not self._running:
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
                LOGGER.info("Stop requested while connecting")
                return
            await asyncio.wait({task}, timeout=self._settings.poll_interval_seconds)
        task.result()

    async def _install_transport(self, transport: BaseTransport) -> None:
        previous = self._transport
        self._transport = transport
        self._liveness.clear()
        if previous is not None and previous is not transport:
            await previous.close()

    async def _release_transport(self) -> None:
        transport = self._transport
        self._transport = None
        self._liveness.clear()
        if transport is not None:
            await transport.close()

    async def _pause(self, seconds: float) -> None:
        """Sleep in poll-sized slices so a stop request cuts the wait short."""

        loop = asyncio.get_running_loop()
        deadline = loop.time() + seconds
        while self._running:
            remaining = deadline - loop.time()
            if remaining <= 0:
                return
            await asyncio.sleep(min(self._settings.poll_interval_seconds, remaining))

    # Transport events ---------------------------------------------------

    async def _on_open(self, transport: BaseTransport) -> None:
        if transport is not self._transport:
            return
        self._liveness.touch()
        LOGGER.info("Connected to Slack")

    async def _on_frame(self, transport: BaseTransport, frame: Frame) -> None:
        if transport is not self._transport:
            LOGGER.debug("Ignoring %s frame from a replaced connection", frame.kind.value)
            return
        self._liveness.touch()
        await self._processor.process(frame)
