"""Application object tying the Socket Mode connection to handlers."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from .config import BotSettings
from .context import Context
from .errors import short_trace
from .handlers.base import Handler
from .loader import load_handlers
from .middleware import LoggingMiddleware, MiddlewareChain, MiddlewareLike
from .network.supervisor import ConnectionSupervisor
from .router import Router
from .web.client import WebClient

LOGGER = logging.getLogger(__name__)

ErrorHandler = Callable[[BaseException, dict[str, Any]], None]

SOCKET_PAYLOAD_TYPES = frozenset(
    {
        "events_api",
        "interactive",
        "slash_commands",
        "block_actions",
        "view_submission",
        "view_closed",
        "shortcut",
    }
)


def extract_payload(envelope: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Unwrap the handler payload from a Socket Mode envelope.

    Known envelope types carry it under ``payload``; anything else is passed
    through whole.
    """

    if envelope.get("type") in SOCKET_PAYLOAD_TYPES:
        return envelope.get("payload")
    return envelope


def _socket_mode_ack(response: Optional[Any] = None) -> None:
    # Envelopes are acknowledged by the connection before handlers run.
    return None


class App:
    """A bot: settings, Web API client, router, middleware and connection.

    Handlers run synchronously on a worker thread, one envelope at a time,
    so they may call the blocking :class:`WebClient` freely.
    """

    def __init__(
        self,
        settings: BotSettings,
        *,
        router: Optional[Router] = None,
        client: Optional[WebClient] = None,
        supervisor: Optional[ConnectionSupervisor] = None,
        middleware: Optional[Sequence[MiddlewareLike]] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self.settings = settings
        self.router = router or Router()
        self.client = client or WebClient.from_settings(settings)
        self.supervisor = supervisor or ConnectionSupervisor(settings)
        self.middleware: list[MiddlewareLike] = list(middleware) if middleware is not None else [LoggingMiddleware]
        self.error_handler = error_handler
        self.supervisor.on_message(self.handle_socket_event)

    def use(self, middleware: MiddlewareLike) -> MiddlewareLike:
        self.middleware.append(middleware)
        return middleware

    def register(self, handler_cls: type[Handler]) -> type[Handler]:
        return self.router.register(handler_cls)

    def load_handlers(self, paths: Optional[Iterable[Union[str, Path]]] = None) -> int:
        return load_handlers(self.router, self.settings.handler_paths if paths is None else paths)

    # Event processing ---------------------------------------------------

    def handle_socket_event(self, envelope: dict[str, Any]) -> None:
        try:
            payload = extract_payload(envelope)
            if payload is not None:
                self.process_event(payload)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Error handling socket event: %s\n%s", exc, short_trace(exc))

    def process_event(self, payload: dict[str, Any]) -> None:
        """Run every matching handler for ``payload`` inside the app middleware.

        A failing handler is logged and reported to ``error_handler``; the
        remaining handlers still run.
        """

        handlers = self.router.route(payload)
        if not handlers:
            return
        context = self.build_context(payload)

        def run_handlers() -> None:
            for handler_cls in handlers:
                self._execute_handler(handler_cls, context)

        MiddlewareChain(self.middleware).call(context, run_handlers)

    def build_context(self, payload: dict[str, Any]) -> Context:
        return Context(payload=payload, client=self.client, ack=_socket_mode_ack)

    def _execute_handler(self, handler_cls: type[Handler], context: Context) -> None:
        try:
            handler_cls(context).call()
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Error in %s: %s\n%s", handler_cls.__name__, exc, short_trace(exc))
            if self.error_handler is not None:
                self.error_handler(exc, context.payload)

    # Lifecycle ----------------------------------------------------------

    @property
    def running(self) -> bool:
        return self.supervisor.running

    async def start(self) -> None:
        """Load handlers from ``settings.handler_paths`` and serve until stopped."""

        self.load_handlers()
        LOGGER.info("Starting app...")
        await self.supervisor.start()

    async def stop(self) -> None:
        LOGGER.info("Stopping app...")
        await self.supervisor.stop()

    def request_stop(self) -> None:
        self.supervisor.request_stop()

    def run(self) -> None:
        """Blocking entrypoint; SIGINT and SIGTERM request a graceful stop."""

        asyncio.run(self._serve())

    async def _serve(self) -> None:
        loop = asyncio.get_running_loop()
        installed = []
        for signum in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError, RuntimeError):
                loop.add_signal_handler(signum, self._on_signal, signum)
                installed.append(signum)
        try:
            await self.start()
        finally:
            for signum in installed:
                loop.remove_signal_handler(signum)

    def _on_signal(self, signum: int) -> None:
        LOGGER.info("Received %s, shutting down...", signal.Signals(signum).name)
        self.request_stop()
