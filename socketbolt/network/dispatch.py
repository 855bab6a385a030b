"""Consumer registration and queued dispatch of decoded envelopes."""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, List, Optional

from socketbolt.errors import short_trace

LOGGER = logging.getLogger(__name__)

Envelope = dict[str, Any]
Consumer = Callable[[Envelope], Optional[Awaitable[None]]]

OVERFLOW_POLICIES = frozenset({"block", "drop_new", "drop_oldest"})


class ConsumerRegistry:
    """Ordered, append-only list of envelope consumers."""

    def __init__(self) -> None:
        self._consumers: List[Consumer] = []

    def register(self, consumer: Consumer) -> Consumer:
        self._consumers.append(consumer)
        return consumer

    def __len__(self) -> int:
        return len(self._consumers)

    async def dispatch(self, envelope: Envelope) -> None:
        """Invoke every consumer in registration order, isolating failures.

        Coroutine consumers are awaited on the loop; plain callables run in a
        worker thread so blocking application code never stalls frame delivery.
        """

        for consumer in list(self._consumers):
            try:
                if inspect.iscoroutinefunction(consumer):
                    await consumer(envelope)
                    continue
                result = await asyncio.to_thread(consumer, envelope)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:  # noqa: BLE001
                LOGGER.error(
                    "Consumer %s failed: %s\n%s",
                    getattr(consumer, "__qualname__", repr(consumer)),
                    exc,
                    short_trace(exc),
                )


class EventDispatcher:
    """FIFO queue between the acknowledgement path and consumer execution."""

    def __init__(
        self,
        consumers: ConsumerRegistry,
        *,
        queue_max: int = 0,
        overflow: str = "block",
        drain_timeout: float = 5.0,
    ) -> None:
        self._consumers = consumers
        self._drain_timeout = drain_timeout
        self._queue_max = max(0, int(queue_max or 0))
        self._overflow = overflow if overflow in OVERFLOW_POLICIES else "block"
        self._queue: Optional[asyncio.Queue[Envelope]] = None
        self._worker: Optional[asyncio.Task[None]] = None

    def start(self) -> None:
        if self._worker is not None and not self._worker.done():
            return
        self._queue = asyncio.Queue(maxsize=self._queue_max)
        self._worker = asyncio.create_task(self._work_loop(self._queue), name="socket-mode-dispatch")

    async def stop(self) -> None:
        """Dispatch what is already queued, then stop the worker.

        Queued envelopes have been acknowledged and will not be redelivered, so
        the worker gets up to ``drain_timeout`` seconds to finish them.
        """

        worker = self._worker
        queue = self._queue
        self._worker = None
        if worker is not None and queue is not None and not worker.done():
            try:
                await asyncio.wait_for(queue.join(), timeout=self._drain_timeout)
            except asyncio.TimeoutError:
                LOGGER.warning(
                    "Dispatch drain timed out after %ss; dropping %s queued envelopes",
                    self._drain_timeout,
                    queue.qsize(),
                )
        if worker is not None:
            worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await worker
        self._queue = None

    async def submit(self, envelope: Envelope) -> None:
        queue = self._queue
        if queue is None:
            await self._consumers.dispatch(envelope)
            return
        if not queue.full() or self._overflow == "block":
            await queue.put(envelope)
            return
        if self._overflow == "drop_new":
            LOGGER.warning("Dispatch queue full; dropping envelope %s", envelope.get("envelope_id"))
            return
        try:
            dropped = queue.get_nowait()
        except asyncio.QueueEmpty:
            pass
        else:
            queue.task_done()
            LOGGER.warning("Dispatch queue full; dropping oldest envelope %s", dropped.get("envelope_id"))
        await queue.put(envelope)

    async def join(self) -> None:
        """Wait until every submitted envelope has been dispatched."""

        if self._queue is not None:
            await self._queue.join()

    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    async def _work_loop(self, queue: asyncio.Queue[Envelope]) -> None:
        while True:
            envelope = await queue.get()
            try:
                await self._consumers.dispatch(envelope)
            finally:
                queue.task_done()
