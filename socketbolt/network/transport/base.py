"""Transport abstractions for the Socket Mode connection."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Protocol, Union

FramePayload = Union[str, bytes]


class FrameKind(enum.Enum):
    TEXT = "text"
    BINARY = "binary"
    PING = "ping"
    PONG = "pong"


@dataclass(frozen=True)
class Frame:
    """One inbound frame as delivered by a transport."""

    kind: FrameKind
    payload: Optional[FramePayload] = None

    def text(self) -> Optional[str]:
        if self.payload is None or isinstance(self.payload, str):
            return self.payload
        return self.payload.decode("utf-8")

    def data(self) -> bytes:
        if self.payload is None:
            return b""
        if isinstance(self.payload, bytes):
            return self.payload
        return self.payload.encode("utf-8")


class TransportListener(Protocol):
    """Receives transport events from the transport's own reader context."""

    async def on_open(self) -> None:
        ...

    async def on_frame(self, frame: Frame) -> None:
        ...

    async def on_error(self, exc: BaseException) -> None:
        ...

    async def on_close(self, code: Optional[int], reason: str) -> None:
        ...


class BaseTransport(ABC):
    """One physical duplex connection; a new instance is used per attempt."""

    @abstractmethod
    async def open(self, url: str, listener: TransportListener) -> None:
        ...

    @abstractmethod
    async def send(self, data: FramePayload, kind: FrameKind = FrameKind.TEXT) -> None:
        ...

    @abstractmethod
    def is_open(self) -> bool:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...
