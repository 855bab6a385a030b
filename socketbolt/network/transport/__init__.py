"""Duplex transports for Socket Mode connections."""

from .base import BaseTransport, Frame, FrameKind, FramePayload, TransportListener
from .dummy import DummyTransport
from .websocket import WebSocketTransport

__all__ = [
    "BaseTransport",
    "DummyTransport",
    "Frame",
    "FrameKind",
    "FramePayload",
    "TransportListener",
    "WebSocketTransport",
]
