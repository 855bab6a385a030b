"""Socket Mode connection core."""

from .dispatch import ConsumerRegistry, EventDispatcher
from .liveness import LivenessMarker
from .processor import EnvelopeProcessor, encode_message
from .resolver import EndpointResolver
from .supervisor import ConnectionState, ConnectionSupervisor, default_transport_factory
from .transport import BaseTransport, DummyTransport, Frame, FrameKind, WebSocketTransport

__all__ = [
    "BaseTransport",
    "ConnectionState",
    "ConnectionSupervisor",
    "ConsumerRegistry",
    "DummyTransport",
    "EndpointResolver",
    "EnvelopeProcessor",
    "EventDispatcher",
    "Frame",
    "FrameKind",
    "LivenessMarker",
    "WebSocketTransport",
    "default_transport_factory",
    "encode_message",
]
