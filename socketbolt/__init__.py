"""socketbolt: chat-platform bots over Socket Mode."""

from .app import App, extract_payload
from .config import BotSettings, get_settings
from .context import Context
from .errors import (
    ConfigurationError,
    EndpointAuthError,
    EndpointNetworkError,
    EndpointProtocolError,
    EndpointResolutionError,
    SocketBoltError,
    TransportConnectError,
    TransportNotReady,
    WebApiError,
)
from .handlers import (
    ActionHandler,
    CommandHandler,
    EventHandler,
    Handler,
    ShortcutHandler,
    ViewClosedHandler,
    ViewSubmissionHandler,
)
from .loader import load_handlers
from .middleware import LoggingMiddleware, Middleware, MiddlewareChain
from .network import ConnectionState, ConnectionSupervisor
from .router import Router
from .web import WebClient

__version__ = "0.1.0"

__all__ = [
    "ActionHandler",
    "App",
    "BotSettings",
    "CommandHandler",
    "ConfigurationError",
    "ConnectionState",
    "ConnectionSupervisor",
    "Context",
    "EndpointAuthError",
    "EndpointNetworkError",
    "EndpointProtocolError",
    "EndpointResolutionError",
    "EventHandler",
    "Handler",
    "LoggingMiddleware",
    "Middleware",
    "MiddlewareChain",
    "Router",
    "ShortcutHandler",
    "SocketBoltError",
    "TransportConnectError",
    "TransportNotReady",
    "ViewClosedHandler",
    "ViewSubmissionHandler",
    "WebApiError",
    "WebClient",
    "extract_payload",
    "get_settings",
    "load_handlers",
]
