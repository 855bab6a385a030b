"""Middleware stages run around handler execution."""

from .base import Middleware, NextFn
from .chain import MiddlewareChain, MiddlewareLike
from .log import LoggingMiddleware, describe_payload

__all__ = [
    "LoggingMiddleware",
    "Middleware",
    "MiddlewareChain",
    "MiddlewareLike",
    "NextFn",
    "describe_payload",
]
