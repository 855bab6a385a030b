"""Helpers for testing handlers without a live connection."""

from .fakes import FakeWebClient, build_context
from .payloads import PayloadFactory

__all__ = ["FakeWebClient", "PayloadFactory", "build_context"]
