"""Outbound Web API access."""

from .client import WebClient

__all__ = ["WebClient"]
