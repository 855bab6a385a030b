"""Configuration primitives for socketbolt bots."""

from .settings import BotSettings, get_settings

__all__ = ["BotSettings", "get_settings"]
