"""Bot configuration loading and validation."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, ClassVar, Dict, Iterable, Literal

import yaml
from pydantic import Field, NonNegativeInt, PositiveFloat, PositiveInt
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from socketbolt.errors import ConfigurationError

DEFAULT_CONFIG_LOCATIONS: tuple[Path, ...] = (
    Path("/etc/socketbolt/bot.yaml"),
    Path("/etc/socketbolt/bot.yml"),
    Path("./config/bot.yaml"),
    Path("./config/bot.yml"),
)


class BotSettings(BaseSettings):
    """Validated settings for a Socket Mode bot process."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="SOCKETBOLT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Credentials
    bot_token: str | None = Field(
        default=None,
        description="Bot token (xoxb-...) used for outbound Web API calls.",
        repr=False,
    )
    app_token: str | None = Field(
        default=None,
        description="App-level token (xapp-...) used to open Socket Mode connections.",
        repr=False,
    )
    signing_secret: str | None = Field(
        default=None,
        description="Request signing secret; unused by Socket Mode but kept for parity with HTTP apps.",
        repr=False,
    )

    # Platform endpoints
    api_base_url: str = Field(
        default="https://slack.com/api",
        description="Base URL of the platform Web API.",
    )
    http_timeout_seconds: PositiveInt = Field(
        default=10,
        description="Timeout applied to REST requests.",
    )
    transport: Literal["dummy", "websocket"] = Field(
        default="websocket",
        description="Duplex transport implementation to use.",
    )

    # Connection supervision
    connect_max_retries: NonNegativeInt = Field(
        default=5,
        description="Retries after a failed connect before giving up.",
    )
    reconnect_delay_seconds: float = Field(
        default=5.0,
        ge=0,
        description="Delay between connect retries and before reconnecting a lost connection.",
    )
    stale_threshold_seconds: PositiveFloat = Field(
        default=45.0,
        description="Seconds without any inbound frame before an open connection is treated as stale.",
    )
    poll_interval_seconds: PositiveFloat = Field(
        default=0.1,
        description="Run loop polling interval.",
    )
    heartbeat_log_interval_seconds: PositiveFloat = Field(
        default=60.0,
        description="Interval of the run loop liveness log line.",
    )
    open_timeout_seconds: PositiveFloat = Field(
        default=10.0,
        description="Timeout for the WebSocket opening handshake.",
    )
    close_timeout_seconds: PositiveFloat = Field(
        default=5.0,
        description="Timeout for the WebSocket closing handshake.",
    )

    # Consumer dispatch
    dispatch_queue_max: NonNegativeInt = Field(
        default=0,
        description="Maximum queued envelopes awaiting consumers (0 = unbounded).",
    )
    dispatch_queue_overflow: Literal["block", "drop_new", "drop_oldest"] = Field(
        default="block",
        description="Policy applied when the dispatch queue is full.",
    )
    dispatch_drain_timeout_seconds: PositiveFloat = Field(
        default=5.0,
        description="Time allowed on stop to dispatch envelopes that were already acknowledged.",
    )

    # App layer
    handler_paths: list[Path] = Field(
        default_factory=lambda: [Path("app/slack_handlers")],
        description="Directories scanned for handler modules at start.",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum log level for the bot process.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    config_path: Path | None = Field(
        default=None,
        description="Resolved path to the on-disk config that seeded the settings.",
        exclude=True,
    )

    @property
    def connections_open_url(self) -> str:
        return f"{self.api_base_url}/apps.connections.open"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BotSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            cls._yaml_settings_source,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    @staticmethod
    def _yaml_settings_source(settings_cls: type[BotSettings] | None = None) -> Dict[str, Any]:
        for path in BotSettings._resolve_candidate_paths():
            data = BotSettings._load_file(path)
            if data is not None:
                data.setdefault("config_path", path)
                return data
        return {}

    @staticmethod
    def _resolve_candidate_paths() -> Iterable[Path]:
        explicit = os.getenv("SOCKETBOLT_CONFIG_FILE")
        if explicit:
            yield Path(explicit).expanduser()
        yield from DEFAULT_CONFIG_LOCATIONS

    @staticmethod
    def _load_file(path: Path) -> Dict[str, Any] | None:
        if not path.is_file():
            return None
        suffix = path.suffix.lower()
        try:
            with path.open("r", encoding="utf-8") as handle:
                if suffix in {".yaml", ".yml"}:
                    raw = yaml.safe_load(handle)
                elif suffix == ".json":
                    raw = json.load(handle)
                else:
                    return None
        except OSError as exc:
            raise ConfigurationError(f"Failed to read bot config file {path}") from exc
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Invalid bot config file {path}") from exc

        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Bot config file {path} must contain a mapping at top level.")
        return raw


@lru_cache()
def get_settings() -> BotSettings:
    """Return memoized bot settings for the process entrypoint."""

    return BotSettings()
