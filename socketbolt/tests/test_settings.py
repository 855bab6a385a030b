from pathlib import Path

import pytest
from pydantic import ValidationError

from socketbolt.config import BotSettings
from socketbolt.errors import ConfigurationError


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("SOCKETBOLT_CONFIG_FILE", "SOCKETBOLT_APP_TOKEN", "SOCKETBOLT_LOG_LEVEL", "SOCKETBOLT_TRANSPORT"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_match_connection_timings():
    settings = BotSettings()

    assert settings.connect_max_retries == 5
    assert settings.reconnect_delay_seconds == 5.0
    assert settings.stale_threshold_seconds == 45.0
    assert settings.poll_interval_seconds == 0.1
    assert settings.heartbeat_log_interval_seconds == 60.0
    assert settings.transport == "websocket"
    assert settings.handler_paths == [Path("app/slack_handlers")]
    assert settings.connections_open_url == "https://slack.com/api/apps.connections.open"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SOCKETBOLT_APP_TOKEN", "xapp-env")
    monkeypatch.setenv("SOCKETBOLT_LOG_LEVEL", "debug")
    monkeypatch.setenv("SOCKETBOLT_TRANSPORT", "dummy")

    settings = BotSettings()

    assert settings.app_token == "xapp-env"
    assert settings.log_level == "DEBUG"
    assert settings.transport == "dummy"


def test_tokens_are_hidden_from_repr():
    settings = BotSettings(app_token="xapp-secret", bot_token="xoxb-secret")

    assert "xapp-secret" not in repr(settings)
    assert "xoxb-secret" not in repr(settings)


def test_yaml_file_is_loaded_and_init_kwargs_win(monkeypatch, tmp_path):
    config_file = tmp_path / "bot.yaml"
    config_file.write_text(
        "app_token: xapp-file\n"
        "api_base_url: https://api.example.test/api/\n"
        "stale_threshold_seconds: 30\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("SOCKETBOLT_CONFIG_FILE", str(config_file))

    settings = BotSettings(stale_threshold_seconds=20)

    assert settings.app_token == "xapp-file"
    assert settings.stale_threshold_seconds == 20
    assert settings.config_path == config_file
    assert settings.connections_open_url == "https://api.example.test/api/apps.connections.open"


def test_non_mapping_config_file_is_rejected(monkeypatch, tmp_path):
    config_file = tmp_path / "bot.yaml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("SOCKETBOLT_CONFIG_FILE", str(config_file))

    with pytest.raises(ConfigurationError):
        BotSettings()


def test_unparseable_config_file_is_a_configuration_error(monkeypatch, tmp_path):
    config_file = tmp_path / "bot.yaml"
    config_file.write_text("app_token: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv("SOCKETBOLT_CONFIG_FILE", str(config_file))

    with pytest.raises(ConfigurationError, match="Invalid bot config file"):
        BotSettings()


def test_drain_timeout_defaults_to_five_seconds():
    assert BotSettings().dispatch_drain_timeout_seconds == 5.0


def test_invalid_overflow_policy_is_rejected():
    with pytest.raises(ValidationError):
        BotSettings(dispatch_queue_overflow="explode")
