"""Tests for relay configuration."""
import pytest

from feed_relay.config import RelayConfig
from feed_relay.exceptions import ConfigurationError


def test_defaults():
    config = RelayConfig.from_env()

    assert config.host == "0.0.0.0"
    assert config.port == 8080
    assert config.log_level == "INFO"
    assert config.log_format == "json"
    assert config.service_name == "feed-relay"
    assert config.timeout == 30.0
    assert config.user_agent == "feed-relay/1.0.0"
    assert config.content_max_length == 300


def test_from_env(monkeypatch):
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FORMAT", "Console")
    monkeypatch.setenv("SERVICE_NAME", "relay-test")
    monkeypatch.setenv("RELAY_TIMEOUT", "2.5")
    monkeypatch.setenv("RELAY_USER_AGENT", "relay-test/0.1")
    monkeypatch.setenv("RELAY_CONTENT_MAX_LENGTH", "200")

    config = RelayConfig.from_env()

    assert config.host == "127.0.0.1"
    assert config.port == 9000
    assert config.log_level == "DEBUG"
    assert config.log_format == "console"
    assert config.service_name == "relay-test"
    assert config.timeout == 2.5
    assert config.user_agent == "relay-test/0.1"
    assert config.content_max_length == 200


@pytest.mark.parametrize(
    "name,value",
    [
        ("PORT", "eighty"),
        ("PORT", "0"),
        ("PORT", "70000"),
        ("RELAY_TIMEOUT", "-1"),
        ("RELAY_TIMEOUT", "soon"),
        ("RELAY_CONTENT_MAX_LENGTH", "2.5"),
    ],
)
def test_invalid_numbers(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError) as exc_info:
        RelayConfig.from_env()

    assert name in str(exc_info.value)


def test_invalid_log_format(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "xml")

    with pytest.raises(ConfigurationError):
        RelayConfig.from_env()


def test_from_dict_ignores_unknown_keys():
    config = RelayConfig.from_dict({"port": 9100, "unknown": True})

    assert config.port == 9100
    assert not hasattr(config, "unknown")
