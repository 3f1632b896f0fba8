"""Configuration settings for the relay service."""

import os
from dataclasses import dataclass
from typing import Any, Dict

from ..exceptions import ConfigurationError


def _positive_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        value = cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def _port(name: str, default: str) -> int:
    port = _positive_number(name, default, int)
    if port > 65535:
        raise ConfigurationError(f"{name} must be between 1 and 65535, got {port}")
    return port


@dataclass
class RelayConfig:
    """Configuration for the relay service.

    Attributes:
        host: Address the HTTP server listens on
        port: Port the HTTP server listens on
        log_level: Minimum level of emitted log events
        log_format: ``json`` for machine-readable logs, ``console`` for local runs
        service_name: Name reported by the health endpoint
        timeout: Outbound request timeout in seconds
        user_agent: User-Agent header sent with every outbound message
        content_max_length: Number of characters of entry content kept in a message
    """

    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    log_format: str = "json"
    service_name: str = "feed-relay"
    timeout: float = 30.0
    user_agent: str = "feed-relay/1.0.0"
    content_max_length: int = 300

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """Create config from environment variables.

        Environment Variables:
            HOST: Optional listen address
            PORT: Optional listen port
            LOG_LEVEL: Optional log level (DEBUG, INFO, WARNING, ERROR)
            LOG_FORMAT: Optional renderer, ``json`` or ``console``
            SERVICE_NAME: Optional name reported by ``/health``
            RELAY_TIMEOUT: Optional outbound timeout in seconds
            RELAY_USER_AGENT: Optional outbound User-Agent
            RELAY_CONTENT_MAX_LENGTH: Optional content truncation threshold

        Returns:
            RelayConfig instance

        Raises:
            ConfigurationError: If a numeric setting is malformed or not positive,
                or PORT is outside 1-65535
        """
        log_format = os.getenv("LOG_FORMAT", "json").lower()
        if log_format not in ("json", "console"):
            raise ConfigurationError(f"LOG_FORMAT must be 'json' or 'console', got {log_format!r}")

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=_port("PORT", "8080"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_format=log_format,
            service_name=os.getenv("SERVICE_NAME", "feed-relay"),
            timeout=_positive_number("RELAY_TIMEOUT", "30", float),
            user_agent=os.getenv("RELAY_USER_AGENT", "feed-relay/1.0.0"),
            content_max_length=_positive_number("RELAY_CONTENT_MAX_LENGTH", "300", int),
        )

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "RelayConfig":
        """Create a RelayConfig instance from a dictionary, ignoring unknown keys."""
        return cls(**{k: v for k, v in config_dict.items() if k in cls.__dataclass_fields__})
