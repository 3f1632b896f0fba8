"""Configuration management for feed relay components."""

from .relay_config import RelayConfig

__all__ = ["RelayConfig"]
