"""Outbound webhook package: message formatting and delivery."""

from .delivery import MessageSender
from .formatter import MessageFormatter, strip_html, truncate

__all__ = [
    "MessageFormatter",
    "MessageSender",
    "strip_html",
    "truncate",
]
