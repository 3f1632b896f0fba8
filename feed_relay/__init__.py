"""Feed relay: forwards Miniflux new entries to chat webhooks."""

from .api import create_app
from .config import RelayConfig
from .models import Entry, Feed, FeedMessage, WebhookEnvelope
from .webhook import MessageFormatter, MessageSender
from .webhook_handler import WebhookHandler

__version__ = "1.0.0"

__all__ = [
    "create_app",
    "Entry",
    "Feed",
    "FeedMessage",
    "MessageFormatter",
    "MessageSender",
    "RelayConfig",
    "WebhookEnvelope",
    "WebhookHandler",
]
