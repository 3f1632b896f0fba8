"""
Webhook handler for inbound Miniflux notifications.
"""
import json
from typing import Any, Dict, Optional, Protocol, Tuple, Union

import structlog

from .exceptions import FeedRelayError, ValidationError
from .metrics import WEBHOOK_REQUESTS
from .models import NEW_ENTRIES_EVENT, Entry, Feed, WebhookEnvelope

logger = structlog.get_logger(__name__)

EVENT_TYPE_HEADER = "X-Miniflux-Event-Type"

EVENT_IGNORED = "Event ignored"
PROCESSED = "Webhook processed successfully"
MISSING_WEBHOOK_URL = "webhook_url parameter is required"
INVALID_PAYLOAD = "Invalid payload"


class EntrySender(Protocol):
    """Anything able to deliver one entry to a destination webhook."""

    def send_entry(self, entry: Entry, feed: Feed, webhook_url: str) -> None:
        ...


class WebhookHandler:
    """Handles inbound webhook requests and relays their entries."""

    def __init__(self, sender: EntrySender):
        self.sender = sender

    def parse_envelope(self, body: Union[bytes, str], event_type: str) -> WebhookEnvelope:
        """Decode the request body into an envelope.

        Raises:
            ValidationError: If the body is not JSON or not shaped like an envelope
        """
        try:
            data = json.loads(body)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Malformed JSON body: {e}") from e
        return WebhookEnvelope.from_dict(data, event_type=event_type)

    def process_webhook(
        self,
        event_type: Optional[str],
        webhook_url: Optional[str],
        body: Union[bytes, str],
    ) -> Tuple[Dict[str, Any], int]:
        """Process one inbound webhook request.

        Args:
            event_type: Value of the event type header, ``None`` when absent
            webhook_url: Destination webhook taken from the query string
            body: Raw request body

        Returns:
            Tuple of (JSON response body, HTTP status code)
        """
        if event_type != NEW_ENTRIES_EVENT:
            logger.info("webhook_event_ignored", event_type=event_type)
            WEBHOOK_REQUESTS.labels(outcome="ignored").inc()
            return {"message": EVENT_IGNORED}, 200

        if not webhook_url:
            logger.warning("webhook_url_missing")
            WEBHOOK_REQUESTS.labels(outcome="missing_url").inc()
            return {"error": MISSING_WEBHOOK_URL}, 400

        try:
            envelope = self.parse_envelope(body, event_type)
        except ValidationError as e:
            logger.warning("webhook_payload_invalid", error=str(e))
            WEBHOOK_REQUESTS.labels(outcome="invalid_payload").inc()
            return {"error": INVALID_PAYLOAD}, 400

        logger.info(
            "webhook_entries_received",
            feed_id=envelope.feed.id,
            feed_title=envelope.feed.title,
            entry_count=len(envelope.entries),
        )

        delivered = self.relay_entries(envelope, webhook_url)

        logger.info(
            "webhook_processed",
            feed_id=envelope.feed.id,
            delivered=delivered,
            failed=len(envelope.entries) - delivered,
        )
        WEBHOOK_REQUESTS.labels(outcome="processed").inc()
        return {"message": PROCESSED}, 200

    def relay_entries(self, envelope: WebhookEnvelope, webhook_url: str) -> int:
        """Send every entry of ``envelope`` in order.

        A failed entry is logged and skipped.

        Returns:
            Number of entries delivered
        """
        delivered = 0
        for entry in envelope.entries:
            try:
                self.sender.send_entry(entry, envelope.feed, webhook_url)
            except FeedRelayError as e:
                logger.error("entry_delivery_failed", entry_id=entry.id, error=str(e))
                continue
            except Exception:
                logger.exception("entry_delivery_crashed", entry_id=entry.id)
                continue
            delivered += 1
            logger.info("entry_delivered", entry_id=entry.id)
        return delivered
