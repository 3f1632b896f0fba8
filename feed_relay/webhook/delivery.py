"""Message delivery to chat webhook endpoints."""

import time
from typing import Optional

import requests
import structlog

from ..exceptions import WebhookError
from ..metrics import DELIVERIES, DELIVERY_DURATION
from ..models import Entry, Feed, FeedMessage
from .formatter import MessageFormatter

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "feed-relay/1.0.0"


class MessageSender:
    """Posts formatted entries to a destination webhook, one attempt per message.

    The destination URL is passed per call and never kept on the instance.
    Each message goes out on a fresh connection, so nothing from one send
    reaches the next.
    """

    def __init__(
        self,
        formatter: Optional[MessageFormatter] = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """Initialize the sender.

        Args:
            formatter: Formatter used by ``send_entry``
            timeout: Request timeout in seconds
            user_agent: Value of the User-Agent header
        """
        self.formatter = formatter or MessageFormatter()
        self.timeout = timeout
        self.user_agent = user_agent
        self.logger = structlog.get_logger(__name__)

    def send_entry(self, entry: Entry, feed: Feed, webhook_url: str) -> None:
        """Format ``entry`` and deliver it to ``webhook_url``.

        Raises:
            WebhookError: If the delivery failed
        """
        message = self.formatter.format_entry(entry, feed)
        self.send_message(message, webhook_url)

    def send_message(self, message: FeedMessage, webhook_url: str) -> None:
        """Deliver a single message.

        Only an HTTP 200 answer counts as delivered.

        Args:
            message: Message to post as JSON
            webhook_url: Destination endpoint

        Raises:
            WebhookError: On transport failure or any non-200 status
        """
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }

        start_time = time.time()
        try:
            response = requests.post(
                webhook_url,
                json=message.to_dict(),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            DELIVERIES.labels(status="failed").inc()
            # requests errors embed the destination host and path.
            error = type(e).__name__
            self.logger.error("message_delivery_request_failed", error=error)
            raise WebhookError(f"failed to send request: {error}") from e
        finally:
            DELIVERY_DURATION.observe(time.time() - start_time)

        if response.status_code != 200:
            body = response.text
            DELIVERIES.labels(status="failed").inc()
            self.logger.warning(
                "message_delivery_rejected",
                status_code=response.status_code,
                response_body=body,
            )
            raise WebhookError(
                f"webhook returned status {response.status_code}: {body}",
                status_code=response.status_code,
                response_body=body,
            )

        DELIVERIES.labels(status="success").inc()
        self.logger.debug("message_delivered", title=message.title)
