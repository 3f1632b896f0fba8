"""
Custom exceptions for the feed relay.
"""
from typing import Optional


class FeedRelayError(Exception):
    """Base exception for feed relay errors."""

    pass


class ValidationError(FeedRelayError):
    """Raised when an inbound webhook payload cannot be decoded."""

    pass


class ConfigurationError(FeedRelayError):
    """Raised when the environment holds an invalid setting."""

    pass


class WebhookError(FeedRelayError):
    """Raised when a message could not be delivered to the destination webhook."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
