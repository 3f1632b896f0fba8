"""Metrics collection and exposure for the feed relay."""
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Metrics definitions
WEBHOOK_REQUESTS = Counter(
    "feed_relay_webhook_requests_total",
    "Inbound webhook requests by outcome",
    ["outcome"],
)
DELIVERIES = Counter(
    "feed_relay_deliveries_total",
    "Outbound message deliveries by status",
    ["status"],
)
DELIVERY_DURATION = Histogram(
    "feed_relay_delivery_duration_seconds",
    "Time spent delivering a message to the destination webhook",
    buckets=(0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
)


def render_metrics():
    """Return the current metrics in the Prometheus text format.

    Returns:
        tuple: (payload bytes, content type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST
