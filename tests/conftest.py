import copy
from unittest.mock import Mock

import pytest

from feed_relay.api import create_app
from feed_relay.config import RelayConfig
from feed_relay.webhook_handler import WebhookHandler

SAMPLE_PAYLOAD = {
    "event_type": "new_entries",
    "feed": {
        "id": 8,
        "user_id": 1,
        "feed_url": "https://example.org/feed.xml",
        "site_url": "https://example.org",
        "title": "Example website",
        "checked_at": "2023-09-10T12:48:43.428196-07:00",
    },
    "entries": [
        {
            "id": 231,
            "user_id": 1,
            "feed_id": 3,
            "status": "unread",
            "hash": "1163a93ef12741b558a3b86d7e975c4c1de0152f3439915ed185eb460e5718d7",
            "title": "Example",
            "url": "https://example.org/article",
            "comments_url": "",
            "published_at": "2023-08-17T19:29:22Z",
            "created_at": "2023-09-10T12:48:43.428196-07:00",
            "changed_at": "2023-09-10T12:48:43.428196-07:00",
            "content": "<p>Some HTML content</p>",
            "share_code": "",
            "starred": False,
            "reading_time": 1,
            "enclosures": [
                {
                    "id": 158,
                    "user_id": 1,
                    "entry_id": 231,
                    "url": "https://example.org/podcast.mp3",
                    "mime_type": "audio/mpeg",
                    "size": 63451045,
                    "media_progression": 0,
                }
            ],
            "tags": ["Some category", "Another label"],
        }
    ],
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep relay settings from the outer environment out of the tests."""
    for name in (
        "HOST",
        "PORT",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "SERVICE_NAME",
        "RELAY_TIMEOUT",
        "RELAY_USER_AGENT",
        "RELAY_CONTENT_MAX_LENGTH",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_payload():
    """A Miniflux new_entries payload with one entry."""
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture
def multi_entry_payload(sample_payload):
    """The sample payload with three entries, ids 1 to 3."""
    template = sample_payload["entries"][0]
    sample_payload["entries"] = [
        dict(template, id=entry_id, title=f"Entry {entry_id}") for entry_id in (1, 2, 3)
    ]
    return sample_payload


@pytest.fixture
def mock_sender():
    """Create a mock entry sender."""
    sender = Mock()
    sender.send_entry.return_value = None
    return sender


@pytest.fixture
def handler(mock_sender):
    return WebhookHandler(mock_sender)


@pytest.fixture
def client(handler):
    """Flask test client backed by the mock sender."""
    app = create_app(RelayConfig(), handler=handler)
    app.config["TESTING"] = True
    return app.test_client()
