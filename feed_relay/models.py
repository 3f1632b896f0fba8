"""
Data models for the feed relay.

The inbound models mirror the Miniflux webhook payload; ``FeedMessage`` is the
outbound chat message.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from dateutil.parser import parse as parse_date

from .exceptions import ValidationError

NEW_ENTRIES_EVENT = "new_entries"


def _parse_timestamp(data: Dict[str, Any], key: str, name: str) -> Optional[datetime]:
    value = data.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{name}.{key} must be a string")
    try:
        return parse_date(value)
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Invalid timestamp for {name}.{key}: {value!r}") from e


def _require_mapping(value: Any, name: str, allow_null: bool = False) -> Dict[str, Any]:
    if value is None and allow_null:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"{name} must be an object")
    return value


# JSON null falls back to the zero value, any other type mismatch is rejected.
def _string(data: Dict[str, Any], key: str, name: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{name}.{key} must be a string")
    return value


def _integer(data: Dict[str, Any], key: str, name: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name}.{key} must be an integer")
    return value


def _boolean(data: Dict[str, Any], key: str, name: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValidationError(f"{name}.{key} must be a boolean")
    return value


def _list(data: Dict[str, Any], key: str, name: str) -> List[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"{name}.{key} must be a list")
    return value


@dataclass
class Feed:
    id: int = 0
    user_id: int = 0
    title: str = ""
    feed_url: str = ""
    site_url: str = ""
    checked_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Feed":
        data = _require_mapping(data, "feed", allow_null=True)
        return cls(
            id=_integer(data, "id", "feed"),
            user_id=_integer(data, "user_id", "feed"),
            title=_string(data, "title", "feed"),
            feed_url=_string(data, "feed_url", "feed"),
            site_url=_string(data, "site_url", "feed"),
            checked_at=_parse_timestamp(data, "checked_at", "feed"),
        )


@dataclass
class Enclosure:
    id: int = 0
    user_id: int = 0
    entry_id: int = 0
    url: str = ""
    mime_type: str = ""
    size: int = 0
    media_progression: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "Enclosure":
        data = _require_mapping(data, "enclosure")
        return cls(
            id=_integer(data, "id", "enclosure"),
            user_id=_integer(data, "user_id", "enclosure"),
            entry_id=_integer(data, "entry_id", "enclosure"),
            url=_string(data, "url", "enclosure"),
            mime_type=_string(data, "mime_type", "enclosure"),
            size=_integer(data, "size", "enclosure"),
            media_progression=_integer(data, "media_progression", "enclosure"),
        )


@dataclass
class Entry:
    """A single feed item announced by the feed reader."""

    id: int = 0
    user_id: int = 0
    feed_id: int = 0
    status: str = ""
    hash: str = ""
    title: str = ""
    url: str = ""
    comments_url: str = ""
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    changed_at: Optional[datetime] = None
    content: str = ""
    share_code: str = ""
    starred: bool = False
    reading_time: int = 0
    enclosures: List[Enclosure] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Entry":
        data = _require_mapping(data, "entry")

        tags = _list(data, "tags", "entry")
        if not all(isinstance(tag, str) for tag in tags):
            raise ValidationError("entry.tags must contain only strings")

        return cls(
            id=_integer(data, "id", "entry"),
            user_id=_integer(data, "user_id", "entry"),
            feed_id=_integer(data, "feed_id", "entry"),
            status=_string(data, "status", "entry"),
            hash=_string(data, "hash", "entry"),
            title=_string(data, "title", "entry"),
            url=_string(data, "url", "entry"),
            comments_url=_string(data, "comments_url", "entry"),
            published_at=_parse_timestamp(data, "published_at", "entry"),
            created_at=_parse_timestamp(data, "created_at", "entry"),
            changed_at=_parse_timestamp(data, "changed_at", "entry"),
            content=_string(data, "content", "entry"),
            share_code=_string(data, "share_code", "entry"),
            starred=_boolean(data, "starred", "entry"),
            reading_time=_integer(data, "reading_time", "entry"),
            enclosures=[Enclosure.from_dict(item) for item in _list(data, "enclosures", "entry")],
            tags=tags,
        )


@dataclass
class WebhookEnvelope:
    """Inbound ``new_entries`` notification: one feed and its new entries."""

    event_type: str
    feed: Feed
    entries: List[Entry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, event_type: str = NEW_ENTRIES_EVENT) -> "WebhookEnvelope":
        if not isinstance(data, dict):
            raise ValidationError("Webhook payload must be a JSON object")

        return cls(
            event_type=event_type,
            feed=Feed.from_dict(data.get("feed")),
            entries=[Entry.from_dict(item) for item in _list(data, "entries", "envelope")],
        )


@dataclass
class FeedMessage:
    """Plain text chat message built from one entry."""

    title: str
    content: str
    link: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "content": self.content, "link": self.link}
