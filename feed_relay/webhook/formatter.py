"""Turn feed entries into chat messages."""

from ..models import Entry, Feed, FeedMessage

DEFAULT_CONTENT_MAX_LENGTH = 300
TRUNCATION_MARKER = "..."

_LINE_BREAK_TAGS = ("<br>", "<br/>", "<br />", "<p>")


def strip_html(html: str) -> str:
    """Reduce an HTML fragment to plain text.

    Break and paragraph tags become newlines, every other tag is dropped and
    doubled newlines are collapsed. Entities are left as they are.

    Args:
        html: HTML fragment

    Returns:
        Plain text with surrounding whitespace removed
    """
    result = html
    for tag in _LINE_BREAK_TAGS:
        result = result.replace(tag, "\n")
    result = result.replace("</p>", "")

    in_tag = False
    cleaned = []
    for char in result:
        if char == "<":
            in_tag = True
        elif char == ">":
            in_tag = False
        elif not in_tag:
            cleaned.append(char)

    text = "".join(cleaned).replace("\n\n", "\n")
    return text.strip()


def truncate(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters, marking the cut."""
    if len(text) > max_length:
        return text[:max_length] + TRUNCATION_MARKER
    return text


class MessageFormatter:
    """Builds the plain text message posted for each entry."""

    def __init__(self, content_max_length: int = DEFAULT_CONTENT_MAX_LENGTH):
        self.content_max_length = content_max_length

    def format_entry(self, entry: Entry, feed: Feed) -> FeedMessage:
        """Format an entry of ``feed`` as a chat message.

        Args:
            entry: Entry to announce
            feed: Feed the entry belongs to

        Returns:
            FeedMessage with title ``[<feed title>] - <entry title>``
        """
        content = ""
        if entry.content:
            content = truncate(strip_html(entry.content), self.content_max_length)

        return FeedMessage(
            title=f"[{feed.title}] - {entry.title}",
            content=content,
            link=entry.url,
        )
