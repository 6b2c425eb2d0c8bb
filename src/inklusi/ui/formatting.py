"""Text formatting utilities for the TUI.

Hides the details of how messages, citations and headers are turned into
display strings.
"""

from collections.abc import Iterable
from urllib.parse import urlparse

from ..conversation.models import Message, Sender
from ..llm.models import Source
from .config import MESSAGE_TIMESTAMP_FORMAT

SENDER_LABELS = {
    Sender.USER: ("You", ">"),
    Sender.BOT: ("UDL Assistant", "<"),
    Sender.ERROR: ("Error", "!"),
}


def message_header(message: Message) -> str:
    """Header line with icon, sender and time."""
    label, icon = SENDER_LABELS[message.sender]
    return f"{icon} {label} [{message.timestamp.strftime(MESSAGE_TIMESTAMP_FORMAT)}]"


def source_label(source: Source) -> str:
    """Title of a source, falling back to its host name."""
    if source.title:
        return source.title
    host = urlparse(source.uri).netloc
    return host or source.uri


def format_sources(sources: Iterable[Source]) -> str:
    """Render grounding sources as a numbered markdown list.

    Returns an empty string when there are no sources.
    """
    lines = [
        f"{i}. [{_escape_brackets(source_label(source))}]({source.uri})"
        for i, source in enumerate(sources, 1)
    ]
    if not lines:
        return ""
    return "**Sources:**\n\n" + "\n".join(lines)


def _escape_brackets(text: str) -> str:
    return text.replace("[", "\\[").replace("]", "\\]")


def format_sources_plain(sources: Iterable[Source]) -> list[str]:
    """Sources as plain 'title - uri' lines (CLI output)."""
    return [f"{source_label(source)} - {source.uri}" for source in sources]
