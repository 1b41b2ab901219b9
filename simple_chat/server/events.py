"""Chat event types and their text rendering.

Events form a closed set: ``PublicMessage``, ``PrivateMessage`` and
``SystemNotice``. Code that dispatches on the kind of event handles each of
the three explicitly and raises ``TypeError`` for anything else.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
PRIVATE_PREFIX = "/msg "


@dataclass(frozen=True)
class PublicMessage:
    sender: str
    content: str
    timestamp: str


@dataclass(frozen=True)
class PrivateMessage:
    sender: str
    recipient: str
    content: str
    timestamp: str


@dataclass(frozen=True)
class SystemNotice:
    """Server-generated notice. Delivered to a single session, never stored."""

    content: str


ChatEvent = Union[PublicMessage, PrivateMessage, SystemNotice]


def format_timestamp(moment: datetime) -> str:
    return moment.strftime(TIMESTAMP_FORMAT)


def now_timestamp() -> str:
    """Local wall-clock time in the fixed log format."""
    return format_timestamp(datetime.now())


def render(event: ChatEvent) -> str:
    """Render an event as the text frame sent to clients."""
    if isinstance(event, PublicMessage):
        return f"[{event.timestamp}][{event.sender}]: {event.content}"
    if isinstance(event, PrivateMessage):
        return f"[{event.timestamp}][Private from {event.sender} to {event.recipient}]: {event.content}"
    if isinstance(event, SystemNotice):
        return event.content
    raise TypeError(f"Unsupported chat event: {type(event).__name__}")


def is_private_command(text: str) -> bool:
    return text.startswith(PRIVATE_PREFIX)


def parse_frame(text: str, username: str, timestamp: str) -> Optional[ChatEvent]:
    """Turn an inbound text frame into a chat event.

    ``/msg <target> <body>`` becomes a ``PrivateMessage``; target and body
    are split on the first space after the prefix and both trimmed. A
    ``/msg`` frame missing either part returns ``None``, as does a frame
    that is blank. Everything else is a ``PublicMessage`` carrying the text
    verbatim.
    """
    if is_private_command(text):
        target, _, body = text[len(PRIVATE_PREFIX):].partition(" ")
        target = target.strip()
        body = body.strip()
        if not target or not body:
            return None
        return PrivateMessage(sender=username, recipient=target, content=body, timestamp=timestamp)

    if not text.strip():
        return None
    return PublicMessage(sender=username, content=text, timestamp=timestamp)


def target_not_found(target: str) -> SystemNotice:
    return SystemNotice(f"[Error] User '{target}' not found.")


def usage_notice() -> SystemNotice:
    return SystemNotice("[Error] Usage: /msg <user> <message>")
