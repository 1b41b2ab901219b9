"""Shared utility functions."""
from .dto import MessageDTO


def format_record(record: MessageDTO) -> str:
    """Render a stored message the same way the live feed shows it."""
    if record.is_private:
        recipient = record.to_user or "?"
        return f"[{record.timestamp}][Private from {record.from_user} to {recipient}]: {record.content}"
    return f"[{record.timestamp}][{record.from_user}]: {record.content}"


def mentions(line: str, username: str) -> bool:
    """True when a received line names ``username`` (used for highlighting)."""
    return bool(username) and username in line
