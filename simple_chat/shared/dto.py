"""Shared data transfer object helpers."""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class MessageDTO:
    id: int
    from_user: str
    to_user: Optional[str]
    content: str
    timestamp: str
    is_private: bool

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "MessageDTO":
        return cls(
            id=int(data["id"]),
            from_user=data["from_user"],
            to_user=data.get("to_user"),
            content=data["content"],
            timestamp=data["timestamp"],
            is_private=bool(data["is_private"]),
        )
