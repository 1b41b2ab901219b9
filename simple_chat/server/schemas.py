"""Pydantic schemas for stored records and response bodies."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class MessageRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    from_user: str
    to_user: Optional[str] = None
    content: str
    timestamp: str
    is_private: bool


class OnlineUsers(BaseModel):
    count: int
    usernames: List[str]
