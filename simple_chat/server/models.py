"""Database models for the chat server."""
from sqlalchemy import Column, Integer, Text

from .database import Base


class Message(Base):
    """Append-only log of public and private chat messages."""

    __tablename__ = "messages"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    from_user = Column(Text, nullable=False)
    to_user = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    timestamp = Column(Text, nullable=False)
    is_private = Column(Integer, nullable=False)
