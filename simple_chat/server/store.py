"""Durable message log backed by SQLAlchemy."""
import threading
from typing import List, Union

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .database import Base
from .errors import PersistenceError
from .events import PrivateMessage, PublicMessage
from .models import Message
from .schemas import MessageRecord


class MessageStore:
    """Append-only log of public and private messages.

    One store is shared by every session. Calls are serialized through a
    lock and each opens its own short-lived ORM session.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        self._lock = threading.Lock()

    def init_schema(self) -> None:
        """Create the messages table if it does not exist yet."""
        try:
            Base.metadata.create_all(bind=self._engine)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"cannot initialise message store: {exc}") from exc

    def append(self, event: Union[PublicMessage, PrivateMessage]) -> MessageRecord:
        if isinstance(event, PublicMessage):
            row = Message(
                from_user=event.sender,
                to_user=None,
                content=event.content,
                timestamp=event.timestamp,
                is_private=0,
            )
        elif isinstance(event, PrivateMessage):
            row = Message(
                from_user=event.sender,
                to_user=event.recipient,
                content=event.content,
                timestamp=event.timestamp,
                is_private=1,
            )
        else:
            raise TypeError(f"Only public and private messages are stored, got {type(event).__name__}")

        with self._lock:
            db = self._session_factory()
            try:
                db.add(row)
                db.commit()
                db.refresh(row)
                return MessageRecord.model_validate(row)
            except SQLAlchemyError as exc:
                db.rollback()
                raise PersistenceError(f"cannot append message: {exc}") from exc
            finally:
                db.close()

    def recent_history(self, limit: int) -> List[MessageRecord]:
        """Latest ``limit`` records, newest first."""
        _check_limit(limit)
        with self._lock:
            db = self._session_factory()
            try:
                rows = db.query(Message).order_by(Message.id.desc()).limit(limit).all()
                return [MessageRecord.model_validate(row) for row in rows]
            except SQLAlchemyError as exc:
                raise PersistenceError(f"cannot read history: {exc}") from exc
            finally:
                db.close()

    def search(self, keyword: str, limit: int) -> List[MessageRecord]:
        """Records whose content contains ``keyword``, newest first.

        Matching uses SQL ``LIKE`` with wildcards in ``keyword`` escaped, so
        it is case-insensitive for ASCII letters on SQLite.
        """
        _check_limit(limit)
        with self._lock:
            db = self._session_factory()
            try:
                rows = (
                    db.query(Message)
                    .filter(Message.content.contains(keyword, autoescape=True))
                    .order_by(Message.id.desc())
                    .limit(limit)
                    .all()
                )
                return [MessageRecord.model_validate(row) for row in rows]
            except SQLAlchemyError as exc:
                raise PersistenceError(f"cannot search messages: {exc}") from exc
            finally:
                db.close()

    def dispose(self) -> None:
        self._engine.dispose()


def _check_limit(limit: int) -> None:
    if limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")
