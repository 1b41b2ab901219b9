from __future__ import annotations

import pytest
from sqlalchemy import inspect

from simple_chat.server.database import build_engine
from simple_chat.server.errors import PersistenceError
from simple_chat.server.events import PrivateMessage, PublicMessage, SystemNotice
from simple_chat.server.store import MessageStore


def test_schema_matches_message_log_layout(store: MessageStore) -> None:
    columns = {col["name"]: col for col in inspect(store._engine).get_columns("messages")}
    assert set(columns) == {"id", "from_user", "to_user", "content", "timestamp", "is_private"}
    assert columns["to_user"]["nullable"] is True
    assert columns["content"]["nullable"] is False


def test_init_schema_is_idempotent(store: MessageStore) -> None:
    store.append(PublicMessage("alice", "kept", "t1"))
    store.init_schema()
    assert [r.content for r in store.recent_history(10)] == ["kept"]


def test_append_public_and_private(store: MessageStore) -> None:
    public = store.append(PublicMessage("alice", "hello", "2024-01-01 10:00:00"))
    private = store.append(PrivateMessage("alice", "bob", "hi", "2024-01-01 10:00:01"))

    assert public.id == 1
    assert public.to_user is None
    assert public.is_private is False
    assert private.id == 2
    assert private.to_user == "bob"
    assert private.is_private is True


def test_system_notices_are_not_stored(store: MessageStore) -> None:
    with pytest.raises(TypeError):
        store.append(SystemNotice("[Error] nope"))  # type: ignore[arg-type]
    assert store.recent_history(10) == []


def test_recent_history_returns_latest_first(store: MessageStore) -> None:
    for i in range(1, 16):
        store.append(PublicMessage("alice", f"message {i}", f"t{i}"))

    history = store.recent_history(10)

    assert [r.id for r in history] == list(range(15, 5, -1))
    assert history[0].content == "message 15"


def test_search_filters_by_substring(store: MessageStore) -> None:
    store.append(PublicMessage("alice", "foo fighters", "t1"))
    store.append(PublicMessage("bob", "nothing here", "t2"))
    store.append(PrivateMessage("bob", "alice", "seafood tonight?", "t3"))
    store.append(PublicMessage("carol", "100% sure", "t4"))

    results = store.search("foo", 10)

    assert [r.content for r in results] == ["seafood tonight?", "foo fighters"]
    assert store.search("bar", 10) == []
    assert [r.content for r in store.search("%", 10)] == ["100% sure"]


def test_search_respects_limit(store: MessageStore) -> None:
    for i in range(5):
        store.append(PublicMessage("alice", f"foo {i}", f"t{i}"))
    assert [r.content for r in store.search("foo", 2)] == ["foo 4", "foo 3"]


def test_non_positive_limit_rejected(store: MessageStore) -> None:
    with pytest.raises(ValueError):
        store.recent_history(0)
    with pytest.raises(ValueError):
        store.search("foo", -1)


def test_unreachable_database_raises_persistence_error(tmp_path) -> None:
    broken = MessageStore(build_engine(f"sqlite:///{tmp_path / 'missing' / 'chat.db'}"))
    with pytest.raises(PersistenceError):
        broken.init_schema()
    with pytest.raises(PersistenceError):
        broken.append(PublicMessage("alice", "hello", "t1"))
