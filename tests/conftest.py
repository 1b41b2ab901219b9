from __future__ import annotations

import os
import tempfile
from pathlib import Path

# Keep the server's rotating log out of the source tree during tests.
os.environ.setdefault("SIMPLE_CHAT_LOG_FILE", str(Path(tempfile.gettempdir()) / "simple_chat_test.log"))

import pytest

from simple_chat.server.database import build_engine
from simple_chat.server.store import MessageStore


@pytest.fixture
def store(tmp_path):
    message_store = MessageStore(build_engine(f"sqlite:///{tmp_path / 'chat.db'}"))
    message_store.init_schema()
    yield message_store
    message_store.dispose()
