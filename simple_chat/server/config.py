"""Server configuration values."""
import os
from pathlib import Path
from typing import Optional

BASE_DIR = Path(__file__).resolve().parent
HOST = os.getenv("SIMPLE_CHAT_HOST", "127.0.0.1")
PORT = int(os.getenv("SIMPLE_CHAT_PORT", "8080"))
DATABASE_URL = os.getenv("SIMPLE_CHAT_DATABASE_URL", f"sqlite:///{BASE_DIR / 'chat_history.db'}")
LOG_FILE = Path(os.getenv("SIMPLE_CHAT_LOG_FILE", str(BASE_DIR / "server.log")))
LOG_LEVEL = os.getenv("SIMPLE_CHAT_LOG_LEVEL", "INFO").upper()
LOG_MAX_BYTES = int(os.getenv("SIMPLE_CHAT_LOG_MAX_BYTES", str(5 * 1024 * 1024)))
LOG_BACKUP_COUNT = int(os.getenv("SIMPLE_CHAT_LOG_BACKUP_COUNT", "3"))

HISTORY_LIMIT = int(os.getenv("SIMPLE_CHAT_HISTORY_LIMIT", "10"))
SEARCH_LIMIT = int(os.getenv("SIMPLE_CHAT_SEARCH_LIMIT", "10"))
MAX_QUERY_LIMIT = 500

_idle = os.getenv("SIMPLE_CHAT_IDLE_TIMEOUT")
# Seconds of inbound silence before a session is closed; None disables it.
IDLE_TIMEOUT: Optional[float] = float(_idle) if _idle else None
