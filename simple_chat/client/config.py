"""Client configuration values."""
import os

SERVER_HOST = os.getenv("SIMPLE_CHAT_HOST", "127.0.0.1")
SERVER_PORT = int(os.getenv("SIMPLE_CHAT_PORT", "8080"))
HISTORY_LIMIT = int(os.getenv("SIMPLE_CHAT_HISTORY_LIMIT", "10"))
SEARCH_LIMIT = int(os.getenv("SIMPLE_CHAT_SEARCH_LIMIT", "10"))
REQUEST_TIMEOUT = 10


def ws_url(host: str = SERVER_HOST, port: int = SERVER_PORT) -> str:
    return f"ws://{host}:{port}/"


def http_url(host: str = SERVER_HOST, port: int = SERVER_PORT) -> str:
    return f"http://{host}:{port}"
