"""HTTP API client for the chat server's history endpoints."""
from typing import Any, Dict, List

import requests

from ..shared.dto import MessageDTO
from .config import HISTORY_LIMIT, REQUEST_TIMEOUT, SEARCH_LIMIT


class APIClient:
    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def _get(self, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        resp = requests.get(f"{self.base_url}{path}", params=params, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        return resp.json()

    def get_history(self, limit: int = HISTORY_LIMIT) -> List[MessageDTO]:
        return [MessageDTO.from_json(item) for item in self._get("/messages/history", {"limit": limit})]

    def search(self, keyword: str, limit: int = SEARCH_LIMIT) -> List[MessageDTO]:
        return [MessageDTO.from_json(item) for item in self._get("/messages/search", {"q": keyword, "limit": limit})]

    def online_users(self) -> List[str]:
        resp = requests.get(f"{self.base_url}/users/online", timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        return resp.json()["usernames"]
