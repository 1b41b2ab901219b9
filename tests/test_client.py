from __future__ import annotations

import asyncio
from unittest.mock import Mock, patch

import requests

from simple_chat.cli import build_parser
from simple_chat.client.api import APIClient
from simple_chat.client.main import ChatClient
from simple_chat.client.styles import CYAN, GREEN
from simple_chat.shared.dto import MessageDTO
from simple_chat.shared.utils import format_record

PUBLIC_ROW = {
    "id": 2,
    "from_user": "alice",
    "to_user": None,
    "content": "hello",
    "timestamp": "2024-01-01 10:00:00",
    "is_private": False,
}
PRIVATE_ROW = {
    "id": 1,
    "from_user": "alice",
    "to_user": "bob",
    "content": "hi",
    "timestamp": "2024-01-01 09:59:00",
    "is_private": True,
}


class FakeSocket:
    def __init__(self) -> None:
        self.sent: list[str] = []

    async def send(self, frame: str) -> None:
        self.sent.append(frame)


def _response(payload) -> Mock:
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def test_format_record_matches_live_rendering() -> None:
    assert format_record(MessageDTO.from_json(PUBLIC_ROW)) == "[2024-01-01 10:00:00][alice]: hello"
    assert format_record(MessageDTO.from_json(PRIVATE_ROW)) == "[2024-01-01 09:59:00][Private from alice to bob]: hi"
    orphan = MessageDTO.from_json({**PRIVATE_ROW, "to_user": None})
    assert format_record(orphan).startswith("[2024-01-01 09:59:00][Private from alice to ?]")


def test_api_client_history_and_search() -> None:
    client = APIClient("http://chat.local:8080/")
    with patch("simple_chat.client.api.requests.get", return_value=_response([PUBLIC_ROW, PRIVATE_ROW])) as get:
        history = client.get_history(5)
    assert [m.id for m in history] == [2, 1]
    get.assert_called_once_with("http://chat.local:8080/messages/history", params={"limit": 5}, timeout=10)

    with patch("simple_chat.client.api.requests.get", return_value=_response([PRIVATE_ROW])) as get:
        found = client.search("hi", 3)
    assert found[0].to_user == "bob"
    get.assert_called_once_with("http://chat.local:8080/messages/search", params={"q": "hi", "limit": 3}, timeout=10)


def test_incoming_frames_are_highlighted_when_they_mention_user() -> None:
    lines: list[str] = []
    client = ChatClient("127.0.0.1", 8080, "bob", output=lines.append)
    client.show_frame("[t][Private from alice to bob]: hi")
    client.show_frame("[t][alice]: hello")
    assert lines[0].startswith(GREEN)
    assert lines[1].startswith(CYAN)


def test_handle_line_sends_chat_and_runs_commands() -> None:
    lines: list[str] = []
    client = ChatClient("127.0.0.1", 8080, "alice", output=lines.append)
    client.api = Mock()
    client.api.get_history.return_value = [MessageDTO.from_json(PUBLIC_ROW)]
    client.api.search.return_value = []
    ws = FakeSocket()

    async def scenario() -> list[bool]:
        return [
            await client.handle_line("hello", ws),
            await client.handle_line("/msg bob hi", ws),
            await client.handle_line("/history", ws),
            await client.handle_line("/search nothing", ws),
            await client.handle_line("", ws),
            await client.handle_line("/quit", ws),
        ]

    results = asyncio.run(scenario())

    assert results == [True, True, True, True, True, False]
    assert ws.sent == ["hello", "/msg bob hi"]
    assert "--- Message History ---" in lines
    assert "[2024-01-01 10:00:00][alice]: hello" in lines
    assert "--- Search Results for 'nothing': ---" in lines
    assert "(no messages)" in lines
    client.api.search.assert_called_once_with("nothing", 10)


def test_query_errors_are_reported_not_raised() -> None:
    lines: list[str] = []
    client = ChatClient("127.0.0.1", 8080, "alice", output=lines.append)
    client.api = Mock()
    client.api.get_history.side_effect = requests.ConnectionError("refused")

    assert asyncio.run(client.handle_line("/history", FakeSocket())) is True
    assert lines[-1].startswith("Could not query server")


def test_cli_parses_subcommands() -> None:
    args = build_parser().parse_args(["server", "--port", "9000", "--database-url", "sqlite:///x.db"])
    assert (args.command, args.port, args.database_url) == ("server", 9000, "sqlite:///x.db")

    args = build_parser().parse_args(["client", "--username", "alice"])
    assert (args.command, args.username, args.port) == ("client", "alice", 8080)
