"""Console client for the chat server."""
import asyncio
import sys
from typing import Callable, List, Optional

import requests
import websockets
from websockets.exceptions import ConnectionClosed

from ..shared.dto import MessageDTO
from ..shared.utils import format_record, mentions
from . import api
from .config import HISTORY_LIMIT, SEARCH_LIMIT, SERVER_HOST, SERVER_PORT, http_url, ws_url
from .styles import CYAN, GREEN, YELLOW, paint

HELP = "Commands: /msg <user> <text>, /history, /search <keyword>, /who, /quit"


class ChatClient:
    """Interactive console client: stdin lines out, server frames in."""

    def __init__(self, host: str, port: int, username: str, output: Callable[[str], None] = print):
        self.username = username
        self.server_url = ws_url(host, port)
        self.api = api.APIClient(http_url(host, port))
        self.output = output

    def show_frame(self, frame: str) -> None:
        colour = GREEN if mentions(frame, self.username) else CYAN
        self.output(paint(frame, colour))

    def show_records(self, title: str, records: List[MessageDTO]) -> None:
        self.output(title)
        for record in records:
            self.output(format_record(record))
        if not records:
            self.output("(no messages)")

    async def run(self) -> None:
        async with websockets.connect(self.server_url) as ws:
            await ws.send(self.username)
            self.output(paint(f"Connected as {self.username}. {HELP}", YELLOW))
            receiver = asyncio.create_task(self._receive(ws))
            try:
                await self._send_loop(ws)
            finally:
                receiver.cancel()
                try:
                    await receiver
                except asyncio.CancelledError:
                    pass

    async def _receive(self, ws) -> None:
        try:
            async for frame in ws:
                if isinstance(frame, str):
                    self.show_frame(frame)
        except ConnectionClosed:
            self.output(paint("Disconnected from server.", YELLOW))

    async def _send_loop(self, ws) -> None:
        while True:
            line = await asyncio.to_thread(sys.stdin.readline)
            if not line:
                return
            line = line.rstrip("\n")
            if not await self.handle_line(line, ws):
                return

    async def handle_line(self, line: str, ws) -> bool:
        """Act on one input line; False means the user asked to leave."""
        if line == "/quit":
            return False
        if line.startswith("/history"):
            await self._query(lambda: self.show_records(
                "--- Message History ---", self.api.get_history(HISTORY_LIMIT)))
            return True
        if line.startswith("/search "):
            keyword = line[len("/search "):].strip()
            if not keyword:
                self.output("Usage: /search <keyword>")
                return True
            await self._query(lambda: self.show_records(
                f"--- Search Results for '{keyword}': ---", self.api.search(keyword, SEARCH_LIMIT)))
            return True
        if line == "/who":
            await self._query(lambda: self.output("Online: " + ", ".join(self.api.online_users())))
            return True
        if not line.strip():
            return True
        try:
            await ws.send(line)
        except ConnectionClosed:
            self.output(paint("Connection closed; message not sent.", YELLOW))
            return False
        return True

    async def _query(self, action: Callable[[], None]) -> None:
        try:
            await asyncio.to_thread(action)
        except requests.RequestException as exc:
            self.output(f"Could not query server: {exc}")


def main(host: str = SERVER_HOST, port: int = SERVER_PORT, username: Optional[str] = None) -> None:
    print("Simple Chat Client")
    if not username:
        username = input("Enter your username: ").strip()
    if not username:
        print("A username is required.")
        sys.exit(1)
    client = ChatClient(host, port, username)
    try:
        asyncio.run(client.run())
    except (OSError, websockets.exceptions.InvalidHandshake) as exc:
        print(f"Failed to connect to {client.server_url}: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
