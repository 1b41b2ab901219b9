"""Frame transport between a chat session and its client."""
from typing import Optional, Protocol

from fastapi import WebSocket, WebSocketDisconnect

from .errors import TransportClosed


class Transport(Protocol):
    """Ordered, full-duplex stream of text frames."""

    async def read_frame(self) -> Optional[str]:
        """Next inbound text frame, or None for a non-text frame.

        Raises ``TransportClosed`` on EOF or connection failure.
        """
        ...

    async def write_frame(self, frame: str) -> None:
        ...


class WebSocketTransport:
    """Transport over a Starlette/FastAPI ``WebSocket``."""

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket

    async def accept(self) -> None:
        await self._websocket.accept()

    async def read_frame(self) -> Optional[str]:
        try:
            message = await self._websocket.receive()
        except (WebSocketDisconnect, RuntimeError) as exc:
            raise TransportClosed(str(exc)) from exc
        if message["type"] == "websocket.disconnect":
            raise TransportClosed(f"client disconnected (code={message.get('code')})")
        return message.get("text")

    async def write_frame(self, frame: str) -> None:
        try:
            await self._websocket.send_text(frame)
        except (WebSocketDisconnect, RuntimeError, OSError) as exc:
            raise TransportClosed(str(exc)) from exc

    async def close(self) -> None:
        try:
            await self._websocket.close()
        except (RuntimeError, OSError):
            # already closed by the peer
            pass
