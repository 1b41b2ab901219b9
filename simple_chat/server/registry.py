"""Registry of connected users and their outbound queues."""
import asyncio
import threading
from typing import Dict, List, Optional

from .errors import DeliveryError


class Outbound:
    """Unbounded queue of frames waiting to be written to one connection.

    Producers call :meth:`deliver` from any session; the owning session's
    writer task consumes with :meth:`get` until the queue is closed and
    drained.
    """

    def __init__(self) -> None:
        self._queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def deliver(self, frame: str) -> None:
        if self._closed:
            raise DeliveryError("outbound queue is closed")
        self._queue.put_nowait(frame)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # end-of-stream marker
        self._queue.put_nowait(None)

    async def get(self) -> Optional[str]:
        """Next frame, or None once the queue is closed and empty."""
        return await self._queue.get()


class ConnectionRegistry:
    """Maps usernames to outbound queues.

    Keys are unique; registering an existing username replaces the previous
    entry. Every operation takes the same lock, and fan-out works on a
    snapshot so delivery never happens while the lock is held.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._senders: Dict[str, Outbound] = {}

    def register(self, username: str, outbound: Outbound) -> Optional[Outbound]:
        """Bind ``username`` to ``outbound``; return the handle it displaced."""
        with self._lock:
            previous = self._senders.get(username)
            self._senders[username] = outbound
        return previous if previous is not outbound else None

    def unregister(self, username: str, outbound: Optional[Outbound] = None) -> None:
        """Drop ``username``. With ``outbound`` given, only if it is still the bound handle."""
        with self._lock:
            current = self._senders.get(username)
            if current is None:
                return
            if outbound is not None and current is not outbound:
                return
            del self._senders[username]

    def lookup(self, username: str) -> Optional[Outbound]:
        with self._lock:
            return self._senders.get(username)

    def snapshot(self) -> List[Outbound]:
        with self._lock:
            return list(self._senders.values())

    def usernames(self) -> List[str]:
        with self._lock:
            return sorted(self._senders)

    def __contains__(self, username: object) -> bool:
        with self._lock:
            return username in self._senders

    def __len__(self) -> int:
        with self._lock:
            return len(self._senders)
