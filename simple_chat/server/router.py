"""Per-connection chat session: identification, routing and delivery."""
import asyncio
import contextlib
import enum
from typing import Callable, Optional

from starlette.concurrency import run_in_threadpool

from .errors import DeliveryError, PersistenceError, ProtocolError, TransportClosed
from .events import (
    ChatEvent,
    PrivateMessage,
    PublicMessage,
    is_private_command,
    now_timestamp,
    parse_frame,
    render,
    target_not_found,
    usage_notice,
)
from .logging_config import configure_logging
from .registry import ConnectionRegistry, Outbound
from .store import MessageStore
from .transport import Transport

logger = configure_logging()


class SessionState(enum.Enum):
    AWAITING_USERNAME = "awaiting_username"
    ACTIVE = "active"
    CLOSED = "closed"


class ChatSession:
    """Runs one client connection from handshake to teardown.

    The reading side (``run``) turns inbound frames into events, logs them
    to the store and routes them through the registry. A writer task drains
    this session's outbound queue into the transport. Both end when the
    inbound side fails or reaches EOF; the writer finishes whatever is
    already queued first. A failed write unregisters the user at once and
    stops the reading side as well.
    """

    def __init__(
        self,
        transport: Transport,
        registry: ConnectionRegistry,
        store: MessageStore,
        clock: Callable[[], str] = now_timestamp,
        idle_timeout: Optional[float] = None,
    ) -> None:
        self.transport = transport
        self.registry = registry
        self.store = store
        self.clock = clock
        self.idle_timeout = idle_timeout
        self.state = SessionState.AWAITING_USERNAME
        self.username: Optional[str] = None
        self.outbound: Optional[Outbound] = None
        self._writer: Optional["asyncio.Task[None]"] = None

    async def run(self) -> None:
        try:
            self.username = await self._read_username()
        except (ProtocolError, TransportClosed) as exc:
            logger.warning("SESSION_REJECTED reason=%s", exc)
            self.state = SessionState.CLOSED
            return

        self.outbound = Outbound()
        displaced = self.registry.register(self.username, self.outbound)
        if displaced is not None:
            logger.warning("USERNAME_REPLACED username=%s", self.username)
        self._writer = asyncio.create_task(self._drain_outbound())
        self.state = SessionState.ACTIVE
        logger.info("SESSION_OPEN username=%s", self.username)

        try:
            await self._read_loop()
        finally:
            await self._teardown()

    async def _read_username(self) -> str:
        frame = await self._read()
        if frame is None:
            raise ProtocolError("first frame is not text")
        if not frame:
            raise ProtocolError("empty username")
        return frame

    async def _read(self) -> Optional[str]:
        if self.idle_timeout is None:
            return await self.transport.read_frame()
        try:
            return await asyncio.wait_for(self.transport.read_frame(), timeout=self.idle_timeout)
        except asyncio.TimeoutError as exc:
            raise TransportClosed(f"idle for {self.idle_timeout}s") from exc

    async def _read_loop(self) -> None:
        while True:
            read = asyncio.ensure_future(self._read())
            try:
                await asyncio.wait({read, self._writer}, return_when=asyncio.FIRST_COMPLETED)
            except asyncio.CancelledError:
                read.cancel()
                raise
            if not read.done():
                # the writer gave up on the transport, so stop reading too
                read.cancel()
                with contextlib.suppress(asyncio.CancelledError, TransportClosed):
                    await read
                logger.info("SESSION_WRITE_CLOSED username=%s", self.username)
                return
            try:
                frame = read.result()
            except TransportClosed as exc:
                logger.info("SESSION_EOF username=%s reason=%s", self.username, exc)
                return
            if frame is None:
                continue
            await self.handle_frame(frame)

    async def handle_frame(self, text: str) -> None:
        """Route one inbound text frame from this session's user."""
        timestamp = self.clock()
        event = parse_frame(text, self.username, timestamp)
        if event is None:
            if is_private_command(text):
                self._deliver(self.outbound, usage_notice())
            return

        if isinstance(event, PrivateMessage):
            await self._route_private(event)
        elif isinstance(event, PublicMessage):
            await self._persist(event)
            self._broadcast(event)
        else:
            raise TypeError(f"Unexpected inbound event: {type(event).__name__}")

    async def _persist(self, event: ChatEvent) -> None:
        try:
            record = await run_in_threadpool(self.store.append, event)
        except PersistenceError:
            logger.exception("PERSIST_FAIL username=%s", self.username)
            return
        logger.info("MESSAGE_LOGGED id=%s from=%s private=%s", record.id, record.from_user, record.is_private)

    async def _route_private(self, event: PrivateMessage) -> None:
        # An absent target is answered with a notice and nothing is logged.
        target = self.registry.lookup(event.recipient)
        if target is None:
            logger.info("PRIVATE_TARGET_ABSENT from=%s to=%s", event.sender, event.recipient)
            self._deliver(self.outbound, target_not_found(event.recipient))
            return
        await self._persist(event)
        self._deliver(target, event)

    def _broadcast(self, event: PublicMessage) -> None:
        frame = render(event)
        for outbound in self.registry.snapshot():
            self._deliver(outbound, frame)

    def _deliver(self, outbound: Optional[Outbound], event: "ChatEvent | str") -> None:
        if outbound is None:
            return
        frame = event if isinstance(event, str) else render(event)
        try:
            outbound.deliver(frame)
        except DeliveryError:
            logger.info("DELIVERY_DROPPED from=%s", self.username)

    async def _drain_outbound(self) -> None:
        while True:
            frame = await self.outbound.get()
            if frame is None:
                return
            try:
                await self.transport.write_frame(frame)
            except TransportClosed as exc:
                logger.info("WRITE_FAIL username=%s reason=%s", self.username, exc)
                self.registry.unregister(self.username, self.outbound)
                self.outbound.close()
                return

    async def _teardown(self) -> None:
        self.registry.unregister(self.username, self.outbound)
        self.outbound.close()
        if self._writer is not None:
            await self._writer
        self.state = SessionState.CLOSED
        logger.info("SESSION_CLOSED username=%s", self.username)
