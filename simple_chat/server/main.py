"""FastAPI application entrypoint for the chat server."""
from typing import Optional

import uvicorn
from fastapi import FastAPI, WebSocket

from . import messages, users
from .config import DATABASE_URL, HOST, IDLE_TIMEOUT, PORT
from .database import build_engine
from .logging_config import configure_logging
from .registry import ConnectionRegistry
from .router import ChatSession
from .store import MessageStore
from .transport import WebSocketTransport

logger = configure_logging()


def create_app(
    store: MessageStore,
    registry: Optional[ConnectionRegistry] = None,
    idle_timeout: Optional[float] = IDLE_TIMEOUT,
) -> FastAPI:
    """Build the app around an already-opened store and a (fresh) registry."""
    app = FastAPI(title="Simple Chat Server", version="1.0.0")
    app.state.store = store
    app.state.registry = registry if registry is not None else ConnectionRegistry()
    app.state.idle_timeout = idle_timeout
    app.include_router(messages.router)
    app.include_router(users.router)

    @app.get("/")
    def root():
        return {"status": "ok", "online": len(app.state.registry)}

    @app.websocket("/")
    async def chat(websocket: WebSocket):
        transport = WebSocketTransport(websocket)
        await transport.accept()
        client = websocket.client
        logger.info("CONNECTION_ACCEPTED peer=%s", f"{client.host}:{client.port}" if client else "unknown")
        session = ChatSession(
            transport,
            app.state.registry,
            app.state.store,
            idle_timeout=app.state.idle_timeout,
        )
        await session.run()
        await transport.close()

    return app


def open_store(database_url: str = DATABASE_URL) -> MessageStore:
    store = MessageStore(build_engine(database_url))
    store.init_schema()
    return store


def run_server(host: str = HOST, port: int = PORT, database_url: str = DATABASE_URL) -> None:
    """Open the store and serve until interrupted. Startup failures propagate."""
    store = open_store(database_url)
    logger.info("SERVER_START host=%s port=%s database=%s", host, port, database_url)
    try:
        uvicorn.run(create_app(store), host=host, port=port, reload=False)
    finally:
        store.dispose()
        logger.info("SERVER_STOP host=%s port=%s", host, port)


if __name__ == "__main__":
    run_server()
