"""FastAPI dependencies resolving the state owned by the running app."""
from fastapi import Request

from .registry import ConnectionRegistry
from .store import MessageStore


def get_store(request: Request) -> MessageStore:
    return request.app.state.store


def get_registry(request: Request) -> ConnectionRegistry:
    return request.app.state.registry
