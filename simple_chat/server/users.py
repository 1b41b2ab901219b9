"""Presence routes."""
from fastapi import APIRouter, Depends

from . import schemas
from .deps import get_registry
from .registry import ConnectionRegistry

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/online", response_model=schemas.OnlineUsers)
def list_online(registry: ConnectionRegistry = Depends(get_registry)):
    usernames = registry.usernames()
    return schemas.OnlineUsers(count=len(usernames), usernames=usernames)
