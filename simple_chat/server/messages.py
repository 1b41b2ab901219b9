"""Message history routes."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.concurrency import run_in_threadpool

from . import schemas
from .config import HISTORY_LIMIT, MAX_QUERY_LIMIT, SEARCH_LIMIT
from .deps import get_store
from .errors import PersistenceError
from .logging_config import configure_logging
from .store import MessageStore

router = APIRouter(prefix="/messages", tags=["messages"])
logger = configure_logging()


@router.get("/history", response_model=List[schemas.MessageRecord])
async def get_history(
    limit: int = Query(HISTORY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    store: MessageStore = Depends(get_store),
):
    try:
        return await run_in_threadpool(store.recent_history, limit)
    except PersistenceError as exc:
        logger.error("HISTORY_FAIL limit=%s error=%s", limit, exc)
        raise HTTPException(status_code=503, detail="Message store unavailable")


@router.get("/search", response_model=List[schemas.MessageRecord])
async def search_messages(
    q: str = Query(..., min_length=1),
    limit: int = Query(SEARCH_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    store: MessageStore = Depends(get_store),
):
    try:
        return await run_in_threadpool(store.search, q, limit)
    except PersistenceError as exc:
        logger.error("SEARCH_FAIL keyword=%r error=%s", q, exc)
        raise HTTPException(status_code=503, detail="Message store unavailable")
