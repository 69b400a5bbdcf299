from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from taskmanager.domain.log_models import HistoryItem
from taskmanager.services.log_service import LogService

router = APIRouter(prefix="/api/history", tags=["history"])


def get_service() -> LogService:
    # Overwritten in main.py
    raise RuntimeError("LogService not wired")


@router.get("", response_model=list[HistoryItem])
async def get_history(limit: Optional[int] = Query(default=None, ge=1, le=5000)):
    return await get_service().history(limit)


@router.delete("")
async def clear_history():
    removed = await get_service().clear()
    return {"removed": removed}
