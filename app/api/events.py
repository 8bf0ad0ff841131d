"""
Site event ingestion — receives telemetry from the on-site tracking snippet.

POST /api/event
  {type, user_session, url, referer, duration_ms, data}

  - type is required ("pageview", "time_on_site", anything else is kept as-is)
  - pageview events also land in the pageviews table
  - data is stored as JSON text, capped at 2000 chars
  - Public and write-only; nothing is read back
"""

import json

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.database import get_db
from app.models.tables import Event, PageView

import structlog

logger = structlog.get_logger()
router = APIRouter(prefix="/api", tags=["events"])

MAX_DATA_CHARS = 2000


class EventPayload(BaseModel):
    type: str | None = None
    user_session: str | None = None
    url: str | None = None
    referer: str | None = None
    duration_ms: int | None = None
    data: dict | list | str | int | float | bool | None = None


@router.post("/event")
async def ingest_event(
    payload: EventPayload,
    db: AsyncSession = Depends(get_db),
):
    if not payload.type:
        return JSONResponse(status_code=400, content={"ok": False, "error": "missing type"})

    data = json.dumps(payload.data)[:MAX_DATA_CHARS] if payload.data else None

    db.add(Event(
        type=payload.type,
        session_token=payload.user_session,
        url=payload.url,
        referer=payload.referer,
        duration_ms=payload.duration_ms,
        data=data,
    ))
    if payload.type == "pageview":
        db.add(PageView(
            session_token=payload.user_session,
            url=payload.url,
            referer=payload.referer,
        ))
    await db.commit()

    logger.info("event_ingested", type=payload.type, session=payload.user_session)
    return {"ok": True}
