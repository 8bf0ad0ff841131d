"""
Click recording — one append-only row per resolved redirect.

Privacy: the raw client IP never reaches the database. We store
sha256(ip + user_agent + UTC date [+ salt]), truncated to 32 hex chars,
so the same visitor is linkable within a day and not across days.

Failure policy: analytics never blocks the redirect. A failed insert is
rolled back and logged, and the caller still gets a click id to put on
the outgoing URL.
"""

import datetime
import hashlib
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import RecordingFailure
from app.core.identifiers import new_click_id
from app.models.tables import Click

import structlog

logger = structlog.get_logger()


@dataclass
class ClientMetadata:
    ip: str = ""
    user_agent: str = ""
    referer: str = ""
    utm: dict = field(default_factory=dict)
    session_token: str | None = None


def _utc_day(now: datetime.datetime | None = None) -> str:
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return now.strftime("%Y-%m-%d")


def fingerprint(ip: str, user_agent: str, day: str | None = None, salt: str = "") -> str:
    """Daily-rotating hash of ip + user agent."""
    day = day or _utc_day()
    raw = f"{ip or ''}{user_agent or ''}{day}{salt}"
    return hashlib.sha256(raw.encode()).hexdigest()[:32]


async def insert_click(db: AsyncSession, click: Click) -> None:
    db.add(click)
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise RecordingFailure(str(exc)) from exc


async def record_click(
    db: AsyncSession,
    slug: str,
    client: ClientMetadata,
    scope: str = "",
    salt: str = "",
) -> str:
    """Append a click for `slug` and return its click id."""
    click_id = new_click_id()
    click = Click(
        click_id=click_id,
        scope=scope,
        slug=slug,
        ip_hash=fingerprint(client.ip, client.user_agent, salt=salt),
        user_agent=client.user_agent or "",
        referer=client.referer or "",
        utm_source=client.utm.get("utm_source"),
        utm_medium=client.utm.get("utm_medium"),
        utm_campaign=client.utm.get("utm_campaign"),
        session_token=client.session_token,
    )

    try:
        await insert_click(db, click)
    except RecordingFailure as exc:
        logger.error("click_record_failed", slug=slug, click_id=click_id, error=str(exc))
        return click_id

    logger.info("click_recorded", slug=slug, click_id=click_id)
    return click_id
