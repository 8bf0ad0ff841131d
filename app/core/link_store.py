"""
Link persistence.

The unique constraint on links(scope, slug) is the only hard guard on slug
uniqueness: two writers racing on the same slug get one row and one
SlugConflict. The store stores exactly what it is given (no target rewriting).
"""

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import LinkNotFound, SlugConflict
from app.models.tables import Link

import structlog

logger = structlog.get_logger()


@dataclass
class LinkRecord:
    slug: str
    target: str
    partner: str | None = None
    campaign: str | None = None
    conversion_rate: float | None = None
    average_order_value: float | None = None
    scope: str = ""


async def create_link(db: AsyncSession, record: LinkRecord) -> Link:
    link = Link(
        scope=record.scope,
        slug=record.slug,
        target=record.target,
        partner=record.partner,
        campaign=record.campaign,
        conversion_rate=record.conversion_rate,
        average_order_value=record.average_order_value,
    )
    db.add(link)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("slug_conflict", slug=record.slug, scope=record.scope)
        raise SlugConflict(record.slug)
    await db.refresh(link)
    return link


async def get_link_by_slug(db: AsyncSession, slug: str, scope: str = "") -> Link | None:
    stmt = select(Link).where(Link.scope == scope, Link.slug == slug)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def require_link(db: AsyncSession, slug: str, scope: str = "") -> Link:
    link = await get_link_by_slug(db, slug, scope)
    if link is None:
        raise LinkNotFound(slug)
    return link


async def slug_exists(db: AsyncSession, slug: str, scope: str = "") -> bool:
    stmt = select(Link.id).where(Link.scope == scope, Link.slug == slug).limit(1)
    result = await db.execute(stmt)
    return result.first() is not None


async def list_recent(db: AsyncSession, limit: int = 20, scope: str = "") -> list[Link]:
    """Most recently created first."""
    stmt = (
        select(Link)
        .where(Link.scope == scope)
        .order_by(Link.id.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
