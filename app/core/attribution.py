"""
Attribution estimates — read-side only, recomputed on every call.

Per link:
  clicks             = count of clicks with the link's (scope, slug)
  estimated_sales    = clicks × conversion_rate
  estimated_revenue  = estimated_sales × average_order_value

A link without its own assumptions uses the defaults passed in. Nothing
here is persisted. The numbers are heuristics, not attributed sales.
"""

from dataclasses import dataclass

from sqlalchemy import Float, and_, func, literal, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.numeric import AttributionDefaults
from app.models.tables import Click, Event, Link, PageView


@dataclass(frozen=True)
class EstimateRow:
    slug: str
    partner: str | None
    campaign: str | None
    clicks: int
    conversion_rate: float
    average_order_value: float
    estimated_sales: float
    estimated_revenue: float

    def as_dict(self) -> dict:
        """Row shape consumed by the JSON, HTML and CSV surfaces."""
        return {
            "slug": self.slug,
            "partner": self.partner,
            "campaign": self.campaign,
            "clicks": self.clicks,
            "conversion_rate": self.conversion_rate,
            "average_order_value": self.average_order_value,
            "estimated_sales": round(self.estimated_sales, 2),
            "estimated_revenue": round(self.estimated_revenue, 2),
        }


@dataclass(frozen=True)
class Summary:
    clicks: int
    views: int
    avg_time_on_site_ms: float | None


async def estimate(
    db: AsyncSession,
    defaults: AttributionDefaults,
    slug: str | None = None,
    partner: str | None = None,
    campaign: str | None = None,
    scope: str | None = None,
) -> list[EstimateRow]:
    """Estimates for every matching link, most clicked first."""
    clicks = func.count(Click.id)
    conversion_rate = func.coalesce(Link.conversion_rate, literal(defaults.conversion_rate, Float))
    average_order_value = func.coalesce(
        Link.average_order_value, literal(defaults.average_order_value, Float)
    )

    stmt = (
        select(
            Link.slug,
            Link.partner,
            Link.campaign,
            clicks.label("clicks"),
            conversion_rate.label("conversion_rate"),
            average_order_value.label("average_order_value"),
        )
        .select_from(Link)
        .outerjoin(Click, and_(Click.scope == Link.scope, Click.slug == Link.slug))
        .group_by(
            Link.id, Link.slug, Link.partner, Link.campaign,
            Link.conversion_rate, Link.average_order_value,
        )
        .order_by(clicks.desc(), Link.slug)
    )

    if scope is not None:
        stmt = stmt.where(Link.scope == scope)
    if slug:
        stmt = stmt.where(Link.slug == slug)
    if partner:
        stmt = stmt.where(Link.partner == partner)
    if campaign:
        stmt = stmt.where(Link.campaign == campaign)

    result = await db.execute(stmt)

    rows = []
    for row in result.all():
        sales = row.clicks * row.conversion_rate
        rows.append(EstimateRow(
            slug=row.slug,
            partner=row.partner,
            campaign=row.campaign,
            clicks=row.clicks,
            conversion_rate=row.conversion_rate,
            average_order_value=row.average_order_value,
            estimated_sales=sales,
            estimated_revenue=sales * row.average_order_value,
        ))
    return rows


async def summary(db: AsyncSession) -> Summary:
    """Site-wide totals for the dashboard header."""
    result = await db.execute(
        select(
            select(func.count(Click.id)).scalar_subquery().label("clicks"),
            select(func.count(PageView.id)).scalar_subquery().label("views"),
            select(func.avg(Event.duration_ms))
            .where(Event.type == "time_on_site")
            .scalar_subquery()
            .label("avg_ms"),
        )
    )
    row = result.one()
    return Summary(
        clicks=row.clicks or 0,
        views=row.views or 0,
        avg_time_on_site_ms=float(row.avg_ms) if row.avg_ms is not None else None,
    )


async def latest_clicks(db: AsyncSession, limit: int | None = 25) -> list[Click]:
    stmt = select(Click).order_by(Click.id.desc())
    if limit:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def latest_events(db: AsyncSession, limit: int | None = 25) -> list[Event]:
    stmt = select(Event).order_by(Event.id.desc())
    if limit:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())
