"""
Link creation flow — operator input to a stored link.

Flow:
  1. Normalize the target (prepend https://) and validate it
  2. Parse the conversion-rate / order-value assumptions (never fails)
  3. Explicit slug  → slugify, one insert; a taken slug is a conflict
     Derived slug   → partner/campaign → free candidate → insert,
                      re-deriving when a concurrent writer wins the race
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.core.destination import is_absolute_url, normalize_target
from app.core.errors import SlugConflict, ValidationError
from app.core.link_store import LinkRecord, create_link, slug_exists
from app.core.numeric import NumericNormalizer
from app.core.slugs import derive_slug, ensure_unique, slugify
from app.models.tables import Link

import structlog

logger = structlog.get_logger()


@dataclass
class LinkForm:
    target: str | None = None
    slug: str | None = None
    partner: str | None = None
    campaign: str | None = None
    cr: str | float | None = None
    aov: str | float | None = None


def _clean(value) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


async def create_tracked_link(
    db: AsyncSession,
    settings: Settings,
    form: LinkForm,
    scope: str = "",
) -> Link:
    target = normalize_target(form.target)
    if not target:
        raise ValidationError("target is required")
    if not is_absolute_url(target):
        raise ValidationError(f"target is not a valid URL: {target}")

    normalizer = NumericNormalizer(settings.attribution_defaults())
    partner = _clean(form.partner)
    campaign = _clean(form.campaign)

    record = LinkRecord(
        slug="",
        target=target,
        partner=partner,
        campaign=campaign,
        conversion_rate=normalizer.conversion_rate(form.cr),
        average_order_value=normalizer.money(form.aov),
        scope=scope,
    )

    explicit = _clean(form.slug)
    if explicit is not None:
        record.slug = slugify(explicit)
        if not record.slug:
            raise ValidationError(f"slug is not usable: {explicit}")
        link = await create_link(db, record)
        logger.info("link_created", slug=link.slug, target=link.target, explicit_slug=True)
        return link

    base = derive_slug(partner, campaign)

    async def exists(candidate: str) -> bool:
        return await slug_exists(db, candidate, scope)

    for attempt in range(1, settings.slug_create_attempts + 1):
        record.slug = await ensure_unique(base, exists, settings.slug_max_attempts)
        try:
            link = await create_link(db, record)
        except SlugConflict:
            logger.warning("slug_race_lost", slug=record.slug, attempt=attempt)
            continue
        logger.info("link_created", slug=link.slug, target=link.target, partner=partner,
                    campaign=campaign)
        return link

    raise SlugConflict(record.slug)
