"""
Slug derivation — partner/campaign labels to a URL-safe path segment.

"Acme & Co" + "Fall Sale!" → "acme-and-co-fall-sale"

Uniqueness here is a best-effort pre-check against the store. The unique
constraint on links(scope, slug) is what actually guards against two writers
picking the same slug.
"""

import re
from typing import Awaitable, Callable

from app.core.identifiers import random_token

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

FALLBACK_PREFIX = "link"


def slugify(text: str | None) -> str:
    if not text:
        return ""
    text = str(text).lower().strip()
    text = text.replace("&", "and")
    text = _NON_ALNUM.sub("-", text)
    return text.strip("-")


def random_slug(size: int = 12) -> str:
    return f"{FALLBACK_PREFIX}-{random_token(size)}"


def derive_slug(partner: str | None = None, campaign: str | None = None) -> str:
    """Base slug from the labels, or a random fallback when they give nothing usable."""
    partner = (partner or "").strip()
    campaign = (campaign or "").strip()

    if partner and campaign:
        base = slugify(f"{partner}-{campaign}")
    else:
        base = slugify(partner or campaign)

    return base or random_slug(6)


async def ensure_unique(
    base: str,
    exists: Callable[[str], Awaitable[bool]],
    max_attempts: int = 10,
) -> str:
    """
    Return `base` if free, else the first free `base-2`, `base-3`, …

    After `max_attempts` taken candidates, give up on the readable form and
    return a fully random slug.
    """
    candidate = base
    for n in range(2, max_attempts + 2):
        if not await exists(candidate):
            return candidate
        candidate = f"{base}-{n}"
    return random_slug()
