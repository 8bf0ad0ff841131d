"""
Redirect endpoint — /r/{slug}

Flow:
  1. Look up link (unknown slug → 404, nothing recorded)
  2. Mint click id + record the click (failure is logged, never blocks)
  3. Build destination: target + click id + inbound UTM tags
  4. 302

Every call records a new click. There is no dedupe: a refresh is a click.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.core.click_recorder import ClientMetadata, record_click
from app.core.destination import build_redirect_url, extract_utm_params, is_absolute_url
from app.core.errors import LinkNotFound
from app.core.link_store import require_link
from app.middleware.session import get_session_token
from app.models.database import get_db

import structlog

logger = structlog.get_logger()
router = APIRouter()

_PRIVATE_PREFIXES = (
    "10.", "172.16.", "172.17.", "172.18.", "172.19.",
    "172.20.", "172.21.", "172.22.", "172.23.", "172.24.",
    "172.25.", "172.26.", "172.27.", "172.28.", "172.29.",
    "172.30.", "172.31.", "192.168.", "127.", "::1",
)


def _get_real_ip(request: Request) -> str:
    """Extract real client IP from x-forwarded-for or request."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        # First public IP in chain is the client
        ips = [ip.strip() for ip in forwarded.split(",") if ip.strip()]
        for ip in ips:
            if not ip.startswith(_PRIVATE_PREFIXES):
                return ip
        if ips:
            return ips[0]
    return request.client.host if request.client else ""


def client_metadata(request: Request) -> ClientMetadata:
    return ClientMetadata(
        ip=_get_real_ip(request),
        user_agent=request.headers.get("user-agent", ""),
        referer=request.headers.get("referer", ""),
        utm=extract_utm_params(request.query_params),
        session_token=get_session_token(request),
    )


@router.get("/r/{slug}")
async def redirect_slug(
    slug: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        link = await require_link(db, slug)
    except LinkNotFound:
        raise HTTPException(status_code=404, detail="Not found")

    client = client_metadata(request)
    click_id = await record_click(db, link.slug, client, scope=link.scope,
                                  salt=settings.fingerprint_salt)

    if not is_absolute_url(link.target):
        logger.warning("redirect_target_malformed", slug=link.slug, target=link.target)

    final_url = build_redirect_url(link.target, click_id, client.utm, settings.click_param)
    return RedirectResponse(url=final_url, status_code=302)
