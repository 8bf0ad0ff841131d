"""
Link management — create and list tracked short links.

POST /admin/links accepts the landing-page form (urlencoded) or JSON:
  target (required), slug, partner, campaign, cr, aov

  form → 302 to the confirmation banner on /
  JSON → 201 with the stored link

Errors: bad target / unusable slug / slug conflict → 400.
"""

import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.core.errors import SlugConflict, ValidationError
from app.core.link_service import LinkForm, create_tracked_link
from app.core.link_store import list_recent
from app.middleware.auth import AdminContext, require_admin
from app.models.database import get_db

router = APIRouter(prefix="/admin/links", tags=["links"])

FORM_FIELDS = ("target", "slug", "partner", "campaign", "cr", "aov")


class LinkResponse(BaseModel):
    slug: str
    short_url: str
    target: str
    partner: str | None
    campaign: str | None
    conversion_rate: float | None
    average_order_value: float | None
    created_at: datetime.datetime | None


def _to_response(link, settings: Settings) -> LinkResponse:
    return LinkResponse(
        slug=link.slug,
        short_url=f"{settings.base_url}/r/{link.slug}",
        target=link.target,
        partner=link.partner,
        campaign=link.campaign,
        conversion_rate=link.conversion_rate,
        average_order_value=link.average_order_value,
        created_at=link.created_at,
    )


async def _read_form(request: Request) -> tuple[LinkForm, bool]:
    """Returns (form, is_json)."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Expected a JSON object")
        return LinkForm(**{k: body.get(k) for k in FORM_FIELDS}), True

    form = await request.form()
    return LinkForm(**{k: form.get(k) for k in FORM_FIELDS}), False


@router.post("")
async def create_link_endpoint(
    request: Request,
    admin: AdminContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    form, is_json = await _read_form(request)

    try:
        link = await create_tracked_link(db, settings, form)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SlugConflict as exc:
        raise HTTPException(status_code=400, detail=f"Error creating link: {exc}")

    if is_json:
        return JSONResponse(status_code=201, content=_to_response(link, settings).model_dump(mode="json"))
    return RedirectResponse(url=f"/?created={link.slug}", status_code=302)


@router.get("", response_model=list[LinkResponse])
async def list_links(
    limit: int = Query(20, ge=1, le=500),
    admin: AdminContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Most recent links first."""
    links = await list_recent(db, limit=limit)
    return [_to_response(link, settings) for link in links]
