"""
Landing page — GET /

Link creation form (posts to /admin/links) plus the most recent links with
the assumptions they'll be estimated with. ?created=<slug> shows the new
short URL.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.templates import esc, money, page, percent
from app.config import Settings, get_settings
from app.core.link_store import get_link_by_slug, list_recent
from app.models.database import get_db

router = APIRouter(tags=["pages"])


def _created_banner(link, settings: Settings) -> str:
    short_url = f"{settings.base_url}/r/{link.slug}"
    return f"""
  <div class="card">
    <h2>Link created</h2>
    <p><a href="/r/{esc(link.slug)}" target="_blank"><code>{esc(short_url)}</code></a>
       <span class="muted">→ {esc(link.target)}</span></p>
  </div>"""


@router.get("/", response_class=HTMLResponse)
async def landing(
    created: str | None = None,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    defaults = settings.attribution_defaults()
    links = await list_recent(db, limit=settings.recent_links_limit)

    banner = ""
    if created:
        link = await get_link_by_slug(db, created)
        if link is not None:
            banner = _created_banner(link, settings)

    rows = "".join(
        f"""<tr>
          <td><a href="/r/{esc(link.slug)}" target="_blank">/r/{esc(link.slug)}</a></td>
          <td class="muted">{esc(link.target)}</td>
          <td>{esc(link.partner)}</td>
          <td>{esc(link.campaign)}</td>
          <td>{percent(link.conversion_rate if link.conversion_rate is not None else defaults.conversion_rate)}</td>
          <td>{money(link.average_order_value if link.average_order_value is not None else defaults.average_order_value)}</td>
        </tr>"""
        for link in links
    )

    body = f"""
  <div class="card"><h1>{esc(settings.site_name)} — Tracking &amp; Estimation</h1></div>
  {banner}
  <div class="grid">
    <div class="card">
      <h2>Create a short link</h2>
      <form method="POST" action="/admin/links">
        <label>Target URL (where to redirect)</label>
        <input name="target" required style="width:100%" />
        <label>Partner</label>
        <input name="partner" style="width:100%" />
        <label>Campaign</label>
        <input name="campaign" style="width:100%" />
        <label>Assumed conversion rate</label>
        <input name="cr" inputmode="decimal" placeholder="1%" style="width:100%" />
        <label>Assumed average order value</label>
        <input name="aov" inputmode="decimal" placeholder="$45" style="width:100%" />
        <p><button class="btn" type="submit">Create link</button></p>
      </form>
    </div>
    <div class="card">
      <h2>Recent links</h2>
      <table>
        <thead><tr><th>Slug</th><th>Target</th><th>Partner</th><th>Campaign</th>
          <th>Conversion Rate</th><th>Average Order Value</th></tr></thead>
        <tbody>{rows}</tbody>
      </table>
    </div>
  </div>"""
    return HTMLResponse(page(settings.site_name, body))
