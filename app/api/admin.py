"""
Admin API — dashboard, estimates and exports. All behind HTTP Basic.

GET /admin                         HTML dashboard
GET /admin/estimates               estimate rows as JSON (?slug= ?partner= ?campaign=)
GET /admin/export/clicks.csv       every click, newest first
GET /admin/export/events.csv       every site event, newest first
GET /admin/export/estimates.csv    estimate rows
"""

import csv
import io

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.templates import esc, money, page, percent
from app.config import Settings, get_settings
from app.core.attribution import estimate, latest_clicks, latest_events, summary
from app.middleware.auth import AdminContext, require_admin
from app.models.database import get_db

router = APIRouter(prefix="/admin", tags=["admin"])

CLICK_COLUMNS = (
    "id", "click_id", "slug", "created_at", "ip_hash", "user_agent", "referer",
    "utm_source", "utm_medium", "utm_campaign", "session_token",
)
EVENT_COLUMNS = (
    "id", "type", "created_at", "session_token", "url", "referer", "duration_ms", "data",
)
ESTIMATE_COLUMNS = (
    "slug", "partner", "campaign", "clicks", "conversion_rate",
    "average_order_value", "estimated_sales", "estimated_revenue",
)


def to_csv(columns, rows: list[dict]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(columns)
    for row in rows:
        writer.writerow(["" if row.get(col) is None else row[col] for col in columns])
    return buf.getvalue()


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _row(obj, columns) -> dict:
    return {col: getattr(obj, col) for col in columns}


@router.get("", response_class=HTMLResponse)
async def dashboard(
    admin: AdminContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    totals = await summary(db)
    estimates = await estimate(db, settings.attribution_defaults(), scope="")
    clicks = await latest_clicks(db, limit=25)
    events = await latest_events(db, limit=25)

    avg = f"{round(totals.avg_time_on_site_ms / 100) / 10}s" if totals.avg_time_on_site_ms else "—"

    estimate_rows = "".join(
        f"""<tr><td><code>{esc(r.slug)}</code></td><td>{esc(r.partner)}</td><td>{esc(r.campaign)}</td>
        <td>{r.clicks}</td><td>{percent(r.conversion_rate)}</td><td>{money(r.average_order_value)}</td>
        <td>{r.estimated_sales:.2f}</td><td>{money(r.estimated_revenue)}</td></tr>"""
        for r in estimates
    )
    click_rows = "".join(
        f"""<tr><td>{esc(c.slug)}</td><td><code>{esc(c.click_id)}</code></td><td>{esc(c.created_at)}</td>
        <td>{esc(c.utm_source)}</td><td>{esc(c.utm_medium)}</td><td>{esc(c.utm_campaign)}</td></tr>"""
        for c in clicks
    )
    event_rows = "".join(
        f"""<tr><td>{esc(e.type)}</td><td>{esc(e.created_at)}</td><td>{esc(e.duration_ms)}</td>
        <td>{esc((e.url or "")[:60])}</td></tr>"""
        for e in events
    )

    body = f"""
  <div class="card"><h1>Admin Dashboard</h1></div>
  <div class="card">
    <h2>Summary</h2>
    <table>
      <tr><td>Total Views</td><td>{totals.views}</td></tr>
      <tr><td>Total Clicks</td><td>{totals.clicks}</td></tr>
      <tr><td>Avg Time on Site</td><td>{avg}</td></tr>
    </table>
  </div>
  <div class="card">
    <h2>Per Link — Estimated Sales &amp; Revenue</h2>
    <table>
      <thead><tr><th>Slug</th><th>Partner</th><th>Campaign</th><th>Clicks</th><th>Conversion Rate</th>
        <th>Average Order Value</th><th>Estimated Sales</th><th>Estimated Revenue</th></tr></thead>
      <tbody>{estimate_rows}</tbody>
    </table>
  </div>
  <div class="grid">
    <div class="card">
      <h2>Latest clicks</h2>
      <table>
        <thead><tr><th>Slug</th><th>Click</th><th>Time</th><th>Source</th><th>Medium</th><th>Campaign</th></tr></thead>
        <tbody>{click_rows}</tbody>
      </table>
    </div>
    <div class="card">
      <h2>Latest events</h2>
      <table>
        <thead><tr><th>Type</th><th>Time</th><th>Duration (ms)</th><th>URL</th></tr></thead>
        <tbody>{event_rows}</tbody>
      </table>
    </div>
  </div>
  <div class="card">
    <h2>Download spreadsheets</h2>
    <a class="btn" href="/admin/export/clicks.csv">Clicks</a>
    <a class="btn" href="/admin/export/events.csv">Events</a>
    <a class="btn" href="/admin/export/estimates.csv">Estimates</a>
  </div>"""
    return HTMLResponse(page(settings.site_name, body))


@router.get("/estimates")
async def estimates_json(
    slug: str | None = None,
    partner: str | None = None,
    campaign: str | None = None,
    admin: AdminContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    rows = await estimate(
        db, settings.attribution_defaults(),
        slug=slug, partner=partner, campaign=campaign, scope="",
    )
    return [row.as_dict() for row in rows]


@router.get("/export/{name}.csv")
async def export_csv(
    name: str,
    admin: AdminContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if name == "clicks":
        clicks = await latest_clicks(db, limit=None)
        content = to_csv(CLICK_COLUMNS, [_row(c, CLICK_COLUMNS) for c in clicks])
    elif name == "events":
        events = await latest_events(db, limit=None)
        content = to_csv(EVENT_COLUMNS, [_row(e, EVENT_COLUMNS) for e in events])
    elif name == "estimates":
        rows = await estimate(db, settings.attribution_defaults(), scope="")
        content = to_csv(ESTIMATE_COLUMNS, [row.as_dict() for row in rows])
    else:
        raise HTTPException(status_code=404, detail="Not found")

    return _csv_response(content, f"{name}.csv")
