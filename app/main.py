"""
Clicktrail — short links, click logging and revenue estimates.
Main application entry point.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.redirect import router as redirect_router
from app.api.links import router as links_router
from app.api.events import router as events_router
from app.api.admin import router as admin_router
from app.api.pages import router as pages_router
from app.middleware.security import SecurityHeadersMiddleware
from app.middleware.session import SessionCookieMiddleware
from app.models.database import create_tables, dispose_engine
from app.config import get_settings

import structlog

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.dev.ConsoleRenderer() if get_settings().debug else structlog.processors.JSONRenderer(),
    ],
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info("clicktrail_starting", base_url=settings.base_url,
                default_cr=settings.default_conversion_rate,
                default_aov=settings.default_average_order_value)
    if settings.auto_create_tables:
        await create_tables()
    yield
    await dispose_engine()
    logger.info("clicktrail_shutting_down")


app = FastAPI(
    title="Clicktrail",
    description="Short redirect links with click logging and revenue estimates.",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if get_settings().debug else None,
    redoc_url="/redoc" if get_settings().debug else None,
    openapi_url="/openapi.json" if get_settings().debug else None,
)

# Security headers on every response
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(SessionCookieMiddleware)

# --- Routes ---
app.include_router(redirect_router)
app.include_router(links_router)
app.include_router(events_router)
app.include_router(admin_router)
app.include_router(pages_router)


@app.get("/health")
async def health():
    return {"status": "ok", "service": "clicktrail", "version": "0.1.0"}
