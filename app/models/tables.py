"""
Database models — the "truth layer."

Design principles:
  - Links are immutable once created (no update path; recreate instead)
  - Clicks, events and pageviews are append-only
  - clicks.slug is not a foreign key: a click outlives its link
  - scope is the tenant key ("" = the single global tenant)
"""

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# Entity tables
# ---------------------------------------------------------------------------

class Link(Base):
    __tablename__ = "links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    scope = Column(String(100), nullable=False, default="", server_default="")
    slug = Column(String(200), nullable=False)

    # Where the click goes
    target = Column(Text, nullable=False)

    partner = Column(String(255), nullable=True)
    campaign = Column(String(255), nullable=True)

    # Assumptions — NULL means "use the process default at read time"
    conversion_rate = Column(Float, nullable=True)
    average_order_value = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("scope", "slug", name="uq_links_scope_slug"),
    )


# ---------------------------------------------------------------------------
# Event tables (append-only)
# ---------------------------------------------------------------------------

class Click(Base):
    """One row per resolved /r/:slug request. Never updated."""
    __tablename__ = "clicks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    click_id = Column(String(32), nullable=False, unique=True, index=True)
    scope = Column(String(100), nullable=False, default="", server_default="")
    slug = Column(String(200), nullable=False)

    ip_hash = Column(String(64), nullable=True)              # salted, rotates daily — never the raw IP
    user_agent = Column(Text, nullable=True)
    referer = Column(Text, nullable=True)

    utm_source = Column(String(255), nullable=True)
    utm_medium = Column(String(255), nullable=True)
    utm_campaign = Column(String(255), nullable=True)

    session_token = Column(String(64), nullable=True)        # visitor cookie

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_clicks_scope_slug", "scope", "slug"),
    )


class Event(Base):
    """Site telemetry posted by the tracking snippet (/api/event)."""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String(50), nullable=False, index=True)
    session_token = Column(String(64), nullable=True)
    url = Column(Text, nullable=True)
    referer = Column(Text, nullable=True)
    duration_ms = Column(Integer, nullable=True)
    data = Column(Text, nullable=True)                       # JSON, truncated
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class PageView(Base):
    __tablename__ = "pageviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_token = Column(String(64), nullable=True)
    url = Column(Text, nullable=True)
    referer = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
