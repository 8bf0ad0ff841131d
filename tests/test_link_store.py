"""Tests for link persistence and the link creation flow."""

import asyncio

import pytest

from app.config import Settings
from app.core.errors import LinkNotFound, SlugConflict, ValidationError
from app.core.link_service import LinkForm, create_tracked_link
from app.core.link_store import (
    LinkRecord,
    create_link,
    get_link_by_slug,
    list_recent,
    require_link,
    slug_exists,
)


def _settings(**overrides) -> Settings:
    return Settings(database_url="sqlite+aiosqlite://", **overrides)


class TestStore:
    def test_create_and_get(self, run_db):
        async def scenario(sessions):
            async with sessions() as db:
                await create_link(db, LinkRecord(slug="acme-fall", target="https://example.com"))
            async with sessions() as db:
                return await get_link_by_slug(db, "acme-fall")

        link = run_db(scenario)
        assert link.slug == "acme-fall"
        assert link.target == "https://example.com"
        assert link.created_at is not None

    def test_store_does_not_rewrite_target(self, run_db):
        async def scenario(sessions):
            async with sessions() as db:
                return await create_link(db, LinkRecord(slug="raw", target="example.com"))

        assert run_db(scenario).target == "example.com"

    def test_duplicate_slug_conflicts(self, run_db):
        async def scenario(sessions):
            async with sessions() as db:
                await create_link(db, LinkRecord(slug="dup", target="https://a.com"))
                with pytest.raises(SlugConflict):
                    await create_link(db, LinkRecord(slug="dup", target="https://b.com"))
                # session is usable after the conflict
                return await get_link_by_slug(db, "dup")

        assert run_db(scenario).target == "https://a.com"

    def test_concurrent_inserts_one_winner(self, run_db):
        async def insert(sessions, target):
            async with sessions() as db:
                return await create_link(db, LinkRecord(slug="race", target=target))

        async def scenario(sessions):
            results = await asyncio.gather(
                insert(sessions, "https://a.com"),
                insert(sessions, "https://b.com"),
                return_exceptions=True,
            )
            async with sessions() as db:
                stored = await list_recent(db, limit=10)
            return results, stored

        results, stored = run_db(scenario)
        assert sum(isinstance(r, SlugConflict) for r in results) == 1
        assert [link.slug for link in stored] == ["race"]

    def test_scope_isolates_slugs(self, run_db):
        async def scenario(sessions):
            async with sessions() as db:
                await create_link(db, LinkRecord(slug="shared", target="https://a.com", scope="t1"))
                await create_link(db, LinkRecord(slug="shared", target="https://b.com", scope="t2"))
                a = await get_link_by_slug(db, "shared", scope="t1")
                b = await get_link_by_slug(db, "shared", scope="t2")
                unscoped = await get_link_by_slug(db, "shared")
                return a, b, unscoped

        a, b, unscoped = run_db(scenario)
        assert a.target == "https://a.com"
        assert b.target == "https://b.com"
        assert unscoped is None

    def test_require_link_and_exists(self, run_db):
        async def scenario(sessions):
            async with sessions() as db:
                await create_link(db, LinkRecord(slug="here", target="https://a.com"))
                assert await slug_exists(db, "here")
                assert not await slug_exists(db, "gone")
                with pytest.raises(LinkNotFound):
                    await require_link(db, "gone")
                return await require_link(db, "here")

        assert run_db(scenario).slug == "here"

    def test_list_recent_newest_first(self, run_db):
        async def scenario(sessions):
            async with sessions() as db:
                for slug in ("one", "two", "three"):
                    await create_link(db, LinkRecord(slug=slug, target="https://a.com"))
                return await list_recent(db, limit=2)

        assert [link.slug for link in run_db(scenario)] == ["three", "two"]


class TestCreateTrackedLink:
    def test_end_to_end_fields(self, run_db):
        async def scenario(sessions):
            async with sessions() as db:
                return await create_tracked_link(db, _settings(), LinkForm(
                    target="example.com/page", partner="acme", campaign="fall", cr="1%", aov="$50",
                ))

        link = run_db(scenario)
        assert link.slug == "acme-fall"
        assert link.target == "https://example.com/page"
        assert link.partner == "acme"
        assert link.campaign == "fall"
        assert link.conversion_rate == pytest.approx(0.01)
        assert link.average_order_value == pytest.approx(50.0)

    def test_blank_assumptions_use_configured_defaults(self, run_db):
        settings = _settings(default_conversion_rate=0.02, default_average_order_value=30.0)

        async def scenario(sessions):
            async with sessions() as db:
                return await create_tracked_link(db, settings, LinkForm(target="a.com", cr="", aov="n/a"))

        link = run_db(scenario)
        assert link.conversion_rate == 0.02
        assert link.average_order_value == 30.0

    def test_repeated_labels_are_disambiguated(self, run_db):
        async def scenario(sessions):
            slugs = []
            for _ in range(3):
                async with sessions() as db:
                    link = await create_tracked_link(db, _settings(), LinkForm(
                        target="a.com", partner="Acme", campaign="Fall",
                    ))
                    slugs.append(link.slug)
            return slugs

        assert run_db(scenario) == ["acme-fall", "acme-fall-2", "acme-fall-3"]

    def test_concurrent_creation_never_duplicates(self, run_db):
        async def create(sessions):
            async with sessions() as db:
                link = await create_tracked_link(db, _settings(), LinkForm(
                    target="a.com", partner="acme", campaign="fall",
                ))
                return link.slug

        async def scenario(sessions):
            return await asyncio.gather(*(create(sessions) for _ in range(4)), return_exceptions=True)

        results = run_db(scenario)
        slugs = [r for r in results if isinstance(r, str)]
        conflicts = [r for r in results if isinstance(r, SlugConflict)]
        assert len(slugs) + len(conflicts) == 4
        assert slugs.count("acme-fall") == 1
        assert len(set(slugs)) == len(slugs)
        assert all(s.startswith("acme-fall") for s in slugs)

    def test_explicit_slug(self, run_db):
        async def scenario(sessions):
            async with sessions() as db:
                return await create_tracked_link(db, _settings(), LinkForm(
                    target="a.com", slug="My Promo", partner="acme", campaign="fall",
                ))

        assert run_db(scenario).slug == "my-promo"

    def test_explicit_slug_conflict_is_rejected(self, run_db):
        async def scenario(sessions):
            async with sessions() as db:
                await create_tracked_link(db, _settings(), LinkForm(target="a.com", slug="promo"))
                with pytest.raises(SlugConflict):
                    await create_tracked_link(db, _settings(), LinkForm(target="b.com", slug="promo"))
                return await get_link_by_slug(db, "promo")

        # the original is never overwritten
        assert run_db(scenario).target == "https://a.com"

    @pytest.mark.parametrize("form", [
        LinkForm(target=None),
        LinkForm(target="   "),
        LinkForm(target="not a url"),
        LinkForm(target="a.com", slug="!!!"),
    ])
    def test_validation_errors(self, run_db, form):
        async def scenario(sessions):
            async with sessions() as db:
                with pytest.raises(ValidationError):
                    await create_tracked_link(db, _settings(), form)
                return await list_recent(db)

        assert run_db(scenario) == []
