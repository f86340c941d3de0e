"""Tests for the catalog loader state machine."""
import asyncio

import httpx
import pytest

from shopclone_server.catalog import LOAD_ERROR, SEED_ERROR, CatalogLoader
from shopclone_server.storefront_client import StorefrontClient


class TestLoad:
    @pytest.mark.asyncio
    async def test_initial_load_uses_empty_filters(self, client, backend):
        catalog = CatalogLoader(client)

        applied = await catalog.load()

        assert applied is True
        assert [p.title for p in catalog.products] == [
            "Wireless Headphones",
            "Camping Lantern",
            "Ceramic Mug",
        ]
        assert catalog.loading is False
        assert catalog.error is None
        request = backend.calls("GET", "/api/products")[0]
        assert "q" not in request.url.params
        assert "category" not in request.url.params

    @pytest.mark.asyncio
    async def test_query_change_refetches(self, client, backend):
        catalog = CatalogLoader(client)
        await catalog.load()

        await catalog.set_filters(query="mug")

        assert [p.title for p in catalog.products] == ["Ceramic Mug"]
        assert backend.calls("GET", "/api/products")[-1].url.params["q"] == "mug"

    @pytest.mark.asyncio
    async def test_category_change_refetches(self, client, backend):
        catalog = CatalogLoader(client)

        await catalog.set_filters(category="Outdoors")

        assert [p.title for p in catalog.products] == ["Camping Lantern"]
        assert backend.calls("GET", "/api/products")[-1].url.params["category"] == "Outdoors"

    @pytest.mark.asyncio
    async def test_unchanged_filters_do_not_refetch(self, client, backend):
        catalog = CatalogLoader(client)
        await catalog.set_filters(query="lantern")

        reloaded = await catalog.set_filters(query="lantern")

        assert reloaded is False
        assert len(backend.calls("GET", "/api/products")) == 1

    @pytest.mark.asyncio
    async def test_backend_list_is_used_verbatim(self, settings):
        # The backend ignores the filter here; the loader must not re-filter.
        def handler(request):
            return httpx.Response(200, json=[{"id": 1, "title": "Anything", "price": 1.0, "category": "Home"}])

        catalog = CatalogLoader(StorefrontClient(settings, transport=httpx.MockTransport(handler)))

        await catalog.set_filters(query="zzz", category="Electronics")

        assert [p.title for p in catalog.products] == ["Anything"]

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_list_and_sets_error(self, client, backend):
        catalog = CatalogLoader(client)
        await catalog.load()
        backend.fail_products = True

        applied = await catalog.set_filters(query="mug")

        assert applied is False
        assert catalog.error == LOAD_ERROR
        assert len(catalog.products) == 3
        assert catalog.loading is False

    @pytest.mark.asyncio
    async def test_unparseable_body_sets_error(self, settings):
        def handler(request):
            return httpx.Response(200, text="<html>not json</html>")

        catalog = CatalogLoader(StorefrontClient(settings, transport=httpx.MockTransport(handler)))

        await catalog.load()

        assert catalog.error == LOAD_ERROR
        assert catalog.products == ()

    @pytest.mark.asyncio
    async def test_next_successful_load_clears_error(self, client, backend):
        catalog = CatalogLoader(client)
        backend.fail_products = True
        await catalog.load()
        backend.fail_products = False

        await catalog.load()

        assert catalog.error is None
        assert len(catalog.products) == 3

    @pytest.mark.asyncio
    async def test_same_filters_retry_after_failure(self, client, backend):
        catalog = CatalogLoader(client)
        backend.fail_products = True
        await catalog.set_filters(query="mug")
        assert catalog.error == LOAD_ERROR
        backend.fail_products = False

        applied = await catalog.set_filters(query="mug")

        assert applied is True
        assert catalog.error is None
        assert [p.title for p in catalog.products] == ["Ceramic Mug"]
        assert len(backend.calls("GET", "/api/products")) == 2


class TestStaleResponses:
    @pytest.mark.asyncio
    async def test_superseded_response_is_discarded(self, settings):
        slow_release = asyncio.Event()

        async def handler(request):
            q = request.url.params.get("q", "")
            if q == "slow":
                await slow_release.wait()
                return httpx.Response(200, json=[{"id": 1, "title": "Stale", "price": 1.0, "category": "Home"}])
            return httpx.Response(200, json=[{"id": 2, "title": "Fresh", "price": 2.0, "category": "Home"}])

        catalog = CatalogLoader(StorefrontClient(settings, transport=httpx.MockTransport(handler)))

        slow = asyncio.create_task(catalog.set_filters(query="slow"))
        await asyncio.sleep(0.01)
        fast_applied = await catalog.set_filters(query="fast")
        slow_release.set()
        slow_applied = await slow

        assert fast_applied is True
        assert slow_applied is False
        assert [p.title for p in catalog.products] == ["Fresh"]
        assert catalog.query == "fast"
        assert catalog.loading is False

    @pytest.mark.asyncio
    async def test_loading_stays_set_until_latest_load_finishes(self, settings):
        release = asyncio.Event()

        async def handler(request):
            await release.wait()
            return httpx.Response(200, json=[])

        catalog = CatalogLoader(StorefrontClient(settings, transport=httpx.MockTransport(handler)))

        task = asyncio.create_task(catalog.load())
        await asyncio.sleep(0.01)
        assert catalog.loading is True

        release.set()
        await task
        assert catalog.loading is False


class TestSeed:
    @pytest.mark.asyncio
    async def test_empty_catalog_needs_seed(self, settings):
        from tests.conftest import FakeBackend

        backend = FakeBackend(products=[])
        catalog = CatalogLoader(StorefrontClient(settings, transport=httpx.MockTransport(backend.handler)))

        await catalog.load()

        assert catalog.needs_seed is True

        seeded = await catalog.seed()

        assert seeded is True
        assert catalog.needs_seed is False
        assert len(catalog.products) == 3
        assert len(backend.calls("POST", "/api/products/seed")) == 1

    @pytest.mark.asyncio
    async def test_errored_catalog_does_not_offer_seed(self, client, backend):
        backend.fail_products = True
        catalog = CatalogLoader(client)

        await catalog.load()

        assert catalog.needs_seed is False

    @pytest.mark.asyncio
    async def test_seed_failure_sets_error(self, settings):
        def handler(request):
            return httpx.Response(503, json={"detail": "maintenance"})

        catalog = CatalogLoader(StorefrontClient(settings, transport=httpx.MockTransport(handler)))

        seeded = await catalog.seed()

        assert seeded is False
        assert catalog.error == SEED_ERROR


class TestFind:
    @pytest.mark.asyncio
    async def test_find_by_id_or_title(self, client):
        catalog = CatalogLoader(client)
        await catalog.load()

        assert catalog.find("p2").title == "Camping Lantern"
        assert catalog.find("Ceramic Mug").id == "p3"
        assert catalog.find("nothing") is None
