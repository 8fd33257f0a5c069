"""Tests for catalog queries and their fallbacks."""

import pytest

from storefront.application.catalog_service import (
    ENRICHED_SELECT,
    CatalogService,
    CatalogSource,
)
from storefront.domain.exceptions import ProductNotFoundError
from storefront.domain.models import FilterState
from storefront.infrastructure.backend_client import BackendClient
from tests.conftest import (
    BackendStub,
    make_error_response,
    make_success_response,
    product_row,
)

PRODUCTS = "/rest/v1/products"
CATEGORIES = "/rest/v1/categories"

MONITORS = {"name": "Monitores", "slug": "monitores"}
PERIPHERALS = {"name": "Periféricos", "slug": "perifericos"}


@pytest.fixture
def service(backend: BackendClient) -> CatalogService:
    return CatalogService(backend, featured_fallback_limit=8)


def _params(call: dict) -> dict[str, str]:
    return dict(call["params"])


class TestFetchProducts:
    """Tests for CatalogService.fetch_products."""

    @pytest.mark.asyncio
    async def test_enriched_query_newest_first(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(PRODUCTS, make_success_response([]))

        await service.fetch_products(FilterState())

        params = _params(backend_stub.calls_to(PRODUCTS)[0])
        assert params["select"] == ENRICHED_SELECT.replace(" ", "")
        assert params["order"] == "created_at.desc"
        assert "categories.slug" not in params
        assert "name" not in params

    @pytest.mark.asyncio
    async def test_search_only_adds_name_filter(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        """search='mouse' with category 'all' filters on name only."""
        backend_stub.add(
            PRODUCTS,
            make_success_response(
                [product_row("p-1", "Mouse Gamer", category=PERIPHERALS)]
            ),
        )

        result = await service.fetch_products(FilterState.create("mouse", "all"))

        params = _params(backend_stub.calls_to(PRODUCTS)[0])
        assert params["name"] == "ilike.%mouse%"
        assert "categories.slug" not in params
        assert [p.name for p in result.products] == ["Mouse Gamer"]
        assert not result.degraded

    @pytest.mark.asyncio
    async def test_category_filter_uses_join(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(PRODUCTS, make_success_response([]))

        await service.fetch_products(FilterState.create(category="monitores"))

        params = _params(backend_stub.calls_to(PRODUCTS)[0])
        assert params["categories.slug"] == "eq.monitores"

    @pytest.mark.asyncio
    async def test_search_term_is_trimmed(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(PRODUCTS, make_success_response([]))

        await service.fetch_products(FilterState.create("  teclado "))

        assert _params(backend_stub.calls_to(PRODUCTS)[0])["name"] == "ilike.%teclado%"

    @pytest.mark.asyncio
    async def test_join_failure_falls_back_to_unfiltered_query(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        rows = [
            product_row("p-3", "Fonte ATX", created_at="2025-03-01T00:00:00+00:00"),
            product_row("p-2", "Mouse Gamer", created_at="2025-02-01T00:00:00+00:00"),
            product_row("p-1", "Monitor", created_at="2025-01-01T00:00:00+00:00"),
        ]
        backend_stub.add(PRODUCTS, make_error_response(), make_success_response(rows))

        result = await service.fetch_products(FilterState.create("mouse", "perifericos"))

        calls = backend_stub.calls_to(PRODUCTS)
        assert len(calls) == 2
        fallback = _params(calls[1])
        assert fallback == {"select": "*", "order": "created_at.desc"}

        assert [p.id for p in result.products] == ["p-3", "p-2", "p-1"]
        assert result.source == CatalogSource.FALLBACK
        assert result.degraded is True
        assert result.dropped_filters == ["category", "search"]

    @pytest.mark.asyncio
    async def test_both_queries_failing_returns_empty(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(
            PRODUCTS,
            make_error_response(),
            make_error_response("TIMEOUT", "Request timed out", 504),
        )

        result = await service.fetch_products(FilterState.create("mouse"))

        assert result.products == []
        assert result.source == CatalogSource.NONE
        assert result.degraded is True

    @pytest.mark.asyncio
    async def test_malformed_rows_trigger_fallback(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(
            PRODUCTS,
            make_success_response([{"unexpected": True}]),
            make_success_response([product_row("p-1", "Monitor")]),
        )

        result = await service.fetch_products(FilterState())

        assert [p.id for p in result.products] == ["p-1"]
        assert result.degraded is True
        assert result.dropped_filters == []


class TestFetchFeatured:
    """Tests for CatalogService.fetch_featured."""

    @pytest.mark.asyncio
    async def test_filters_on_featured_flag(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(
            PRODUCTS,
            make_success_response([product_row("p-1", "Monitor", is_featured=True)]),
        )

        result = await service.fetch_featured()

        assert _params(backend_stub.calls_to(PRODUCTS)[0])["is_featured"] == "eq.true"
        assert result.total == 1

    @pytest.mark.asyncio
    async def test_failure_falls_back_to_limited_list(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(
            PRODUCTS,
            make_error_response(),
            make_success_response([product_row("p-1", "Monitor")]),
        )

        result = await service.fetch_featured()

        assert _params(backend_stub.calls_to(PRODUCTS)[1])["limit"] == "8"
        assert result.source == CatalogSource.FALLBACK
        assert result.total == 1

    @pytest.mark.asyncio
    async def test_both_failing_returns_empty(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(PRODUCTS, make_error_response())

        result = await service.fetch_featured()

        assert result.products == []


class TestFetchProduct:
    """Tests for CatalogService.fetch_product."""

    @pytest.mark.asyncio
    async def test_returns_product_with_category(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(
            PRODUCTS,
            make_success_response([product_row("p-1", "Monitor", category=MONITORS)]),
        )

        product = await service.fetch_product("p-1")

        params = _params(backend_stub.calls_to(PRODUCTS)[0])
        assert params["id"] == "eq.p-1"
        assert product.category.name == "Monitores"

    @pytest.mark.asyncio
    async def test_join_failure_uses_plain_lookup(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(
            PRODUCTS,
            make_error_response(),
            make_success_response([product_row("p-1", "Monitor")]),
        )

        product = await service.fetch_product("p-1")

        assert product.id == "p-1"
        assert product.category is None

    @pytest.mark.asyncio
    async def test_missing_product_raises(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(PRODUCTS, make_success_response([]))

        with pytest.raises(ProductNotFoundError):
            await service.fetch_product("missing")


class TestFetchCategories:
    """Tests for CatalogService.fetch_categories."""

    @pytest.mark.asyncio
    async def test_ordered_by_name(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(
            CATEGORIES,
            make_success_response(
                [
                    {"id": "c-1", "name": "Gamer", "slug": "gamer"},
                    {"id": "c-2", "name": "Monitores", "slug": "monitores"},
                ]
            ),
        )

        categories = await service.fetch_categories()

        assert _params(backend_stub.calls_to(CATEGORIES)[0])["order"] == "name.asc"
        assert [c.slug for c in categories] == ["gamer", "monitores"]

    @pytest.mark.asyncio
    async def test_error_returns_empty(
        self, service: CatalogService, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(CATEGORIES, make_error_response())

        assert await service.fetch_categories() == []
