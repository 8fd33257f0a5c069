"""Catalog service.

Builds the catalog read queries against the hosted backend and applies the
degradation policy: the enriched (category-joined) query is tried first,
then a plain query, then an empty result. Reads never raise to the caller.
"""

from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import ValidationError

from storefront.domain.exceptions import ProductNotFoundError
from storefront.domain.models import Category, FilterState, Product
from storefront.infrastructure.backend_client import BackendClient, BackendResponse

logger = structlog.get_logger()

PRODUCTS_TABLE = "products"
CATEGORIES_TABLE = "categories"

# Inner join: rows without a matching category are excluded, and the
# category slug filter can only be expressed through it.
ENRICHED_SELECT = "*, categories!inner(name, slug)"
DETAIL_SELECT = "*, categories(name, slug)"


class CatalogSource:
    """Which query produced a catalog result."""

    ENRICHED = "enriched"
    FALLBACK = "fallback"
    NONE = "none"


@dataclass
class CatalogResult:
    """Products returned by a catalog read.

    Attributes:
        products: Rows, newest first for listing queries.
        source: Query that produced the rows.
        degraded: True when the primary query failed and filters may have
            been dropped.
        dropped_filters: Names of the active filters the fallback ignored.
    """

    products: list[Product] = field(default_factory=list)
    source: str = CatalogSource.ENRICHED
    degraded: bool = False
    dropped_filters: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.products)


class CatalogService:
    """Read-only catalog queries.

    Example usage:
        service = CatalogService(backend)
        result = await service.fetch_products(FilterState.create("mouse"))
    """

    def __init__(self, backend: BackendClient, featured_fallback_limit: int = 8) -> None:
        """Initialize catalog service.

        Args:
            backend: Hosted backend client.
            featured_fallback_limit: Rows shown when the featured query fails.
        """
        self.backend = backend
        self.featured_fallback_limit = featured_fallback_limit

    # =========================================================================
    # Product listing
    # =========================================================================

    async def fetch_products(self, filters: FilterState) -> CatalogResult:
        """Fetch products matching a filter, newest first.

        Tries the category-joined query with the filters applied. If that
        fails, falls back to an unjoined query without any filters; if that
        fails too, returns an empty result.

        Args:
            filters: Search term and category slug.

        Returns:
            Catalog result; ``degraded`` is set when the fallback ran.
        """
        query = (
            self.backend.table(PRODUCTS_TABLE)
            .select(ENRICHED_SELECT)
            .order("created_at", ascending=False)
        )
        if filters.has_category:
            query = query.eq("categories.slug", filters.category)
        if filters.has_search:
            query = query.ilike("name", f"%{filters.search}%")

        logger.debug(
            "Fetching products",
            search=filters.search,
            category=filters.category,
        )
        products = self._parse_products(await query.execute(), query="enriched")
        if products is not None:
            logger.info(
                "Products loaded",
                count=len(products),
                search=filters.search,
                category=filters.category,
            )
            return CatalogResult(products=products)

        dropped = _active_filter_names(filters)
        logger.warning("Retrying products with simple query", dropped_filters=dropped)

        fallback = (
            self.backend.table(PRODUCTS_TABLE)
            .select("*")
            .order("created_at", ascending=False)
        )
        products = self._parse_products(await fallback.execute(), query="fallback")
        if products is None:
            return CatalogResult(
                source=CatalogSource.NONE,
                degraded=True,
                dropped_filters=dropped,
            )

        logger.info("Products loaded via simple query", count=len(products))
        return CatalogResult(
            products=products,
            source=CatalogSource.FALLBACK,
            degraded=True,
            dropped_filters=dropped,
        )

    async def fetch_featured(self) -> CatalogResult:
        """Fetch featured products, or any few products if that fails."""
        query = self.backend.table(PRODUCTS_TABLE).select("*").eq("is_featured", True)
        products = self._parse_products(await query.execute(), query="featured")
        if products is not None:
            logger.info("Featured products loaded", count=len(products))
            return CatalogResult(products=products)

        fallback = (
            self.backend.table(PRODUCTS_TABLE)
            .select("*")
            .limit(self.featured_fallback_limit)
        )
        products = self._parse_products(await fallback.execute(), query="featured_fallback")
        if products is None:
            return CatalogResult(source=CatalogSource.NONE, degraded=True)
        return CatalogResult(
            products=products,
            source=CatalogSource.FALLBACK,
            degraded=True,
        )

    async def fetch_product(self, product_id: str) -> Product:
        """Fetch one product with its category when available.

        Raises:
            ProductNotFoundError: If neither query returns the product.
        """
        query = (
            self.backend.table(PRODUCTS_TABLE)
            .select(DETAIL_SELECT)
            .eq("id", product_id)
            .limit(1)
        )
        products = self._parse_products(await query.execute(), query="detail")
        if products is None:
            fallback = (
                self.backend.table(PRODUCTS_TABLE)
                .select("*")
                .eq("id", product_id)
                .limit(1)
            )
            products = self._parse_products(
                await fallback.execute(), query="detail_fallback"
            )

        if not products:
            raise ProductNotFoundError(product_id)
        return products[0]

    # =========================================================================
    # Categories
    # =========================================================================

    async def fetch_categories(self) -> list[Category]:
        """Fetch all categories ordered by name; empty on failure."""
        response = await (
            self.backend.table(CATEGORIES_TABLE)
            .select("*")
            .order("name", ascending=True)
            .execute()
        )
        if not response.success:
            logger.error(
                "Categories error",
                error_code=response.error.error_code if response.error else None,
                message=response.error.message if response.error else None,
            )
            return []

        try:
            return [Category.model_validate(row) for row in response.data or []]
        except ValidationError as e:
            logger.error("Malformed category rows", error=str(e))
            return []

    # =========================================================================
    # Helpers
    # =========================================================================

    def _parse_products(
        self, response: BackendResponse, query: str
    ) -> list[Product] | None:
        """Validate product rows; None marks a failed query."""
        if not response.success:
            error = response.error
            logger.error(
                "Products query failed",
                query=query,
                error_code=error.error_code if error else None,
                message=error.message if error else None,
                status_code=error.status_code if error else None,
            )
            return None

        rows: list[dict[str, Any]] = response.data or []
        try:
            return [Product.model_validate(row) for row in rows]
        except ValidationError as e:
            logger.error("Malformed product rows", query=query, error=str(e))
            return None


def _active_filter_names(filters: FilterState) -> list[str]:
    names = []
    if filters.has_category:
        names.append("category")
    if filters.has_search:
        names.append("search")
    return names
