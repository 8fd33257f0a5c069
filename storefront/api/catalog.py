"""Catalog endpoints.

Product listing and search, the featured carousel, categories, the
product detail view and its image zoom, and the home page composition.
"""

import asyncio
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import (
    get_catalog_service,
    get_contact_dispatcher,
    get_session_provider,
    get_viewer_profile,
)
from storefront.api.schemas import (
    CategoryListResponse,
    ErrorResponse,
    ProductCardSchema,
    ProductDetailResponse,
    ProductListResponse,
    StorefrontResponse,
    ZoomAction,
    ZoomRequest,
    ZoomStateResponse,
)
from storefront.application.catalog_browser import CatalogBrowser
from storefront.application.catalog_service import CatalogService
from storefront.application.contact_service import ContactDispatcher
from storefront.application.session_provider import SessionProvider
from storefront.domain.detail import ProductDetailModal
from storefront.domain.exceptions import ContactNotConfiguredError
from storefront.domain.models import ALL_CATEGORIES, FilterState, Profile
from storefront.infrastructure.config import settings

logger = structlog.get_logger()

router = APIRouter()

UNSPECIFIED_CATEGORY = "Não especificada"


def _grid_browser(catalog: CatalogService) -> CatalogBrowser:
    return CatalogBrowser(catalog.fetch_products, settings.grid_page_size, name="grid")


def _featured_browser(catalog: CatalogService) -> CatalogBrowser:
    async def load_featured(_filters):
        return await catalog.fetch_featured()

    return CatalogBrowser(load_featured, settings.featured_page_size, name="featured")


# ============================================================================
# Listings
# ============================================================================


@router.get(
    "/products",
    response_model=ProductListResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Catalog"],
)
async def list_products(
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
    profile: Annotated[Profile | None, Depends(get_viewer_profile)],
    search: Annotated[str | None, Query(max_length=200)] = None,
    category: Annotated[str, Query()] = ALL_CATEGORIES,
    page: Annotated[int, Query(ge=0)] = 0,
) -> ProductListResponse:
    """List products, newest first, in the dense grid view.

    Args:
        search: Case-insensitive substring of the product name.
        category: Category slug, or "all".
        page: Zero-based page index.

    Returns:
        One page of products priced for the viewer.

    Raises:
        PageOutOfRangeError: If the page does not exist.
    """
    browser = _grid_browser(catalog)
    try:
        await browser.set_filter(search=search, category=category)
        browser.jump_to(page)
        return ProductListResponse.from_browser(browser, profile)
    finally:
        browser.close()


@router.get(
    "/products/featured",
    response_model=ProductListResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Catalog"],
)
async def list_featured_products(
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
    profile: Annotated[Profile | None, Depends(get_viewer_profile)],
    page: Annotated[int, Query(ge=0)] = 0,
) -> ProductListResponse:
    """List featured products in the carousel's list view.

    Args:
        page: Zero-based page index.

    Returns:
        One carousel page priced for the viewer.
    """
    browser = _featured_browser(catalog)
    try:
        await browser.load()
        browser.jump_to(page)
        return ProductListResponse.from_browser(browser, profile)
    finally:
        browser.close()


@router.get("/categories", response_model=CategoryListResponse, tags=["Catalog"])
async def list_categories(
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
) -> CategoryListResponse:
    """List categories ordered by name."""
    categories = await catalog.fetch_categories()
    return CategoryListResponse(items=categories, total=len(categories))


@router.get("/storefront", response_model=StorefrontResponse, tags=["Catalog"])
async def storefront_home(
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
    profile: Annotated[Profile | None, Depends(get_viewer_profile)],
    search: Annotated[str | None, Query(max_length=200)] = None,
    category: Annotated[str, Query()] = ALL_CATEGORIES,
) -> StorefrontResponse:
    """Compose the home page.

    The product listing is only included when a search term or category
    is selected; the featured carousel and categories are always present.
    """
    featured = _featured_browser(catalog)
    grid = _grid_browser(catalog)
    try:
        grid.filters = FilterState.create(search, category)
        loads = [featured.load(), catalog.fetch_categories()]
        if grid.filters.is_active:
            loads.append(grid.load())
        results = await asyncio.gather(*loads)

        return StorefrontResponse(
            featured=ProductListResponse.from_browser(featured, profile),
            categories=results[1],
            products=(
                ProductListResponse.from_browser(grid, profile)
                if grid.filters.is_active
                else None
            ),
        )
    finally:
        featured.close()
        grid.close()


# ============================================================================
# Detail
# ============================================================================


@router.get(
    "/products/{product_id}",
    response_model=ProductDetailResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Catalog"],
)
async def get_product_detail(
    product_id: str,
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
    contacts: Annotated[ContactDispatcher, Depends(get_contact_dispatcher)],
    provider: Annotated[SessionProvider, Depends(get_session_provider)],
) -> ProductDetailResponse:
    """Get the product detail view.

    Raises:
        ProductNotFoundError: If the product does not exist.
    """
    modal = ProductDetailModal()
    modal.open(await catalog.fetch_product(product_id))
    product = modal.product

    try:
        contact_url = contacts.link_for(provider.sector, product).url
    except ContactNotConfiguredError:
        contact_url = None

    return ProductDetailResponse(
        product=ProductCardSchema.from_product(product, provider.profile),
        category_name=product.category.name if product.category else UNSPECIFIED_CATEGORY,
        contact_url=contact_url,
    )


@router.post(
    "/products/{product_id}/zoom",
    response_model=ZoomStateResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    tags=["Catalog"],
)
async def zoom_product_image(
    product_id: str,
    request: ZoomRequest,
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ZoomStateResponse:
    """Apply a zoom action to the product image overlay.

    The overlay state is held by the client and sent back with each action;
    ``open`` always starts at level 1.0 and zoom steps are clamped to
    [1.0, 3.0].
    """
    modal = ProductDetailModal()
    modal.open(await catalog.fetch_product(product_id))

    if request.action == ZoomAction.OPEN:
        modal.open_zoom()
    elif request.action == ZoomAction.CLOSE:
        modal.zoom.close()
    else:
        modal.restore_zoom(request.level)
        if request.action == ZoomAction.ZOOM_IN:
            modal.zoom.zoom_in()
        else:
            modal.zoom.zoom_out()

    logger.debug(
        "Zoom action applied",
        product_id=product_id,
        action=request.action.value,
        level=modal.zoom.level,
    )
    return ZoomStateResponse.from_overlay(modal.product, modal.zoom)
