"""Pydantic schemas for the storefront API.

Response bodies are built from domain records with the viewer's price
already resolved, so clients never choose between the two price fields.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from storefront.application.catalog_browser import CatalogBrowser
from storefront.domain.detail import MAX_ZOOM, MIN_ZOOM, ZOOM_LEVELS, ZOOM_STEP, ZoomOverlay
from storefront.domain.models import Category, CategoryRef, Product, Profile, Sector
from storefront.domain.pricing import (
    DEFAULT_INSTALLMENTS,
    display_price,
    quantize_money,
    resolve_price,
)


# ============================================================================
# Common
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error body."""

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable message")
    details: dict | list = Field(default_factory=list, description="Error context")


# ============================================================================
# Catalog
# ============================================================================


class ProductCardSchema(BaseModel):
    """Product with the viewer's price resolved."""

    id: str
    name: str
    description: str | None = None
    image_url: str | None = None
    sku: str | None = None
    is_featured: bool | None = None
    category: CategoryRef | None = None
    price: Decimal = Field(..., description="Price for the viewer's sector")
    price_display: str = Field(..., description="Formatted price, e.g. 'R$ 800,00'")
    price_label: str = Field(..., description="'Retail' or 'Reseller'")
    sector: Sector
    installments: int = Field(default=DEFAULT_INSTALLMENTS)
    installment_amount: Decimal
    installment_display: str

    @classmethod
    def from_product(cls, product: Product, profile: Profile | None) -> "ProductCardSchema":
        quote = resolve_price(product, profile)
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            image_url=product.image_url,
            sku=product.sku,
            is_featured=product.is_featured,
            category=product.category,
            price=quantize_money(quote.amount),
            price_display=quote.display,
            price_label=quote.label,
            sector=quote.sector,
            installment_amount=quote.installment,
            installment_display=display_price(quote.installment),
        )


class FilterSchema(BaseModel):
    """Filter applied to a product listing."""

    search: str
    category: str


class ProductListResponse(BaseModel):
    """One page of a catalog view."""

    items: list[ProductCardSchema]
    total: int = Field(..., description="Products across all pages")
    page: int = Field(..., ge=0, description="Zero-based page index")
    page_size: int
    page_count: int
    next_page: int = Field(..., description="Page reached by 'next' (wraps)")
    previous_page: int = Field(..., description="Page reached by 'previous' (wraps)")
    has_navigation: bool
    filters: FilterSchema
    degraded: bool = Field(default=False, description="Fallback query was used")
    dropped_filters: list[str] = Field(default_factory=list)

    @classmethod
    def from_browser(
        cls, browser: CatalogBrowser, profile: Profile | None
    ) -> "ProductListResponse":
        paginator = browser.paginator
        return cls(
            items=[ProductCardSchema.from_product(p, profile) for p in browser.page_items()],
            total=browser.result.total,
            page=paginator.page,
            page_size=paginator.page_size,
            page_count=paginator.page_count,
            next_page=paginator.peek_next(),
            previous_page=paginator.peek_previous(),
            has_navigation=paginator.has_navigation,
            filters=FilterSchema(
                search=browser.filters.search,
                category=browser.filters.category,
            ),
            degraded=browser.result.degraded,
            dropped_filters=browser.result.dropped_filters,
        )


class CategoryListResponse(BaseModel):
    """All categories, ordered by name."""

    items: list[Category]
    total: int


class ZoomLevelsSchema(BaseModel):
    """Zoom range offered by the image overlay."""

    levels: list[float] = Field(default_factory=lambda: list(ZOOM_LEVELS))
    min_level: float = MIN_ZOOM
    max_level: float = MAX_ZOOM
    step: float = ZOOM_STEP


class ProductDetailResponse(BaseModel):
    """Product detail view."""

    product: ProductCardSchema
    category_name: str
    contact_url: str | None = Field(None, description="WhatsApp link, if configured")
    zoom: ZoomLevelsSchema = Field(default_factory=ZoomLevelsSchema)


class ZoomAction(str, Enum):
    """Actions on the image zoom overlay."""

    OPEN = "open"
    ZOOM_IN = "in"
    ZOOM_OUT = "out"
    CLOSE = "close"


class ZoomRequest(BaseModel):
    """Zoom action applied to the level the client currently shows."""

    action: ZoomAction
    level: float = Field(
        default=MIN_ZOOM, allow_inf_nan=False, description="Current zoom level"
    )


class ZoomStateResponse(BaseModel):
    """Zoom overlay state after an action."""

    product_id: str
    image_url: str | None
    open: bool
    level: float
    can_zoom_in: bool
    can_zoom_out: bool

    @classmethod
    def from_overlay(cls, product: Product, overlay: ZoomOverlay) -> "ZoomStateResponse":
        return cls(
            product_id=product.id,
            image_url=product.image_url,
            open=overlay.is_open,
            level=overlay.level,
            can_zoom_in=overlay.can_zoom_in,
            can_zoom_out=overlay.can_zoom_out,
        )


class StorefrontResponse(BaseModel):
    """Home page: featured carousel, categories and the filtered listing."""

    featured: ProductListResponse
    categories: list[Category]
    products: ProductListResponse | None = Field(
        None, description="Present only when a search or category is active"
    )


# ============================================================================
# Contact
# ============================================================================


class ContactLinkResponse(BaseModel):
    """WhatsApp deep link for the viewer."""

    url: str
    phone: str
    message: str
    sector: Sector


class SocialLinksResponse(BaseModel):
    """Store social links."""

    links: dict[str, str]


# ============================================================================
# Auth
# ============================================================================


class SignUpRequest(BaseModel):
    """Account registration."""

    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    sector: Sector = Sector.RETAIL
    phone: str | None = None


class SignInRequest(BaseModel):
    """Password sign-in."""

    email: str
    password: str


class RefreshRequest(BaseModel):
    """Token refresh."""

    refresh_token: str


class SessionResponse(BaseModel):
    """Viewer session as seen by the storefront."""

    authenticated: bool
    user_id: str | None = None
    email: str | None = None
    sector: Sector = Sector.RETAIL
    is_admin: bool = False
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None


class SignUpResponse(BaseModel):
    """Registration outcome."""

    confirmation_required: bool
    session: SessionResponse | None = None


class OAuthResponse(BaseModel):
    """Where to send the browser to start an OAuth sign-in."""

    provider: str
    url: str
