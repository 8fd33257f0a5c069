"""Domain layer for the storefront.

Contains the catalog records, pricing rules, pagination and the product
detail/zoom state machines. Nothing here performs I/O.
"""

from storefront.domain.detail import ProductDetailModal, ZoomOverlay
from storefront.domain.exceptions import (
    AuthenticationError,
    ContactNotConfiguredError,
    InvalidZoomStateError,
    PageOutOfRangeError,
    ProductNotFoundError,
    StorefrontError,
)
from storefront.domain.models import (
    ALL_CATEGORIES,
    AuthEvent,
    AuthSession,
    AuthUser,
    Category,
    FilterState,
    Product,
    Profile,
    Sector,
)
from storefront.domain.pagination import Paginator
from storefront.domain.pricing import PriceQuote, resolve_price

__all__ = [
    "ALL_CATEGORIES",
    "AuthEvent",
    "AuthSession",
    "AuthUser",
    "AuthenticationError",
    "Category",
    "ContactNotConfiguredError",
    "FilterState",
    "InvalidZoomStateError",
    "PageOutOfRangeError",
    "Paginator",
    "PriceQuote",
    "Product",
    "ProductDetailModal",
    "ProductNotFoundError",
    "Profile",
    "Sector",
    "StorefrontError",
    "ZoomOverlay",
    "resolve_price",
]
