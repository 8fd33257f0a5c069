"""Domain exceptions.

Errors raised by the storefront's domain and application layers. The API
layer maps each of them to an HTTP status and an ``error_code``.
"""

from typing import Any


class StorefrontError(Exception):
    """Base class for all storefront exceptions.

    All domain errors should inherit from this class to allow
    catching them at the API layer.
    """

    error_code = "STOREFRONT_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize storefront error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Catalog Errors
# ============================================================================


class ProductNotFoundError(StorefrontError):
    """Raised when a product cannot be found by either catalog query."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str) -> None:
        super().__init__(
            f"Product not found: {product_id}",
            details={"product_id": product_id},
        )


class PageOutOfRangeError(StorefrontError):
    """Raised when a requested page index does not exist."""

    error_code = "PAGE_OUT_OF_RANGE"

    def __init__(self, page: int, page_count: int) -> None:
        super().__init__(
            f"Page {page} is out of range (page count: {page_count})",
            details={"page": page, "page_count": page_count},
        )


# ============================================================================
# Detail / Zoom Errors
# ============================================================================


class InvalidZoomStateError(StorefrontError):
    """Raised when a zoom action is applied to a closed overlay."""

    error_code = "INVALID_ZOOM_STATE"

    def __init__(self, action: str, reason: str = "Zoom overlay is closed") -> None:
        super().__init__(
            f"Cannot apply zoom action '{action}': {reason}",
            details={"action": action, "reason": reason},
        )


# ============================================================================
# Contact Errors
# ============================================================================


class ContactNotConfiguredError(StorefrontError):
    """Raised when no WhatsApp number is configured for the viewer's sector.

    The message is shown to the shopper as a blocking alert.
    """

    error_code = "CONTACT_NOT_CONFIGURED"

    def __init__(self, sector: str) -> None:
        super().__init__(
            "Número do WhatsApp não configurado. "
            "Entre em contato com o administrador.",
            details={"sector": sector},
        )


# ============================================================================
# Authentication Errors
# ============================================================================


class AuthenticationError(StorefrontError):
    """Raised when the backend rejects an authentication request."""

    error_code = "AUTHENTICATION_FAILED"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=details)
