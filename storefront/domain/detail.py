"""Product detail modal and image zoom overlay.

Two independent toggles: the detail modal holds exactly one product while
open, and the zoom overlay nested inside it steps through a bounded set of
zoom levels.

State diagram:
    Detail:  CLOSED ──open(product)──► OPEN ──close / dismiss──► CLOSED
    Zoom:    CLOSED ──open──► OPEN(1.0) ──in/out (clamped)──► OPEN(level)
                                  │
                                  └──close──► CLOSED
"""

import math
from enum import Enum

from storefront.domain.exceptions import InvalidZoomStateError
from storefront.domain.models import Product

MIN_ZOOM = 1.0
MAX_ZOOM = 3.0
ZOOM_STEP = 0.5
ZOOM_LEVELS = (1.0, 1.5, 2.0, 2.5, 3.0)


class OverlayState(str, Enum):
    """Open/closed state shared by the modal and the zoom overlay."""

    CLOSED = "closed"
    OPEN = "open"


def clamp_zoom(level: float) -> float:
    """Clamp a level to the zoom range and snap it to the step grid.

    NaN has no place in the range and falls back to the minimum level.
    """
    if math.isnan(level):
        return MIN_ZOOM
    bounded = min(max(level, MIN_ZOOM), MAX_ZOOM)
    return round(bounded / ZOOM_STEP) * ZOOM_STEP


class ZoomOverlay:
    """Full-screen image zoom with discrete levels."""

    def __init__(self) -> None:
        self.state = OverlayState.CLOSED
        self.level = MIN_ZOOM

    @classmethod
    def restore(cls, level: float) -> "ZoomOverlay":
        """Rebuild an open overlay from a level held by the client."""
        overlay = cls()
        overlay.state = OverlayState.OPEN
        overlay.level = clamp_zoom(level)
        return overlay

    @property
    def is_open(self) -> bool:
        return self.state == OverlayState.OPEN

    @property
    def can_zoom_in(self) -> bool:
        return self.is_open and self.level < MAX_ZOOM

    @property
    def can_zoom_out(self) -> bool:
        return self.is_open and self.level > MIN_ZOOM

    def open(self) -> None:
        """Open the overlay; the level always starts at 1.0."""
        self.state = OverlayState.OPEN
        self.level = MIN_ZOOM

    def close(self) -> None:
        self.state = OverlayState.CLOSED

    def toggle(self) -> None:
        """Mirror a click on the product image."""
        if self.is_open:
            self.close()
        else:
            self.open()

    def zoom_in(self) -> float:
        """Step up by 0.5; no-op at the upper bound.

        Raises:
            InvalidZoomStateError: If the overlay is closed.
        """
        if not self.is_open:
            raise InvalidZoomStateError("in")
        self.level = min(self.level + ZOOM_STEP, MAX_ZOOM)
        return self.level

    def zoom_out(self) -> float:
        """Step down by 0.5; no-op at the lower bound.

        Raises:
            InvalidZoomStateError: If the overlay is closed.
        """
        if not self.is_open:
            raise InvalidZoomStateError("out")
        self.level = max(self.level - ZOOM_STEP, MIN_ZOOM)
        return self.level


class ProductDetailModal:
    """Overlay showing a single product."""

    def __init__(self) -> None:
        self.product: Product | None = None
        self.zoom = ZoomOverlay()

    @property
    def state(self) -> OverlayState:
        return OverlayState.OPEN if self.product is not None else OverlayState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.product is not None

    def open(self, product: Product) -> None:
        """Show a product, replacing any product already shown."""
        self.product = product
        self.zoom.close()

    def close(self) -> None:
        """Close on explicit close or backdrop dismissal."""
        self.zoom.close()
        self.product = None

    def open_zoom(self) -> None:
        """Open the zoom overlay for the current product image.

        Raises:
            InvalidZoomStateError: If no product is shown.
        """
        if not self.is_open:
            raise InvalidZoomStateError("open", reason="Product detail is closed")
        self.zoom.open()

    def restore_zoom(self, level: float) -> None:
        """Reopen the zoom overlay at a level the client already shows.

        Raises:
            InvalidZoomStateError: If no product is shown.
        """
        if not self.is_open:
            raise InvalidZoomStateError("restore", reason="Product detail is closed")
        self.zoom = ZoomOverlay.restore(level)
