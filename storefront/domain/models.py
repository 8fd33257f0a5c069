"""Storefront data model.

Read-only records returned by the hosted backend plus the filter state that
drives catalog queries. Field aliases follow the backend's column names so
rows can be validated straight from the REST payload.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

ALL_CATEGORIES = "all"


class Sector(str, Enum):
    """Viewer classification deciding which price applies.

    Values are the backend's ``setor`` column values.
    """

    RETAIL = "varejo"
    RESELLER = "revenda"


class AuthEvent(str, Enum):
    """Session change notifications emitted by the auth backend."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


# ============================================================================
# Catalog Records
# ============================================================================


class CategoryRef(BaseModel):
    """Category fields embedded by the enriched product query."""

    model_config = ConfigDict(frozen=True)

    name: str
    slug: str


class Category(BaseModel):
    """Product category."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    slug: str
    description: str | None = None


class Product(BaseModel):
    """Catalog product, immutable from the storefront's perspective."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    description: str | None = None
    price_retail: Decimal = Field(default=Decimal("0"), alias="price_varejo")
    price_reseller: Decimal = Field(default=Decimal("0"), alias="price_revenda")
    image_url: str | None = None
    sku: str | None = None
    is_featured: bool | None = None
    category_id: str | None = None
    category: CategoryRef | None = Field(default=None, alias="categories")
    created_at: datetime | None = None


# ============================================================================
# Identity
# ============================================================================


class Profile(BaseModel):
    """Viewer profile stored in the backend ``profiles`` table."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    user_id: str
    email: str | None = None
    phone: str | None = None
    sector: Sector = Field(default=Sector.RETAIL, alias="setor")
    is_admin: bool = False


class AuthUser(BaseModel):
    """Authenticated user as reported by the auth backend."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str | None = None


class AuthSession(BaseModel):
    """Session tokens issued by the auth backend."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None
    user: AuthUser | None = None


# ============================================================================
# Filter State
# ============================================================================


@dataclass(frozen=True)
class FilterState:
    """Catalog filter owned by the page-level controller.

    Attributes:
        search: Free-text term matched against product names. Empty means
            no filter.
        category: Category slug, or ``"all"`` for no restriction.
    """

    search: str = ""
    category: str = ALL_CATEGORIES

    @classmethod
    def create(cls, search: str | None = None, category: str | None = None) -> "FilterState":
        """Build a normalized filter from raw user input."""
        return cls(
            search=(search or "").strip(),
            category=(category or "").strip() or ALL_CATEGORIES,
        )

    @property
    def has_search(self) -> bool:
        return self.search != ""

    @property
    def has_category(self) -> bool:
        return self.category != ALL_CATEGORIES

    @property
    def is_active(self) -> bool:
        """Whether any filter restricts the catalog."""
        return self.has_search or self.has_category
