"""Tiered pricing.

Resolves which of a product's two prices applies to a viewer and formats
amounts the way the storefront displays them (Brazilian real, pt-BR
separators).
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from storefront.domain.models import Product, Profile, Sector

RETAIL_LABEL = "Retail"
RESELLER_LABEL = "Reseller"
CURRENCY_SYMBOL = "R$"
DEFAULT_INSTALLMENTS = 12

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PriceQuote:
    """Price applicable to a viewer."""

    amount: Decimal
    label: str
    sector: Sector

    @property
    def display(self) -> str:
        return display_price(self.amount)

    @property
    def installment(self) -> Decimal:
        return installment_amount(self.amount)


def resolve_price(product: Product, profile: Profile | None) -> PriceQuote:
    """Select the price and label for a viewer.

    Anonymous viewers and retail profiles get the retail price; reseller
    profiles get the reseller price.

    Args:
        product: Product being displayed.
        profile: Viewer profile, or None for anonymous viewers.

    Returns:
        Applicable price quote.
    """
    if profile is None or profile.sector == Sector.RETAIL:
        return PriceQuote(
            amount=product.price_retail,
            label=RETAIL_LABEL,
            sector=Sector.RETAIL,
        )
    return PriceQuote(
        amount=product.price_reseller,
        label=RESELLER_LABEL,
        sector=Sector.RESELLER,
    )


def installment_amount(
    amount: Decimal, installments: int = DEFAULT_INSTALLMENTS
) -> Decimal:
    """Per-installment amount, rounded half-up to cents.

    Values come from the catalog as-is: zero and negative amounts are not
    rejected.
    """
    return quantize_money(Decimal(amount) / installments)


def quantize_money(amount: Decimal) -> Decimal:
    """Round an amount to cents, half-up."""
    return Decimal(amount).quantize(_CENTS, rounding=ROUND_HALF_UP)


def format_price(amount: Decimal) -> str:
    """Format an amount with two decimals and pt-BR separators.

    >>> format_price(Decimal("1234.5"))
    '1.234,50'
    """
    formatted = f"{quantize_money(amount):,.2f}"
    # en-US grouping -> pt-BR grouping
    return formatted.replace(",", "_").replace(".", ",").replace("_", ".")


def display_price(amount: Decimal) -> str:
    """Format an amount with the currency symbol, e.g. ``R$ 800,00``."""
    return f"{CURRENCY_SYMBOL} {format_price(amount)}"
