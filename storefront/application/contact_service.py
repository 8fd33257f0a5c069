"""WhatsApp contact links.

Builds deep links that open a chat with the store with a pre-filled
message, choosing the store number that serves the viewer's sector.
"""

from dataclasses import dataclass
from urllib.parse import quote

import structlog

from storefront.domain.exceptions import ContactNotConfiguredError
from storefront.domain.models import Product, Sector
from storefront.infrastructure.credentials import StoreCredentials

logger = structlog.get_logger()

DEFAULT_MESSAGING_HOST = "wa.me"
PRODUCT_MESSAGE_TEMPLATE = "Olá! Gostaria de saber mais sobre o produto: {name} (SKU: {sku})"
GENERIC_MESSAGE = "Olá! Gostaria de mais informações sobre os produtos."
MISSING_SKU = "N/A"

# Same unreserved set as the browser's encodeURIComponent
_URI_COMPONENT_SAFE = "!~*'()"


def build_contact_link(
    phone: str,
    message_template: str | None = None,
    product: Product | None = None,
    host: str = DEFAULT_MESSAGING_HOST,
) -> str:
    """Build a messaging deep link.

    With a product, the template is interpolated with the product's
    ``name`` and ``sku``. Without one, the template (or the generic inquiry)
    is sent as-is. The phone number is not validated.

    Args:
        phone: Store number, passed through verbatim.
        message_template: Message text or ``str.format`` template.
        product: Product the inquiry is about.
        host: Messaging service host.

    Returns:
        ``https://<host>/<phone>?text=<encoded message>``.
    """
    text = quote(contact_message(message_template, product), safe=_URI_COMPONENT_SAFE)
    return f"https://{host}/{phone}?text={text}"


def contact_message(message_template: str | None = None, product: Product | None = None) -> str:
    """Render the pre-filled message text."""
    if product is None:
        return message_template or GENERIC_MESSAGE
    template = message_template or PRODUCT_MESSAGE_TEMPLATE
    return template.format(name=product.name, sku=product.sku or MISSING_SKU)


@dataclass(frozen=True)
class ContactLink:
    """Resolved contact link."""

    url: str
    phone: str
    message: str
    sector: Sector


class ContactDispatcher:
    """Chooses the store number for a viewer and builds the link."""

    def __init__(
        self,
        credentials: StoreCredentials,
        host: str = DEFAULT_MESSAGING_HOST,
        product_template: str = PRODUCT_MESSAGE_TEMPLATE,
        generic_template: str = GENERIC_MESSAGE,
    ) -> None:
        """Initialize dispatcher.

        Args:
            credentials: Store contact configuration.
            host: Messaging service host.
            product_template: Template for product inquiries.
            generic_template: Message for general inquiries.
        """
        self.credentials = credentials
        self.host = host
        self.product_template = product_template
        self.generic_template = generic_template

    def number_for(self, sector: Sector) -> str:
        """Reseller viewers get the reseller line when one is configured."""
        if sector == Sector.RESELLER and self.credentials.whatsapp_reseller:
            return self.credentials.whatsapp_reseller
        return self.credentials.whatsapp_retail or ""

    def link_for(self, sector: Sector, product: Product | None = None) -> ContactLink:
        """Build the contact link for a viewer.

        Raises:
            ContactNotConfiguredError: If no number serves the sector.
        """
        phone = self.number_for(sector)
        if not phone:
            logger.warning("WhatsApp number not configured", sector=sector.value)
            raise ContactNotConfiguredError(sector.value)

        template = self.product_template if product is not None else self.generic_template
        message = contact_message(template, product)
        return ContactLink(
            url=build_contact_link(phone, template, product, host=self.host),
            phone=phone,
            message=message,
            sector=sector,
        )
