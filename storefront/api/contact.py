"""Contact endpoints.

WhatsApp "contact to buy" links and the store's social links.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse

from storefront.api.dependencies import (
    get_catalog_service,
    get_contact_dispatcher,
    get_session_provider,
    get_store_credentials,
)
from storefront.api.schemas import ContactLinkResponse, ErrorResponse, SocialLinksResponse
from storefront.application.catalog_service import CatalogService
from storefront.application.contact_service import ContactDispatcher, ContactLink
from storefront.application.session_provider import SessionProvider
from storefront.infrastructure.credentials import StoreCredentials

logger = structlog.get_logger()

router = APIRouter()


async def _resolve_link(
    product_id: str | None,
    catalog: CatalogService,
    contacts: ContactDispatcher,
    provider: SessionProvider,
) -> ContactLink:
    product = await catalog.fetch_product(product_id) if product_id else None
    return contacts.link_for(provider.sector, product)


@router.get(
    "/contact/link",
    response_model=ContactLinkResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    tags=["Contact"],
)
async def get_contact_link(
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
    contacts: Annotated[ContactDispatcher, Depends(get_contact_dispatcher)],
    provider: Annotated[SessionProvider, Depends(get_session_provider)],
    product_id: Annotated[str | None, Query()] = None,
) -> ContactLinkResponse:
    """Build the WhatsApp link for the viewer.

    Args:
        product_id: Product the inquiry is about; general inquiry if omitted.

    Raises:
        ContactNotConfiguredError: If no number serves the viewer's sector.
        ProductNotFoundError: If the product does not exist.
    """
    link = await _resolve_link(product_id, catalog, contacts, provider)
    return ContactLinkResponse(
        url=link.url,
        phone=link.phone,
        message=link.message,
        sector=link.sector,
    )


@router.get(
    "/contact/whatsapp",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    tags=["Contact"],
)
async def redirect_to_whatsapp(
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
    contacts: Annotated[ContactDispatcher, Depends(get_contact_dispatcher)],
    provider: Annotated[SessionProvider, Depends(get_session_provider)],
    product_id: Annotated[str | None, Query()] = None,
) -> RedirectResponse:
    """Send the browser straight to WhatsApp.

    Whether the messaging service accepts the number is not checked.
    """
    link = await _resolve_link(product_id, catalog, contacts, provider)
    logger.info("Redirecting to WhatsApp", product_id=product_id, sector=link.sector.value)
    return RedirectResponse(link.url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get("/store/links", response_model=SocialLinksResponse, tags=["Contact"])
async def get_social_links(
    credentials: Annotated[StoreCredentials, Depends(get_store_credentials)],
) -> SocialLinksResponse:
    """Social links configured for the store."""
    return SocialLinksResponse(links=credentials.social_links())
