"""FastAPI dependencies.

Shared resources (backend client, store credentials) live on
``app.state`` and are created by the application lifespan. The viewer's
session provider is built per request from the bearer token and closed
when the request ends.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header, Request

from storefront.application.catalog_service import CatalogService
from storefront.application.contact_service import ContactDispatcher
from storefront.application.session_provider import SessionProvider
from storefront.domain.models import Profile
from storefront.infrastructure.backend_client import BackendClient
from storefront.infrastructure.config import settings
from storefront.infrastructure.credentials import StoreCredentials


def get_backend(request: Request) -> BackendClient:
    """Get the shared backend client."""
    return request.app.state.backend


def get_store_credentials(request: Request) -> StoreCredentials:
    """Get the store configuration loaded at start-up."""
    return request.app.state.store_credentials


def get_catalog_service(
    backend: Annotated[BackendClient, Depends(get_backend)],
) -> CatalogService:
    """Get catalog service dependency."""
    return CatalogService(backend, featured_fallback_limit=settings.featured_fallback_limit)


def get_contact_dispatcher(
    credentials: Annotated[StoreCredentials, Depends(get_store_credentials)],
) -> ContactDispatcher:
    """Get contact dispatcher dependency."""
    return ContactDispatcher(
        credentials,
        host=settings.messaging_host,
        product_template=settings.product_message_template,
        generic_template=settings.generic_message_template,
    )


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header."""
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        return None
    return parts[1].strip()


async def get_session_provider(
    backend: Annotated[BackendClient, Depends(get_backend)],
    authorization: Annotated[str | None, Header()] = None,
    x_refresh_token: Annotated[str | None, Header()] = None,
) -> AsyncGenerator[SessionProvider, None]:
    """Session provider for the requesting viewer.

    Anonymous requests get a provider with no session (retail pricing).
    """
    provider = SessionProvider(backend, redirect_url=settings.oauth_redirect_url)
    await provider.initialize(
        access_token=bearer_token(authorization),
        refresh_token=x_refresh_token,
    )
    try:
        yield provider
    finally:
        provider.close()


def get_viewer_profile(
    provider: Annotated[SessionProvider, Depends(get_session_provider)],
) -> Profile | None:
    """Profile of the requesting viewer, None when anonymous."""
    return provider.profile
