"""Application services: catalog reads, page controllers, contact links and sessions."""

from storefront.application.catalog_browser import CatalogBrowser, RequestSequencer
from storefront.application.catalog_service import CatalogResult, CatalogService
from storefront.application.contact_service import (
    ContactDispatcher,
    ContactLink,
    build_contact_link,
)
from storefront.application.session_provider import SessionProvider

__all__ = [
    "CatalogBrowser",
    "CatalogResult",
    "CatalogService",
    "ContactDispatcher",
    "ContactLink",
    "RequestSequencer",
    "SessionProvider",
    "build_contact_link",
]
