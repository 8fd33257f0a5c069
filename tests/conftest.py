"""Shared fixtures for storefront tests."""

from typing import Any

import pytest
from fastapi.testclient import TestClient

from storefront.api.dependencies import get_backend, get_store_credentials
from storefront.domain.models import Product, Profile, Sector
from storefront.infrastructure.backend_client import (
    BackendClient,
    BackendError,
    BackendResponse,
)
from storefront.infrastructure.credentials import StoreCredentials
from storefront.main import app


# ============================================================================
# Backend Helpers
# ============================================================================


def make_success_response(data: Any) -> BackendResponse:
    """Create a successful backend response."""
    return BackendResponse(success=True, data=data)


def make_error_response(
    error_code: str = "PGRST200",
    message: str = "Could not find a relationship between 'products' and 'categories'",
    status_code: int = 400,
) -> BackendResponse:
    """Create an error backend response."""
    return BackendResponse(
        success=False,
        error=BackendError(
            error_code=error_code,
            message=message,
            status_code=status_code,
        ),
    )


class BackendStub:
    """Answers backend requests with canned responses keyed by path.

    Responses queued for a path are returned in order; the last one is
    repeated once the queue is down to it. Every call is recorded.
    """

    def __init__(self) -> None:
        self.responses: dict[str, list[BackendResponse]] = {}
        self.calls: list[dict[str, Any]] = []

    def add(self, path: str, *responses: BackendResponse) -> None:
        self.responses.setdefault(path, []).extend(responses)

    def calls_to(self, path: str) -> list[dict[str, Any]]:
        return [call for call in self.calls if call["path"] == path]

    async def __call__(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: Any = None,
        access_token: str | None = None,
    ) -> BackendResponse:
        self.calls.append(
            {
                "method": method,
                "path": path,
                "json": json,
                "params": params,
                "access_token": access_token,
            }
        )
        queue = self.responses.get(path)
        if not queue:
            return make_error_response("NOT_STUBBED", f"No response for {path}", 500)
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]


def product_row(
    product_id: str,
    name: str,
    retail: float = 100.0,
    reseller: float = 80.0,
    sku: str | None = None,
    category: dict[str, str] | None = None,
    created_at: str = "2025-01-01T00:00:00+00:00",
    is_featured: bool = False,
) -> dict[str, Any]:
    """Product row as the backend returns it."""
    row: dict[str, Any] = {
        "id": product_id,
        "name": name,
        "description": f"Descrição de {name}",
        "price_varejo": retail,
        "price_revenda": reseller,
        "image_url": f"https://cdn.example.com/{product_id}.jpg",
        "sku": sku,
        "is_featured": is_featured,
        "category_id": "cat-1" if category else None,
        "created_at": created_at,
    }
    if category is not None:
        row["categories"] = category
    return row


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def backend_stub() -> BackendStub:
    return BackendStub()


@pytest.fixture
def backend(backend_stub: BackendStub) -> BackendClient:
    """Backend client whose requests are answered by the stub."""
    client = BackendClient(base_url="http://backend.test", anon_key="anon-key")
    client.request = backend_stub  # type: ignore[method-assign]
    return client


@pytest.fixture
def store_credentials() -> StoreCredentials:
    return StoreCredentials(
        whatsapp_retail="558534833373",
        whatsapp_reseller="558599990000",
        instagram="https://instagram.com/loja",
        website="https://loja.example.com",
    )


@pytest.fixture
def product() -> Product:
    return Product.model_validate(
        product_row(
            "p-1",
            "Monitor Gamer 24",
            retail=1000.00,
            reseller=800.00,
            sku="MON-24",
            category={"name": "Monitores", "slug": "monitores"},
        )
    )


@pytest.fixture
def retail_profile() -> Profile:
    return Profile(id="prof-1", user_id="user-1", sector=Sector.RETAIL)


@pytest.fixture
def reseller_profile() -> Profile:
    return Profile(id="prof-2", user_id="user-2", sector=Sector.RESELLER)


@pytest.fixture
def client(backend: BackendClient, store_credentials: StoreCredentials):
    """Test client wired to the stubbed backend."""
    app.dependency_overrides[get_backend] = lambda: backend
    app.dependency_overrides[get_store_credentials] = lambda: store_credentials
    yield TestClient(app)
    app.dependency_overrides.clear()
