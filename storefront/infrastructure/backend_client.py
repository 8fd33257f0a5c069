"""Hosted backend client.

Thin HTTP client for the backend-as-a-service that owns the catalog and
the user accounts: a PostgREST-style REST API under ``/rest/v1`` and an
auth API under ``/auth/v1``. Failures are returned as ``BackendResponse``
objects rather than raised, so callers decide how to degrade.
"""

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

import httpx
import structlog

logger = structlog.get_logger()

REST_PREFIX = "/rest/v1"
AUTH_PREFIX = "/auth/v1"


@dataclass
class BackendError:
    """Represents a backend error response."""

    error_code: str
    message: str
    status_code: int
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class BackendResponse:
    """Represents a backend response."""

    success: bool
    data: dict[str, Any] | list[Any] | None = None
    error: BackendError | None = None


# ============================================================================
# Table Queries
# ============================================================================


class TableQuery:
    """Fluent read query over one backend table.

    Example usage:
        response = await (
            client.table("products")
            .select("*, categories!inner(name, slug)")
            .eq("categories.slug", "monitores")
            .ilike("name", "%mouse%")
            .order("created_at", ascending=False)
            .execute()
        )
    """

    def __init__(
        self,
        client: "BackendClient",
        table: str,
        access_token: str | None = None,
    ) -> None:
        self._client = client
        self.table = table
        self.access_token = access_token
        self._select = "*"
        self._filters: list[tuple[str, str]] = []
        self._order: str | None = None
        self._limit: int | None = None

    def select(self, columns: str) -> "TableQuery":
        """Choose columns; embedded resources use ``table(col, ...)``."""
        self._select = columns
        return self

    def eq(self, column: str, value: Any) -> "TableQuery":
        """Equality predicate."""
        self._filters.append((column, f"eq.{_encode_value(value)}"))
        return self

    def ilike(self, column: str, pattern: str) -> "TableQuery":
        """Case-insensitive pattern predicate (``%`` wildcards)."""
        self._filters.append((column, f"ilike.{pattern}"))
        return self

    def order(self, column: str, ascending: bool = True) -> "TableQuery":
        self._order = f"{column}.{'asc' if ascending else 'desc'}"
        return self

    def limit(self, count: int) -> "TableQuery":
        self._limit = count
        return self

    @property
    def path(self) -> str:
        return f"{REST_PREFIX}/{self.table}"

    def build_params(self) -> list[tuple[str, str]]:
        """Query-string parameters in PostgREST syntax."""
        params: list[tuple[str, str]] = [("select", self._select.replace(" ", ""))]
        params.extend(self._filters)
        if self._order is not None:
            params.append(("order", self._order))
        if self._limit is not None:
            params.append(("limit", str(self._limit)))
        return params

    async def execute(self) -> BackendResponse:
        """Run the query.

        Returns:
            BackendResponse whose data is the list of rows.
        """
        response = await self._client.request(
            method="GET",
            path=self.path,
            params=self.build_params(),
            access_token=self.access_token,
        )
        if response.success and not isinstance(response.data, list):
            return BackendResponse(
                success=False,
                error=BackendError(
                    error_code="MALFORMED_RESPONSE",
                    message=f"Expected a list of rows from {self.table}",
                    status_code=502,
                ),
            )
        return response


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ============================================================================
# Client
# ============================================================================


class BackendClient:
    """HTTP client for the hosted backend.

    Catalog reads use the anonymous (publishable) key so row-level security
    behaves the same for every visitor; profile reads and auth calls carry
    the viewer's access token.
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the backend client.

        Args:
            base_url: Backend project URL.
            anon_key: Publishable API key.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={
                    "apikey": self.anon_key,
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: list[tuple[str, str]] | dict[str, Any] | None = None,
        access_token: str | None = None,
    ) -> BackendResponse:
        """Make a backend request.

        Args:
            method: HTTP method.
            path: Endpoint path.
            json: Request body as JSON.
            params: Query parameters.
            access_token: Viewer token; the anonymous key is used when absent.

        Returns:
            BackendResponse with success status and data or error.
        """
        client = await self._get_client()

        headers = {"Authorization": f"Bearer {access_token or self.anon_key}"}

        if isinstance(params, dict):
            params = {k: v for k, v in params.items() if v is not None}

        try:
            logger.debug(
                "Making backend request",
                method=method,
                path=path,
                has_body=json is not None,
            )

            response = await client.request(
                method=method,
                url=path,
                json=json,
                params=params,
                headers=headers,
            )

            if response.status_code >= 400:
                return BackendResponse(
                    success=False,
                    error=_parse_error(response),
                )

            if response.status_code == 204 or not response.content:
                return BackendResponse(success=True, data=None)

            return BackendResponse(success=True, data=response.json())

        except httpx.TimeoutException as e:
            logger.error("Backend request timeout", path=path, error=str(e))
            return BackendResponse(
                success=False,
                error=BackendError(
                    error_code="TIMEOUT",
                    message=f"Request timed out: {path}",
                    status_code=504,
                ),
            )
        except httpx.RequestError as e:
            logger.error("Backend request failed", path=path, error=str(e))
            return BackendResponse(
                success=False,
                error=BackendError(
                    error_code="REQUEST_ERROR",
                    message=f"Request failed: {str(e)}",
                    status_code=500,
                ),
            )
        except Exception as e:
            logger.exception("Unexpected backend error", path=path)
            return BackendResponse(
                success=False,
                error=BackendError(
                    error_code="INTERNAL_ERROR",
                    message=f"Internal error: {str(e)}",
                    status_code=500,
                ),
            )

    # =========================================================================
    # REST
    # =========================================================================

    def table(self, name: str, access_token: str | None = None) -> TableQuery:
        """Start a read query over a table."""
        return TableQuery(self, name, access_token=access_token)

    # =========================================================================
    # Auth
    # =========================================================================

    async def sign_up(
        self,
        email: str,
        password: str,
        data: dict[str, Any] | None = None,
        redirect_to: str | None = None,
    ) -> BackendResponse:
        """Register a user; ``data`` becomes the user's metadata.

        Args:
            email: User email.
            password: User password.
            data: Metadata copied into the profile (sector, phone).
            redirect_to: Where the confirmation email should send the user.

        Returns:
            BackendResponse with the created user or session.
        """
        params = {"redirect_to": redirect_to} if redirect_to else None
        return await self.request(
            method="POST",
            path=f"{AUTH_PREFIX}/signup",
            json={"email": email, "password": password, "data": data or {}},
            params=params,
        )

    async def sign_in_with_password(self, email: str, password: str) -> BackendResponse:
        """Exchange credentials for a session."""
        return await self.request(
            method="POST",
            path=f"{AUTH_PREFIX}/token",
            json={"email": email, "password": password},
            params={"grant_type": "password"},
        )

    async def refresh_session(self, refresh_token: str) -> BackendResponse:
        """Exchange a refresh token for a new session."""
        return await self.request(
            method="POST",
            path=f"{AUTH_PREFIX}/token",
            json={"refresh_token": refresh_token},
            params={"grant_type": "refresh_token"},
        )

    async def sign_out(self, access_token: str) -> BackendResponse:
        """Revoke the session behind an access token."""
        return await self.request(
            method="POST",
            path=f"{AUTH_PREFIX}/logout",
            access_token=access_token,
        )

    async def get_user(self, access_token: str) -> BackendResponse:
        """Resolve the user that owns an access token."""
        return await self.request(
            method="GET",
            path=f"{AUTH_PREFIX}/user",
            access_token=access_token,
        )

    def oauth_authorize_url(self, provider: str, redirect_to: str) -> str:
        """URL that starts an OAuth sign-in with a third-party provider."""
        query = urlencode({"provider": provider, "redirect_to": redirect_to})
        return f"{self.base_url}{AUTH_PREFIX}/authorize?{query}"


def _parse_error(response: httpx.Response) -> BackendError:
    """Normalize REST and auth error payloads."""
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    error_code = (
        payload.get("error_code")
        or payload.get("code")
        or payload.get("error")
        or "BACKEND_ERROR"
    )
    message = (
        payload.get("message")
        or payload.get("msg")
        or payload.get("error_description")
        or f"Backend returned status {response.status_code}"
    )
    details = {k: v for k, v in payload.items() if k in ("details", "hint")}
    return BackendError(
        error_code=str(error_code),
        message=str(message),
        status_code=response.status_code,
        details=details,
    )
