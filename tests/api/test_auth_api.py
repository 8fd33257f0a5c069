"""Tests for auth endpoints."""

from fastapi.testclient import TestClient

from tests.conftest import BackendStub, make_error_response, make_success_response

TOKEN = "/auth/v1/token"
SIGNUP = "/auth/v1/signup"
LOGOUT = "/auth/v1/logout"
USER = "/auth/v1/user"
PROFILES = "/rest/v1/profiles"

SESSION = {
    "access_token": "access-1",
    "refresh_token": "refresh-1",
    "token_type": "bearer",
    "expires_in": 3600,
    "user": {"id": "user-1", "email": "cliente@example.com"},
}
PROFILE = {"id": "prof-1", "user_id": "user-1", "setor": "revenda", "is_admin": True}


class TestSession:
    """Tests for GET /auth/session."""

    def test_anonymous(self, client: TestClient) -> None:
        data = client.get("/auth/session").json()

        assert data["authenticated"] is False
        assert data["sector"] == "varejo"
        assert data["access_token"] is None

    def test_authenticated(self, client: TestClient, backend_stub: BackendStub) -> None:
        backend_stub.add(USER, make_success_response(SESSION["user"]))
        backend_stub.add(PROFILES, make_success_response([PROFILE]))

        data = client.get(
            "/auth/session", headers={"Authorization": "Bearer access-1"}
        ).json()

        assert data["authenticated"] is True
        assert data["sector"] == "revenda"
        assert data["is_admin"] is True

    def test_malformed_authorization_is_anonymous(
        self, client: TestClient, backend_stub: BackendStub
    ) -> None:
        data = client.get("/auth/session", headers={"Authorization": "Token abc"}).json()

        assert data["authenticated"] is False
        assert backend_stub.calls_to(USER) == []


class TestSignUp:
    """Tests for POST /auth/sign-up."""

    def test_confirmation_required(
        self, client: TestClient, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(SIGNUP, make_success_response({"id": "user-1"}))

        response = client.post(
            "/auth/sign-up",
            json={
                "email": "cliente@example.com",
                "password": "secret123",
                "sector": "revenda",
                "phone": "85999990000",
            },
        )

        assert response.status_code == 201
        assert response.json() == {"confirmation_required": True, "session": None}
        sent = backend_stub.calls_to(SIGNUP)[0]["json"]
        assert sent["data"] == {"setor": "revenda", "phone": "85999990000"}

    def test_rejected(self, client: TestClient, backend_stub: BackendStub) -> None:
        backend_stub.add(
            SIGNUP, make_error_response("user_already_exists", "User already registered", 422)
        )

        response = client.post(
            "/auth/sign-up", json={"email": "cliente@example.com", "password": "secret123"}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "AUTHENTICATION_FAILED"

    def test_short_password_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/auth/sign-up", json={"email": "cliente@example.com", "password": "123"}
        )

        assert response.status_code == 422


class TestSignIn:
    """Tests for POST /auth/sign-in and /auth/refresh."""

    def test_success_returns_tokens(
        self, client: TestClient, backend_stub: BackendStub
    ) -> None:
        backend_stub.add(TOKEN, make_success_response(SESSION))
        backend_stub.add(PROFILES, make_success_response([PROFILE]))

        data = client.post(
            "/auth/sign-in", json={"email": "cliente@example.com", "password": "secret123"}
        ).json()

        assert data["authenticated"] is True
        assert data["access_token"] == "access-1"
        assert data["refresh_token"] == "refresh-1"
        assert data["sector"] == "revenda"

    def test_invalid_credentials(self, client: TestClient, backend_stub: BackendStub) -> None:
        backend_stub.add(
            TOKEN, make_error_response("invalid_credentials", "Invalid login credentials", 400)
        )

        response = client.post(
            "/auth/sign-in", json={"email": "cliente@example.com", "password": "wrong"}
        )

        assert response.status_code == 401
        body = response.json()
        assert body["message"] == "Invalid login credentials"
        assert body["details"]["backend_error_code"] == "invalid_credentials"

    def test_refresh(self, client: TestClient, backend_stub: BackendStub) -> None:
        backend_stub.add(TOKEN, make_success_response(SESSION))
        backend_stub.add(PROFILES, make_success_response([PROFILE]))

        data = client.post("/auth/refresh", json={"refresh_token": "refresh-0"}).json()

        assert data["access_token"] == "access-1"
        assert backend_stub.calls_to(TOKEN)[0]["json"] == {"refresh_token": "refresh-0"}


class TestOAuthAndSignOut:
    """Tests for OAuth start and sign-out."""

    def test_oauth_url(self, client: TestClient) -> None:
        data = client.get("/auth/oauth/google").json()

        assert data["provider"] == "google"
        assert data["url"].startswith("http://backend.test/auth/v1/authorize?provider=google")

    def test_sign_out(self, client: TestClient, backend_stub: BackendStub) -> None:
        backend_stub.add(USER, make_success_response(SESSION["user"]))
        backend_stub.add(PROFILES, make_success_response([PROFILE]))
        backend_stub.add(LOGOUT, make_success_response(None))

        data = client.post(
            "/auth/sign-out", headers={"Authorization": "Bearer access-1"}
        ).json()

        assert data["authenticated"] is False
        assert data["sector"] == "varejo"
        assert backend_stub.calls_to(LOGOUT)[0]["access_token"] == "access-1"
