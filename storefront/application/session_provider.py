"""Viewer session and profile.

The session provider is the one place that knows who the viewer is. It is
created per consumer and passed explicitly to whatever needs the viewer's
sector; listeners subscribe to session changes and get an unsubscribe
handle back.

Profile refresh follows the backend's session events:
    SIGNED_IN / TOKEN_REFRESHED / INITIAL_SESSION -> refetch profile
    SIGNED_OUT                                    -> clear profile
"""

from collections.abc import Callable

import structlog
from pydantic import ValidationError

from storefront.application.catalog_browser import RequestSequencer
from storefront.domain.exceptions import AuthenticationError
from storefront.domain.models import AuthEvent, AuthSession, AuthUser, Profile, Sector
from storefront.infrastructure.backend_client import BackendClient, BackendResponse

logger = structlog.get_logger()

PROFILES_TABLE = "profiles"

PROFILE_REFRESH_EVENTS = frozenset(
    {AuthEvent.SIGNED_IN, AuthEvent.TOKEN_REFRESHED, AuthEvent.INITIAL_SESSION}
)

SessionListener = Callable[[AuthEvent, "SessionProvider"], None]


class SessionProvider:
    """Current session, user and profile for one viewer.

    Example usage:
        provider = SessionProvider(backend)
        unsubscribe = provider.subscribe(on_change)
        await provider.initialize(access_token=token)
        quote = resolve_price(product, provider.profile)
        unsubscribe()
        provider.close()
    """

    def __init__(self, backend: BackendClient, redirect_url: str | None = None) -> None:
        """Initialize provider.

        Args:
            backend: Hosted backend client.
            redirect_url: Where email confirmation and OAuth return the user.
        """
        self._backend = backend
        self.redirect_url = redirect_url
        self.session: AuthSession | None = None
        self.user: AuthUser | None = None
        self.profile: Profile | None = None
        self.loading = True
        self.alive = True
        self._listeners: list[SessionListener] = []
        self._profile_requests = RequestSequencer()

    @property
    def sector(self) -> Sector:
        """Viewer sector; anonymous viewers are retail."""
        return self.profile.sector if self.profile else Sector.RETAIL

    @property
    def is_admin(self) -> bool:
        return bool(self.profile and self.profile.is_admin)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a session-change listener.

        Returns:
            Callable that removes the listener.
        """
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: SessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: AuthEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, self)
            except Exception:
                logger.exception("Session listener failed", auth_event=event.value)

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    async def initialize(
        self,
        access_token: str | None = None,
        refresh_token: str | None = None,
    ) -> None:
        """Restore the viewer's session from tokens, if any.

        An invalid or expired token leaves the viewer anonymous.
        """
        session = None
        if access_token:
            response = await self._backend.get_user(access_token)
            if response.success and isinstance(response.data, dict):
                session = AuthSession(
                    access_token=access_token,
                    refresh_token=refresh_token,
                    user=AuthUser.model_validate(response.data),
                )
            else:
                logger.warning(
                    "Session error",
                    error_code=response.error.error_code if response.error else None,
                )

        await self.handle_auth_event(AuthEvent.INITIAL_SESSION, session)

    async def handle_auth_event(self, event: AuthEvent, session: AuthSession | None) -> None:
        """Apply a session change and notify listeners.

        Args:
            event: Session change reported by the auth backend.
            session: New session, None when signed out.
        """
        if not self.alive:
            return

        logger.debug("Auth state change", auth_event=event.value, has_session=session is not None)
        self.session = session
        self.user = session.user if session else None

        if event == AuthEvent.SIGNED_OUT or session is None:
            # Supersedes any profile fetch still in flight
            self._profile_requests.issue()
            self.profile = None
        elif self.user is not None and event in PROFILE_REFRESH_EVENTS:
            await self._load_profile(self.user.id, session.access_token)

        if not self.alive:
            return
        self.loading = False
        self._notify(event)

    async def _load_profile(self, user_id: str, access_token: str) -> None:
        token = self._profile_requests.issue()
        response = await (
            self._backend.table(PROFILES_TABLE, access_token=access_token)
            .select("*")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )

        if not self.alive or not self._profile_requests.is_current(token):
            logger.debug("Discarding stale profile response", user_id=user_id)
            return

        self.profile = _parse_profile(response, user_id)

    # =========================================================================
    # Auth actions
    # =========================================================================

    async def sign_up(
        self,
        email: str,
        password: str,
        sector: Sector = Sector.RETAIL,
        phone: str | None = None,
    ) -> AuthSession | None:
        """Register a new account.

        Returns:
            The new session, or None when the backend requires email
            confirmation first.

        Raises:
            AuthenticationError: If the backend rejects the sign-up.
        """
        response = await self._backend.sign_up(
            email,
            password,
            data={"setor": sector.value, "phone": phone},
            redirect_to=self.redirect_url,
        )
        _raise_for_auth_error(response, "Sign-up failed")

        data = response.data if isinstance(response.data, dict) else {}
        if not data.get("access_token"):
            logger.info("Sign-up pending email confirmation", email=email)
            return None

        session = AuthSession.model_validate(data)
        await self.handle_auth_event(AuthEvent.SIGNED_IN, session)
        return session

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password.

        Raises:
            AuthenticationError: If the credentials are rejected.
        """
        response = await self._backend.sign_in_with_password(email, password)
        _raise_for_auth_error(response, "Sign-in failed")

        session = AuthSession.model_validate(response.data)
        await self.handle_auth_event(AuthEvent.SIGNED_IN, session)
        return session

    def sign_in_with_oauth(self, provider: str = "google") -> str:
        """URL that starts an OAuth sign-in."""
        return self._backend.oauth_authorize_url(provider, self.redirect_url or "")

    async def refresh(self, refresh_token: str | None = None) -> AuthSession:
        """Refresh the session tokens.

        Raises:
            AuthenticationError: If there is no refresh token or it is rejected.
        """
        token = refresh_token or (self.session.refresh_token if self.session else None)
        if not token:
            raise AuthenticationError("No refresh token available")

        response = await self._backend.refresh_session(token)
        _raise_for_auth_error(response, "Token refresh failed")

        session = AuthSession.model_validate(response.data)
        await self.handle_auth_event(AuthEvent.TOKEN_REFRESHED, session)
        return session

    async def sign_out(self) -> None:
        """Sign out; the local session and profile are always cleared."""
        if self.session is not None:
            response = await self._backend.sign_out(self.session.access_token)
            if not response.success and response.error:
                logger.warning(
                    "Backend sign-out failed",
                    error_code=response.error.error_code,
                    message=response.error.message,
                )
        await self.handle_auth_event(AuthEvent.SIGNED_OUT, None)

    def close(self) -> None:
        """Detach the provider; late responses are ignored from now on."""
        self.alive = False
        self._listeners.clear()


def _parse_profile(response: BackendResponse, user_id: str) -> Profile | None:
    if not response.success:
        logger.error(
            "Profile error",
            user_id=user_id,
            error_code=response.error.error_code if response.error else None,
        )
        return None

    rows = response.data or []
    if not rows:
        return None
    try:
        return Profile.model_validate(rows[0])
    except ValidationError as e:
        logger.error("Malformed profile row", user_id=user_id, error=str(e))
        return None


def _raise_for_auth_error(response: BackendResponse, action: str) -> None:
    if response.success:
        return
    error = response.error
    message = error.message if error else action
    logger.warning(action, error_code=error.error_code if error else None)
    raise AuthenticationError(
        message,
        details={"backend_error_code": error.error_code if error else None},
    )
