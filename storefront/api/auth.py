"""Auth endpoints.

Thin pass-through to the hosted auth backend. Tokens are returned to the
client, which sends the access token back as ``Authorization: Bearer``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_session_provider
from storefront.api.schemas import (
    ErrorResponse,
    OAuthResponse,
    RefreshRequest,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
    SignUpResponse,
)
from storefront.application.session_provider import SessionProvider

router = APIRouter(prefix="/auth", tags=["Auth"])


def _session_response(provider: SessionProvider, include_tokens: bool = False) -> SessionResponse:
    session = provider.session if include_tokens else None
    return SessionResponse(
        authenticated=provider.is_authenticated,
        user_id=provider.user.id if provider.user else None,
        email=provider.user.email if provider.user else None,
        sector=provider.sector,
        is_admin=provider.is_admin,
        access_token=session.access_token if session else None,
        refresh_token=session.refresh_token if session else None,
        expires_in=session.expires_in if session else None,
    )


@router.get("/session", response_model=SessionResponse)
async def get_session(
    provider: Annotated[SessionProvider, Depends(get_session_provider)],
) -> SessionResponse:
    """Describe the requesting viewer (anonymous viewers are retail)."""
    return _session_response(provider)


@router.post(
    "/sign-up",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse}},
)
async def sign_up(
    request: SignUpRequest,
    provider: Annotated[SessionProvider, Depends(get_session_provider)],
) -> SignUpResponse:
    """Register an account with a sector."""
    session = await provider.sign_up(
        request.email,
        request.password,
        sector=request.sector,
        phone=request.phone,
    )
    if session is None:
        return SignUpResponse(confirmation_required=True)
    return SignUpResponse(
        confirmation_required=False,
        session=_session_response(provider, include_tokens=True),
    )


@router.post(
    "/sign-in",
    response_model=SessionResponse,
    responses={401: {"model": ErrorResponse}},
)
async def sign_in(
    request: SignInRequest,
    provider: Annotated[SessionProvider, Depends(get_session_provider)],
) -> SessionResponse:
    """Sign in with email and password."""
    await provider.sign_in(request.email, request.password)
    return _session_response(provider, include_tokens=True)


@router.get("/oauth/{oauth_provider}", response_model=OAuthResponse)
async def oauth_sign_in(
    oauth_provider: str,
    provider: Annotated[SessionProvider, Depends(get_session_provider)],
) -> OAuthResponse:
    """URL that starts an OAuth sign-in (e.g. ``google``)."""
    return OAuthResponse(
        provider=oauth_provider,
        url=provider.sign_in_with_oauth(oauth_provider),
    )


@router.post(
    "/refresh",
    response_model=SessionResponse,
    responses={401: {"model": ErrorResponse}},
)
async def refresh_session(
    request: RefreshRequest,
    provider: Annotated[SessionProvider, Depends(get_session_provider)],
) -> SessionResponse:
    """Exchange a refresh token for new session tokens."""
    await provider.refresh(request.refresh_token)
    return _session_response(provider, include_tokens=True)


@router.post("/sign-out", response_model=SessionResponse)
async def sign_out(
    provider: Annotated[SessionProvider, Depends(get_session_provider)],
) -> SessionResponse:
    """Sign out the requesting viewer."""
    await provider.sign_out()
    return _session_response(provider)
