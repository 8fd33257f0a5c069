"""API middleware for the storefront.

One middleware wraps every request: it correlates logs with a request ID,
tags them with the kind of viewer (anonymous or signed in) and turns
unhandled exceptions into the standard error body.
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.api.dependencies import bearer_token
from storefront.api.schemas import ErrorResponse

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds request and viewer context for the duration of a request.

    Log context:
        request_id: Client-supplied ``X-Request-ID`` or a new UUID.
        viewer: ``"authenticated"`` when a bearer token is present,
            otherwise ``"anonymous"``.

    The request ID is echoed on every response, including 500s.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        viewer = (
            "authenticated"
            if bearer_token(request.headers.get("Authorization"))
            else "anonymous"
        )
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id, viewer=viewer)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Unhandled exception",
                method=request.method,
                path=request.url.path,
            )
            response = internal_error_response(request_id)
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "viewer")

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            request_id=request_id,
            viewer=viewer,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def internal_error_response(request_id: str) -> JSONResponse:
    """500 response in the shape of every other storefront error."""
    body = ErrorResponse(
        error_code="INTERNAL_ERROR",
        message="An internal error occurred",
        details={"request_id": request_id},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )


def setup_middleware(app: FastAPI) -> None:
    """Configure middleware for the application."""
    app.add_middleware(RequestContextMiddleware)
