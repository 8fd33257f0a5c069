"""Storefront API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, error handlers and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.auth import router as auth_router
from storefront.api.catalog import router as catalog_router
from storefront.api.contact import router as contact_router
from storefront.api.health import router as health_router
from storefront.api.middleware import setup_middleware
from storefront.domain.exceptions import (
    AuthenticationError,
    ContactNotConfiguredError,
    InvalidZoomStateError,
    PageOutOfRangeError,
    ProductNotFoundError,
    StorefrontError,
)
from storefront.infrastructure.backend_client import BackendClient
from storefront.infrastructure.config import settings
from storefront.infrastructure.credentials import load_store_credentials
from storefront.infrastructure.logging_config import configure_logging

configure_logging(settings.log_level, json_output=settings.log_json)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting storefront API",
        version=settings.api_version,
        backend_url=settings.backend_url,
    )

    app.state.backend = BackendClient(
        base_url=settings.backend_url,
        anon_key=settings.backend_anon_key,
        timeout=settings.backend_timeout,
    )
    app.state.store_credentials = load_store_credentials(settings.store_credentials_path)

    yield

    await app.state.backend.close()
    logger.info("Storefront API shutdown complete")


app = FastAPI(
    title="Storefront API",
    description="Catalog browsing, tiered pricing and WhatsApp contact links",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_middleware(app)

app.include_router(health_router)
app.include_router(catalog_router)
app.include_router(contact_router)
app.include_router(auth_router)


# ============================================================================
# Error Handlers
# ============================================================================

STATUS_BY_ERROR: dict[type[StorefrontError], int] = {
    ProductNotFoundError: status.HTTP_404_NOT_FOUND,
    PageOutOfRangeError: status.HTTP_400_BAD_REQUEST,
    InvalidZoomStateError: status.HTTP_409_CONFLICT,
    ContactNotConfiguredError: status.HTTP_409_CONFLICT,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
}


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """Map domain errors to HTTP responses."""
    status_code = STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.warning(
        "Request failed",
        path=request.url.path,
        error_code=exc.error_code,
        message=exc.message,
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error_code": detail.get("error_code", "ERROR"),
                "message": detail.get("message", str(detail)),
                "details": detail.get("details", []),
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": "ERROR",
            "message": str(detail),
            "details": [],
        },
    )


def main() -> None:
    """Run the storefront API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
