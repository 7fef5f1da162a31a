"""
Middleware — CORS and domain exception handlers.
Version: 1.0.0
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog_hub.core.config import Settings
from catalog_hub.core.exceptions import (
    CatalogHubException,
    DatabaseError,
    DataIntegrityError,
    DraftNotFoundError,
    ExternalAPIError,
    ShopifyUserError,
    ValidationError,
)

logger = logging.getLogger("middleware")

# Ordered most specific first
_STATUS_BY_EXCEPTION: list[tuple[type[CatalogHubException], int]] = [
    (ValidationError, 400),
    (DraftNotFoundError, 404),
    (ShopifyUserError, 422),
    (DataIntegrityError, 422),
    (ExternalAPIError, 502),
    (DatabaseError, 500),
]


def apply_cors(app: FastAPI, settings: Settings) -> None:
    """Apply CORS middleware using the configured origins."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def status_for(exc: CatalogHubException) -> int:
    for exc_type, status_code in _STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return status_code
    return 500


async def _handle_catalog_hub_exception(request: Request, exc: CatalogHubException) -> JSONResponse:
    status_code = status_for(exc)
    logger.warning("request failed path=%s status=%s error=%s", request.url.path, status_code, exc)
    content = {"detail": str(exc)}
    if isinstance(exc, ShopifyUserError):
        content["user_errors"] = exc.user_errors
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain exceptions into HTTP responses."""
    app.add_exception_handler(CatalogHubException, _handle_catalog_hub_exception)
