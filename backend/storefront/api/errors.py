"""
Exception handlers

Maps the storefront error hierarchy onto HTTP status codes so routers can
let domain errors propagate.
"""
import logging
from typing import List, Tuple, Type

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from storefront.domain.exceptions import (
    DomainError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidOrderTransitionError,
    OrderNotEditableError,
    RepositoryError,
    StorefrontError,
)

logger = logging.getLogger(__name__)

# First match wins, so subclasses come before their bases
STATUS_BY_ERROR: List[Tuple[Type[StorefrontError], int]] = [
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateEntityError, status.HTTP_409_CONFLICT),
    (InvalidOrderTransitionError, status.HTTP_409_CONFLICT),
    (OrderNotEditableError, status.HTTP_409_CONFLICT),
    (RepositoryError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (DomainError, status.HTTP_400_BAD_REQUEST),
]


def status_for(exc: StorefrontError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "detail": exc.message, "error": type(exc).__name__},
    )


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Validation errors raised while building domain objects inside a route"""
    return JSONResponse(
        status_code=422,
        content={
            "status": "error",
            "detail": exc.errors(include_url=False, include_context=False, include_input=False),
            "error": "ValidationError",
        },
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request body, path or query parameters"""
    return JSONResponse(
        status_code=422,
        content={
            "status": "error",
            "detail": jsonable_encoder(exc.errors()),
            "error": "ValidationError",
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
