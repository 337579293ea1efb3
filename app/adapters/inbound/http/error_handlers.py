"""Mapping of domain errors to HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.adapters.inbound.http.schemas import failure
from app.domain.errors import (
    ExternalServiceError,
    NotFoundError,
    RateLimitExceededError,
    ValidationError,
)
from app.infrastructure.logging.logger import logger


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=failure(str(exc)))


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=failure(str(exc)))


async def _rate_limited(request: Request, exc: RateLimitExceededError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=failure("Rate limit exceeded. Try again in a moment."),
        headers={"Retry-After": str(exc.retry_after_seconds)},
    )


async def _external_service(request: Request, exc: ExternalServiceError) -> JSONResponse:
    logger.error(f"External service failure on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=failure(f"{exc.service} is temporarily unavailable"),
    )


async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=failure("; ".join(messages) or "Invalid request"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register envelope-producing handlers for domain and request errors.

    Args:
        app: FastAPI application
    """
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(RateLimitExceededError, _rate_limited)
    app.add_exception_handler(ExternalServiceError, _external_service)
    app.add_exception_handler(RequestValidationError, _request_validation)
