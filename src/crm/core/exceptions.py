"""Exception handlers producing the `{success: false, message, errors?, request_id}` envelope."""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.crm.core.logging import get_logger

logger = get_logger(__name__)


def error_response(
    status_code: int,
    message: str,
    errors: list[str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the JSON error envelope returned for every failed request."""
    content: dict[str, Any] = {
        "success": False,
        "message": message,
        "request_id": correlation_id.get(),
    }
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def format_validation_errors(exc: RequestValidationError) -> list[str]:
    """Flatten pydantic errors into `field: message` strings.

    The leading location segment (body, query, path) is dropped so clients
    see the field name only.
    """
    messages = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = str(error.get("msg", "Invalid value"))
        messages.append(f"{field}: {msg}" if field else msg)
    return messages


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_response(
            exc.status_code,
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Validation failed",
            errors=format_validation_errors(exc),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        logger.warning("Integrity error reached handler", path=request.url.path, error=str(exc.orig))
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Duplicate value or invalid reference",
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_exception_handler(
        request: Request, exc: RateLimitExceeded
    ) -> JSONResponse:
        logger.warning("Endpoint rate limit exceeded", path=request.url.path, limit=exc.detail)
        return error_response(
            status.HTTP_429_TOO_MANY_REQUESTS,
            f"Too many requests: {exc.detail}",
            headers={"Retry-After": "60"},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=correlation_id.get(),
            path=request.url.path,
        )
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
        )
