"""
Error handling for controllers and the application.

error_handler(resource) returns a `handle(operation)` decorator factory.
Decorated controller methods never build error responses themselves:
AppError becomes its envelope, anything else is logged and returned as a
sanitized "{OPERATION}_FAILED" envelope.

register_error_handlers(app) installs the global handlers for errors raised
outside a decorated method (dependencies, request validation).
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from worksite.core.errors import AppError, translate_db_error
from worksite.core.responses import error_body

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


_REQUEST_PARTS = {"body", "query", "path", "header", "cookie"}


def _field_path(loc: tuple[Any, ...]) -> str:
    """Dotted field path without the leading request part (body, query, ...)."""
    parts = list(loc)
    if len(parts) > 1 and parts[0] in _REQUEST_PARTS:
        parts = parts[1:]
    return ".".join(str(part) for part in parts)


def _app_error_response(exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def error_handler(resource: str) -> Callable[[str], Callable[[F], F]]:
    """Build the per-resource `handle(operation)` decorator factory."""

    def handle(operation: str) -> Callable[[F], F]:
        failed_message = f"Failed to {operation} {resource}"
        failed_code = f"{operation.upper()}_FAILED"
        log_extra = {"resource": resource, "operation": operation}

        def decorator(func: F) -> F:
            @functools.wraps(func)
            async def wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    return await func(*args, **kwargs)
                except AppError as exc:
                    logger.info(
                        "%s: %s",
                        failed_message,
                        exc.message,
                        extra={**log_extra, "error_code": exc.code},
                    )
                    return _app_error_response(exc)
                except SQLAlchemyError as exc:
                    return _app_error_response(translate_db_error(exc, resource))
                except Exception:
                    logger.exception(failed_message, extra=log_extra)
                    return JSONResponse(
                        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                        content=error_body(failed_message, failed_code),
                    )

            return wrapper  # type: ignore[return-value]

        return decorator

    return handle


# ---------------------------------------------------------------------------
# Global handlers
# ---------------------------------------------------------------------------

def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        logger.info(
            exc.message,
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return _app_error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ) -> JSONResponse:
        logger.info(
            "Validation error on %s",
            request.url.path,
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(
                "Invalid request data",
                "VALIDATION_ERROR",
                [
                    {
                        "field": _field_path(e["loc"]),
                        "message": e["msg"],
                        "type": e["type"],
                    }
                    for e in exc.errors()
                ],
            ),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception on %s",
            request.url.path,
            exc_info=exc,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("An unexpected error occurred", "INTERNAL_SERVER_ERROR"),
        )
