from typing import Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

logger = logging.getLogger("fxwidget.errors")


class WidgetError(Exception):
    """Base class for all widget failures."""


class InputValidationError(WidgetError, ValueError):
    """Bad local input; handled locally and never sent to the quote service."""


class ServiceError(WidgetError):
    """Quote service answered with a non-success status or a malformed body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransportError(ServiceError):
    """Quote service could not be reached (connect failure, timeout)."""


def not_found_handler(request: Request, exc):  # type: ignore
    code = getattr(exc, "status_code", status.HTTP_404_NOT_FOUND)
    if code != status.HTTP_404_NOT_FOUND:
        return JSONResponse(
            status_code=code,
            content={"error": "http_error", "detail": getattr(exc, "detail", None)},
        )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "not_found",
            "detail": f"No route for {request.method} {request.url.path}",
        },
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


def service_error_handler(request: Request, exc: ServiceError):  # type: ignore
    logger.warning("quote service failure escaped to handler: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={
            "error": "service_unavailable",
            "detail": str(exc),
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
