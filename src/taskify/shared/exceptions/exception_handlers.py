"""
FastAPI exception handlers mapping the Taskify error taxonomy to JSON
responses of the form ``{"error": "<message>"}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import NotFoundError, StoreError, ValidationError

log = logging.getLogger(__name__)

GENERIC_STORE_ERROR_MESSAGE = "Database operation failed"
GENERIC_INTERNAL_ERROR_MESSAGE = "Internal server error"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _request_context(request: Request) -> dict:
    return {"path": request.url.path, "method": request.method}


def _describe_validation_errors(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if first.get("type") == "json_invalid":
        return "Request body is not valid JSON"
    if location:
        return f"Invalid value for '{location}': {first.get('msg')}"
    return f"Invalid request: {first.get('msg')}"


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    log.info(
        "ValidationError: %s", exc.message, extra=_request_context(request)
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.message)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report body/path parsing failures as 400 instead of FastAPI's 422."""
    message = _describe_validation_errors(exc)
    log.info(
        "RequestValidationError: %s", exc.errors(), extra=_request_context(request)
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    log.info("NotFoundError: %s", exc.message, extra=_request_context(request))
    return _error_response(status.HTTP_404_NOT_FOUND, exc.message)


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Log the store failure in full and answer with a generic message."""
    log.error(
        "StoreError: %s",
        exc.message,
        extra=_request_context(request),
        exc_info=True,
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_STORE_ERROR_MESSAGE
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    log.warning(
        "HTTP exception: Status=%s, Detail=%s, Request: %s %s",
        exc.status_code,
        exc.detail,
        request.method,
        request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception(
        "Unhandled error: %s, Request: %s %s", exc, request.method, request.url.path
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_INTERNAL_ERROR_MESSAGE
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the Taskify exception handlers on a FastAPI application."""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
