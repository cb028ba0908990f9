"""API response envelope helpers and exception handlers.

Response shapes:
- Success: { "data": ... }
- Error: { "error": { "code": "E_...", "message": "...", "request_id": "..." } }
- Validation failure (400): [ { "field": "...", "message": "{...}" }, ... ]

Together the handlers form the global exception filter: every error raised
while serving a request leaves as one of the shapes above.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from series_lounge.errors import (
    STATUS_TO_ERROR_CODE,
    ApiError,
    ApiErrorCode,
    BadRequestError,
)
from series_lounge.logging import get_logger, get_request_id
from series_lounge.middleware.request_id import REQUEST_ID_HEADER

logger = get_logger(__name__)


def success_response(data: Any) -> dict[str, Any]:
    """Create a success response envelope.

    Args:
        data: The response data to wrap.

    Returns:
        Dict with "data" key containing the response.
    """
    return {"data": data}


def error_response(
    code: ApiErrorCode, message: str, request_id: str | None = None
) -> dict[str, Any]:
    """Create an error response envelope.

    Args:
        code: The error code enum value.
        message: Human-readable error message.
        request_id: Optional request ID for correlation (auto-populated from context if None).

    Returns:
        Dict with "error" key containing code, message, and request_id.
    """
    if request_id is None:
        request_id = get_request_id()

    error = {"code": code.value, "message": message}
    if request_id:
        error["request_id"] = request_id

    return {"error": error}


def _request_id(request: Request) -> str | None:
    # The outermost handlers run after the request-id middleware has cleared its context
    return get_request_id() or getattr(request.state, "request_id", None)


async def bad_request_handler(request: Request, exc: BadRequestError) -> JSONResponse:
    """Render a validation failure as the list of invalid fields."""
    logger.info(
        "request_validation_failed",
        fields=[entry.field for entry in exc.errors],
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=[entry.model_dump() for entry in exc.errors],
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Handle ApiError exceptions and return proper JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.code, exc.message, _request_id(request)),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle Starlette/FastAPI HTTPException and return proper JSON response."""
    code = STATUS_TO_ERROR_CODE.get(exc.status_code, ApiErrorCode.E_INTERNAL)
    message = str(exc.detail) if exc.detail else "An error occurred"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(code, message, _request_id(request)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions and return 500 with E_INTERNAL.

    Logs the exception server-side but never leaks details to client.
    """
    logger.exception("unhandled_exception", error_type=type(exc).__name__)

    # Rendered outside RequestIDMiddleware, so the header is set here
    request_id = _request_id(request)
    return JSONResponse(
        status_code=500,
        content=error_response(ApiErrorCode.E_INTERNAL, "Internal server error", request_id),
        headers={REQUEST_ID_HEADER: request_id} if request_id else None,
    )
