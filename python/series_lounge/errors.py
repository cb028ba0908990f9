"""API error definitions.

All API errors are defined here with their corresponding HTTP status codes.
Validation failures are a separate shape: a list of ValidationErrorEntry
carried by BadRequestError.
"""

from enum import Enum

from pydantic import BaseModel, Field


class ApiErrorCode(str, Enum):
    """Standardized error codes for the API.

    Format: E_CATEGORY_NAME
    """

    # Validation errors (400)
    E_INVALID_REQUEST = "E_INVALID_REQUEST"

    # Authentication errors (401)
    E_UNAUTHENTICATED = "E_UNAUTHENTICATED"

    # Authorization errors (403)
    E_FORBIDDEN = "E_FORBIDDEN"

    # Not found errors (404)
    E_NOT_FOUND = "E_NOT_FOUND"

    # Method errors (405)
    E_METHOD_NOT_ALLOWED = "E_METHOD_NOT_ALLOWED"

    # Server errors
    E_INTERNAL = "E_INTERNAL"  # 500
    E_UNAVAILABLE = "E_UNAVAILABLE"  # 503


ERROR_CODE_TO_STATUS: dict[ApiErrorCode, int] = {
    ApiErrorCode.E_INVALID_REQUEST: 400,
    ApiErrorCode.E_UNAUTHENTICATED: 401,
    ApiErrorCode.E_FORBIDDEN: 403,
    ApiErrorCode.E_NOT_FOUND: 404,
    ApiErrorCode.E_METHOD_NOT_ALLOWED: 405,
    ApiErrorCode.E_INTERNAL: 500,
    ApiErrorCode.E_UNAVAILABLE: 503,
}

STATUS_TO_ERROR_CODE: dict[int, ApiErrorCode] = {
    400: ApiErrorCode.E_INVALID_REQUEST,
    401: ApiErrorCode.E_UNAUTHENTICATED,
    403: ApiErrorCode.E_FORBIDDEN,
    404: ApiErrorCode.E_NOT_FOUND,
    405: ApiErrorCode.E_METHOD_NOT_ALLOWED,
    422: ApiErrorCode.E_INVALID_REQUEST,
    503: ApiErrorCode.E_UNAVAILABLE,
}


class ValidationErrorEntry(BaseModel):
    """One invalid input field.

    message is a JSON object string mapping constraint name to description,
    e.g. '{"string_too_short": "String should have at least 3 characters"}'.
    """

    field: str = Field(..., description="Name of the invalid property")
    message: str = Field(..., description="JSON-serialized map of failed constraints")


class ApiError(Exception):
    """Base exception for API errors.

    Attributes:
        code: The error code enum value
        message: Human-readable error message
        status_code: HTTP status code (derived from code)
    """

    def __init__(self, code: ApiErrorCode, message: str):
        self.code = code
        self.message = message
        self.status_code = ERROR_CODE_TO_STATUS.get(code, 500)
        super().__init__(message)


class NotFoundError(ApiError):
    """Resource not found error."""

    def __init__(self, code: ApiErrorCode = ApiErrorCode.E_NOT_FOUND, message: str = "Not found"):
        super().__init__(code, message)


class InvalidRequestError(ApiError):
    """Invalid request error."""

    def __init__(
        self, code: ApiErrorCode = ApiErrorCode.E_INVALID_REQUEST, message: str = "Invalid request"
    ):
        super().__init__(code, message)


class BadRequestError(InvalidRequestError):
    """Request input failed validation.

    Always carries the complete list of invalid fields.
    """

    def __init__(self, errors: list[ValidationErrorEntry]):
        self.errors = list(errors)
        fields = ", ".join(entry.field for entry in self.errors)
        super().__init__(message=f"Validation failed: {fields}" if fields else "Validation failed")
