"""Request validation pipe.

pydantic already turns raw payloads into typed models and reports every failed
constraint on every field. This pipe replaces FastAPI's RequestValidationError
handler and reshapes those errors:

    [{"field": "<property>", "message": "{\"<constraint>\": \"<description>\"}"}, ...]

one entry per invalid top-level property, in the order pydantic reported them.
The entries are wrapped in an exception by exception_factory (BadRequestError by
default) and rendered through the application's exception handlers, so the
client always receives the complete list.
"""

import inspect
import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import Response

from series_lounge.errors import BadRequestError, ValidationErrorEntry

# First element of a pydantic error location names the request part
REQUEST_SOURCES = {"body", "query", "path", "header", "cookie"}


@dataclass
class FieldErrors:
    """All failed constraints for one input property."""

    property: str
    constraints: dict[str, str] = field(default_factory=dict)

    def to_entry(self) -> ValidationErrorEntry:
        return ValidationErrorEntry(field=self.property, message=json.dumps(self.constraints))


def error_property(error: dict[str, Any]) -> str:
    """Return the top-level property a pydantic error belongs to."""
    loc = tuple(error.get("loc") or ())
    if not loc:
        return "body"
    if loc[0] in REQUEST_SOURCES:
        # json_invalid reports a character offset, not a property
        if len(loc) == 1 or error.get("type") == "json_invalid":
            return str(loc[0])
        return str(loc[1])
    return str(loc[0])


def group_errors(
    errors: Sequence[dict[str, Any]], stop_at_first_error: bool = False
) -> list[FieldErrors]:
    """Group pydantic errors by property, keeping first-seen order.

    Args:
        errors: Errors as returned by RequestValidationError.errors().
        stop_at_first_error: Keep only the first failed constraint per property.
    """
    grouped: dict[str, FieldErrors] = {}
    for error in errors:
        name = error_property(error)
        entry = grouped.setdefault(name, FieldErrors(property=name))
        if stop_at_first_error and entry.constraints:
            continue
        constraint = str(error.get("type") or "invalid")
        entry.constraints.setdefault(constraint, str(error.get("msg", "")))
    return list(grouped.values())


def default_exception_factory(errors: list[FieldErrors]) -> Exception:
    return BadRequestError([e.to_entry() for e in errors])


async def render_exception(request: Request, exc: Exception) -> Response:
    """Render exc with the handler the application registered for its type."""
    handlers = request.app.exception_handlers
    for cls in type(exc).__mro__:
        handler = handlers.get(cls)
        if handler is not None:
            response = handler(request, exc)
            if inspect.isawaitable(response):
                response = await response
            return response
    raise exc


class ValidationPipe:
    """Global validation pipe.

    Args:
        stop_at_first_error: Report only the first failed constraint per property.
        exception_factory: Builds the exception raised for a failed request
            from the grouped errors. Defaults to BadRequestError.
    """

    def __init__(
        self,
        *,
        stop_at_first_error: bool = False,
        exception_factory: Callable[[list[FieldErrors]], Exception] | None = None,
    ):
        self.stop_at_first_error = stop_at_first_error
        self.exception_factory = exception_factory or default_exception_factory

    def build_exception(self, exc: RequestValidationError) -> Exception:
        return self.exception_factory(group_errors(exc.errors(), self.stop_at_first_error))

    async def __call__(self, request: Request, exc: RequestValidationError) -> Response:
        return await render_exception(request, self.build_exception(exc))

    def install(self, app: FastAPI) -> None:
        app.add_exception_handler(RequestValidationError, self)
