"""Cookie header parsing middleware.

Parses the Cookie request header once per request and stores the result on
request.state.cookies before any handler runs. Splitting and unquoting come
from Starlette's cookie_parser (the same parser behind request.cookies); on
top of it:
- "a=1; b=2" -> {"a": "1", "b": "2"}
- values are percent-decoded
- values prefixed with "j:" are decoded as JSON ("JSON cookies"); a result
  that is invalid or falsy (0, false, null, "") keeps the raw string
- for a repeated name the last occurrence wins
- pairs without a name are dropped

Cookies are neither signed nor encrypted here.
"""

import json
from typing import Any
from urllib.parse import unquote

from starlette.datastructures import Headers
from starlette.requests import cookie_parser
from starlette.types import ASGIApp, Receive, Scope, Send

from series_lounge.middleware.raw_body import scope_state

JSON_COOKIE_PREFIX = "j:"


def _decode(value: str) -> str:
    if "%" not in value:
        return value
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        return value


def _is_falsy_json(value: Any) -> bool:
    # Containers count as present, as in the JSON cookie convention
    if isinstance(value, (dict, list)):
        return False
    return value is None or value is False or value == 0 or value == ""


def _json_cookie(value: str) -> Any:
    if not value.startswith(JSON_COOKIE_PREFIX):
        return value
    try:
        parsed = json.loads(value[len(JSON_COOKIE_PREFIX) :])
    except ValueError:
        return value
    return value if _is_falsy_json(parsed) else parsed


def parse_cookie_header(header: str | None) -> dict[str, Any]:
    """Parse a Cookie header value into a name -> value mapping."""
    if not header:
        return {}
    return {
        name: _json_cookie(_decode(value))
        for name, value in cookie_parser(header).items()
        if name
    }


class CookieParserMiddleware:
    """Pure ASGI middleware exposing parsed cookies on request.state.cookies."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            header = Headers(scope=scope).get("cookie")
            scope_state(scope)["cookies"] = parse_cookie_header(header)
        await self.app(scope, receive, send)
