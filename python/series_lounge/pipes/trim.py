"""Whitespace-trimming pipe.

Runs right before routing, so validation and handlers only ever see trimmed
strings. Applies to:
- query string values
- JSON bodies: every string value, at any depth
- application/x-www-form-urlencoded bodies: every field value

Keys and non-string values are left alone. Bodies that do not parse pass
through untouched and are reported by the validation pipe. Path parameters are
route identifiers and are not rewritten.
"""

import json
from typing import Any
from urllib.parse import urlencode

from fastapi import FastAPI
from starlette.datastructures import Headers, MutableHeaders, QueryParams
from starlette.middleware import Middleware
from starlette.types import ASGIApp, Receive, Scope, Send

from series_lounge.middleware.raw_body import read_body, replay_body

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def trim_strings(value: Any) -> Any:
    """Return value with every nested string stripped."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, dict):
        return {key: trim_strings(item) for key, item in value.items()}
    if isinstance(value, list):
        return [trim_strings(item) for item in value]
    return value


def trim_urlencoded(raw: bytes) -> bytes:
    """Strip every value of an urlencoded string; unchanged input is returned as-is."""
    pairs = QueryParams(raw).multi_items()
    trimmed = [(key, value.strip()) for key, value in pairs]
    if trimmed == pairs:
        return raw
    return urlencode(trimmed).encode("ascii")


def media_type(content_type: str | None) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_json_content_type(content_type: str | None) -> bool:
    mt = media_type(content_type)
    return mt == "application/json" or mt.endswith("+json")


def trim_json_body(body: bytes) -> bytes:
    try:
        payload = json.loads(body)
    except ValueError:
        return body
    return json.dumps(trim_strings(payload), ensure_ascii=False).encode("utf-8")


class TrimMiddleware:
    """Pure ASGI middleware that trims string input before routing."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if scope.get("query_string"):
            scope["query_string"] = trim_urlencoded(scope["query_string"])

        content_type = Headers(scope=scope).get("content-type")
        if is_json_content_type(content_type):
            transform = trim_json_body
        elif media_type(content_type) == FORM_CONTENT_TYPE:
            transform = trim_urlencoded
        else:
            await self.app(scope, receive, send)
            return

        body = await read_body(receive)
        if body:
            body = transform(body)
            MutableHeaders(scope=scope)["content-length"] = str(len(body))

        await self.app(scope, replay_body(body, receive), send)


class TrimPipe:
    """Global pipe wrapper installing TrimMiddleware closest to the routes."""

    def install(self, app: FastAPI) -> None:
        # Appended, not inserted: pipes sit inside every other middleware
        app.user_middleware.append(Middleware(TrimMiddleware))
