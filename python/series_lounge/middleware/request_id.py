"""X-Request-ID middleware for request correlation and access logging.

A valid incoming X-Request-ID is kept (UUIDs normalized to lowercase);
anything else is replaced by a fresh UUID4. The ID is stored on
request.state.request_id, bound to the logging context, echoed in the
response header and included in one access log entry per request.
"""

import re
import time
import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from series_lounge.logging import clear_request_context, get_logger, set_request_context
from series_lounge.middleware.raw_body import scope_state

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

# Alphanumeric, dots, hyphens, underscores
VALID_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,128}$")

UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)

logger = get_logger(__name__)


def is_valid_request_id(value: str) -> bool:
    """Check if value is acceptable as a request ID (<= 128 bytes, UUID or slug)."""
    if len(value.encode("utf-8")) > MAX_REQUEST_ID_LENGTH:
        return False
    return bool(UUID_PATTERN.match(value) or VALID_REQUEST_ID_PATTERN.match(value))


def resolve_request_id(incoming: str | None) -> str:
    """Return the normalized incoming ID, or a new UUID4 if missing/invalid."""
    if incoming and is_valid_request_id(incoming):
        return incoming.lower() if UUID_PATTERN.match(incoming) else incoming
    return str(uuid.uuid4())


class RequestIDMiddleware:
    """Pure ASGI middleware for X-Request-ID handling and access logging.

    Args:
        app: The ASGI application.
        log_requests: If True, log access entries for each request.
    """

    def __init__(self, app: ASGIApp, log_requests: bool = True):
        self.app = app
        self.log_requests = log_requests

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.monotonic()
        request_id = resolve_request_id(Headers(scope=scope).get(REQUEST_ID_HEADER))
        scope_state(scope)["request_id"] = request_id
        set_request_context(request_id, path=scope["path"], method=scope["method"])

        status_code = 500

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception:
            logger.exception("request_failed")
            raise
        else:
            if self.log_requests:
                logger.info(
                    "request_completed",
                    status_code=status_code,
                    duration_ms=round((time.monotonic() - start_time) * 1000, 2),
                )
        finally:
            clear_request_context()
