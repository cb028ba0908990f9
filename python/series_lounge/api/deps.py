"""FastAPI dependencies for route handlers.

Expose what the bootstrap middleware attaches to each request, plus services
from the application container.
"""

from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import Request

from series_lounge.container import get_app_container

T = TypeVar("T")


def get_cookies(request: Request) -> dict[str, Any]:
    """Cookies parsed by CookieParserMiddleware ({} when it is not installed)."""
    return getattr(request.state, "cookies", {})


def get_raw_body(request: Request) -> bytes | None:
    """Unparsed request body, or None when raw body capture is off."""
    return getattr(request.state, "raw_body", None)


def get_service(cls: type[T]) -> Callable[[Request], T]:
    """Build a dependency resolving cls from the application container.

    Usage:
        def handler(users: UsersService = Depends(get_service(UsersService))): ...
    """

    def dependency(request: Request) -> T:
        return get_app_container(request.app).get(cls)

    return dependency
