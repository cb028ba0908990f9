"""FastAPI application creation and configuration.

create_application() builds the bare instance: service container on
app.state, request-id correlation, optional raw body capture and the route
table (under GLOBAL_PREFIX when set).

configure_app() then applies the setup steps, in this order:
1. Container linkage (validators resolve services from app.state.container)
2. Exception filter (every request error leaves as a normalized response)
3. Cookie parsing
4. Global pipes: TrimPipe, then ValidationPipe
5. Swagger documentation at /api/docs

Middleware Ordering:
- add_middleware() inserts at the front, so later registrations run first
- Pipes are appended instead and always run last, right before routing

Actual execution order per request:
1. CookieParserMiddleware
2. RawBodyMiddleware (untouched bytes)
3. RequestIDMiddleware
4. TrimMiddleware
5. Route handler (body validated by pydantic)
"""

from collections.abc import Iterable
from typing import Any

from fastapi import APIRouter, FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from series_lounge.api.routes import create_api_router
from series_lounge.config import Settings, get_settings
from series_lounge.container import ContainerLinkResult, ServiceContainer, link_app_container
from series_lounge.docs import DOCS, setup_swagger
from series_lounge.errors import ApiError, BadRequestError
from series_lounge.logging import get_logger
from series_lounge.middleware import CookieParserMiddleware, RawBodyMiddleware, RequestIDMiddleware
from series_lounge.pipes import TrimPipe, ValidationPipe, use_global_pipes
from series_lounge.responses import (
    api_error_handler,
    bad_request_handler,
    http_exception_handler,
    unhandled_exception_handler,
)

logger = get_logger(__name__)


def create_application(
    *,
    settings: Settings | None = None,
    raw_body: bool = False,
    routers: Iterable[APIRouter] = (),
    providers: dict[Any, Any] | None = None,
    log_requests: bool = True,
) -> FastAPI:
    """Create the bare FastAPI application.

    Args:
        settings: Settings to attach (defaults to get_settings()).
        raw_body: Capture unparsed request bodies on request.state.raw_body.
        routers: Extra routers mounted after the health route.
        providers: Services registered in the application container.
        log_requests: Whether to log access entries for each request.

    Returns:
        FastAPI instance, not yet configured.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=DOCS.title,
        description=DOCS.description,
        version=DOCS.version,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    container = ServiceContainer()
    container.register(Settings, settings)
    for key, provider in (providers or {}).items():
        container.register(key, provider)
    app.state.container = container

    app.add_middleware(RequestIDMiddleware, log_requests=log_requests)
    if raw_body:
        app.add_middleware(RawBodyMiddleware)

    # Inert unless GLOBAL_PREFIX is set
    app.include_router(create_api_router(*routers), prefix=settings.global_prefix or "")

    return app


def setup_container(app: FastAPI) -> ContainerLinkResult:
    """Link the application's service container for custom validators."""
    return link_app_container(app, fallback_on_errors=True)


def setup_exception_filter(app: FastAPI) -> None:
    """Register the global exception handlers."""
    app.add_exception_handler(BadRequestError, bad_request_handler)
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def setup_cookie_parser(app: FastAPI) -> None:
    app.add_middleware(CookieParserMiddleware)


def setup_global_pipes(app: FastAPI) -> None:
    """Trim string input, then validate it, reporting every invalid field."""
    use_global_pipes(
        app,
        TrimPipe(),
        ValidationPipe(stop_at_first_error=False),
    )


def configure_app(app: FastAPI) -> FastAPI:
    """Apply the setup steps to app.

    Args:
        app: Instance from create_application().

    Returns:
        The same instance, configured.
    """
    link_result = setup_container(app)
    setup_exception_filter(app)
    setup_cookie_parser(app)
    setup_global_pipes(app)
    setup_swagger(app)

    logger.info("app_configured", container=link_result.value)
    return app
