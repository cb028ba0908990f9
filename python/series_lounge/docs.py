"""OpenAPI document and Swagger UI.

The document is generated from the live route table the first time it is
requested and cached on the app (FastAPI's app.openapi_schema), so a restart
picks up route changes. Security schemes are declared for documentation only;
nothing here enforces them.

Mounted paths:
    GET /api/docs       Swagger UI
    GET /api/docs-json  OpenAPI document
"""

from dataclasses import dataclass, field
from typing import Any

from fastapi import FastAPI
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.openapi.utils import get_openapi
from fastapi.responses import HTMLResponse, JSONResponse

DOCS_PATH = "/api/docs"


@dataclass(frozen=True)
class SecurityScheme:
    name: str
    scheme: str
    description: str
    type: str = "http"

    def as_openapi(self) -> dict[str, str]:
        return {"type": self.type, "scheme": self.scheme, "description": self.description}


@dataclass(frozen=True)
class DocsDescriptor:
    """Static description of the API used to build the OpenAPI document."""

    title: str
    description: str
    version: str
    security_schemes: tuple[SecurityScheme, ...] = field(default_factory=tuple)

    def components(self) -> dict[str, Any]:
        return {
            "securitySchemes": {s.name: s.as_openapi() for s in self.security_schemes},
        }


DOCS = DocsDescriptor(
    title="IT-Incubator API",
    description=(
        "API for IT-Incubator project. This API provides endpoints for managing users, "
        "posts, and comments."
    ),
    version="36.0",
    security_schemes=(
        SecurityScheme(name="bearer", scheme="bearer", description="Enter JWT Bearer token only"),
        SecurityScheme(
            name="basic", scheme="basic", description="Login with username and password"
        ),
    ),
)


def build_openapi(app: FastAPI, descriptor: DocsDescriptor) -> dict[str, Any]:
    """Generate the OpenAPI document for app's current routes."""
    document = get_openapi(
        title=descriptor.title,
        version=descriptor.version,
        description=descriptor.description,
        routes=app.routes,
    )
    components = document.setdefault("components", {})
    components.update(descriptor.components())
    return document


def setup_swagger(app: FastAPI, descriptor: DocsDescriptor = DOCS, path: str = DOCS_PATH) -> None:
    """Mount Swagger UI at path and the document at f"{path}-json"."""
    json_path = f"{path}-json"

    def openapi() -> dict[str, Any]:
        if app.openapi_schema is None:
            app.openapi_schema = build_openapi(app, descriptor)
        return app.openapi_schema

    app.openapi = openapi  # type: ignore[method-assign]

    async def openapi_document() -> JSONResponse:
        return JSONResponse(app.openapi())

    async def swagger_ui() -> HTMLResponse:
        return get_swagger_ui_html(openapi_url=json_path, title=f"{descriptor.title} - Swagger UI")

    app.add_api_route(json_path, openapi_document, methods=["GET"], include_in_schema=False)
    app.add_api_route(path, swagger_ui, methods=["GET"], include_in_schema=False)
