"""Test routes and payload models exercised through the configured app.

Provides:
- LoginBlocklist: a service resolved from the container by a custom validator
- CreateUserRequest: a body model with several constrained fields
- echo_router: routes echoing what the middleware and pipes produced
"""

from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field, field_validator
from starlette.datastructures import QueryParams

from series_lounge.api.deps import get_cookies, get_raw_body, get_service
from series_lounge.config import Settings
from series_lounge.container import get_from_container
from series_lounge.errors import NotFoundError
from series_lounge.responses import success_response


class LoginBlocklist:
    """Logins that cannot be registered."""

    def __init__(self, blocked: set[str] | None = None):
        self.blocked = blocked if blocked is not None else {"admin"}

    def is_blocked(self, login: str) -> bool:
        return login.lower() in self.blocked


class CreateUserRequest(BaseModel):
    login: str = Field(..., min_length=3, max_length=10, pattern=r"^[a-zA-Z0-9_-]*$")
    password: str = Field(..., min_length=6, max_length=20)
    email: str = Field(..., pattern=r"^[\w.+-]+@[\w-]+\.[\w.-]+$")

    @field_validator("login")
    @classmethod
    def login_not_blocked(cls, value: str) -> str:
        if get_from_container(LoginBlocklist).is_blocked(value):
            raise ValueError("login is not available")
        return value


class Tags(BaseModel):
    tags: list[str] = Field(default_factory=list)
    meta: dict[str, Any] = Field(default_factory=dict)


echo_router = APIRouter(prefix="/echo", tags=["echo"])


@echo_router.post("/users", status_code=201)
async def create_user(body: CreateUserRequest) -> dict:
    return success_response(body.model_dump())


@echo_router.post("/tags")
async def echo_tags(body: Tags) -> dict:
    return success_response(body.model_dump())


@echo_router.post("/raw")
async def echo_raw(body: Tags, raw: bytes | None = Depends(get_raw_body)) -> dict:
    return success_response({"raw": raw.decode() if raw is not None else None, "parsed": body.tags})


@echo_router.get("/cookies")
async def echo_cookies(cookies: dict = Depends(get_cookies)) -> dict:
    return success_response(cookies)


@echo_router.get("/blocklist")
async def blocklist(service: LoginBlocklist = Depends(get_service(LoginBlocklist))) -> dict:
    return success_response(sorted(service.blocked))


@echo_router.get("/items")
async def list_items(page: int = 1, size: int = 10) -> dict:
    return success_response({"page": page, "size": size})


@echo_router.get("/search")
async def search(name: str) -> dict:
    return success_response({"name": name})


@echo_router.post("/form")
async def echo_form(request: Request) -> dict:
    return success_response(dict(QueryParams(await request.body())))


@echo_router.get("/boom")
async def boom() -> dict:
    raise RuntimeError("database exploded at /var/lib/secret")


@echo_router.get("/missing")
async def missing() -> dict:
    raise NotFoundError(message="Series not found")


def valid_user(**overrides: Any) -> dict[str, Any]:
    payload = {"login": "viewer_1", "password": "s3cret!!", "email": "viewer@example.com"}
    payload.update(overrides)
    return payload


def make_settings(**overrides: Any) -> Settings:
    """Build a Settings instance with test defaults + overrides."""
    defaults = {"SERIES_LOUNGE_ENV": "test", "LOG_FORMAT": "console"}
    defaults.update(overrides)
    return Settings(**defaults)
