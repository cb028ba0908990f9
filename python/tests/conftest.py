"""Pytest configuration and fixtures for Series Lounge tests.

Test isolation strategy:
- Settings are built directly from keyword aliases, never from the process env
- The process-wide validator container is reset around every test
- Apps are built with the same factory + configurator the bootstrap uses
"""

import sys
from collections.abc import Callable, Generator
from pathlib import Path

# Add repo root to sys.path for importing top-level packages (e.g., apps)
_repo_root = Path(__file__).parent.parent.parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from series_lounge.app import configure_app, create_application
from series_lounge.config import Settings, clear_settings_cache
from series_lounge.container import reset_container
from tests.helpers import LoginBlocklist, make_settings, echo_router


@pytest.fixture(autouse=True)
def isolate_process_state() -> Generator[None, None, None]:
    """Reset process-wide caches so tests never see each other's links."""
    reset_container()
    clear_settings_cache()
    yield
    reset_container()
    clear_settings_cache()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def build_app(settings: Settings) -> Callable[..., FastAPI]:
    """Factory for configured apps with the test routes mounted."""

    def _build(**kwargs) -> FastAPI:
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("raw_body", True)
        kwargs.setdefault("routers", [echo_router])
        kwargs.setdefault("log_requests", False)
        return configure_app(create_application(**kwargs))

    return _build


@pytest.fixture
def app(build_app) -> FastAPI:
    return build_app(providers={LoginBlocklist: LoginBlocklist({"root"})})


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Client that turns unhandled server errors into 500 responses instead of raising."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
