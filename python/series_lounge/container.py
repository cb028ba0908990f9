"""Service container and validator linkage.

The application keeps its services in a ServiceContainer on app.state. Custom
pydantic validators cannot receive FastAPI dependencies, so the container is
also linked process-wide through use_container(); validators then call
get_from_container(SomeService).

When the application scope cannot resolve a service and the link was made with
fallback_on_errors, resolution falls back to the DefaultContainer, which builds
the class with no arguments and keeps the instance.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

from series_lounge.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class ContainerLinkResult(str, Enum):
    """Outcome of linking the application container for validators."""

    LINKED = "linked"
    FALLBACK = "fallback"


class ServiceNotFoundError(LookupError):
    """No service is registered under the requested key."""

    def __init__(self, key: Any):
        self.key = key
        name = getattr(key, "__name__", repr(key))
        super().__init__(f"Service not registered: {name}")


class ServiceContainer:
    """Application-scoped registry of services.

    Instances are registered directly; factories are called once on first
    access and the result is kept.
    """

    def __init__(self) -> None:
        self._instances: dict[Any, Any] = {}
        self._factories: dict[Any, Callable[[], Any]] = {}

    def register(self, key: Any, instance: Any) -> None:
        self._instances[key] = instance

    def register_factory(self, key: Any, factory: Callable[[], Any]) -> None:
        self._instances.pop(key, None)
        self._factories[key] = factory

    def has(self, key: Any) -> bool:
        return key in self._instances or key in self._factories

    def get(self, key: type[T]) -> T:
        if key in self._instances:
            return self._instances[key]
        factory = self._factories.get(key)
        if factory is None:
            raise ServiceNotFoundError(key)
        instance = factory()
        self._instances[key] = instance
        return instance


class DefaultContainer:
    """Fallback resolver: instantiate the class itself, once."""

    def __init__(self) -> None:
        self._instances: dict[type, Any] = {}

    def get(self, cls: type[T]) -> T:
        if cls not in self._instances:
            self._instances[cls] = cls()
        return self._instances[cls]


_default_container = DefaultContainer()
_user_container: ServiceContainer | None = None
_fallback_on_errors = False


def use_container(container: ServiceContainer, *, fallback_on_errors: bool = False) -> None:
    """Link a container so validators resolve services through it."""
    global _user_container, _fallback_on_errors
    _user_container = container
    _fallback_on_errors = fallback_on_errors


def reset_container() -> None:
    """Drop any linked container. Useful for testing."""
    global _user_container, _fallback_on_errors, _default_container
    _user_container = None
    _fallback_on_errors = False
    _default_container = DefaultContainer()


def get_from_container(cls: type[T]) -> T:
    """Resolve a service for validator code.

    Raises:
        ServiceNotFoundError: If the linked container lacks the service and the
            link was made without fallback_on_errors.
    """
    if _user_container is None:
        return _default_container.get(cls)
    if not _fallback_on_errors:
        return _user_container.get(cls)
    try:
        return _user_container.get(cls)
    except Exception as e:
        logger.debug(
            "container_fallback",
            service=getattr(cls, "__name__", repr(cls)),
            error=str(e),
        )
        return _default_container.get(cls)


def get_app_container(app: Any) -> ServiceContainer:
    """Return the ServiceContainer attached to an application.

    Raises:
        ServiceNotFoundError: If the application has no container.
    """
    container = getattr(app.state, "container", None)
    if not isinstance(container, ServiceContainer):
        raise ServiceNotFoundError(ServiceContainer)
    return container


def link_app_container(app: Any, *, fallback_on_errors: bool = True) -> ContainerLinkResult:
    """Link the application's container for validators.

    With fallback_on_errors, a missing or broken application container is not
    raised: the default container stays in charge and FALLBACK is returned.
    """
    try:
        container = get_app_container(app)
    except Exception as e:
        if not fallback_on_errors:
            raise
        reset_container()
        logger.warning("container_link_failed", error=str(e))
        return ContainerLinkResult.FALLBACK

    use_container(container, fallback_on_errors=fallback_on_errors)
    logger.info("container_linked", fallback_on_errors=fallback_on_errors)
    return ContainerLinkResult.LINKED
