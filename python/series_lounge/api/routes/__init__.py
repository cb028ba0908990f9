"""API route definitions.

Domain routers live with their modules; this package only assembles the
route table that the application factory mounts.
"""

from fastapi import APIRouter

from series_lounge.api.routes.health import router as health_router


def create_api_router(*routers: APIRouter) -> APIRouter:
    """Create the API router with the health route and any extra routers.

    Args:
        routers: Additional routers to mount, in order.

    Returns:
        Configured APIRouter with all routes registered.
    """
    api_router = APIRouter()
    api_router.include_router(health_router, tags=["health"])
    for router in routers:
        api_router.include_router(router)
    return api_router


__all__ = ["create_api_router"]
