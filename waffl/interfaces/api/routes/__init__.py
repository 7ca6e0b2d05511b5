from fastapi import FastAPI

from .devices import router as devices_router
from .interactions import router as interactions_router
from .notifications import router as notifications_router
from .push import router as push_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(notifications_router)
    app.include_router(interactions_router)
    app.include_router(devices_router)
    app.include_router(push_router)
