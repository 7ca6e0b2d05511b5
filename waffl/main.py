import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from waffl.config import get_settings
from waffl.infrastructure.database import engine, initialize_database
from waffl.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables on startup and release the pool on shutdown."""

    initialize_database()
    yield
    engine.dispose()


def create_app() -> FastAPI:
    """Build the notification API application."""

    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title="Waffl Notifications", lifespan=lifespan)
    register_routes(app)
    return app
