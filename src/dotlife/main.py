"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from dotlife.config import get_settings
from dotlife.database import Database
from dotlife.health.router import router as health_router
from dotlife.leaderboards.router import router as leaderboards_router
from dotlife.middleware import setup_middleware
from dotlife.patch_notes.router import router as patch_notes_router
from dotlife.profiles.router import router as profiles_router
from dotlife.quests.router import router as quests_router
from dotlife.redis_client import close_redis, create_redis
from dotlife.tower.router import router as tower_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle: open and close the DB and Redis handles."""
    settings = get_settings()
    app.state.database = Database(settings.database_url, echo=settings.debug)
    app.state.redis = create_redis(settings.redis_url) if settings.redis_url else None
    logger.info("app_started", environment=settings.environment, redis=app.state.redis is not None)

    yield

    await app.state.database.close()
    await close_redis(app.state.redis)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="dotLife API",
        description="Backend API for dotLife: daily quests that pay out bricks for building a pixel tower",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(profiles_router)
    app.include_router(quests_router)
    app.include_router(tower_router)
    app.include_router(leaderboards_router)
    app.include_router(patch_notes_router)

    return app


app = create_app()
