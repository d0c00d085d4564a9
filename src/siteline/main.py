from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.siteline.api.middlewares import setup_middlewares
from src.siteline.api.v1.router import api_router
from src.siteline.core.config import get_settings
from src.siteline.core.db import dispose_engine
from src.siteline.core.exceptions import setup_exception_handlers
from src.siteline.core.health import setup_health_endpoint, setup_metrics
from src.siteline.core.logging import get_logger, setup_logging
from src.siteline.core.rate_limit import limiter
from src.siteline.core.redis import close_redis
from src.siteline.core.shutdown import request_tracker
from src.siteline.temporal.client import close_temporal_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and graceful shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}", env=settings.app_env)

    yield

    grace_period = settings.shutdown_grace_period
    logger.info(
        f"Shutdown initiated, waiting for {request_tracker.in_flight_count} in-flight requests..."
    )
    await request_tracker.start_shutdown()

    drained = await request_tracker.wait_for_drain(timeout=grace_period)
    if not drained:
        logger.warning(
            f"Shutdown timeout after {grace_period}s - "
            f"{request_tracker.in_flight_count} requests may not have completed"
        )

    logger.info("Closing connections...")
    await close_redis()
    await close_temporal_client()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "Sign in, sign up, sessions and invitations"},
    {"name": "users", "description": "Profiles and user invitations"},
    {"name": "projects", "description": "Projects, members and project task lists"},
    {"name": "tasks", "description": "Task creation, updates and deletion"},
    {"name": "notifications", "description": "In-app notification inbox"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Construction project management API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)

    # RateLimitExceeded is an HTTPException, so 429s get the standard error body
    app.state.limiter = limiter

    setup_middlewares(app, settings)

    app.include_router(api_router)
    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
