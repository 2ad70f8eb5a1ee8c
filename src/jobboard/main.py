"""FastAPI application entry point for the job board API."""

import logging
from contextlib import asynccontextmanager

# Configure logging before importing modules
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

from fastapi import FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from redis.asyncio import Redis  # noqa: E402
from redis.exceptions import RedisError  # noqa: E402

from src.jobboard.api.exception_handlers import register_exception_handlers  # noqa: E402
from src.jobboard.api.routers import api_router  # noqa: E402
from src.jobboard.config import Settings, get_settings  # noqa: E402
from src.jobboard.repositories.database import (  # noqa: E402
    create_engine,
    create_session_factory,
    create_tables,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: open the database engine and connect to Redis."""
    settings: Settings = app.state.settings

    engine = create_engine(settings.database_url, echo=settings.database_echo)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    if settings.database_create_tables:
        await create_tables(engine)

    redis = None
    try:
        redis = Redis.from_url(settings.redis_url, decode_responses=True)
        await redis.ping()
        logger.info("Connected to Redis at %s", settings.redis_url)
    except (RedisError, OSError):
        logger.warning(
            "Redis not available at %s, list caching disabled",
            settings.redis_url,
        )
        if redis is not None:
            await redis.aclose()
        redis = None
    app.state.redis = redis

    yield

    # Cleanup
    if redis is not None:
        await redis.aclose()
    await engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to run with; defaults to the environment-derived
            singleton from :func:`get_settings`

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Job Board API",
        description="Job postings, candidates and applications with cached paginated listings",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_exception_handlers(app)

    # CORS middleware for local frontends
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check(request: Request) -> dict[str, str]:
        """Health check endpoint, reporting whether the cache is reachable."""
        redis = getattr(request.app.state, "redis", None)
        cache = "unavailable"
        if redis is not None:
            try:
                await redis.ping()
                cache = "connected"
            except (RedisError, OSError) as e:
                logger.warning("Redis health check failed: %s", e)
        return {"status": "healthy", "cache": cache}

    return app


app = create_app()
