"""FastAPI application factory and lifespan management."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from saad import __version__
from saad.config import settings
from saad.logging_config import configure_logging

# Configure logging at import time
configure_logging(log_level=settings.log_level, json_output=not settings.local_mode)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown resources."""
    from saad.db.engine import create_db_engine, create_session_factory
    from saad.services.intake.generator import GeminiGenerator
    from saad.services.intake.merge import TurnGate

    db_url = settings.effective_database_url
    engine = create_db_engine(db_url)

    # No migrations; the four tables are created if missing
    from saad.db.base import Base
    import saad.db.models  # noqa: F401 register all ORM models

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    app.state.db_engine = engine
    app.state.db_session_factory = create_session_factory(engine)
    app.state.generator = GeminiGenerator()
    app.state.turn_gate = TurnGate()
    if not settings.gemini_api_key:
        logger.warning("SAAD_GEMINI_API_KEY is not set; chat turns will answer with the fallback reply")

    logger.info("SAAD API started (db=%s)", "sqlite" if "sqlite" in db_url else "postgresql")
    yield

    await engine.dispose()
    logger.info("SAAD API shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="SAAD API",
        version=__version__,
        description="Delivery tracking with a five-column pipeline, progress metrics and AI-assisted intake.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from saad.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)

    # Register error handlers
    from saad.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    # Import and mount routers
    from saad.api.router import api_router
    app.include_router(api_router)

    return app


app = create_app()
