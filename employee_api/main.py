"""
Employee Registry: application entry point.

This is the **only** file that assembles the app.  Business logic lives
in ``services/``; the GraphQL surface lives in ``api/graphql/``.

Run with ``uvicorn employee_api.main:app``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from employee_api.api.graphql.schema import build_graphql_router
from employee_api.api.health import router as health_router
from employee_api.core.config import Settings, get_settings
from employee_api.core.exceptions import register_exception_handlers
from employee_api.core.security import TokenService
from employee_api.db.base import Base
from employee_api.db.session import build_engine, build_session_factory
from employee_api.services.media import CloudinaryMediaStore, MediaStore

# Ensure all models are imported so metadata.create_all can see them
from employee_api.models.employee import Employee  # noqa: F401
from employee_api.models.user import User  # noqa: F401

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = app.state.engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    logger.info("%s v%s started", app.state.settings.PROJECT_NAME, app.state.settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app(
    settings: Settings | None = None,
    media: MediaStore | None = None,
) -> FastAPI:
    """Build the app.  Fails fast if no ``SECRET_KEY`` is configured."""
    settings = settings or get_settings()
    _configure_logging(settings.LOG_LEVEL)

    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Employee records over GraphQL",
        version=settings.VERSION,
        lifespan=lifespan,
    )

    engine = build_engine(settings.DATABASE_URL)
    application.state.settings = settings
    application.state.engine = engine
    application.state.session_factory = build_session_factory(engine)
    application.state.tokens = TokenService.from_settings(settings)
    application.state.media = media or CloudinaryMediaStore.from_settings(settings)

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(build_graphql_router(settings))
    application.include_router(health_router)

    return application


app = create_app()
