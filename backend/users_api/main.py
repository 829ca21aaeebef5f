"""Users API - FastAPI application entry point.

Invariants:
    - Store, guards, dispatch table and executor constructed explicitly here
      (no DI container, no auto-discovery)
    - Health router registered before the pipeline catch-all so probes win
    - Global error handlers render every non-pipeline failure in the same envelope
    - CORS configured from settings (not hardcoded)

Design Decisions:
    - create_app factory: tests build isolated apps with their own store,
      the module-level app serves uvicorn (`uvicorn users_api.main:app`)
    - Lifespan over @app.on_event: logging set up once per process start
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from users_api.api.error_handlers import register_error_handlers
from users_api.api.pipeline_binding import router as pipeline_router
from users_api.api.routes import health
from users_api.config import Settings, get_settings
from users_api.core.dispatch import DispatchTable
from users_api.core.guards import BearerTokenGuard
from users_api.core.user_store import UserStore
from users_api.infrastructure.observability import setup_logging
from users_api.services.pipeline_executor import PipelineExecutor
from users_api.services.user_routes import build_user_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    logger.info(
        f"{settings.service_name} started with {app.state.store.count()} users",
    )
    yield
    logger.info(f"{settings.service_name} shutting down")


def build_executor(settings: Settings, store: UserStore) -> PipelineExecutor:
    """Wire guard -> routes -> dispatch table -> executor."""
    auth_guard = BearerTokenGuard(
        min_token_length=settings.min_token_length,
        principal_id=settings.principal_id,
        principal_username=settings.principal_username,
    )
    routes = build_user_routes(store, auth_guards=(auth_guard,))
    table = DispatchTable(routes, prefix=settings.api_prefix)
    return PipelineExecutor(table)


def create_app(
    settings: Settings | None = None, store: UserStore | None = None,
) -> FastAPI:
    """Build a configured FastAPI app around one in-memory store."""
    settings = settings or get_settings()
    if store is None:
        store = UserStore.with_demo_users() if settings.seed_demo_users else UserStore()

    app = FastAPI(
        title="Users API", version=settings.service_version, lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.executor = build_executor(settings, store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes - explicit registration, probes before the catch-all
    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(pipeline_router, prefix=settings.api_prefix)

    register_error_handlers(app)
    return app


app = create_app()
