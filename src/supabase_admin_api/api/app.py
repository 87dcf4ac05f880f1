# src/supabase_admin_api/api/app.py
"""
FastAPI application for the Supabase admin API.

Startup builds one ServiceContainer (Supabase client + Postgres pool) and
kicks off the connectivity probes as background tasks, so the listener is
ready whether or not either dependency answers. Shutdown cancels unfinished
probes and closes the pool.
"""

import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import sentry_sdk
from fastapi import FastAPI, Request
from sentry_sdk.integrations.fastapi import FastApiIntegration

from supabase_admin_api import __version__
from supabase_admin_api.api.routes import admin, database, root, supabase
from supabase_admin_api.container import ServiceContainer, build_services
from supabase_admin_api.logging import configure_logging, get_logger, redact_api_key, timed
from supabase_admin_api.probes import start_probes
from supabase_admin_api.settings import Settings, get_settings, load_env


def _init_sentry(settings: Settings) -> None:
    if not settings.sentry_dsn:
        return
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=f"supabase-admin-api@{__version__}",
        traces_sample_rate=1.0,
        integrations=[FastApiIntegration()],
    )


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[ServiceContainer] = None,
    *,
    run_probes: bool = True,
) -> FastAPI:
    """
    Build the application.

    `services` may be injected (tests); otherwise it is built from
    `settings` during startup.
    """
    if settings is None:
        load_env()
        settings = get_settings()

    logger = configure_logging(level=settings.log_level, json_output=settings.log_format == "json")
    _init_sentry(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        container = services or await build_services(settings)
        app.state.services = container

        logger.info(
            "Starting Supabase admin API",
            supabase_url=settings.supabase_url,
            service_role_key=redact_api_key(settings.supabase_service_role_key),
            pool_max=settings.db_pool_max,
            admin_auth=type(container.auth).__name__,
        )
        app.state.probe_tasks = start_probes(container, logger) if run_probes else []

        logger.info(f"Server is running on http://{settings.host}:{settings.port}")
        try:
            yield
        finally:
            logger.info("Shutting down, closing connection pool")
            for task in app.state.probe_tasks:
                if not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task
            if services is None:
                await container.close()

    app = FastAPI(
        title="Supabase Admin API",
        description="Administrative endpoints backed by a Supabase service-role client and a direct Postgres pool",
        version=__version__,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        with logger.request_context(request.method, request.url.path), timed() as timer:
            response = await call_next(request)
            logger.info(
                "request handled",
                status=response.status_code,
                duration_ms=round(timer.elapsed_ms, 1),
            )
        return response

    app.include_router(root.router, tags=["Root"])
    app.include_router(supabase.router, prefix="/api", tags=["Diagnostics"])
    app.include_router(database.router, prefix="/api", tags=["Diagnostics"])
    app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])

    return app
