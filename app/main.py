from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import AsyncIterator

from fastapi import FastAPI

from app.api.router import api_router
from app.clients.http_client import close_http_client, create_http_client
from app.config import Settings
from app.core.exceptions import SessionGuardError
from app.core.logging import get_logger, setup_logging
from app.core.middleware import session_guard_exception_handler
from app.services.controller_registry import ControllerRegistry

logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app_settings = settings or Settings()
        setup_logging(log_level=app_settings.LOG_LEVEL, debug=app_settings.DEBUG)
        app.state.settings = app_settings
        app.state.http_client = create_http_client(app_settings)
        app.state.registry = ControllerRegistry(app_settings, app.state.http_client)
        sweeper = asyncio.create_task(
            app.state.registry.run_sweeper(app_settings.GUARD_SWEEP_INTERVAL_MINUTES * 60)
        )
        yield
        logger.info("shutdown", open_guards=len(app.state.registry))
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
        app.state.registry.dispose()
        await close_http_client(app.state.http_client)

    app = FastAPI(
        title="ClassBridge Session Guard API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(SessionGuardError, session_guard_exception_handler)
    app.include_router(api_router)
    return app


app = create_app()
