"""
Production FastAPI Application

HTTP API plus the reconciliation scheduler running in the lifespan task group.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Showtime Reservation] Starting up...')

    tracing = TracingConfig(service_name=settings.SERVICE_NAME)
    tracing.setup()
    Logger.base.info('📊 [Showtime Reservation] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Showtime Reservation] Dependency injection wired')

    database = container.database()
    if settings.DB_CREATE_TABLES_ON_STARTUP:
        await database.create_db_and_tables()
        Logger.base.info('🗄️  [Showtime Reservation] Tables ensured')

    tracing.instrument_sqlalchemy(engine=database.get_engine())
    Logger.base.info('🗄️  [Showtime Reservation] Database engine ready + instrumented')

    async with anyio.create_task_group() as tg:
        if settings.RECONCILIATION_ENABLED:
            tg.start_soon(container.reconciliation_scheduler().serve)
        else:
            Logger.base.info('⏸️  [Showtime Reservation] Reconciliation disabled')

        Logger.base.info('✅ [Showtime Reservation] Ready to serve requests')
        yield

        Logger.base.info('🛑 [Showtime Reservation] Shutting down...')
        tg.cancel_scope.cancel()

    await database.dispose()
    Logger.base.info('🗄️  [Showtime Reservation] Database engine disposed')

    tracing.shutdown()
    container.unwire()
    Logger.base.info('👋 [Showtime Reservation] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
