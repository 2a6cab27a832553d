"""
Production FastAPI Application

Registration service: saga coordinator over the order and conference read
models, sending commands to the command bus.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import cleanup, container, setup
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Registration Service] Starting up...')

    tracing = TracingConfig(service_name='registration-service')
    tracing.setup()
    Logger.base.info('📊 [Registration Service] OpenTelemetry tracing configured')

    setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Registration Service] Dependency injection wired')

    if settings.READ_MODEL_BACKEND == 'sql':
        database = container.database()
        tracing.instrument_sqlalchemy(engine=database.engine)
        if settings.DEBUG:
            await create_db_and_tables(database)
        Logger.base.info('🗄️  [Registration Service] Projection database ready + instrumented')
    else:
        Logger.base.info('🧠 [Registration Service] Using in-memory read models')

    Logger.base.info('✅ [Registration Service] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Registration Service] Shutting down...')

    await container.command_dispatcher().close()
    if settings.READ_MODEL_BACKEND == 'sql':
        await container.database().dispose()
        Logger.base.info('🗄️  [Registration Service] Database engine disposed')

    tracing.shutdown()
    container.unwire()
    cleanup()

    Logger.base.info('👋 [Registration Service] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
