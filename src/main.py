"""
Production FastAPI Application

Run with: uvicorn src.main:app --host 0.0.0.0 --port 8000
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.exception.exceptions import StoreUnavailableError
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Isolation Lab] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Isolation Lab] Dependency injection wired')

    settings = container.config_service()
    Logger.base.info(f'🗄️  [Isolation Lab] Database: {settings.DATABASE_URL_MASKED}')
    if settings.BOOKING_PROCESSING_DELAY_SECONDS > 0:
        Logger.base.warning(
            f'⏳ [Isolation Lab] Booking processing delay is '
            f'{settings.BOOKING_PROCESSING_DELAY_SECONDS}s (demo mode)'
        )

    database = container.database()
    try:
        await database.warmup()
        Logger.base.info('🔥 [Isolation Lab] Asyncpg pool warmed up to MIN_SIZE')
    except StoreUnavailableError as e:
        # Requests report the store as unavailable until it comes up
        Logger.base.error(f'❌ [Isolation Lab] Database not reachable at startup: {e.message}')

    Logger.base.info('✅ [Isolation Lab] Ready to serve requests')
    yield

    Logger.base.info('🛑 [Isolation Lab] Shutting down...')
    await database.close()
    Logger.base.info('🏊 [Isolation Lab] Asyncpg pool closed')

    container.unwire()
    Logger.base.info('👋 [Isolation Lab] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
