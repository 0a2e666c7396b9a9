"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.asyncpg_setting import Database
from src.service.seat_booking.driven_adapter.processing_delay_impl import SleepProcessingDelay
from src.service.shared_kernel.app.transaction_coordinator import TransactionCoordinator
from src.service.shared_kernel.driven_adapter.asyncpg_resource_store import (
    AsyncpgResourceStore,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (asyncpg pool, created lazily on first use)
    database = providers.Singleton(
        Database,
        dsn=config_service.provided.DATABASE_URL,
        min_size=config_service.provided.ASYNCPG_POOL_MIN_SIZE,
        max_size=config_service.provided.ASYNCPG_POOL_MAX_SIZE,
        command_timeout=config_service.provided.ASYNCPG_POOL_COMMAND_TIMEOUT,
        acquire_timeout=config_service.provided.ASYNCPG_POOL_TIMEOUT,
    )

    # Resource store (the only component that talks to PostgreSQL)
    resource_store = providers.Singleton(AsyncpgResourceStore, database=database)

    # Booking processing delay (0 in production, 15s for the isolation demo)
    processing_delay = providers.Singleton(
        SleepProcessingDelay,
        seconds=config_service.provided.BOOKING_PROCESSING_DELAY_SECONDS,
    )

    transaction_coordinator = providers.Singleton(
        TransactionCoordinator,
        resource_store=resource_store,
        timeout_seconds=config_service.provided.TRANSACTION_TIMEOUT_SECONDS,
    )


container = Container()
