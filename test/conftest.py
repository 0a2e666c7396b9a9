"""
Test Configuration and Fixtures

- Unit tests run against AsyncMock doubles or the in-memory FakeResourceStore
- HTTP scenarios (.feature files, pytest-bdd-ng) go through TestClient with the
  container's store overridden
- Integration tests need a real PostgreSQL and only run with RUN_DB_INTEGRATION=1
"""

# =============================================================================
# Environment setup MUST happen before any application import: settings and
# the loguru sinks are configured at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    os.environ.setdefault('POSTGRES_DB', 'isolation_lab_test_db')
    os.environ['BOOKING_PROCESSING_DELAY_SECONDS'] = '0'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('ASYNCPG_POOL_MIN_SIZE', '2')
    os.environ.setdefault('ASYNCPG_POOL_MAX_SIZE', '10')


_early_setup_test_environment()

from collections.abc import AsyncIterator, Iterator  # noqa: E402
from contextlib import asynccontextmanager  # noqa: E402
from typing import Any  # noqa: E402

from dependency_injector import providers  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from fake_resource_store import FakeResourceStore  # noqa: E402
from gated_processing_delay import GatedProcessingDelay  # noqa: E402
from src.platform.app_factory import create_app  # noqa: E402
from src.platform.config.di import container  # noqa: E402
from src.platform.config.wire_modules import WIRE_MODULES  # noqa: E402
from src.service.seat_booking.driven_adapter.processing_delay_impl import (  # noqa: E402
    SleepProcessingDelay,
)
from src.service.shared_kernel.app.transaction_coordinator import (  # noqa: E402
    TransactionCoordinator,
)


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.environ.get('RUN_DB_INTEGRATION') == '1':
        return
    skip_integration = pytest.mark.skip(reason='set RUN_DB_INTEGRATION=1 to run against PostgreSQL')
    for item in items:
        if 'integration' in [m.name for m in item.iter_markers()]:
            item.add_marker(skip_integration)


# =============================================================================
# In-memory store fixtures
# =============================================================================
@pytest.fixture
def fake_store() -> FakeResourceStore:
    store = FakeResourceStore()
    store.seed_demo()
    return store


@pytest.fixture
def coordinator(fake_store: FakeResourceStore) -> TransactionCoordinator:
    return TransactionCoordinator(resource_store=fake_store)


@pytest.fixture
def gated_delay() -> GatedProcessingDelay:
    return GatedProcessingDelay()


# =============================================================================
# HTTP fixtures
# =============================================================================
@asynccontextmanager
async def _test_lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield


@pytest.fixture
def client(fake_store: FakeResourceStore) -> Iterator[TestClient]:
    container.wire(modules=WIRE_MODULES)
    with (
        container.resource_store.override(providers.Object(fake_store)),
        container.processing_delay.override(providers.Object(SleepProcessingDelay())),
    ):
        container.reset_singletons()
        app = create_app(lifespan=_test_lifespan, title_suffix=' (Test)')
        with TestClient(app) as test_client:
            yield test_client
    container.reset_singletons()
    container.unwire()


@pytest.fixture
def context() -> dict[str, Any]:
    """Shared state between the Given/When/Then steps of one scenario."""
    return {}


# =============================================================================
# BDD step definitions
# =============================================================================
from bdd_steps_loader import *  # noqa: E402, F401, F403
