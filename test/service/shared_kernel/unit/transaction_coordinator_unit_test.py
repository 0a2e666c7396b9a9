"""
Unit tests for TransactionCoordinator

Every path must end in exactly one of commit / rollback:
- successful result -> commit
- failed result, exception, timeout -> rollback
"""

from unittest.mock import AsyncMock

import anyio
import pytest

from src.platform.exception.exceptions import (
    IntegrityViolationError,
    StoreSerializationError,
    TransactionTimeoutError,
)
from src.service.shared_kernel.app.dto.operation_result import OperationResult
from src.service.shared_kernel.app.interface.i_resource_store import TransactionHandle
from src.service.shared_kernel.app.transaction_coordinator import TransactionCoordinator
from src.service.shared_kernel.domain.enum.failure_kind import FailureKind
from src.service.shared_kernel.domain.enum.isolation_level import IsolationLevel


@pytest.fixture
def handle() -> TransactionHandle:
    return TransactionHandle(
        isolation_level=IsolationLevel.SERIALIZABLE,
        effective_isolation_level=IsolationLevel.SERIALIZABLE,
    )


@pytest.fixture
def mock_store(handle: TransactionHandle) -> AsyncMock:
    store = AsyncMock()
    store.begin_transaction = AsyncMock(return_value=handle)
    return store


@pytest.mark.unit
class TestRunInTransaction:
    @pytest.mark.asyncio
    async def test_success_commits(self, mock_store: AsyncMock, handle: TransactionHandle) -> None:
        coordinator = TransactionCoordinator(resource_store=mock_store)
        body = AsyncMock(return_value=OperationResult(message='done'))

        result = await coordinator.run_in_transaction(
            isolation_level=IsolationLevel.SERIALIZABLE, session_id='s1', body=body
        )

        assert result.succeeded
        body.assert_awaited_once_with(handle)
        mock_store.begin_transaction.assert_awaited_once_with(
            isolation_level=IsolationLevel.SERIALIZABLE
        )
        mock_store.commit.assert_awaited_once_with(handle)
        mock_store.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_result_rolls_back(self, mock_store: AsyncMock) -> None:
        coordinator = TransactionCoordinator(resource_store=mock_store)
        failed = OperationResult(failure=FailureKind.LOST_RACE, message='lost')

        result = await coordinator.run_in_transaction(
            isolation_level=IsolationLevel.READ_COMMITTED,
            session_id='s1',
            body=AsyncMock(return_value=failed),
        )

        assert result is failed
        assert result.retryable
        mock_store.commit.assert_not_awaited()
        mock_store.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_exception_in_body_rolls_back_and_propagates(self, mock_store: AsyncMock) -> None:
        coordinator = TransactionCoordinator(resource_store=mock_store)
        body = AsyncMock(side_effect=IntegrityViolationError('finalize affected 2 rows'))

        with pytest.raises(IntegrityViolationError):
            await coordinator.run_in_transaction(
                isolation_level=IsolationLevel.READ_COMMITTED, session_id='s1', body=body
            )

        mock_store.commit.assert_not_awaited()
        mock_store.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_commit_failure_still_releases_transaction(self, mock_store: AsyncMock) -> None:
        mock_store.commit = AsyncMock(side_effect=StoreSerializationError('could not serialize'))
        coordinator = TransactionCoordinator(resource_store=mock_store)

        with pytest.raises(StoreSerializationError) as exc_info:
            await coordinator.run_in_transaction(
                isolation_level=IsolationLevel.SERIALIZABLE,
                session_id='s1',
                body=AsyncMock(return_value=OperationResult(message='done')),
            )

        mock_store.rollback.assert_awaited_once()
        assert exc_info.value.isolation_level is IsolationLevel.SERIALIZABLE
        assert exc_info.value.effective_isolation_level is IsolationLevel.SERIALIZABLE

    @pytest.mark.asyncio
    async def test_timeout_rolls_back(self, mock_store: AsyncMock) -> None:
        coordinator = TransactionCoordinator(resource_store=mock_store, timeout_seconds=0.05)

        async def slow_body(tx: TransactionHandle) -> OperationResult:
            await anyio.sleep(5)
            return OperationResult(message='too late')

        with pytest.raises(TransactionTimeoutError) as exc_info:
            await coordinator.run_in_transaction(
                isolation_level=IsolationLevel.READ_COMMITTED, session_id='s1', body=slow_body
            )

        assert exc_info.value.status_code == 504
        mock_store.commit.assert_not_awaited()
        mock_store.rollback.assert_awaited_once()


@pytest.mark.unit
def test_read_uncommitted_handle_reports_coercion() -> None:
    handle = TransactionHandle(
        isolation_level=IsolationLevel.READ_UNCOMMITTED,
        effective_isolation_level=IsolationLevel.READ_COMMITTED,
    )

    assert handle.coerced
