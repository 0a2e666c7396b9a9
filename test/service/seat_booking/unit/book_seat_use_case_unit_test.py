"""
Unit tests for BookSeatUseCase

Tests:
- Happy path through all phases
- Each failure kind, and that it ends in a rollback
- Serialization aborts reported as a result, integrity violations raised
"""

from decimal import Decimal
from typing import Any, Optional
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import IntegrityViolationError, StoreSerializationError
from src.service.seat_booking.app.command.book_seat_use_case import BookSeatUseCase
from src.service.seat_booking.domain.entity.seat_entity import SeatStatus
from src.service.seat_booking.domain.enum.booking_phase import BookingPhase
from src.service.shared_kernel.app.interface.i_resource_store import TransactionHandle
from src.service.shared_kernel.app.transaction_coordinator import TransactionCoordinator
from src.service.shared_kernel.domain.enum.failure_kind import FailureKind
from src.service.shared_kernel.domain.enum.isolation_level import IsolationLevel
from src.service.shared_kernel.domain.enum.resource_table import ResourceTable


def seat_row(
    status: str = 'available',
    *,
    reserved_by: Optional[str] = None,
    booked_by: Optional[str] = None,
) -> dict[str, Any]:
    return {
        'seat_id': 'A1',
        'status': status,
        'price': Decimal('25.00'),
        'reserved_by': reserved_by,
        'reserved_at': None,
        'booked_by': booked_by,
        'booked_at': None,
    }


class TestBookSeatUseCase:
    @pytest.fixture
    def mock_store(self) -> AsyncMock:
        store = AsyncMock()
        store.begin_transaction = AsyncMock(
            return_value=TransactionHandle(
                isolation_level=IsolationLevel.READ_COMMITTED,
                effective_isolation_level=IsolationLevel.READ_COMMITTED,
            )
        )
        store.read_one = AsyncMock(
            side_effect=[seat_row(), seat_row('reserving', reserved_by='s1')]
        )
        store.conditional_update = AsyncMock(side_effect=[1, 1])
        return store

    @pytest.fixture
    def mock_delay(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def use_case(self, mock_store: AsyncMock, mock_delay: AsyncMock) -> BookSeatUseCase:
        return BookSeatUseCase(
            transaction_coordinator=TransactionCoordinator(resource_store=mock_store),
            resource_store=mock_store,
            processing_delay=mock_delay,
        )

    @pytest.mark.asyncio
    async def test_books_available_seat(
        self, use_case: BookSeatUseCase, mock_store: AsyncMock, mock_delay: AsyncMock
    ) -> None:
        result = await use_case.execute(session_id='s1', isolation_level=IsolationLevel.READ_COMMITTED)

        assert result.succeeded
        assert result.owner == 's1'
        assert result.message == 'Seat A1 booked by session s1 (isolation: ReadCommitted)'
        assert result.last_phase is BookingPhase.COMMIT
        assert result.recheck_snapshot is not None
        assert result.recheck_snapshot.status is SeatStatus.RESERVING
        mock_delay.wait.assert_awaited_once_with(session_id='s1')
        mock_store.commit.assert_awaited_once()
        mock_store.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reserve_then_finalize_are_conditional(
        self, use_case: BookSeatUseCase, mock_store: AsyncMock
    ) -> None:
        await use_case.execute(session_id='s1', isolation_level=IsolationLevel.READ_COMMITTED)

        reserve_call, finalize_call = mock_store.conditional_update.await_args_list
        assert reserve_call.kwargs['table'] is ResourceTable.SEATS
        assert reserve_call.kwargs['where'] == {'seat_id': 'A1', 'status': 'available'}
        assert reserve_call.kwargs['set_values']['status'] == 'reserving'
        assert reserve_call.kwargs['set_values']['reserved_by'] == 's1'
        assert finalize_call.kwargs['where'] == {'seat_id': 'A1', 'reserved_by': 's1'}
        assert finalize_call.kwargs['set_values']['status'] == 'booked'
        assert finalize_call.kwargs['set_values']['reserved_by'] is None

    @pytest.mark.asyncio
    async def test_missing_seat(self, use_case: BookSeatUseCase, mock_store: AsyncMock) -> None:
        mock_store.read_one = AsyncMock(return_value=None)

        result = await use_case.execute(session_id='s1', isolation_level=IsolationLevel.READ_COMMITTED)

        assert result.failure is FailureKind.NOT_FOUND
        assert result.message == 'Seat A1 not found'
        mock_store.conditional_update.assert_not_awaited()
        mock_store.rollback.assert_awaited_once()
        mock_store.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_seat_already_booked(
        self, use_case: BookSeatUseCase, mock_store: AsyncMock
    ) -> None:
        mock_store.read_one = AsyncMock(return_value=seat_row('booked', booked_by='other'))

        result = await use_case.execute(session_id='s1', isolation_level=IsolationLevel.READ_COMMITTED)

        assert result.failure is FailureKind.CONFLICT
        assert result.owner == 'other'
        assert result.message == 'Seat is booked by other'
        assert not result.retryable
        mock_store.conditional_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lost_race_on_reserve(
        self, use_case: BookSeatUseCase, mock_store: AsyncMock, mock_delay: AsyncMock
    ) -> None:
        mock_store.conditional_update = AsyncMock(return_value=0)

        result = await use_case.execute(session_id='s1', isolation_level=IsolationLevel.READ_COMMITTED)

        assert result.failure is FailureKind.LOST_RACE
        assert result.message == 'Someone else reserved the seat during our check'
        assert result.retryable
        mock_delay.wait.assert_not_awaited()
        mock_store.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reservation_lost_on_finalize(
        self, use_case: BookSeatUseCase, mock_store: AsyncMock
    ) -> None:
        mock_store.conditional_update = AsyncMock(side_effect=[1, 0])

        result = await use_case.execute(session_id='s1', isolation_level=IsolationLevel.READ_COMMITTED)

        assert result.failure is FailureKind.RESERVATION_LOST
        assert result.message == 'Booking conflict - seat reservation was lost'
        assert result.last_phase is BookingPhase.FINALIZE
        mock_store.commit.assert_not_awaited()
        mock_store.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_serialization_abort_is_reported_with_hint(
        self, use_case: BookSeatUseCase, mock_store: AsyncMock
    ) -> None:
        mock_store.begin_transaction.return_value = TransactionHandle(
            isolation_level=IsolationLevel.SERIALIZABLE,
            effective_isolation_level=IsolationLevel.SERIALIZABLE,
        )
        mock_store.conditional_update = AsyncMock(
            side_effect=StoreSerializationError('could not serialize access due to concurrent update')
        )

        result = await use_case.execute(session_id='s2', isolation_level=IsolationLevel.SERIALIZABLE)

        assert result.failure is FailureKind.STORE_SERIALIZATION_FAILURE
        assert 'could not serialize access' in result.message
        assert 'expected behavior for Serializable isolation level' in result.message
        assert result.retryable
        assert result.effective_isolation_level is IsolationLevel.SERIALIZABLE
        assert result.last_phase is BookingPhase.RESERVE
        mock_store.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_refused_commit_is_reported_at_commit_phase(
        self, use_case: BookSeatUseCase, mock_store: AsyncMock
    ) -> None:
        mock_store.begin_transaction.return_value = TransactionHandle(
            isolation_level=IsolationLevel.READ_UNCOMMITTED,
            effective_isolation_level=IsolationLevel.READ_COMMITTED,
        )
        mock_store.commit = AsyncMock(
            side_effect=StoreSerializationError('deadlock detected')
        )

        result = await use_case.execute(
            session_id='s1', isolation_level=IsolationLevel.READ_UNCOMMITTED
        )

        assert result.failure is FailureKind.STORE_SERIALIZATION_FAILURE
        assert result.isolation_level is IsolationLevel.READ_UNCOMMITTED
        assert result.effective_isolation_level is IsolationLevel.READ_COMMITTED
        assert result.last_phase is BookingPhase.COMMIT

    @pytest.mark.asyncio
    async def test_multi_row_update_is_fatal(
        self, use_case: BookSeatUseCase, mock_store: AsyncMock
    ) -> None:
        mock_store.conditional_update = AsyncMock(return_value=2)

        with pytest.raises(IntegrityViolationError):
            await use_case.execute(session_id='s1', isolation_level=IsolationLevel.READ_COMMITTED)

        mock_store.commit.assert_not_awaited()
        mock_store.rollback.assert_awaited_once()
