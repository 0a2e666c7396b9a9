from datetime import datetime, timezone
from functools import partial
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import StoreSerializationError
from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.dto.booking_result import BookingResult
from src.service.seat_booking.app.dto.seat_snapshot import SeatSnapshot
from src.service.seat_booking.app.interface.i_processing_delay import IProcessingDelay
from src.service.seat_booking.domain.entity.seat_entity import (
    Seat,
    SeatStatus,
    finalize_values,
    reserve_values,
)
from src.service.seat_booking.domain.enum.booking_phase import BookingPhase
from src.service.shared_kernel.app.conflict_detector import UpdateVerdict, detect_update_conflict
from src.service.shared_kernel.app.interface.i_resource_store import (
    IResourceStore,
    TransactionHandle,
)
from src.service.shared_kernel.app.transaction_coordinator import TransactionCoordinator
from src.service.shared_kernel.domain.enum.failure_kind import FailureKind
from src.service.shared_kernel.domain.enum.isolation_level import IsolationLevel
from src.service.shared_kernel.domain.enum.resource_table import ResourceTable


class BookSeatUseCase:
    """
    Book a seat through the available -> reserving -> booked protocol.

    Flow (one transaction, opened by TransactionCoordinator):
    1. Check availability: read the seat, fail NOT_FOUND / CONFLICT
    2. Reserve: UPDATE ... WHERE status = 'available', 0 rows -> LOST_RACE
    3. Processing delay: hold the open transaction (injected IProcessingDelay)
    4. Recheck: re-read the seat, recorded for observability only
    5. Finalize: UPDATE ... WHERE reserved_by = session, 0 rows -> RESERVATION_LOST
    6. Commit

    Correctness rests on the two conditional writes, not on step 1's read.
    Any failure rolls the seat back to its pre-attempt state.
    """

    def __init__(
        self,
        *,
        transaction_coordinator: TransactionCoordinator,
        resource_store: IResourceStore,
        processing_delay: IProcessingDelay,
        seat_id: str = 'A1',
    ) -> None:
        self.transaction_coordinator = transaction_coordinator
        self.resource_store = resource_store
        self.processing_delay = processing_delay
        self.seat_id = seat_id

    @classmethod
    @inject
    def depends(
        cls,
        transaction_coordinator: TransactionCoordinator = Depends(
            Provide[Container.transaction_coordinator]
        ),
        resource_store: IResourceStore = Depends(Provide[Container.resource_store]),
        processing_delay: IProcessingDelay = Depends(Provide[Container.processing_delay]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            transaction_coordinator=transaction_coordinator,
            resource_store=resource_store,
            processing_delay=processing_delay,
            seat_id=settings.DEMO_SEAT_ID,
        )

    @Logger.io
    async def execute(
        self,
        *,
        session_id: str,
        isolation_level: IsolationLevel,
        seat_id: Optional[str] = None,
    ) -> BookingResult:
        seat_id = seat_id or self.seat_id
        Logger.base.info(
            f'=== SESSION {session_id}: Starting booking of seat {seat_id} '
            f'with isolation level: {isolation_level.value} ==='
        )
        try:
            return await self.transaction_coordinator.run_in_transaction(
                isolation_level=isolation_level,
                session_id=session_id,
                body=partial(self._book, session_id=session_id, seat_id=seat_id),
            )
        except StoreSerializationError as e:
            Logger.base.warning(
                f'SESSION {session_id}: ⚔️  Store aborted the booking at {isolation_level.value}: {e}'
            )
            if e.last_phase:
                last_phase = BookingPhase(e.last_phase)
            elif e.effective_isolation_level is not None:
                # The body finished, the store refused the COMMIT
                last_phase = BookingPhase.COMMIT
            else:
                last_phase = None
            return BookingResult(
                failure=FailureKind.STORE_SERIALIZATION_FAILURE,
                message=(
                    f'{e.message} | This is expected behavior for {isolation_level.value} '
                    'isolation level during concurrent access.'
                ),
                session_id=session_id,
                seat_id=seat_id,
                isolation_level=isolation_level,
                effective_isolation_level=e.effective_isolation_level,
                last_phase=last_phase,
            )

    async def _book(
        self, tx: TransactionHandle, *, session_id: str, seat_id: str
    ) -> BookingResult:
        reached: list[BookingPhase] = []
        try:
            return await self._run_phases(
                tx, session_id=session_id, seat_id=seat_id, reached=reached
            )
        except StoreSerializationError as e:
            e.last_phase = reached[-1] if reached else None
            raise

    async def _run_phases(
        self,
        tx: TransactionHandle,
        *,
        session_id: str,
        seat_id: str,
        reached: list[BookingPhase],
    ) -> BookingResult:
        result = partial(
            BookingResult,
            session_id=session_id,
            seat_id=seat_id,
            isolation_level=tx.isolation_level,
            effective_isolation_level=tx.effective_isolation_level,
        )

        # STEP 1
        self._log_phase(
            reached, session_id, BookingPhase.CHECK_AVAILABILITY, 'Checking seat availability...'
        )
        seat = await self._read_seat(tx, seat_id=seat_id)
        if seat is None:
            Logger.base.error(f'SESSION {session_id}: Seat {seat_id} not found in database')
            return result(
                failure=FailureKind.NOT_FOUND,
                message=f'Seat {seat_id} not found',
                last_phase=BookingPhase.CHECK_AVAILABILITY,
            )

        Logger.base.info(
            f'SESSION {session_id}: 🔍 INITIAL READ - Seat {seat_id} {SeatSnapshot.from_seat(seat)}, '
            f'price: {seat.price}'
        )
        if not seat.is_available:
            Logger.base.warning(f'SESSION {session_id}: Seat not available for booking')
            return result(
                failure=FailureKind.CONFLICT,
                message=seat.describe_unavailable(),
                owner=seat.owner,
                last_phase=BookingPhase.CHECK_AVAILABILITY,
            )

        # STEP 2
        self._log_phase(
            reached, session_id, BookingPhase.RESERVE, 'Reserving seat (intermediate state)...'
        )
        affected_rows = await self.resource_store.conditional_update(
            tx,
            table=ResourceTable.SEATS,
            where={'seat_id': seat_id, 'status': SeatStatus.AVAILABLE.value},
            set_values=reserve_values(session_id=session_id, now=datetime.now(timezone.utc)),
        )
        verdict = detect_update_conflict(affected_rows, operation=f'reserve seat {seat_id}')
        if verdict is UpdateVerdict.PRECONDITION_FAILED:
            Logger.base.warning(
                f'SESSION {session_id}: Failed to reserve seat - someone else got it first'
            )
            return result(
                failure=FailureKind.LOST_RACE,
                message='Someone else reserved the seat during our check',
                last_phase=BookingPhase.RESERVE,
            )
        Logger.base.info(f"SESSION {session_id}: ✅ Successfully marked seat as 'reserving'")

        # STEP 3
        self._log_phase(reached, session_id, BookingPhase.PROCESSING_DELAY, 'Processing payment... ⏳')
        await self.processing_delay.wait(session_id=session_id)

        # STEP 4
        self._log_phase(reached, session_id, BookingPhase.RECHECK, 'Double-checking seat status...')
        rechecked = await self._read_seat(tx, seat_id=seat_id)
        recheck_snapshot = SeatSnapshot.from_seat(rechecked) if rechecked else None
        Logger.base.info(
            f'SESSION {session_id}: 🔍 RECHECK READ - Seat {seat_id} '
            f'{recheck_snapshot or "not visible"}'
        )

        # STEP 5
        self._log_phase(reached, session_id, BookingPhase.FINALIZE, 'Finalizing booking...')
        affected_rows = await self.resource_store.conditional_update(
            tx,
            table=ResourceTable.SEATS,
            where={'seat_id': seat_id, 'reserved_by': session_id},
            set_values=finalize_values(session_id=session_id, now=datetime.now(timezone.utc)),
        )
        verdict = detect_update_conflict(affected_rows, operation=f'finalize seat {seat_id}')
        if verdict is UpdateVerdict.PRECONDITION_FAILED:
            Logger.base.error(
                f'SESSION {session_id}: Failed to finalize booking - reservation was lost'
            )
            return result(
                failure=FailureKind.RESERVATION_LOST,
                message='Booking conflict - seat reservation was lost',
                last_phase=BookingPhase.FINALIZE,
                recheck_snapshot=recheck_snapshot,
            )

        # STEP 6 happens in the coordinator once this result reports success
        self._log_phase(reached, session_id, BookingPhase.COMMIT, 'Committing booking...')
        return result(
            message=(
                f'Seat {seat_id} booked by session {session_id} '
                f'(isolation: {tx.isolation_level.value})'
            ),
            owner=session_id,
            last_phase=BookingPhase.COMMIT,
            recheck_snapshot=recheck_snapshot,
        )

    async def _read_seat(self, tx: TransactionHandle, *, seat_id: str) -> Optional[Seat]:
        row = await self.resource_store.read_one(
            tx, table=ResourceTable.SEATS, where={'seat_id': seat_id}
        )
        return Seat.from_row(row) if row is not None else None

    @staticmethod
    def _log_phase(
        reached: list[BookingPhase], session_id: str, phase: BookingPhase, text: str
    ) -> None:
        reached.append(phase)
        Logger.base.info(f'SESSION {session_id}: STEP {phase.step} - {text}')
