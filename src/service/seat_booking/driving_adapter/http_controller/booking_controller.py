import uuid_utils
from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.command.book_seat_use_case import BookSeatUseCase
from src.service.seat_booking.app.command.reset_seat_use_case import ResetSeatUseCase
from src.service.seat_booking.app.query.get_seat_snapshot_use_case import (
    GetSeatSnapshotUseCase,
)
from src.service.seat_booking.driving_adapter.http_controller.schema.booking_schema import (
    BookSeatRequest,
    BookSeatResponse,
    ResetSeatResponse,
    SeatNotFoundResponse,
    SeatStatusResponse,
)
from src.service.shared_kernel.domain.enum.isolation_level import IsolationLevel


router = APIRouter()


def new_session_id() -> str:
    return str(uuid_utils.uuid4())[:8]


@router.post('', status_code=status.HTTP_200_OK)
@Logger.io
async def book_seat(
    request: BookSeatRequest,
    use_case: BookSeatUseCase = Depends(BookSeatUseCase.depends),
) -> BookSeatResponse:
    """
    One booking attempt on the demo seat.

    Domain failures (seat taken, lost race, serialization abort) are normal
    outcomes of the demo and come back as 200 with `outcome` set.
    """
    session_id = new_session_id()
    result = await use_case.execute(
        session_id=session_id,
        isolation_level=IsolationLevel.parse(request.isolation_level),
    )
    return BookSeatResponse(
        session_id=result.session_id,
        outcome=result.failure.value if result.failure else 'success',
        message=result.message,
        owner=result.owner,
        isolation_level=result.isolation_level.value,
        effective_isolation_level=(
            result.effective_isolation_level.value if result.effective_isolation_level else None
        ),
        retryable=result.retryable,
    )


@router.post('/reset', status_code=status.HTTP_200_OK)
@Logger.io
async def reset_seat(
    use_case: ResetSeatUseCase = Depends(ResetSeatUseCase.depends),
) -> ResetSeatResponse:
    await use_case.execute(session_id=f'reset-{new_session_id()[:4]}')
    return ResetSeatResponse(message=f'Demo reset! Seat {use_case.seat_id} is now available.')


@router.get('/seat-status')
@Logger.io
async def get_seat_status(
    use_case: GetSeatSnapshotUseCase = Depends(GetSeatSnapshotUseCase.depends),
) -> SeatNotFoundResponse | SeatStatusResponse:
    snapshot = await use_case.execute()
    if snapshot is None:
        return SeatNotFoundResponse()
    return SeatStatusResponse(
        status=snapshot.status.value,
        booked_by=snapshot.booked_by,
        reserved_by=snapshot.reserved_by,
        booked_at=snapshot.booked_at,
        reserved_at=snapshot.reserved_at,
    )
