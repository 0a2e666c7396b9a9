from typing import Optional

import attrs

from src.service.seat_booking.app.dto.seat_snapshot import SeatSnapshot
from src.service.seat_booking.domain.enum.booking_phase import BookingPhase
from src.service.shared_kernel.app.dto.operation_result import OperationResult
from src.service.shared_kernel.domain.enum.isolation_level import IsolationLevel


@attrs.define(frozen=True, kw_only=True)
class BookingResult(OperationResult):
    session_id: str
    seat_id: str
    isolation_level: IsolationLevel
    effective_isolation_level: Optional[IsolationLevel] = None
    owner: Optional[str] = None
    last_phase: Optional[BookingPhase] = None
    recheck_snapshot: Optional[SeatSnapshot] = None
