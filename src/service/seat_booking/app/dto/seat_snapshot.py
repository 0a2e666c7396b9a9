from datetime import datetime
from typing import Optional

import attrs

from src.service.seat_booking.domain.entity.seat_entity import Seat, SeatStatus


@attrs.define(frozen=True)
class SeatSnapshot:
    """Point-in-time view of a seat row, as visible to whoever read it."""

    status: SeatStatus
    booked_by: Optional[str] = None
    reserved_by: Optional[str] = None
    booked_at: Optional[datetime] = None
    reserved_at: Optional[datetime] = None

    @classmethod
    def from_seat(cls, seat: Seat) -> 'SeatSnapshot':
        return cls(
            status=seat.status,
            booked_by=seat.booked_by,
            reserved_by=seat.reserved_by,
            booked_at=seat.booked_at,
            reserved_at=seat.reserved_at,
        )

    def __str__(self) -> str:
        return (
            f"status: '{self.status.value}', booked_by: '{self.booked_by or 'null'}', "
            f"reserved_by: '{self.reserved_by or 'null'}'"
        )
