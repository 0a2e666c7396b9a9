from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any, Optional

import attrs

from src.platform.logging.loguru_io import Logger


class SeatStatus(StrEnum):
    AVAILABLE = 'available'
    RESERVING = 'reserving'
    BOOKED = 'booked'


@attrs.define(frozen=True)
class Seat:
    """
    A bookable seat as stored in the `seats` table.

    `reserved_by`/`reserved_at` are set together while RESERVING,
    `booked_by`/`booked_at` together once BOOKED, and all four are null while
    AVAILABLE. The owner fields hold ephemeral session ids, not user ids.
    """

    seat_id: str
    status: SeatStatus
    price: Decimal
    reserved_by: Optional[str] = None
    reserved_at: Optional[datetime] = None
    booked_by: Optional[str] = None
    booked_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> 'Seat':
        seat = cls(
            seat_id=row['seat_id'],
            status=SeatStatus(row['status']),
            price=row['price'],
            reserved_by=row['reserved_by'],
            reserved_at=row['reserved_at'],
            booked_by=row['booked_by'],
            booked_at=row['booked_at'],
        )
        if not seat.owner_fields_consistent:
            # Still returned: a reset must be able to repair the row
            Logger.base.warning(
                f'⚠️  Seat {seat.seat_id} has inconsistent owner fields: status={seat.status.value}, '
                f'reserved_by={seat.reserved_by}, booked_by={seat.booked_by}'
            )
        return seat

    @property
    def is_available(self) -> bool:
        return self.status is SeatStatus.AVAILABLE

    @property
    def owner(self) -> Optional[str]:
        return self.booked_by or self.reserved_by

    @property
    def owner_fields_consistent(self) -> bool:
        if self.status is SeatStatus.AVAILABLE:
            return self.reserved_by is None and self.booked_by is None
        if self.status is SeatStatus.RESERVING:
            return self.reserved_by is not None and self.booked_by is None
        return self.booked_by is not None and self.reserved_by is None

    def describe_unavailable(self) -> str:
        """Diagnostic text for a seat that cannot be booked, e.g. 'Seat is booked by 1a2b3c4d'."""
        message = f'Seat is {self.status.value}'
        if self.booked_by is not None:
            message += f' by {self.booked_by}'
        if self.reserved_by is not None:
            message += f' (reserved by {self.reserved_by})'
        return message


def reserve_values(*, session_id: str, now: datetime) -> dict[str, Any]:
    return {
        'status': SeatStatus.RESERVING.value,
        'reserved_by': session_id,
        'reserved_at': now,
    }


def finalize_values(*, session_id: str, now: datetime) -> dict[str, Any]:
    return {
        'status': SeatStatus.BOOKED.value,
        'booked_by': session_id,
        'booked_at': now,
        'reserved_by': None,
        'reserved_at': None,
    }


def reset_values() -> dict[str, Any]:
    return {
        'status': SeatStatus.AVAILABLE.value,
        'booked_by': None,
        'reserved_by': None,
        'booked_at': None,
        'reserved_at': None,
    }
