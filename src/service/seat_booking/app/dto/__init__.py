"""Application layer DTOs"""

from src.service.seat_booking.app.dto.booking_result import BookingResult
from src.service.seat_booking.app.dto.seat_snapshot import SeatSnapshot

__all__ = ['BookingResult', 'SeatSnapshot']
