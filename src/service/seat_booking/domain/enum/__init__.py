from src.service.seat_booking.domain.enum.booking_phase import BookingPhase

__all__ = ['BookingPhase']
