"""Application layer interfaces"""

from src.service.seat_booking.app.interface.i_processing_delay import IProcessingDelay

__all__ = ['IProcessingDelay']
