import anyio

from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.interface.i_processing_delay import IProcessingDelay


class SleepProcessingDelay(IProcessingDelay):
    """Wall-clock pause. Zero seconds in production, 15 for the isolation demo."""

    def __init__(self, *, seconds: float = 0.0) -> None:
        if seconds < 0:
            raise ValueError('seconds must not be negative')
        self.seconds = seconds

    async def wait(self, *, session_id: str) -> None:
        if self.seconds <= 0:
            return
        Logger.base.info(
            f'SESSION {session_id}: 🚨 DEBUG POINT: holding the transaction for {self.seconds}s, '
            'try booking from another session with a different isolation level!'
        )
        await anyio.sleep(self.seconds)
