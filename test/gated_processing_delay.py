from collections import defaultdict

import anyio

from src.service.seat_booking.app.interface.i_processing_delay import IProcessingDelay


class GatedProcessingDelay(IProcessingDelay):
    """
    Processing delay the test opens by hand.

    `wait` marks the session as parked, then blocks until `release(session_id)`.
    Lets a test hold one booking inside its open transaction while another runs.
    """

    def __init__(self) -> None:
        self._parked: defaultdict[str, anyio.Event] = defaultdict(anyio.Event)
        self._gates: defaultdict[str, anyio.Event] = defaultdict(anyio.Event)

    async def wait(self, *, session_id: str) -> None:
        self._parked[session_id].set()
        await self._gates[session_id].wait()

    async def parked(self, session_id: str) -> None:
        await self._parked[session_id].wait()

    def release(self, session_id: str) -> None:
        self._gates[session_id].set()
