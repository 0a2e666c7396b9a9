from abc import ABC, abstractmethod


class IProcessingDelay(ABC):
    """
    Pause between reserving and finalizing a booking.

    The transaction stays open for the whole pause, which is what lets
    concurrent attempts at different isolation levels observe (or not observe)
    the reserving row. Production wiring uses a zero-length pause; tests inject
    gates to interleave two attempts deterministically.
    """

    @abstractmethod
    async def wait(self, *, session_id: str) -> None:
        pass
