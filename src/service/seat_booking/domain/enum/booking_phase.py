from enum import StrEnum


class BookingPhase(StrEnum):
    """Phases of one booking attempt, in execution order."""

    CHECK_AVAILABILITY = 'check_availability'
    RESERVE = 'reserve'
    PROCESSING_DELAY = 'processing_delay'
    RECHECK = 'recheck'
    FINALIZE = 'finalize'
    COMMIT = 'commit'

    @property
    def step(self) -> int:
        return list(BookingPhase).index(self) + 1
