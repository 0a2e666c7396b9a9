from enum import StrEnum


class FailureKind(StrEnum):
    NOT_FOUND = 'not_found'
    CONFLICT = 'conflict'
    LOST_RACE = 'lost_race'
    RESERVATION_LOST = 'reservation_lost'
    INSUFFICIENT_FUNDS = 'insufficient_funds'
    DEBIT_FAILED = 'debit_failed'
    CREDIT_FAILED = 'credit_failed'
    STORE_SERIALIZATION_FAILURE = 'store_serialization_failure'

    @property
    def retryable(self) -> bool:
        """Whether a caller may simply try the same operation again."""
        return self in _RETRYABLE


_RETRYABLE = frozenset(
    {
        FailureKind.LOST_RACE,
        FailureKind.RESERVATION_LOST,
        FailureKind.STORE_SERIALIZATION_FAILURE,
    }
)
