from enum import StrEnum

from src.platform.exception.exceptions import IntegrityViolationError
from src.platform.logging.loguru_io import Logger


class UpdateVerdict(StrEnum):
    APPLIED = 'applied'
    PRECONDITION_FAILED = 'precondition_failed'


def detect_update_conflict(affected_rows: int, *, operation: str) -> UpdateVerdict:
    """
    Classify the affected-row count of a conditional update.

    0 rows: the precondition no longer held (someone else got there first).
    1 row: the update applied.
    Anything else means a key matched several rows, which unique keys rule out;
    that is raised as a fatal IntegrityViolationError rather than returned.
    """
    if affected_rows == 0:
        return UpdateVerdict.PRECONDITION_FAILED
    if affected_rows == 1:
        return UpdateVerdict.APPLIED

    Logger.base.critical(f'🚨 [INTEGRITY] {operation} affected {affected_rows} rows, expected 0 or 1')
    raise IntegrityViolationError(
        f'Integrity violation: {operation} affected {affected_rows} rows'
    )
