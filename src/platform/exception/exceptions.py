from typing import TYPE_CHECKING, Optional


if TYPE_CHECKING:
    from src.service.shared_kernel.domain.enum.isolation_level import IsolationLevel


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class StoreSerializationError(ConflictError):
    """
    Engine-detected isolation conflict (serialization failure or deadlock).

    Raised bare by the store adapter. The transaction coordinator fills in the
    isolation levels of the aborted transaction and the use case fills in the
    step it had reached, so the failure can still be reported accurately.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.isolation_level: Optional['IsolationLevel'] = None
        self.effective_isolation_level: Optional['IsolationLevel'] = None
        self.last_phase: Optional[str] = None


class IntegrityViolationError(CustomBaseError):
    """A conditional update matched more than one row. Fatal, never retried."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 500)


class StoreUnavailableError(CustomBaseError):
    def __init__(self, message: str = 'Resource store unavailable, please try again') -> None:
        super().__init__(message, 503)


class TransactionTimeoutError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 504)
