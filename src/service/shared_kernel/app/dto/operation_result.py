"""Explicit outcome of a transactional operation."""

from typing import Optional

import attrs

from src.service.shared_kernel.domain.enum.failure_kind import FailureKind


@attrs.define(frozen=True, kw_only=True)
class OperationResult:
    """
    Domain outcomes (lost race, insufficient funds, ...) are returned as values.

    Infrastructure problems (connection loss, integrity violations, timeouts) are
    raised as exceptions instead and never show up here.
    """

    message: str
    failure: Optional[FailureKind] = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def retryable(self) -> bool:
        return self.failure is not None and self.failure.retryable
