from decimal import Decimal
from typing import Optional

import attrs

from src.service.shared_kernel.app.dto.operation_result import OperationResult
from src.service.shared_kernel.domain.enum.isolation_level import IsolationLevel


@attrs.define(frozen=True, kw_only=True)
class TransferResult(OperationResult):
    from_account_id: str
    to_account_id: str
    amount: Decimal
    isolation_level: IsolationLevel
    effective_isolation_level: Optional[IsolationLevel] = None
    balance_before: Optional[Decimal] = None
