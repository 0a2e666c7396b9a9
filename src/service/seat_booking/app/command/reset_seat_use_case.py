from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.domain.entity.seat_entity import reset_values
from src.service.shared_kernel.app.conflict_detector import UpdateVerdict, detect_update_conflict
from src.service.shared_kernel.app.dto.operation_result import OperationResult
from src.service.shared_kernel.app.interface.i_resource_store import (
    IResourceStore,
    TransactionHandle,
)
from src.service.shared_kernel.app.transaction_coordinator import TransactionCoordinator
from src.service.shared_kernel.domain.enum.failure_kind import FailureKind
from src.service.shared_kernel.domain.enum.isolation_level import IsolationLevel
from src.service.shared_kernel.domain.enum.resource_table import ResourceTable


class ResetSeatUseCase:
    """Return a seat to AVAILABLE from any state. Idempotent."""

    def __init__(
        self,
        *,
        transaction_coordinator: TransactionCoordinator,
        resource_store: IResourceStore,
        seat_id: str = 'A1',
    ) -> None:
        self.transaction_coordinator = transaction_coordinator
        self.resource_store = resource_store
        self.seat_id = seat_id

    @classmethod
    @inject
    def depends(
        cls,
        transaction_coordinator: TransactionCoordinator = Depends(
            Provide[Container.transaction_coordinator]
        ),
        resource_store: IResourceStore = Depends(Provide[Container.resource_store]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            transaction_coordinator=transaction_coordinator,
            resource_store=resource_store,
            seat_id=settings.DEMO_SEAT_ID,
        )

    @Logger.io
    async def execute(self, *, session_id: str, seat_id: Optional[str] = None) -> None:
        seat_id = seat_id or self.seat_id
        Logger.base.info(f'=== SESSION {session_id}: Resetting seat {seat_id} ===')

        async def _reset(tx: TransactionHandle) -> OperationResult:
            affected_rows = await self.resource_store.conditional_update(
                tx,
                table=ResourceTable.SEATS,
                where={'seat_id': seat_id},
                set_values=reset_values(),
            )
            verdict = detect_update_conflict(affected_rows, operation=f'reset seat {seat_id}')
            if verdict is UpdateVerdict.PRECONDITION_FAILED:
                return OperationResult(
                    failure=FailureKind.NOT_FOUND, message=f'Seat {seat_id} not found'
                )
            return OperationResult(message=f'Seat {seat_id} is now available')

        result = await self.transaction_coordinator.run_in_transaction(
            isolation_level=IsolationLevel.READ_COMMITTED,
            session_id=session_id,
            body=_reset,
        )
        if not result.succeeded:
            raise NotFoundError(result.message)
        Logger.base.info(f'SESSION {session_id}: 🔄 Reset completed')
