from decimal import Decimal
from functools import partial
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, StoreSerializationError
from src.platform.logging.loguru_io import Logger
from src.service.funds_transfer.app.dto.transfer_result import TransferResult
from src.service.funds_transfer.domain.entity.account_entity import Account
from src.service.shared_kernel.app.conflict_detector import UpdateVerdict, detect_update_conflict
from src.service.shared_kernel.app.interface.i_resource_store import (
    IResourceStore,
    TransactionHandle,
)
from src.service.shared_kernel.app.transaction_coordinator import TransactionCoordinator
from src.service.shared_kernel.domain.enum.failure_kind import FailureKind
from src.service.shared_kernel.domain.enum.isolation_level import IsolationLevel
from src.service.shared_kernel.domain.enum.resource_table import ResourceTable


class TransferFundsUseCase:
    """
    Move `amount` between two accounts atomically: both balances change or neither does.

    The debit is conditional on the balance read in step 1 still being current,
    so a concurrent transfer that drained the source in between turns into
    DEBIT_FAILED instead of a negative balance.
    """

    def __init__(
        self,
        *,
        transaction_coordinator: TransactionCoordinator,
        resource_store: IResourceStore,
        settings: Settings,
    ) -> None:
        self.transaction_coordinator = transaction_coordinator
        self.resource_store = resource_store
        self.settings = settings

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
            settings=settings,
        )

    async def execute_default(self) -> TransferResult:
        return await self.execute(
            from_account_id=self.settings.TRANSFER_FROM_ACCOUNT,
            to_account_id=self.settings.TRANSFER_TO_ACCOUNT,
            amount=self.settings.TRANSFER_AMOUNT,
        )

    @Logger.io
    async def execute(
        self,
        *,
        from_account_id: str,
        to_account_id: str,
        amount: Decimal,
        isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED,
    ) -> TransferResult:
        if amount <= 0:
            raise DomainError('Transfer amount must be positive')

        session_id = f'transfer-{from_account_id}-{to_account_id}'
        Logger.base.info(
            f'=== {session_id}: Transferring {amount} from {from_account_id} to {to_account_id} ==='
        )
        try:
            return await self.transaction_coordinator.run_in_transaction(
                isolation_level=isolation_level,
                session_id=session_id,
                body=partial(
                    self._transfer,
                    from_account_id=from_account_id,
                    to_account_id=to_account_id,
                    amount=amount,
                ),
            )
        except StoreSerializationError as e:
            return TransferResult(
                failure=FailureKind.STORE_SERIALIZATION_FAILURE,
                message=(
                    f'{e.message} | This is expected behavior for {isolation_level.value} '
                    'isolation level during concurrent access.'
                ),
                from_account_id=from_account_id,
                to_account_id=to_account_id,
                amount=amount,
                isolation_level=isolation_level,
                effective_isolation_level=e.effective_isolation_level,
            )

    async def _transfer(
        self,
        tx: TransactionHandle,
        *,
        from_account_id: str,
        to_account_id: str,
        amount: Decimal,
    ) -> TransferResult:
        result = partial(
            TransferResult,
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            amount=amount,
            isolation_level=tx.isolation_level,
            effective_isolation_level=tx.effective_isolation_level,
        )

        # Step 1: the source must exist and cover the amount
        row = await self.resource_store.read_one(
            tx, table=ResourceTable.ACCOUNTS, where={'account_id': from_account_id}
        )
        if row is None:
            return result(
                failure=FailureKind.NOT_FOUND,
                message=f"Account '{from_account_id}' not found",
            )
        source = Account.from_row(row)
        if not source.can_cover(amount):
            Logger.base.warning(
                f'{from_account_id} balance {source.balance} cannot cover {amount}'
            )
            return result(
                failure=FailureKind.INSUFFICIENT_FUNDS,
                message=f"Insufficient funds. {from_account_id}'s balance: ${source.balance:.2f}",
                balance_before=source.balance,
            )

        # Step 2: debit, only if the balance is still what we checked
        affected_rows = await self.resource_store.conditional_update(
            tx,
            table=ResourceTable.ACCOUNTS,
            where={'account_id': from_account_id, 'balance': source.balance},
            increments={'balance': -amount},
        )
        verdict = detect_update_conflict(affected_rows, operation=f'debit {from_account_id}')
        if verdict is UpdateVerdict.PRECONDITION_FAILED:
            return result(
                failure=FailureKind.DEBIT_FAILED,
                message=f"Failed to debit {from_account_id}'s account",
                balance_before=source.balance,
            )

        # Step 3: credit
        affected_rows = await self.resource_store.conditional_update(
            tx,
            table=ResourceTable.ACCOUNTS,
            where={'account_id': to_account_id},
            increments={'balance': amount},
        )
        verdict = detect_update_conflict(affected_rows, operation=f'credit {to_account_id}')
        if verdict is UpdateVerdict.PRECONDITION_FAILED:
            return result(
                failure=FailureKind.CREDIT_FAILED,
                message=f"Failed to credit {to_account_id}'s account",
                balance_before=source.balance,
            )

        return result(
            message=(
                f'Transfer completed! ${amount:.2f} transferred from '
                f'{from_account_id} to {to_account_id}.'
            ),
            balance_before=source.balance,
        )
