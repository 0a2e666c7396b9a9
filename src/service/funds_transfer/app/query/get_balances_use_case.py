from decimal import Decimal
from typing import Optional, Self, Sequence

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.funds_transfer.domain.entity.account_entity import Account
from src.service.shared_kernel.app.interface.i_resource_store import IResourceStore
from src.service.shared_kernel.domain.enum.resource_table import ResourceTable


class GetBalancesUseCase:
    def __init__(self, *, resource_store: IResourceStore, settings: Settings) -> None:
        self.resource_store = resource_store
        self.settings = settings

    @classmethod
    @inject
    def depends(
        cls,
        resource_store: IResourceStore = Depends(Provide[Container.resource_store]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(resource_store=resource_store, settings=settings)

    @Logger.io
    async def execute(
        self, *, account_ids: Optional[Sequence[str]] = None
    ) -> dict[str, Decimal]:
        """Committed balances keyed by account id, ordered by account id."""
        if account_ids is None:
            account_ids = [self.settings.TRANSFER_FROM_ACCOUNT, self.settings.TRANSFER_TO_ACCOUNT]
        rows = await self.resource_store.read_many(
            None, table=ResourceTable.ACCOUNTS, column='account_id', values=list(account_ids)
        )
        accounts = [Account.from_row(row) for row in rows]
        return {account.account_id: account.balance for account in accounts}
