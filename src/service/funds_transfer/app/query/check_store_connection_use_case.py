from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.interface.i_resource_store import IResourceStore


class CheckStoreConnectionUseCase:
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

    async def execute(self) -> str:
        Logger.base.info(f'🔌 Checking store connection: {self.settings.DATABASE_URL_MASKED}')
        version = await self.resource_store.server_version()
        Logger.base.info('🔌 Store connection OK')
        return version
