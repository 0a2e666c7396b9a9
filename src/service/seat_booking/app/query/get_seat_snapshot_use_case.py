from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.seat_booking.app.dto.seat_snapshot import SeatSnapshot
from src.service.seat_booking.domain.entity.seat_entity import Seat
from src.service.shared_kernel.app.interface.i_resource_store import IResourceStore
from src.service.shared_kernel.domain.enum.resource_table import ResourceTable


class GetSeatSnapshotUseCase:
    """
    Read the seat outside any transaction, for polling.

    No consistency guarantee relative to in-flight bookings: the snapshot only
    ever shows committed state.
    """

    def __init__(self, *, resource_store: IResourceStore, seat_id: str = 'A1') -> None:
        self.resource_store = resource_store
        self.seat_id = seat_id

    @classmethod
    @inject
    def depends(
        cls,
        resource_store: IResourceStore = Depends(Provide[Container.resource_store]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(resource_store=resource_store, seat_id=settings.DEMO_SEAT_ID)

    @Logger.io
    async def execute(self, *, seat_id: Optional[str] = None) -> Optional[SeatSnapshot]:
        row = await self.resource_store.read_one(
            None, table=ResourceTable.SEATS, where={'seat_id': seat_id or self.seat_id}
        )
        if row is None:
            return None
        return SeatSnapshot.from_seat(Seat.from_row(row))
