from fastapi import APIRouter, Depends, status

from src.platform.exception.exceptions import StoreUnavailableError
from src.platform.logging.loguru_io import Logger
from src.service.funds_transfer.app.command.transfer_funds_use_case import TransferFundsUseCase
from src.service.funds_transfer.app.query.check_store_connection_use_case import (
    CheckStoreConnectionUseCase,
)
from src.service.funds_transfer.app.query.get_balances_use_case import GetBalancesUseCase
from src.service.funds_transfer.driving_adapter.http_controller.schema.transfer_schema import (
    BalancesResponse,
    ConnectionResponse,
    TransferResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_200_OK)
@Logger.io
async def execute_transfer(
    use_case: TransferFundsUseCase = Depends(TransferFundsUseCase.depends),
) -> TransferResponse:
    """Fixed demo transfer (Virat -> Rohit, 100.00 by default)."""
    result = await use_case.execute_default()
    if result.succeeded:
        return TransferResponse(
            success=True, message=f'✅ SUCCESS: {result.message}', outcome='success'
        )
    return TransferResponse(
        success=False,
        message=f'❌ ERROR: Transfer failed - {result.message}',
        outcome=result.failure.value if result.failure else 'unknown',
    )


@router.get('/balances')
@Logger.io
async def get_balances(
    use_case: GetBalancesUseCase = Depends(GetBalancesUseCase.depends),
) -> BalancesResponse:
    return await use_case.execute()


@router.get('/connection')
async def check_connection(
    use_case: CheckStoreConnectionUseCase = Depends(CheckStoreConnectionUseCase.depends),
) -> ConnectionResponse:
    try:
        version = await use_case.execute()
    except StoreUnavailableError as e:
        Logger.base.error(f'🔌 Store connection check failed: {e.message}')
        return ConnectionResponse(success=False, error=e.message)
    return ConnectionResponse(success=True, version=version)
