from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar

import anyio

from src.platform.exception.exceptions import StoreSerializationError, TransactionTimeoutError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.dto.operation_result import OperationResult
from src.service.shared_kernel.app.interface.i_resource_store import (
    IResourceStore,
    TransactionHandle,
)
from src.service.shared_kernel.domain.enum.isolation_level import IsolationLevel


_R = TypeVar('_R', bound=OperationResult)


class TransactionCoordinator:
    """
    Runs a unit of work inside one store transaction.

    Commits only when the body returns a successful OperationResult. A failed
    result, any exception, a timeout or a cancellation all end in a rollback,
    so no return path leaves the transaction open.
    """

    def __init__(
        self, *, resource_store: IResourceStore, timeout_seconds: Optional[float] = None
    ) -> None:
        self.resource_store = resource_store
        self.timeout_seconds = timeout_seconds

    async def run_in_transaction(
        self,
        *,
        isolation_level: IsolationLevel,
        session_id: str,
        body: Callable[[TransactionHandle], Awaitable[_R]],
    ) -> _R:
        with Logger.session(session_id):
            return await self._run(
                isolation_level=isolation_level, session_id=session_id, body=body
            )

    async def _run(
        self,
        *,
        isolation_level: IsolationLevel,
        session_id: str,
        body: Callable[[TransactionHandle], Awaitable[_R]],
    ) -> _R:
        tx = await self.resource_store.begin_transaction(isolation_level=isolation_level)
        Logger.base.info(
            f'SESSION {session_id}: 🔒 [TX] isolation requested={isolation_level.value} '
            f'effective={tx.effective_isolation_level.value}'
        )
        if tx.coerced:
            Logger.base.warning(
                f'SESSION {session_id}: ⚠️  Store runs {isolation_level.value} as '
                f'{tx.effective_isolation_level.value}'
            )

        committed = False
        try:
            try:
                with anyio.fail_after(self.timeout_seconds):
                    result = await body(tx)
            except TimeoutError as e:
                raise TransactionTimeoutError(
                    f'Transaction for session {session_id} exceeded {self.timeout_seconds}s'
                ) from e

            if not result.succeeded:
                Logger.base.info(
                    f'SESSION {session_id}: ↩️  [TX] rolling back ({result.failure})'
                )
                return result

            await self.resource_store.commit(tx)
            committed = True
            Logger.base.info(f'SESSION {session_id}: ✅ [TX] committed')
            return result
        except StoreSerializationError as e:
            e.isolation_level = tx.isolation_level
            e.effective_isolation_level = tx.effective_isolation_level
            raise
        finally:
            if not committed:
                with anyio.CancelScope(shield=True):
                    await self.resource_store.rollback(tx)
