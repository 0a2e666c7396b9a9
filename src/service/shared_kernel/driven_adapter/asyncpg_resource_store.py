"""
PostgreSQL implementation of the Resource Store port (asyncpg).

Every statement is built from the ResourceTable registry for identifiers and
positional parameters for values. Engine errors are translated to the
platform exceptions:
- SQLSTATE class 40 (serialization failure, deadlock) -> StoreSerializationError
- connection-level failures -> StoreUnavailableError
"""

import asyncio
from collections.abc import AsyncIterator, Iterator, Mapping, Sequence
from contextlib import asynccontextmanager, contextmanager
from decimal import Decimal
from typing import Any, Optional

import asyncpg
import attrs

from src.platform.database.asyncpg_setting import Database
from src.platform.exception.exceptions import StoreSerializationError, StoreUnavailableError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.interface.i_resource_store import (
    IResourceStore,
    Row,
    TransactionHandle,
)
from src.service.shared_kernel.domain.enum.isolation_level import IsolationLevel
from src.service.shared_kernel.domain.enum.resource_table import ResourceTable


_ASYNCPG_ISOLATION: dict[IsolationLevel, str] = {
    IsolationLevel.READ_UNCOMMITTED: 'read_uncommitted',
    IsolationLevel.READ_COMMITTED: 'read_committed',
    IsolationLevel.REPEATABLE_READ: 'repeatable_read',
    IsolationLevel.SERIALIZABLE: 'serializable',
}


@attrs.define(kw_only=True)
class AsyncpgTransactionHandle(TransactionHandle):
    pool: Any
    connection: Any
    transaction: Any


def effective_postgres_level(reported: IsolationLevel) -> IsolationLevel:
    # PostgreSQL accepts READ UNCOMMITTED but never exposes dirty reads
    if reported is IsolationLevel.READ_UNCOMMITTED:
        return IsolationLevel.READ_COMMITTED
    return reported


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except asyncpg.exceptions.TransactionRollbackError as e:
        Logger.base.warning(f'⚔️  [STORE] {operation}: {type(e).__name__}: {e}')
        raise StoreSerializationError(f'{type(e).__name__}: {e}') from e
    except (
        asyncpg.exceptions.PostgresConnectionError,
        asyncpg.exceptions.CannotConnectNowError,
        asyncpg.InterfaceError,
        asyncio.TimeoutError,
        OSError,
    ) as e:
        Logger.base.error(f'❌ [STORE] {operation} failed: {type(e).__name__}: {e}')
        raise StoreUnavailableError() from e


def build_where_clause(where: Mapping[str, Any], *, start: int = 1) -> tuple[str, list[Any]]:
    if not where:
        raise ValueError('A where clause needs at least one condition')
    conditions: list[str] = []
    args: list[Any] = []
    for column, value in where.items():
        if value is None:
            conditions.append(f'{column} IS NULL')
        else:
            args.append(value)
            conditions.append(f'{column} = ${start + len(args) - 1}')
    return ' AND '.join(conditions), args


def parse_affected_rows(status: str) -> int:
    """asyncpg returns the command tag, e.g. 'UPDATE 1'."""
    try:
        return int(status.rsplit(' ', 1)[-1])
    except ValueError as e:
        raise ValueError(f'Unexpected command status: {status!r}') from e


class AsyncpgResourceStore(IResourceStore):
    def __init__(self, *, database: Database) -> None:
        self.database = database

    async def begin_transaction(
        self, *, isolation_level: IsolationLevel
    ) -> AsyncpgTransactionHandle:
        with translate_store_errors('begin'):
            pool = await self.database.get_pool()
            conn = await pool.acquire(timeout=self.database.acquire_timeout)
        try:
            with translate_store_errors('begin'):
                transaction = conn.transaction(isolation=_ASYNCPG_ISOLATION[isolation_level])
                await transaction.start()
                reported = await conn.fetchval('SHOW transaction_isolation')
        except BaseException:
            await pool.release(conn)
            raise

        return AsyncpgTransactionHandle(
            isolation_level=isolation_level,
            effective_isolation_level=effective_postgres_level(
                IsolationLevel.from_sql_name(reported)
            ),
            pool=pool,
            connection=conn,
            transaction=transaction,
        )

    async def commit(self, tx: TransactionHandle) -> None:
        handle = self._handle(tx)
        if handle.closed:
            raise ValueError('Transaction is already closed')
        try:
            with translate_store_errors('commit'):
                await handle.transaction.commit()
        finally:
            # A failed COMMIT ends the transaction as a rollback on the server
            await self._close(handle)

    async def rollback(self, tx: TransactionHandle) -> None:
        handle = self._handle(tx)
        if handle.closed:
            return
        try:
            with translate_store_errors('rollback'):
                await handle.transaction.rollback()
        finally:
            await self._close(handle)

    async def read_one(
        self,
        tx: Optional[TransactionHandle],
        *,
        table: ResourceTable,
        where: Mapping[str, Any],
    ) -> Optional[Row]:
        table.check_columns(where)
        clause, args = build_where_clause(where)
        sql = f'SELECT {", ".join(table.columns)} FROM {table.value} WHERE {clause}'
        async with self._connection(tx) as conn:
            with translate_store_errors(f'read {table.value}'):
                record = await conn.fetchrow(sql, *args)
        return dict(record) if record is not None else None

    async def read_many(
        self,
        tx: Optional[TransactionHandle],
        *,
        table: ResourceTable,
        column: str,
        values: Sequence[Any],
    ) -> list[Row]:
        table.check_columns([column])
        sql = (
            f'SELECT {", ".join(table.columns)} FROM {table.value} '
            f'WHERE {column} = ANY($1) ORDER BY {table.key_column}'
        )
        async with self._connection(tx) as conn:
            with translate_store_errors(f'read {table.value}'):
                records = await conn.fetch(sql, list(values))
        return [dict(record) for record in records]

    async def conditional_update(
        self,
        tx: TransactionHandle,
        *,
        table: ResourceTable,
        where: Mapping[str, Any],
        set_values: Optional[Mapping[str, Any]] = None,
        increments: Optional[Mapping[str, Decimal]] = None,
    ) -> int:
        set_values = set_values or {}
        increments = increments or {}
        table.check_columns([*where, *set_values, *increments])
        if not set_values and not increments:
            raise ValueError('Nothing to update')

        args: list[Any] = []
        assignments: list[str] = []
        for column, value in set_values.items():
            args.append(value)
            assignments.append(f'{column} = ${len(args)}')
        for column, delta in increments.items():
            args.append(delta)
            assignments.append(f'{column} = {column} + ${len(args)}')

        clause, where_args = build_where_clause(where, start=len(args) + 1)
        sql = f'UPDATE {table.value} SET {", ".join(assignments)} WHERE {clause}'

        handle = self._handle(tx)
        with translate_store_errors(f'update {table.value}'):
            status = await handle.connection.execute(sql, *args, *where_args)
        return parse_affected_rows(status)

    @Logger.io
    async def server_version(self) -> str:
        with translate_store_errors('version'):
            pool = await self.database.get_pool()
            async with pool.acquire(timeout=self.database.acquire_timeout) as conn:
                return await conn.fetchval('SELECT version()')

    @asynccontextmanager
    async def _connection(self, tx: Optional[TransactionHandle]) -> AsyncIterator[Any]:
        if tx is not None:
            yield self._handle(tx).connection
            return
        with translate_store_errors('acquire'):
            pool = await self.database.get_pool()
            conn = await pool.acquire(timeout=self.database.acquire_timeout)
        try:
            yield conn
        finally:
            await pool.release(conn)

    @staticmethod
    def _handle(tx: TransactionHandle) -> AsyncpgTransactionHandle:
        if not isinstance(tx, AsyncpgTransactionHandle):
            raise TypeError(f'Expected AsyncpgTransactionHandle, got {type(tx).__name__}')
        return tx

    @staticmethod
    async def _close(handle: AsyncpgTransactionHandle) -> None:
        handle.closed = True
        await handle.pool.release(handle.connection)
