"""
Resource Store port.

The relational store that owns the seats and accounts tables. It enforces
isolation and durability; the application only opens transactions, reads rows
and issues conditional updates whose affected-row count tells it whether the
precondition still held.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any, Optional

import attrs

from src.service.shared_kernel.domain.enum.isolation_level import IsolationLevel
from src.service.shared_kernel.domain.enum.resource_table import ResourceTable


Row = dict[str, Any]


@attrs.define(kw_only=True)
class TransactionHandle:
    """
    An open store transaction.

    `effective_isolation_level` is what the engine actually runs, which can
    differ from the requested one (PostgreSQL runs READ UNCOMMITTED as READ
    COMMITTED).
    """

    isolation_level: IsolationLevel
    effective_isolation_level: IsolationLevel
    closed: bool = False

    @property
    def coerced(self) -> bool:
        return self.isolation_level is not self.effective_isolation_level


class IResourceStore(ABC):
    @abstractmethod
    async def begin_transaction(self, *, isolation_level: IsolationLevel) -> TransactionHandle:
        """Open a connection and start a transaction at `isolation_level`."""
        pass

    @abstractmethod
    async def commit(self, tx: TransactionHandle) -> None:
        """
        Commit and release the connection.

        Raises StoreSerializationError when the engine aborts the commit; the
        handle is closed either way.
        """
        pass

    @abstractmethod
    async def rollback(self, tx: TransactionHandle) -> None:
        """Roll back and release the connection. No-op on a closed handle."""
        pass

    @abstractmethod
    async def read_one(
        self,
        tx: Optional[TransactionHandle],
        *,
        table: ResourceTable,
        where: Mapping[str, Any],
    ) -> Optional[Row]:
        """
        Read a single row matching all equality conditions in `where`.

        With `tx=None` the read runs outside any transaction (snapshot read).
        """
        pass

    @abstractmethod
    async def read_many(
        self,
        tx: Optional[TransactionHandle],
        *,
        table: ResourceTable,
        column: str,
        values: Sequence[Any],
    ) -> list[Row]:
        """Read every row whose `column` is in `values`, ordered by the table key."""
        pass

    @abstractmethod
    async def conditional_update(
        self,
        tx: TransactionHandle,
        *,
        table: ResourceTable,
        where: Mapping[str, Any],
        set_values: Optional[Mapping[str, Any]] = None,
        increments: Optional[Mapping[str, Decimal]] = None,
    ) -> int:
        """
        Single atomic `UPDATE ... WHERE <where>`.

        `set_values` assigns columns, `increments` adds to numeric columns.
        A `None` value in `where` matches SQL NULL. Returns the affected-row count.
        """
        pass

    @abstractmethod
    async def server_version(self) -> str:
        pass
