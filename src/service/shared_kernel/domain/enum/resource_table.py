"""
Tables and columns the resource store is allowed to touch.

SQL identifiers cannot be bound as parameters, so every table/column name that
reaches a statement is checked against this registry first.
"""

from collections.abc import Iterable
from enum import StrEnum


class ResourceTable(StrEnum):
    SEATS = 'seats'
    ACCOUNTS = 'accounts'

    @property
    def key_column(self) -> str:
        return _KEY_COLUMNS[self]

    @property
    def columns(self) -> tuple[str, ...]:
        return _COLUMNS[self]

    def check_columns(self, names: Iterable[str]) -> None:
        unknown = [name for name in names if name not in _COLUMNS[self]]
        if unknown:
            raise ValueError(f'Unknown column(s) for table {self.value}: {", ".join(unknown)}')


_KEY_COLUMNS: dict[ResourceTable, str] = {
    ResourceTable.SEATS: 'seat_id',
    ResourceTable.ACCOUNTS: 'account_id',
}

_COLUMNS: dict[ResourceTable, tuple[str, ...]] = {
    ResourceTable.SEATS: (
        'seat_id',
        'status',
        'price',
        'booked_by',
        'reserved_by',
        'booked_at',
        'reserved_at',
    ),
    ResourceTable.ACCOUNTS: ('account_id', 'balance'),
}
