from decimal import Decimal
from typing import Any

import attrs


@attrs.define(frozen=True)
class Account:
    account_id: str
    balance: Decimal

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> 'Account':
        return cls(account_id=row['account_id'], balance=Decimal(row['balance']))

    def can_cover(self, amount: Decimal) -> bool:
        return self.balance >= amount
