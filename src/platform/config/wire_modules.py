"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.funds_transfer.app.command import transfer_funds_use_case
from src.service.funds_transfer.app.query import (
    check_store_connection_use_case,
    get_balances_use_case,
)
from src.service.seat_booking.app.command import book_seat_use_case, reset_seat_use_case
from src.service.seat_booking.app.query import get_seat_snapshot_use_case


WIRE_MODULES: list[ModuleType] = [
    book_seat_use_case,
    reset_seat_use_case,
    get_seat_snapshot_use_case,
    transfer_funds_use_case,
    get_balances_use_case,
    check_store_connection_use_case,
]
