"""Application layer DTOs"""

from src.service.funds_transfer.app.dto.transfer_result import TransferResult

__all__ = ['TransferResult']
