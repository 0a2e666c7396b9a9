"""Application layer DTOs"""

from src.service.shared_kernel.app.dto.operation_result import OperationResult

__all__ = ['OperationResult']
