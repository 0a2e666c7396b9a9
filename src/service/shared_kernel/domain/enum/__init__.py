"""Shared Kernel Domain Enums"""

from src.service.shared_kernel.domain.enum.failure_kind import FailureKind
from src.service.shared_kernel.domain.enum.isolation_level import IsolationLevel
from src.service.shared_kernel.domain.enum.resource_table import ResourceTable

__all__ = ['FailureKind', 'IsolationLevel', 'ResourceTable']
