from src.service.shared_kernel.app.interface.i_resource_store import (
    IResourceStore,
    Row,
    TransactionHandle,
)

__all__ = ['IResourceStore', 'Row', 'TransactionHandle']
