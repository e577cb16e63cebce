"""Services package."""

from wallet.services.storage import (
    AuditStorageInterface,
    DumpFormatError,
    FileDumpStorage,
    InMemoryAuditStorage,
    InMemoryLedgerStore,
    LedgerStoreInterface,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "DumpFormatError",
    "FileDumpStorage",
    "InMemoryAuditStorage",
    "InMemoryLedgerStore",
    "LedgerStoreInterface",
    "StorageError",
]
