"""
Storage Services Package

Provides the abstract store interfaces, the in-memory implementations
used by the ledger, and the flat-file dump layer.
"""

from wallet.services.storage.interface import (
    AuditStorageInterface,
    DumpFormatError,
    LedgerStoreInterface,
    StorageError,
)
from wallet.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryLedgerStore,
)
from wallet.services.storage.dump import (
    ACCOUNTS_DUMP,
    FAVORITES_DUMP,
    PAYMENTS_DUMP,
    FileDumpStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStoreInterface",
    # Exceptions
    "DumpFormatError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryLedgerStore",
    # Flat-file dumps
    "ACCOUNTS_DUMP",
    "FAVORITES_DUMP",
    "PAYMENTS_DUMP",
    "FileDumpStorage",
]
