"""
Abstract Storage Interface

DESIGN DECISION: The ledger talks to its entities through an abstract
store. This allows us to:
1. Keep the ledger rules independent of how entities are held
2. Use the in-memory store in tests and in-process use
3. Back the same ledger with a database later

The interface is intentionally simple - just the operations the ledger
and the dump layer need. Lookups are by ID; there is no query language.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from wallet.models.audit import AuditEvent
from wallet.models.ledger import Account, Favorite, Payment


class LedgerStoreInterface(ABC):
    """
    Abstract interface for ledger entity storage.

    Collections keep insertion order. Nothing is ever deleted.
    """

    @abstractmethod
    def next_account_id(self) -> int:
        """
        Advance the account ID counter and return the new value.

        The counter is never decremented.
        """
        pass

    @abstractmethod
    def advance_account_id(self, seen_id: int) -> None:
        """
        Make sure the counter is at least seen_id.

        Called for every imported account so that later registrations
        never reuse an imported ID.
        """
        pass

    @property
    @abstractmethod
    def last_account_id(self) -> int:
        """The most recently assigned (or imported) account ID."""
        pass

    @abstractmethod
    def add_account(self, account: Account) -> None:
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """
        Retrieve an account by its ID.

        Returns:
            The first account with this ID, None if there is none
        """
        pass

    @abstractmethod
    def get_account_by_phone(self, phone: str) -> Optional[Account]:
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        pass

    @abstractmethod
    def add_payment(self, payment: Payment) -> None:
        pass

    @abstractmethod
    def get_payment(self, payment_id: str) -> Optional[Payment]:
        pass

    @abstractmethod
    def list_payments(self) -> list[Payment]:
        pass

    @abstractmethod
    def add_favorite(self, favorite: Favorite) -> None:
        pass

    @abstractmethod
    def get_favorite(self, favorite_id: str) -> Optional[Favorite]:
        pass

    @abstractmethod
    def list_favorites(self) -> list[Favorite]:
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., a repeat and the
        payment it created).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity.

        Args:
            entity_type: Type of entity (e.g., 'account', 'payment')
            entity_id: The entity's ID as a string

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DumpFormatError(StorageError):
    """
    A dump file holds a record that cannot be parsed.

    The whole import is aborted; records read before the bad one
    may already be in the store.
    """

    def __init__(self, path: str, record_number: int, reason: str):
        self.path = path
        self.record_number = record_number
        self.reason = reason
        super().__init__(f"{path}, record {record_number}: {reason}")
