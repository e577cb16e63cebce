"""
In-Memory Storage Implementation

The ledger's default store. Entities live in plain insertion-ordered
lists and every lookup is a linear first-match scan.

TRADEOFFS:
- O(n) lookups (fine at personal-wallet scale)
- Nothing survives the process unless exported through the dump layer
- No locking: one store must only be used from one thread at a time
"""

from typing import Optional
from uuid import UUID

from wallet.models.audit import AuditEvent
from wallet.models.ledger import Account, Favorite, Payment
from wallet.services.storage.interface import (
    AuditStorageInterface,
    LedgerStoreInterface,
)


class InMemoryLedgerStore(LedgerStoreInterface):
    """Holds accounts, payments, favorites and the account ID counter."""

    def __init__(self):
        self._next_account_id = 0
        self._accounts: list[Account] = []
        self._payments: list[Payment] = []
        self._favorites: list[Favorite] = []

    def next_account_id(self) -> int:
        self._next_account_id += 1
        return self._next_account_id

    def advance_account_id(self, seen_id: int) -> None:
        if seen_id > self._next_account_id:
            self._next_account_id = seen_id

    @property
    def last_account_id(self) -> int:
        return self._next_account_id

    def add_account(self, account: Account) -> None:
        self._accounts.append(account)

    def get_account(self, account_id: int) -> Optional[Account]:
        for account in self._accounts:
            if account.id == account_id:
                return account
        return None

    def get_account_by_phone(self, phone: str) -> Optional[Account]:
        for account in self._accounts:
            if account.phone == phone:
                return account
        return None

    def list_accounts(self) -> list[Account]:
        return list(self._accounts)

    def add_payment(self, payment: Payment) -> None:
        self._payments.append(payment)

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        for payment in self._payments:
            if payment.id == payment_id:
                return payment
        return None

    def list_payments(self) -> list[Payment]:
        return list(self._payments)

    def add_favorite(self, favorite: Favorite) -> None:
        self._favorites.append(favorite)

    def get_favorite(self, favorite_id: str) -> Optional[Favorite]:
        for favorite in self._favorites:
            if favorite.id == favorite_id:
                return favorite
        return None

    def list_favorites(self) -> list[Favorite]:
        return list(self._favorites)


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Append-only audit storage kept in a list.

    Events are stored in the order they were appended.
    """

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        events = [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        # Newest first; appended order breaks timestamp ties
        return list(reversed(self._events))[:limit]
