"""
Ledger Service

This module holds the operation set of the wallet:
1. Accounts (register → deposit)
2. Payments (pay → reject / repeat)
3. Favorites (favorite → pay from favorite)
4. History (per-account history, filtering, totals)
5. Persistence wrappers around the dump layer

DESIGN DECISION: The service owns no state of its own. Accounts,
payments and favorites live in the store it is given, so two services
never share a ledger by accident.

GUARANTEES:
- Validation happens before any mutation; a failed operation leaves
  the store untouched
- A balance never goes negative
- Every successful mutation is audited; failures are raised, not logged
"""

import os
from pathlib import Path
from typing import Callable, Optional, Union

from wallet.audit import AuditLogger, create_correlation_id
from wallet.config import get_settings
from wallet.ledger.errors import (
    AccountNotFoundError,
    AmountMustBePositiveError,
    FavoriteNotFoundError,
    NotEnoughBalanceError,
    PaymentNotFoundError,
    PhoneAlreadyRegisteredError,
)
from wallet.models.ledger import (
    Account,
    Favorite,
    Payment,
    PaymentStatus,
    new_entity_id,
)
from wallet.services.storage import (
    FileDumpStorage,
    InMemoryLedgerStore,
    LedgerStoreInterface,
)


PathLike = Union[str, os.PathLike]


class LedgerService:
    """
    Accounts, payments and favorites over a ledger store.

    Not thread-safe: callers sharing one service between threads
    must serialize access themselves.
    """

    def __init__(
        self,
        store: Optional[LedgerStoreInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        dump_storage: Optional[FileDumpStorage] = None,
    ):
        self._store = store or InMemoryLedgerStore()
        self._audit_logger = audit_logger
        self._dump_storage = dump_storage or FileDumpStorage(self._store)

    @property
    def store(self) -> LedgerStoreInterface:
        return self._store

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    def register_account(self, phone: str) -> Account:
        """
        Register a new zero-balance account.

        Raises:
            PhoneAlreadyRegisteredError: If the phone is taken
        """
        if self._store.get_account_by_phone(phone) is not None:
            raise PhoneAlreadyRegisteredError(phone)

        account = Account(
            id=self._store.next_account_id(),
            phone=phone,
            balance=0,
        )
        self._store.add_account(account)

        if self._audit_logger:
            self._audit_logger.log_account_registered(account.id, phone)

        return account

    def deposit(self, account_id: int, amount: int) -> None:
        """
        Add amount to an account's balance.

        Raises:
            AmountMustBePositiveError: If amount <= 0
            AccountNotFoundError: If the account doesn't exist
        """
        if amount <= 0:
            raise AmountMustBePositiveError(amount)

        account = self.find_account_by_id(account_id)
        account.balance += amount

        if self._audit_logger:
            self._audit_logger.log_deposit(account.id, amount, account.balance)

    def find_account_by_id(self, account_id: int) -> Account:
        account = self._store.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    # =========================================================================
    # PAYMENTS
    # =========================================================================

    def pay(self, account_id: int, amount: int, category: str) -> Payment:
        """
        Debit an account and record an in-progress payment.

        Raises:
            AmountMustBePositiveError: If amount <= 0
            AccountNotFoundError: If the account doesn't exist
            NotEnoughBalanceError: If the balance is below amount
        """
        if amount <= 0:
            raise AmountMustBePositiveError(amount)

        account = self.find_account_by_id(account_id)
        payment = self._debit_and_create_payment(account, amount, category)

        if self._audit_logger:
            self._audit_logger.log_payment_created(
                payment.id, account.id, amount, category,
            )

        return payment

    def _debit_and_create_payment(
        self,
        account: Account,
        amount: int,
        category: str,
    ) -> Payment:
        """Shared by pay() and pay_from_favorite(); account already resolved."""
        if account.balance < amount:
            raise NotEnoughBalanceError(account.id, account.balance, amount)

        account.balance -= amount

        payment = Payment(
            id=new_entity_id(),
            account_id=account.id,
            amount=amount,
            category=category,
            status=PaymentStatus.INPROGRESS,
        )
        self._store.add_payment(payment)
        return payment

    def find_payment_by_id(self, payment_id: str) -> Payment:
        payment = self._store.get_payment(payment_id)
        if payment is None:
            raise PaymentNotFoundError(payment_id)
        return payment

    def reject(self, payment_id: str) -> None:
        """
        Reject a payment, returning its amount to the account.

        Rejecting a payment that is already FAIL does nothing, so the
        amount is only ever credited back once.

        Raises:
            PaymentNotFoundError: If the payment doesn't exist
            AccountNotFoundError: If its account doesn't exist
        """
        payment = self.find_payment_by_id(payment_id)
        account = self.find_account_by_id(payment.account_id)

        if payment.is_rejected:
            return

        account.balance += payment.amount
        payment.status = PaymentStatus.FAIL

        if self._audit_logger:
            self._audit_logger.log_payment_rejected(
                payment.id, account.id, payment.amount,
            )

    def repeat(self, payment_id: str) -> Payment:
        """
        Make a new payment with the amount and category of an earlier one.

        The earlier payment is not modified.

        Raises:
            PaymentNotFoundError: If the payment doesn't exist
            AccountNotFoundError: If its account doesn't exist
            NotEnoughBalanceError: If the balance no longer covers it
        """
        source = self.find_payment_by_id(payment_id)
        account = self.find_account_by_id(source.account_id)

        correlation_id = create_correlation_id()
        payment = self._debit_and_create_payment(account, source.amount, source.category)

        if self._audit_logger:
            self._audit_logger.log_payment_created(
                payment.id, account.id, payment.amount, payment.category,
                correlation_id=correlation_id,
            )
            self._audit_logger.log_payment_repeated(
                source.id, payment.id, correlation_id=correlation_id,
            )

        return payment

    # =========================================================================
    # FAVORITES
    # =========================================================================

    def favorite_payment(self, payment_id: str, name: str) -> Favorite:
        """
        Save a payment's account, amount and category as a named favorite.

        Raises:
            PaymentNotFoundError: If the payment doesn't exist
        """
        payment = self.find_payment_by_id(payment_id)

        favorite = Favorite(
            id=new_entity_id(),
            account_id=payment.account_id,
            name=name,
            amount=payment.amount,
            category=payment.category,
        )
        self._store.add_favorite(favorite)

        if self._audit_logger:
            self._audit_logger.log_favorite_created(favorite.id, payment.id, name)

        return favorite

    def find_favorite_by_id(self, favorite_id: str) -> Favorite:
        favorite = self._store.get_favorite(favorite_id)
        if favorite is None:
            raise FavoriteNotFoundError(favorite_id)
        return favorite

    def pay_from_favorite(self, favorite_id: str) -> Payment:
        """
        Make a payment from a favorite's stored amount and category.

        Raises:
            FavoriteNotFoundError: If the favorite doesn't exist
            AccountNotFoundError: If its account doesn't exist
            NotEnoughBalanceError: If the balance is below the stored amount
        """
        favorite = self.find_favorite_by_id(favorite_id)
        account = self.find_account_by_id(favorite.account_id)

        correlation_id = create_correlation_id()
        payment = self._debit_and_create_payment(
            account, favorite.amount, favorite.category,
        )

        if self._audit_logger:
            self._audit_logger.log_payment_created(
                payment.id, account.id, payment.amount, payment.category,
                correlation_id=correlation_id,
            )
            self._audit_logger.log_favorite_paid(
                favorite.id, payment.id, correlation_id=correlation_id,
            )

        return payment

    # =========================================================================
    # HISTORY
    # =========================================================================

    def filter_payments(self, predicate: Callable[[Payment], bool]) -> list[Payment]:
        """Copies of the payments matching predicate, oldest first."""
        return [
            payment.model_copy()
            for payment in self._store.list_payments()
            if predicate(payment)
        ]

    def export_account_history(self, account_id: int) -> list[Payment]:
        """
        All payments of one account, oldest first.

        The returned payments are copies; changing them does not touch
        the ledger.

        Raises:
            AccountNotFoundError: If the account doesn't exist
        """
        account = self.find_account_by_id(account_id)
        return self.filter_payments(lambda p: p.account_id == account.id)

    def sum_payments(self) -> int:
        """Total amount of every recorded payment, rejected ones included."""
        return sum(payment.amount for payment in self._store.list_payments())

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def export_to_file(self, path: Optional[PathLike] = None) -> int:
        """
        Append all accounts to a single-file dump.

        path defaults to the configured account file.
        """
        if path is None:
            path = get_settings().dump.account_file_path
        count = self._dump_storage.export_to_file(path)
        if self._audit_logger:
            self._audit_logger.log_dump_exported(str(path), {"accounts": count})
        return count

    def import_from_file(self, path: Optional[PathLike] = None) -> int:
        """
        Append the accounts of a single-file dump.

        path defaults to the configured account file.
        """
        if path is None:
            path = get_settings().dump.account_file_path
        count = self._dump_storage.import_from_file(path)
        if self._audit_logger:
            self._audit_logger.log_dump_imported(str(path), {"accounts": count})
        return count

    def export_to_dir(self, directory: PathLike) -> dict[str, int]:
        """Write accounts.dump, payments.dump and favorites.dump."""
        written = self._dump_storage.export_to_dir(directory)
        if self._audit_logger:
            self._audit_logger.log_dump_exported(str(directory), written)
        return written

    def import_from_dir(self, directory: PathLike) -> dict[str, int]:
        """Load accounts.dump, payments.dump and favorites.dump if present."""
        read = self._dump_storage.import_from_dir(directory)
        if self._audit_logger:
            self._audit_logger.log_dump_imported(str(directory), read)
        return read

    def history_to_files(
        self,
        payments: list[Payment],
        directory: PathLike,
        records: int,
    ) -> list[Path]:
        """Write payments into pages of at most `records` lines."""
        files = self._dump_storage.history_to_files(payments, directory, records)
        if self._audit_logger and files:
            self._audit_logger.log_history_exported(
                str(directory), [f.name for f in files], len(payments),
            )
        return files

    def export_account_history_to_files(
        self,
        account_id: int,
        directory: Optional[PathLike] = None,
        records: Optional[int] = None,
    ) -> list[Path]:
        """
        Export one account's history in pages.

        directory and records default to the dump settings.

        Raises:
            AccountNotFoundError: If the account doesn't exist
        """
        history = self.export_account_history(account_id)

        if directory is None or records is None:
            dump_settings = get_settings().dump
            directory = directory if directory is not None else dump_settings.directory
            records = records if records is not None else dump_settings.history_page_size

        return self.history_to_files(history, directory, records)
