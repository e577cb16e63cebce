"""
Flat-File Dump Storage

Snapshots a ledger store to delimited text files and restores it.

Two schemes exist side by side:
1. Single-file account dump - "id;phone;balance|" records appended
   to one file
2. Directory dump - accounts.dump, payments.dump and favorites.dump,
   one ";"-separated record per line

Payment history can also be split over several files of a fixed page size.

FORMAT: fields are separated by ";" and records by newline ("|" for the
single-file scheme). Nothing is escaped, so a phone, category or
favorite name containing ";", "|" or a newline corrupts the dump.
The format is fixed and reproduced exactly.

TRADEOFFS:
- Directory and history files are written to a temp file and renamed
  into place. The single-file dump appends and is not atomic.
- The three directory files are written independently; a failure half
  way leaves the earlier ones updated.
- Imports fail fast: the first bad record aborts with DumpFormatError.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Union

from pydantic import ValidationError

from wallet.models.ledger import Account, Favorite, Payment, PaymentStatus
from wallet.services.storage.interface import (
    DumpFormatError,
    LedgerStoreInterface,
)


PathLike = Union[str, os.PathLike]

FIELD_SEPARATOR = ";"
RECORD_SEPARATOR = "|"

ACCOUNTS_DUMP = "accounts.dump"
PAYMENTS_DUMP = "payments.dump"
FAVORITES_DUMP = "favorites.dump"

# Column order for each record type
ACCOUNT_COLUMNS = ["id", "phone", "balance"]
PAYMENT_COLUMNS = ["id", "account_id", "amount", "category", "status"]
FAVORITE_COLUMNS = ["id", "account_id", "name", "amount", "category"]

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

# Integer fields are signed 64-bit
INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1


def account_to_row(account: Account) -> list[str]:
    return [str(account.id), account.phone, str(account.balance)]


def payment_to_row(payment: Payment) -> list[str]:
    return [
        payment.id,
        str(payment.account_id),
        str(payment.amount),
        payment.category,
        payment.status.value,
    ]


def favorite_to_row(favorite: Favorite) -> list[str]:
    return [
        favorite.id,
        str(favorite.account_id),
        favorite.name,
        str(favorite.amount),
        favorite.category,
    ]


def format_record(row: list[str]) -> str:
    return FIELD_SEPARATOR.join(row)


class _RecordParser:
    """Parses the records of one dump file, tracking position for errors."""

    def __init__(self, path: PathLike):
        self.path = str(path)
        self.record_number = 0

    def fail(self, reason: str) -> DumpFormatError:
        return DumpFormatError(self.path, self.record_number, reason)

    def split(self, record: str, columns: list[str]) -> list[str]:
        self.record_number += 1
        fields = record.split(FIELD_SEPARATOR)
        if len(fields) != len(columns):
            raise self.fail(
                f"expected {len(columns)} fields ({FIELD_SEPARATOR.join(columns)}), "
                f"got {len(fields)}"
            )
        return fields

    def integer(self, value: str, column: str) -> int:
        if not _INT_PATTERN.fullmatch(value):
            raise self.fail(f"{column} is not an integer: {value!r}")
        number = int(value)
        if not INT_MIN <= number <= INT_MAX:
            raise self.fail(f"{column} is out of the 64-bit range: {value}")
        return number

    def account(self, record: str) -> Account:
        id_, phone, balance = self.split(record, ACCOUNT_COLUMNS)
        try:
            return Account(
                id=self.integer(id_, "id"),
                phone=phone,
                balance=self.integer(balance, "balance"),
            )
        except ValidationError as e:
            raise self.fail(f"invalid account: {e}") from e

    def payment(self, record: str) -> Payment:
        id_, account_id, amount, category, status = self.split(record, PAYMENT_COLUMNS)
        try:
            status_value = PaymentStatus(status)
        except ValueError as e:
            raise self.fail(f"unknown payment status: {status!r}") from e
        try:
            return Payment(
                id=id_,
                account_id=self.integer(account_id, "account_id"),
                amount=self.integer(amount, "amount"),
                category=category,
                status=status_value,
            )
        except ValidationError as e:
            raise self.fail(f"invalid payment: {e}") from e

    def favorite(self, record: str) -> Favorite:
        id_, account_id, name, amount, category = self.split(record, FAVORITE_COLUMNS)
        try:
            return Favorite(
                id=id_,
                account_id=self.integer(account_id, "account_id"),
                name=name,
                amount=self.integer(amount, "amount"),
                category=category,
            )
        except ValidationError as e:
            raise self.fail(f"invalid favorite: {e}") from e


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _write_lines_atomic(path: Path, lines: Iterable[str]) -> None:
    """
    Write newline-terminated lines to path via a temp file and rename.

    The file gets the same mode a plain open() would give it
    (0666 minus the umask), not the owner-only mode of mkstemp.
    """
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            for line in lines:
                f.write(line + "\n")
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, path)
    except BaseException:
        os.unlink(tmp_name)
        raise


def _read_lines(path: Path) -> Optional[list[str]]:
    """Read the lines of path, None if it doesn't exist."""
    try:
        with open(path, encoding="utf-8") as f:
            return [line.rstrip("\n") for line in f]
    except FileNotFoundError:
        return None


class FileDumpStorage:
    """
    Reads and writes dumps of a ledger store.

    Exports never modify the store; imports only append to it
    (and update balances of accounts that already exist).
    """

    def __init__(self, store: LedgerStoreInterface):
        self._store = store

    # -------------------------------------------------------------------------
    # Single-file account dump
    # -------------------------------------------------------------------------

    def export_to_file(self, path: PathLike) -> int:
        """
        Append all accounts to path as "id;phone;balance|" records.

        The file is created if missing and never truncated.

        Returns:
            Number of accounts written
        """
        accounts = self._store.list_accounts()
        data = "".join(
            format_record(account_to_row(a)) + RECORD_SEPARATOR for a in accounts
        )
        with open(path, "a", encoding="utf-8", newline="") as f:
            f.write(data)
        return len(accounts)

    def import_from_file(self, path: PathLike) -> int:
        """
        Append the accounts of a single-file dump to the store.

        Accounts are appended as-is, without checking for an existing
        account with the same ID or phone.

        Returns:
            Number of accounts imported

        Raises:
            FileNotFoundError: If path doesn't exist
            DumpFormatError: On the first malformed record
        """
        data = Path(path).read_text(encoding="utf-8")
        # The trailing separator leaves an empty last segment
        records = data.split(RECORD_SEPARATOR)[:-1]

        parser = _RecordParser(path)
        for record in records:
            account = parser.account(record)
            self._store.add_account(account)
            self._store.advance_account_id(account.id)
        return len(records)

    # -------------------------------------------------------------------------
    # Directory dump
    # -------------------------------------------------------------------------

    def export_to_dir(self, directory: PathLike) -> dict[str, int]:
        """
        Write accounts.dump, payments.dump and favorites.dump into directory.

        A file is only written when its collection is non-empty; an
        existing file for an empty collection is left untouched.
        The directory must already exist.

        Returns:
            {file name: records written} for each file written
        """
        directory = Path(directory)
        written = {}

        collections = [
            (ACCOUNTS_DUMP, self._store.list_accounts(), account_to_row),
            (PAYMENTS_DUMP, self._store.list_payments(), payment_to_row),
            (FAVORITES_DUMP, self._store.list_favorites(), favorite_to_row),
        ]
        for filename, items, to_row in collections:
            if not items:
                continue
            _write_lines_atomic(
                directory / filename,
                (format_record(to_row(item)) for item in items),
            )
            written[filename] = len(items)

        return written

    def import_from_dir(self, directory: PathLike) -> dict[str, int]:
        """
        Load whichever of the three dump files exist in directory.

        - Accounts are upserted by ID: an existing account gets the dumped
          balance, otherwise the account is appended. The ID counter is
          advanced to the largest ID seen.
        - Payments and favorites are appended unconditionally.

        Returns:
            {file name: records read} for each file found

        Raises:
            DumpFormatError: On the first malformed record
        """
        directory = Path(directory)
        read = {}

        lines = _read_lines(directory / ACCOUNTS_DUMP)
        if lines is not None:
            parser = _RecordParser(directory / ACCOUNTS_DUMP)
            for line in lines:
                account = parser.account(line)
                existing = self._store.get_account(account.id)
                if existing is None:
                    self._store.add_account(account)
                else:
                    existing.balance = account.balance
                self._store.advance_account_id(account.id)
            read[ACCOUNTS_DUMP] = len(lines)

        lines = _read_lines(directory / PAYMENTS_DUMP)
        if lines is not None:
            parser = _RecordParser(directory / PAYMENTS_DUMP)
            for line in lines:
                self._store.add_payment(parser.payment(line))
            read[PAYMENTS_DUMP] = len(lines)

        lines = _read_lines(directory / FAVORITES_DUMP)
        if lines is not None:
            parser = _RecordParser(directory / FAVORITES_DUMP)
            for line in lines:
                self._store.add_favorite(parser.favorite(line))
            read[FAVORITES_DUMP] = len(lines)

        return read

    # -------------------------------------------------------------------------
    # Chunked payment history
    # -------------------------------------------------------------------------

    def history_to_files(
        self,
        payments: list[Payment],
        directory: PathLike,
        records: int,
    ) -> list[Path]:
        """
        Write payments into pages of at most `records` lines.

        Pages are named payments1.dump, payments2.dump, ...
        If everything fits in a single page it is named payments.dump.
        Nothing is written for an empty list.

        Returns:
            Paths of the files written, in page order

        Raises:
            ValueError: If records < 1
        """
        if records < 1:
            raise ValueError(f"records must be >= 1, got {records}")

        directory = Path(directory)
        pages = [
            payments[start:start + records]
            for start in range(0, len(payments), records)
        ]

        files = []
        for number, page in enumerate(pages, start=1):
            if len(pages) == 1:
                path = directory / PAYMENTS_DUMP
            else:
                path = directory / f"payments{number}.dump"
            _write_lines_atomic(
                path,
                (format_record(payment_to_row(p)) for p in page),
            )
            files.append(path)

        return files
