"""Ledger operations package."""

from wallet.ledger.errors import (
    AccountNotFoundError,
    AmountMustBePositiveError,
    FavoriteNotFoundError,
    LedgerError,
    NotEnoughBalanceError,
    PaymentNotFoundError,
    PhoneAlreadyRegisteredError,
)
from wallet.ledger.service import LedgerService

__all__ = [
    "LedgerService",
    # Exceptions
    "AccountNotFoundError",
    "AmountMustBePositiveError",
    "FavoriteNotFoundError",
    "LedgerError",
    "NotEnoughBalanceError",
    "PaymentNotFoundError",
    "PhoneAlreadyRegisteredError",
]
