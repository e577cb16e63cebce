"""
Ledger Errors

Every rule the ledger enforces has its own exception so callers can
tell them apart. All of them are raised before any state changes.
"""


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class PhoneAlreadyRegisteredError(LedgerError):
    """An account with this phone already exists."""

    def __init__(self, phone: str):
        self.phone = phone
        super().__init__(f"phone already registered: {phone}")


class AmountMustBePositiveError(LedgerError):
    """Deposit or payment amount was zero or negative."""

    def __init__(self, amount: int):
        self.amount = amount
        super().__init__(f"amount must be > 0, got {amount}")


class AccountNotFoundError(LedgerError):
    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"account not found: {account_id}")


class PaymentNotFoundError(LedgerError):
    def __init__(self, payment_id: str):
        self.payment_id = payment_id
        super().__init__(f"payment not found: {payment_id}")


class FavoriteNotFoundError(LedgerError):
    def __init__(self, favorite_id: str):
        self.favorite_id = favorite_id
        super().__init__(f"favorite not found: {favorite_id}")


class NotEnoughBalanceError(LedgerError):
    """The debit would drive the balance negative."""

    def __init__(self, account_id: int, balance: int, amount: int):
        self.account_id = account_id
        self.balance = balance
        self.amount = amount
        super().__init__(
            f"not enough balance in account {account_id}: "
            f"balance {balance}, requested {amount}"
        )
