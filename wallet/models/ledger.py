"""
Core Ledger Models

These models define the three entities the ledger owns:
1. Account - a phone-identified balance holder
2. Payment - a debit against an account
3. Favorite - a named template for repeating a payment

DESIGN DECISION: Money is a plain integer amount of units.
There is no currency and no fractional part.

Accounts and payments are mutated in place by the ledger (balance, status),
so those models validate on assignment. Favorites never change after
creation and are frozen.
"""

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class PaymentStatus(str, Enum):
    """
    Payment status.

    A payment starts INPROGRESS and only ever moves to FAIL (rejection).
    There is no separate "succeeded" state.
    """
    INPROGRESS = "INPROGRESS"
    FAIL = "FAIL"


def new_entity_id() -> str:
    """Generate a fresh unique ID for a payment or favorite."""
    return str(uuid4())


# =============================================================================
# ENTITIES
# =============================================================================

class Account(BaseModel):
    """
    A registered account.

    CRITICAL: balance can never go negative. Assigning a negative
    balance raises a ValidationError.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(
        ...,
        ge=1,
        description="Account ID, assigned sequentially from 1"
    )
    phone: str = Field(
        ...,
        description="Phone number, unique across accounts"
    )
    balance: int = Field(
        default=0,
        ge=0,
        description="Current balance in money units"
    )


class Payment(BaseModel):
    """A single debit against an account."""
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        default_factory=new_entity_id,
        min_length=1,
        description="Unique payment ID"
    )
    account_id: int = Field(
        ...,
        description="Account the payment was debited from"
    )
    amount: int = Field(
        ...,
        gt=0,
        description="Debited amount"
    )
    category: str = Field(
        ...,
        description="Free-form category tag"
    )
    status: PaymentStatus = Field(
        default=PaymentStatus.INPROGRESS,
        description="Payment status"
    )

    @property
    def is_rejected(self) -> bool:
        return self.status == PaymentStatus.FAIL


class Favorite(BaseModel):
    """
    A payment template.

    amount and category are copied from the source payment when the
    favorite is created; later changes to that payment do not affect it.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default_factory=new_entity_id,
        min_length=1,
        description="Unique favorite ID"
    )
    account_id: int
    name: str = Field(
        ...,
        description="User-supplied label"
    )
    amount: int = Field(..., gt=0)
    category: str
