"""
Tests for the Wallet Ledger models

Test strategy:
1. Unit tests for the pydantic models (validation rules, defaults)
2. Ledger service tests against the in-memory store
3. Dump tests against real files in a temporary directory
"""

import pytest
from uuid import uuid4

from pydantic import ValidationError

from wallet.models.ledger import (
    Account,
    Favorite,
    Payment,
    PaymentStatus,
    new_entity_id,
)
from wallet.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestLedgerModels:
    """Tests for Account, Payment and Favorite."""

    def test_account_creation(self):
        """Test Account model creation."""
        account = Account(id=1, phone="+992000000001", balance=100)
        assert account.id == 1
        assert account.phone == "+992000000001"
        assert account.balance == 100

    def test_account_defaults_to_zero_balance(self):
        account = Account(id=1, phone="+1")
        assert account.balance == 0

    def test_account_rejects_negative_balance(self):
        """Test that negative balances are rejected at creation."""
        with pytest.raises(ValueError):
            Account(id=1, phone="+1", balance=-1)

    def test_account_rejects_negative_balance_on_assignment(self):
        """Test that balance stays non-negative when mutated."""
        account = Account(id=1, phone="+1", balance=10)
        with pytest.raises(ValidationError):
            account.balance = -5
        assert account.balance == 10

    def test_account_rejects_zero_id(self):
        with pytest.raises(ValueError):
            Account(id=0, phone="+1")

    def test_payment_creation(self):
        """Test Payment model creation."""
        payment = Payment(account_id=1, amount=30, category="Food")
        assert payment.status == PaymentStatus.INPROGRESS
        assert payment.id
        assert payment.is_rejected is False

    def test_payment_ids_are_unique(self):
        first = Payment(account_id=1, amount=30, category="Food")
        second = Payment(account_id=1, amount=30, category="Food")
        assert first.id != second.id

    @pytest.mark.parametrize("amount", [0, -10])
    def test_payment_rejects_non_positive_amount(self, amount):
        with pytest.raises(ValueError):
            Payment(account_id=1, amount=amount, category="Food")

    def test_payment_category_kept_verbatim(self):
        """Categories are free-form and not normalized."""
        payment = Payment(account_id=1, amount=1, category=" Food ")
        assert payment.category == " Food "

    def test_payment_status_values(self):
        """Test status wire values."""
        assert PaymentStatus.INPROGRESS.value == "INPROGRESS"
        assert PaymentStatus.FAIL.value == "FAIL"
        assert PaymentStatus("FAIL") is PaymentStatus.FAIL

    def test_favorite_is_frozen(self):
        """Test that favorites cannot be modified after creation."""
        favorite = Favorite(account_id=1, name="Lunch", amount=30, category="Food")
        with pytest.raises(ValidationError):
            favorite.amount = 50
        assert favorite.amount == 30

    def test_new_entity_id_is_uuid_string(self):
        value = new_entity_id()
        assert isinstance(value, str)
        assert len(value) == 36


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.ACCOUNT_REGISTERED,
            description="Account registered",
        )
        assert event.event_type == AuditEventType.ACCOUNT_REGISTERED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.PAYMENT_CREATED,
            entity_type="payment",
            entity_id="p-1",
            description="Payment created",
            details={"amount": 30, "category": "Food"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "payment_created"
        assert log_dict["entity_id"] == "p-1"
        assert log_dict["correlation_id"] is None
        assert log_dict["details"]["category"] == "Food"

    def test_builder_account_registered(self):
        """Test AuditEventBuilder.account_registered."""
        event = AuditEventBuilder.account_registered(account_id=7, phone="+7")
        assert event.event_type == AuditEventType.ACCOUNT_REGISTERED
        assert event.entity_type == "account"
        assert event.entity_id == "7"
        assert event.details["phone"] == "+7"

    def test_builder_payment_rejected_is_warning(self):
        event = AuditEventBuilder.payment_rejected(
            payment_id="p-1",
            account_id=1,
            amount=30,
        )
        assert event.event_type == AuditEventType.PAYMENT_REJECTED
        assert event.severity == AuditSeverity.WARNING
        assert event.details == {"account_id": 1, "amount": 30}

    def test_builder_payment_repeated_carries_correlation(self):
        correlation_id = uuid4()
        event = AuditEventBuilder.payment_repeated(
            source_payment_id="p-1",
            new_payment_id="p-2",
            correlation_id=correlation_id,
        )
        assert event.entity_id == "p-2"
        assert event.correlation_id == correlation_id
        assert event.details["source_payment_id"] == "p-1"

    def test_builder_history_exported(self):
        event = AuditEventBuilder.history_exported(
            directory="out",
            files=["payments1.dump", "payments2.dump"],
            payment_count=3,
        )
        assert event.event_type == AuditEventType.HISTORY_EXPORTED
        assert event.description == "3 payments written to 2 files"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
