"""
Tests for LedgerService against the in-memory store.
"""

import pytest

from wallet.audit import AuditLogger
from wallet.ledger import (
    AccountNotFoundError,
    AmountMustBePositiveError,
    FavoriteNotFoundError,
    LedgerError,
    LedgerService,
    NotEnoughBalanceError,
    PaymentNotFoundError,
    PhoneAlreadyRegisteredError,
)
from wallet.models.audit import AuditEventType
from wallet.models.ledger import Account, Payment, PaymentStatus
from wallet.services.storage import InMemoryAuditStorage, InMemoryLedgerStore


@pytest.fixture
def service():
    return LedgerService()


@pytest.fixture
def funded(service):
    """A service with one account holding 100."""
    account = service.register_account("+992000000001")
    service.deposit(account.id, 100)
    return service, account


class TestRegistration:
    """Tests for register_account and deposit."""

    def test_register_assigns_sequential_ids(self, service):
        first = service.register_account("+1")
        second = service.register_account("+2")
        assert first.id == 1
        assert second.id == 2
        assert first.balance == 0

    def test_register_duplicate_phone_fails(self, service):
        """Second registration of a phone fails and adds nothing."""
        service.register_account("+1")
        with pytest.raises(PhoneAlreadyRegisteredError):
            service.register_account("+1")
        assert len(service.store.list_accounts()) == 1

    def test_failed_registration_does_not_consume_an_id(self, service):
        service.register_account("+1")
        with pytest.raises(PhoneAlreadyRegisteredError):
            service.register_account("+1")
        assert service.register_account("+2").id == 2

    def test_deposit_adds_to_balance(self, service):
        account = service.register_account("+1")
        service.deposit(account.id, 10)
        service.deposit(account.id, 15)
        assert service.find_account_by_id(account.id).balance == 25

    @pytest.mark.parametrize("amount", [0, -1])
    def test_deposit_rejects_non_positive_amount(self, service, amount):
        account = service.register_account("+1")
        with pytest.raises(AmountMustBePositiveError):
            service.deposit(account.id, amount)
        assert account.balance == 0

    def test_deposit_checks_amount_before_account(self, service):
        with pytest.raises(AmountMustBePositiveError):
            service.deposit(99, 0)

    def test_deposit_unknown_account(self, service):
        with pytest.raises(AccountNotFoundError):
            service.deposit(99, 10)

    def test_errors_share_a_base_class(self, service):
        with pytest.raises(LedgerError):
            service.find_account_by_id(1)


class TestPayments:
    """Tests for pay, find, reject and repeat."""

    def test_pay_debits_and_records(self, funded):
        service, account = funded
        payment = service.pay(account.id, 30, "Food")
        assert account.balance == 70
        assert payment.account_id == account.id
        assert payment.amount == 30
        assert payment.category == "Food"
        assert payment.status == PaymentStatus.INPROGRESS
        assert service.find_payment_by_id(payment.id) is payment

    @pytest.mark.parametrize("amount", [0, -5])
    def test_pay_rejects_non_positive_amount(self, funded, amount):
        service, account = funded
        with pytest.raises(AmountMustBePositiveError):
            service.pay(account.id, amount, "Food")
        assert service.store.list_payments() == []
        assert account.balance == 100

    def test_pay_unknown_account(self, service):
        with pytest.raises(AccountNotFoundError):
            service.pay(42, 10, "Food")

    def test_pay_more_than_balance(self, funded):
        service, account = funded
        with pytest.raises(NotEnoughBalanceError) as exc_info:
            service.pay(account.id, 101, "Food")
        assert account.balance == 100
        assert service.store.list_payments() == []
        assert exc_info.value.balance == 100
        assert exc_info.value.amount == 101

    def test_pay_exact_balance(self, funded):
        service, account = funded
        service.pay(account.id, 100, "Rent")
        assert account.balance == 0

    def test_find_account_by_id(self, funded):
        service, account = funded
        assert service.find_account_by_id(account.id) is account

    def test_find_account_not_found(self, service):
        with pytest.raises(AccountNotFoundError) as exc_info:
            service.find_account_by_id(5)
        assert exc_info.value.account_id == 5

    def test_find_payment_not_found(self, service):
        with pytest.raises(PaymentNotFoundError):
            service.find_payment_by_id("missing")

    def test_reject_restores_balance(self, funded):
        service, account = funded
        payment = service.pay(account.id, 30, "Food")
        service.reject(payment.id)
        assert account.balance == 100
        assert payment.status == PaymentStatus.FAIL

    def test_reject_twice_credits_once(self, funded):
        """Rejecting an already failed payment changes nothing."""
        service, account = funded
        payment = service.pay(account.id, 30, "Food")
        service.reject(payment.id)
        service.reject(payment.id)
        assert account.balance == 100
        assert payment.status == PaymentStatus.FAIL

    def test_reject_unknown_payment(self, service):
        with pytest.raises(PaymentNotFoundError):
            service.reject("missing")

    def test_reject_payment_of_unknown_account(self):
        store = InMemoryLedgerStore()
        store.add_payment(Payment(id="orphan", account_id=9, amount=5, category="x"))
        service = LedgerService(store=store)
        with pytest.raises(AccountNotFoundError):
            service.reject("orphan")

    def test_repeat_creates_new_payment(self, funded):
        service, account = funded
        original = service.pay(account.id, 30, "Food")
        repeated = service.repeat(original.id)
        assert repeated.id != original.id
        assert repeated.amount == 30
        assert repeated.category == "Food"
        assert repeated.account_id == account.id
        assert repeated.status == PaymentStatus.INPROGRESS
        assert account.balance == 40
        assert len(service.store.list_payments()) == 2

    def test_repeat_rejected_payment_is_a_new_debit(self, funded):
        service, account = funded
        original = service.pay(account.id, 30, "Food")
        service.reject(original.id)
        repeated = service.repeat(original.id)
        assert original.status == PaymentStatus.FAIL
        assert repeated.status == PaymentStatus.INPROGRESS
        assert account.balance == 70

    def test_repeat_without_enough_balance(self, funded):
        service, account = funded
        original = service.pay(account.id, 60, "Food")
        with pytest.raises(NotEnoughBalanceError):
            service.repeat(original.id)
        assert account.balance == 40
        assert len(service.store.list_payments()) == 1

    def test_repeat_unknown_payment(self, service):
        with pytest.raises(PaymentNotFoundError):
            service.repeat("missing")

    def test_balance_conservation(self, service):
        """Final balance = deposits - payments + rejected payments."""
        account = service.register_account("+1")
        deposits = [50, 25, 100]
        for amount in deposits:
            service.deposit(account.id, amount)

        payments = [service.pay(account.id, amount, "misc") for amount in (10, 20, 30, 40)]
        service.reject(payments[1].id)
        service.reject(payments[3].id)

        paid = sum(p.amount for p in payments)
        rejected = payments[1].amount + payments[3].amount
        assert account.balance == sum(deposits) - paid + rejected


class TestFavorites:
    """Tests for favorite_payment and pay_from_favorite."""

    def test_favorite_snapshots_payment(self, funded):
        service, account = funded
        payment = service.pay(account.id, 30, "Food")
        favorite = service.favorite_payment(payment.id, "Lunch")
        assert favorite.id not in (payment.id, "")
        assert favorite.account_id == account.id
        assert favorite.name == "Lunch"
        assert favorite.amount == 30
        assert favorite.category == "Food"
        assert service.find_favorite_by_id(favorite.id) is favorite

    def test_favorite_unknown_payment(self, service):
        with pytest.raises(PaymentNotFoundError):
            service.favorite_payment("missing", "Lunch")

    def test_pay_from_favorite_debits_stored_amount(self, funded):
        service, account = funded
        payment = service.pay(account.id, 30, "Food")
        favorite = service.favorite_payment(payment.id, "Lunch")

        new_payment = service.pay_from_favorite(favorite.id)
        assert account.balance == 40
        assert new_payment.amount == 30
        assert new_payment.category == "Food"
        assert new_payment.account_id == account.id
        assert new_payment.status == PaymentStatus.INPROGRESS
        assert new_payment.id != payment.id
        assert service.find_payment_by_id(new_payment.id) is new_payment

    def test_pay_from_favorite_after_balance_dropped(self, funded):
        service, account = funded
        payment = service.pay(account.id, 30, "Food")
        favorite = service.favorite_payment(payment.id, "Lunch")
        service.pay(account.id, 50, "Rent")

        with pytest.raises(NotEnoughBalanceError):
            service.pay_from_favorite(favorite.id)
        assert account.balance == 20
        assert len(service.store.list_payments()) == 2

    def test_pay_from_unknown_favorite(self, service):
        with pytest.raises(FavoriteNotFoundError):
            service.pay_from_favorite("missing")

    def test_favorite_not_found_is_not_payment_not_found(self, service):
        with pytest.raises(FavoriteNotFoundError) as exc_info:
            service.find_favorite_by_id("missing")
        assert not isinstance(exc_info.value, PaymentNotFoundError)


class TestHistory:
    """Tests for export_account_history, filter_payments and sum_payments."""

    def test_export_account_history(self, service):
        first = service.register_account("+1")
        second = service.register_account("+2")
        service.deposit(first.id, 1000)
        service.deposit(second.id, 1000)
        service.pay(first.id, 100, "Food")
        service.pay(second.id, 5, "Taxi")
        service.pay(first.id, 200, "Transport")

        history = service.export_account_history(first.id)
        assert [p.amount for p in history] == [100, 200]

    def test_history_returns_copies(self, funded):
        service, account = funded
        payment = service.pay(account.id, 10, "Food")
        history = service.export_account_history(account.id)
        history[0].status = PaymentStatus.FAIL
        assert payment.status == PaymentStatus.INPROGRESS

    def test_history_unknown_account(self, service):
        with pytest.raises(AccountNotFoundError):
            service.export_account_history(3)

    def test_filter_payments(self, funded):
        service, account = funded
        service.pay(account.id, 10, "Food")
        service.pay(account.id, 20, "Taxi")
        service.pay(account.id, 30, "Food")
        food = service.filter_payments(lambda p: p.category == "Food")
        assert [p.amount for p in food] == [10, 30]

    def test_sum_payments(self, funded):
        service, account = funded
        for amount in (10, 20, 30):
            service.pay(account.id, amount, "ALif")
        assert service.sum_payments() == 60

    def test_sum_payments_empty(self, service):
        assert service.sum_payments() == 0


class TestAuditing:
    """Tests that the ledger audits successful mutations only."""

    @pytest.fixture
    def audited(self):
        storage = InMemoryAuditStorage()
        return LedgerService(audit_logger=AuditLogger(storage)), storage

    def test_mutations_are_audited(self, audited):
        service, storage = audited
        account = service.register_account("+1")
        service.deposit(account.id, 100)
        payment = service.pay(account.id, 30, "Food")
        service.reject(payment.id)

        types = [e.event_type for e in reversed(storage.get_recent_events())]
        assert types == [
            AuditEventType.ACCOUNT_REGISTERED,
            AuditEventType.DEPOSIT_MADE,
            AuditEventType.PAYMENT_CREATED,
            AuditEventType.PAYMENT_REJECTED,
        ]

    def test_failures_are_not_audited(self, audited):
        service, storage = audited
        account = service.register_account("+1")
        with pytest.raises(NotEnoughBalanceError):
            service.pay(account.id, 1, "Food")
        with pytest.raises(PhoneAlreadyRegisteredError):
            service.register_account("+1")
        assert len(storage.get_recent_events()) == 1

    def test_repeat_events_share_correlation_id(self, audited):
        service, storage = audited
        account = service.register_account("+1")
        service.deposit(account.id, 100)
        original = service.pay(account.id, 10, "Food")
        repeated = service.repeat(original.id)

        events = storage.get_events_by_entity("payment", repeated.id)
        assert {e.event_type for e in events} == {
            AuditEventType.PAYMENT_CREATED,
            AuditEventType.PAYMENT_REPEATED,
        }
        correlation_id = events[0].correlation_id
        assert correlation_id is not None
        assert len(storage.get_events_by_correlation_id(correlation_id)) == 2

    def test_favorite_payment_is_audited(self, audited):
        service, storage = audited
        account = service.register_account("+1")
        service.deposit(account.id, 100)
        payment = service.pay(account.id, 10, "Food")
        favorite = service.favorite_payment(payment.id, "Lunch")
        service.pay_from_favorite(favorite.id)

        events = storage.get_events_by_entity("favorite", favorite.id)
        assert [e.event_type for e in events] == [
            AuditEventType.FAVORITE_CREATED,
            AuditEventType.FAVORITE_PAID,
        ]


class TestStoreCounter:
    """Tests for the account ID counter on the store."""

    def test_advance_never_goes_back(self):
        store = InMemoryLedgerStore()
        store.advance_account_id(5)
        store.advance_account_id(3)
        assert store.last_account_id == 5
        assert store.next_account_id() == 6

    def test_registration_after_manual_account(self):
        store = InMemoryLedgerStore()
        store.add_account(Account(id=4, phone="+4"))
        store.advance_account_id(4)
        service = LedgerService(store=store)
        assert service.register_account("+5").id == 5
