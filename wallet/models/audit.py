"""
Audit Models for the Wallet Ledger

Every successful ledger mutation and every dump written or read
produces one audit event. This provides:
1. A readable trail of how balances got where they are
2. Debugging information when a dump does not look right
3. The ability to reconstruct history after the fact

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
Failed operations raise to the caller and are NOT audited here.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Accounts
    ACCOUNT_REGISTERED = "account_registered"
    DEPOSIT_MADE = "deposit_made"

    # Payments
    PAYMENT_CREATED = "payment_created"
    PAYMENT_REJECTED = "payment_rejected"
    PAYMENT_REPEATED = "payment_repeated"

    # Favorites
    FAVORITE_CREATED = "favorite_created"
    FAVORITE_PAID = "favorite_paid"

    # Persistence
    DUMP_EXPORTED = "dump_exported"
    DUMP_IMPORTED = "dump_imported"
    HISTORY_EXPORTED = "history_exported"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    entity_id is a string because account IDs are integers while
    payment and favorite IDs are UUID strings.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = Field(default=AuditSeverity.INFO)

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'payment', 'dump')"
    )
    entity_id: Optional[str] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., a repeat and the payment it created)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.account_registered(account_id, phone)
        event = AuditEventBuilder.payment_created(payment_id, account_id, 30, "Food")
    """

    @staticmethod
    def account_registered(
        account_id: int,
        phone: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_REGISTERED,
            entity_type="account",
            entity_id=str(account_id),
            correlation_id=correlation_id,
            description=f"Account {account_id} registered",
            details={"phone": phone},
        )

    @staticmethod
    def deposit_made(
        account_id: int,
        amount: int,
        balance: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEPOSIT_MADE,
            entity_type="account",
            entity_id=str(account_id),
            correlation_id=correlation_id,
            description=f"Deposited {amount} to account {account_id}",
            details={
                "amount": amount,
                "balance": balance,
            },
        )

    @staticmethod
    def payment_created(
        payment_id: str,
        account_id: int,
        amount: int,
        category: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_CREATED,
            entity_type="payment",
            entity_id=payment_id,
            correlation_id=correlation_id,
            description=f"Payment of {amount} from account {account_id}",
            details={
                "account_id": account_id,
                "amount": amount,
                "category": category,
            },
        )

    @staticmethod
    def payment_rejected(
        payment_id: str,
        account_id: int,
        amount: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="payment",
            entity_id=payment_id,
            correlation_id=correlation_id,
            description=f"Payment rejected, {amount} returned to account {account_id}",
            details={
                "account_id": account_id,
                "amount": amount,
            },
        )

    @staticmethod
    def payment_repeated(
        source_payment_id: str,
        new_payment_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_REPEATED,
            entity_type="payment",
            entity_id=new_payment_id,
            correlation_id=correlation_id,
            description=f"Payment {source_payment_id} repeated",
            details={"source_payment_id": source_payment_id},
        )

    @staticmethod
    def favorite_created(
        favorite_id: str,
        payment_id: str,
        name: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FAVORITE_CREATED,
            entity_type="favorite",
            entity_id=favorite_id,
            correlation_id=correlation_id,
            description=f"Favorite '{name}' created",
            details={
                "payment_id": payment_id,
                "name": name,
            },
        )

    @staticmethod
    def favorite_paid(
        favorite_id: str,
        payment_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FAVORITE_PAID,
            entity_type="favorite",
            entity_id=favorite_id,
            correlation_id=correlation_id,
            description="Payment made from favorite",
            details={"payment_id": payment_id},
        )

    @staticmethod
    def dump_exported(
        target: str,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DUMP_EXPORTED,
            entity_type="dump",
            entity_id=target,
            correlation_id=correlation_id,
            description=f"Ledger exported to {target}",
            details=counts,
        )

    @staticmethod
    def dump_imported(
        source: str,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DUMP_IMPORTED,
            entity_type="dump",
            entity_id=source,
            correlation_id=correlation_id,
            description=f"Ledger imported from {source}",
            details=counts,
        )

    @staticmethod
    def history_exported(
        directory: str,
        files: list[str],
        payment_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HISTORY_EXPORTED,
            entity_type="dump",
            entity_id=directory,
            correlation_id=correlation_id,
            description=f"{payment_count} payments written to {len(files)} files",
            details={
                "files": files,
                "payment_count": payment_count,
            },
        )
