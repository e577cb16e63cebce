"""
Data Models Package

This package contains all Pydantic models used by the wallet ledger.
"""

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

__all__ = [
    # Ledger models
    "Account",
    "Favorite",
    "Payment",
    "PaymentStatus",
    "new_entity_id",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
