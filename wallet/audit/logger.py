"""
Audit Logger

DESIGN DECISION: Every successful ledger mutation is logged.
This provides:
1. Traceability of every balance change
2. Debugging capability when a dump looks wrong
3. A history the user can inspect

The audit logger:
- Always writes a structured local log line
- Persists to an audit storage backend when one is configured
- Gracefully handles storage failures (the ledger keeps working)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from wallet.models.audit import AuditEvent, AuditEventBuilder
from wallet.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route audit log lines to stderr at the given level."""
    logging.basicConfig(format="%(message)s")
    # basicConfig is a no-op once handlers exist; the level must still apply
    logging.getLogger().setLevel(getattr(logging, level))


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend (for later inspection)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("wallet.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_account_registered(
        self,
        account_id: int,
        phone: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.account_registered(
            account_id=account_id,
            phone=phone,
            correlation_id=correlation_id,
        ))

    def log_deposit(
        self,
        account_id: int,
        amount: int,
        balance: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.deposit_made(
            account_id=account_id,
            amount=amount,
            balance=balance,
            correlation_id=correlation_id,
        ))

    def log_payment_created(
        self,
        payment_id: str,
        account_id: int,
        amount: int,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.payment_created(
            payment_id=payment_id,
            account_id=account_id,
            amount=amount,
            category=category,
            correlation_id=correlation_id,
        ))

    def log_payment_rejected(
        self,
        payment_id: str,
        account_id: int,
        amount: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.payment_rejected(
            payment_id=payment_id,
            account_id=account_id,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_payment_repeated(
        self,
        source_payment_id: str,
        new_payment_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.payment_repeated(
            source_payment_id=source_payment_id,
            new_payment_id=new_payment_id,
            correlation_id=correlation_id,
        ))

    def log_favorite_created(
        self,
        favorite_id: str,
        payment_id: str,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.favorite_created(
            favorite_id=favorite_id,
            payment_id=payment_id,
            name=name,
            correlation_id=correlation_id,
        ))

    def log_favorite_paid(
        self,
        favorite_id: str,
        payment_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.favorite_paid(
            favorite_id=favorite_id,
            payment_id=payment_id,
            correlation_id=correlation_id,
        ))

    def log_dump_exported(
        self,
        target: str,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.dump_exported(
            target=target,
            counts=counts,
            correlation_id=correlation_id,
        ))

    def log_dump_imported(
        self,
        source: str,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.dump_imported(
            source=source,
            counts=counts,
            correlation_id=correlation_id,
        ))

    def log_history_exported(
        self,
        directory: str,
        files: list[str],
        payment_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.history_exported(
            directory=directory,
            files=files,
            payment_count=payment_count,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a compound action (e.g., a repeat) and
    pass it to every event the action produces.
    """
    return uuid4()
