"""
Application Wiring for the Wallet Ledger

Ties the store, the dump layer, the audit logger and the ledger
service together from settings.

DESIGN DECISION: The ledger never builds its collaborators from global
state. This factory is the one place that reads settings and decides
what goes where; tests construct LedgerService directly.
"""

from typing import Optional

from wallet.audit import AuditLogger, configure_logging
from wallet.config import get_settings
from wallet.ledger import LedgerService
from wallet.services.storage import (
    FileDumpStorage,
    InMemoryAuditStorage,
    InMemoryLedgerStore,
)


def create_app_components(
    use_audit_storage: bool = True,
    restore: bool = False,
) -> tuple[LedgerService, Optional[InMemoryAuditStorage]]:
    """
    Factory function to create all application components.

    Args:
        use_audit_storage: Keep audit events in memory in addition to
                    the local log. Set to False for log-only auditing.
        restore: Import the configured dump directory into the new
                    ledger before returning it.

    Returns:
        (ledger_service, audit_storage)
    """
    settings = get_settings()
    configure_logging(settings.app.effective_log_level)

    audit_storage = InMemoryAuditStorage() if use_audit_storage else None
    audit_logger = AuditLogger(audit_storage)

    store = InMemoryLedgerStore()
    service = LedgerService(
        store=store,
        audit_logger=audit_logger,
        dump_storage=FileDumpStorage(store),
    )

    if restore:
        service.import_from_dir(settings.dump.directory)

    return service, audit_storage
