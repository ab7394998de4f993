"""
Audit Recorder

DESIGN DECISION: Every mutating action in the ledger is recorded.
This provides:
1. Traceability of who changed what
2. An activity feed administrators can read
3. A structured log line for debugging

The recorder:
- Is synchronous; an entry exists as soon as record() returns
- Prepends, so the stored audit log is always newest-first
- Persists the audit collection on every call
- Does NOT swallow storage failures; they are fatal for the caller
"""

from collections.abc import Callable
from datetime import datetime
from typing import Optional

import structlog

from fincorp.config import LedgerSettings, get_settings
from fincorp.models.audit import AuditAction, AuditLogEntry
from fincorp.models.ledger import StaffUser
from fincorp.services.storage import LedgerSnapshot, LedgerStore


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


def _now() -> datetime:
    return datetime.now().astimezone()


class AuditRecorder:
    """
    Central audit recording service.

    Writes entries both to:
    1. The audit collection (persisted, shown in the Logs tab)
    2. The structured local log
    """

    def __init__(
        self,
        state: LedgerSnapshot,
        store: LedgerStore,
        current_actor: Callable[[], Optional[StaffUser]],
        settings: Optional[LedgerSettings] = None,
        clock: Callable[[], datetime] = _now,
    ):
        """
        Initialize audit recorder.

        Args:
            state: Live ledger collections; the audit log is replaced in place.
            store: Where the audit collection is persisted.
            current_actor: Returns the logged-in user, or None.
            settings: Supplies the system actor used when nobody is logged in.
            clock: Wall-clock source for entry timestamps.
        """
        self._state = state
        self._store = store
        self._current_actor = current_actor
        self._settings = settings or get_settings().ledger
        self._clock = clock
        self._logger = structlog.get_logger(__name__)

    def record(
        self,
        action: AuditAction,
        details: str,
        target_id: Optional[str] = None,
    ) -> AuditLogEntry:
        """
        Record one audit entry for one logical mutation.

        Returns the entry that was prepended to the audit log.
        """
        actor = self._current_actor()
        if actor is not None:
            user_id, user_name = actor.id, actor.name
        else:
            user_id = self._settings.system_actor_id
            user_name = self._settings.system_actor_name

        entry = AuditLogEntry(
            timestamp=self._clock(),
            user_id=user_id,
            user_name=user_name,
            action=action,
            details=details,
            target_id=target_id,
        )

        self._state.audit_log = [entry, *self._state.audit_log]
        self._store.save_audit_log(self._state.audit_log)

        self._logger.info("audit_event", **entry.to_log_dict())
        return entry

    def record_event(self, event: tuple[AuditAction, str, Optional[str]]) -> AuditLogEntry:
        """Record a triple produced by AuditEntryBuilder."""
        action, details, target_id = event
        return self.record(action, details, target_id)
