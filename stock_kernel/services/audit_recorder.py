"""
AuditRecorder -- append-only, newest-first audit trail.

Responsibility:
    Builds one ``AuditLog`` (generated id, clock timestamp, actor, free-text
    action) and prepends it to the store's global log.

Architecture position:
    Kernel > Services.  Called by every mutating service from inside that
    service's own store transaction, so the audit line commits (or is
    discarded) together with the change it describes.

Invariants enforced:
    - Append-only: logs are only ever prepended; nothing edits or deletes
      them (restore replaces the whole collection and then records itself).
    - Exactly one line per successful mutating operation.

Failure modes:
    None under normal operation.  Retention is unbounded.
"""

from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.domain.ids import IdGenerator, UuidGenerator
from stock_kernel.domain.models import AuditLog
from stock_kernel.logging_config import get_logger
from stock_kernel.store import EntityStore

logger = get_logger("services.audit")


class AuditRecorder:
    """
    Service for appending audit log entries.

    Contract:
        ``record()`` opens (or joins) a store transaction and prepends the
        new entry at index 0.

    Non-goals:
        - Does NOT decide what text to write; callers compose the action.
        - Does NOT trim or rotate the log.
    """

    def __init__(
        self,
        store: EntityStore,
        clock: Clock | None = None,
        id_generator: IdGenerator | None = None,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._ids = id_generator or UuidGenerator()

    def record(self, actor_name: str, action_text: str) -> AuditLog:
        log = AuditLog(
            id=self._ids.next_id(),
            timestamp=self._clock.now(),
            user=actor_name,
            action=action_text,
        )
        with self._store.transaction() as tx:
            tx.prepend_audit_log(log)

        logger.debug(
            "audit_recorded",
            extra={"audit_id": log.id, "user": actor_name, "action": action_text},
        )
        return log
