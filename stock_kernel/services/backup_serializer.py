"""
BackupSerializer -- JSON export and all-or-nothing restore of the store.

Responsibility:
    Encodes the whole store as a backup document (``stockItems``, ``users``,
    ``suppliers``, ``auditLogs``, ``historyData``) and restores the store
    from a user-supplied document.

Architecture position:
    Kernel > Services.  The only caller of ``StoreTransaction.replace_all``.
    File picking and downloading belong to the view layer; this service
    deals in dicts, ``str`` and ``bytes``.

Invariants enforced:
    - Round trip: decoding ``export_all()`` reproduces the exported snapshot.
    - All-or-nothing restore: the document is fully decoded before the store
      is touched; the five collections are replaced in one transaction
      together with the "restored" audit line.

Failure modes:
    - InvalidBackupFormatError: undecodable JSON, non-object document,
      missing top-level keys, or malformed records.  Store unchanged.

Audit relevance:
    Export and restore log the document fingerprint (SHA-256 of canonical
    JSON), so a restore can be traced back to the export that produced it.
"""

import json
from collections.abc import Mapping
from typing import Any

from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.domain.codec import BACKUP_KEYS, snapshot_from_document, snapshot_to_document
from stock_kernel.domain.snapshot import StoreSnapshot
from stock_kernel.exceptions import InvalidBackupFormatError
from stock_kernel.logging_config import LogContext, get_logger
from stock_kernel.services.audit_recorder import AuditRecorder
from stock_kernel.store import EntityStore
from stock_kernel.utils.hashing import hash_payload

logger = get_logger("services.backup")

RESTORE_ACTION = "Restored system from a backup."


class BackupSerializer:
    """
    Export/restore of the full entity store.

    Guarantees:
        - ``restore_all`` either replaces every collection and adds one audit
          line, or raises and changes nothing.
    """

    def __init__(
        self,
        store: EntityStore,
        audit: AuditRecorder,
        clock: Clock | None = None,
        actor_name: str = "Administrator",
        filename_prefix: str = "backup",
    ):
        self._store = store
        self._audit = audit
        self._clock = clock or SystemClock()
        self._actor_name = actor_name
        self._filename_prefix = filename_prefix

    # -- export ----------------------------------------------------------------

    def export_all(self) -> dict[str, Any]:
        """Return the backup document for the current committed snapshot."""
        snapshot = self._store.snapshot()
        document = snapshot_to_document(snapshot)
        logger.info(
            "backup_exported",
            extra={"fingerprint": hash_payload(document), **snapshot.counts()},
        )
        return document

    def export_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.export_all(), indent=indent, ensure_ascii=False)

    def backup_filename(self) -> str:
        """``<prefix>-<ISO timestamp>.json`` for the download."""
        return f"{self._filename_prefix}-{self._clock.now().isoformat()}.json"

    # -- restore ---------------------------------------------------------------

    def decode(self, document: Mapping[str, Any] | str | bytes) -> StoreSnapshot:
        """
        Parse and validate a backup document without touching the store.

        Raises:
            InvalidBackupFormatError: On any decoding or validation failure.
        """
        if isinstance(document, (str, bytes, bytearray)):
            try:
                document = json.loads(document)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                logger.warning("backup_rejected", extra={"reason": "invalid_json"})
                raise InvalidBackupFormatError(f"not valid JSON ({exc})") from exc

        if not isinstance(document, Mapping):
            logger.warning("backup_rejected", extra={"reason": "not_an_object"})
            raise InvalidBackupFormatError(
                f"expected a JSON object, got {type(document).__name__}"
            )

        missing = tuple(key for key in BACKUP_KEYS if key not in document)
        if missing:
            logger.warning(
                "backup_rejected",
                extra={"reason": "missing_keys", "missing_keys": list(missing)},
            )
            raise InvalidBackupFormatError(
                f"missing keys {', '.join(missing)}", missing_keys=missing
            )

        try:
            return snapshot_from_document(document)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(
                "backup_rejected",
                extra={"reason": "malformed_record", "detail": repr(exc)},
            )
            raise InvalidBackupFormatError(f"malformed record ({exc!r})") from exc

    def restore_all(
        self,
        document: Mapping[str, Any] | str | bytes,
        actor: str | None = None,
    ) -> StoreSnapshot:
        """
        Replace all five collections with those of ``document``.

        Postconditions:
            - Store collections equal the decoded document, plus one audit
              line at index 0 of the audit log.

        Returns:
            The decoded snapshot (without the restore audit line).

        Raises:
            InvalidBackupFormatError: Store left completely unchanged.
        """
        actor_name = actor or self._actor_name
        with LogContext.bind(actor=actor_name, operation="restore_all"):
            snapshot = self.decode(document)
            with self._store.transaction() as tx:
                tx.replace_all(snapshot)
                self._audit.record(actor_name, RESTORE_ACTION)

            logger.info(
                "backup_restored",
                extra={
                    "fingerprint": hash_payload(snapshot_to_document(snapshot)),
                    **snapshot.counts(),
                },
            )
            return snapshot
