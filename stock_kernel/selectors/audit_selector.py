"""AuditSelector -- read access to the newest-first audit log."""

from stock_kernel.domain.models import AuditLog
from stock_kernel.selectors.base import BaseSelector


class AuditSelector(BaseSelector):

    def latest(self, count: int) -> tuple[AuditLog, ...]:
        return self._snapshot().audit_logs[:count]

    def search(self, query: str) -> tuple[AuditLog, ...]:
        """Logs whose action or user contains ``query`` (any case)."""
        logs = self._snapshot().audit_logs
        if not query:
            return logs
        needle = query.lower()
        return tuple(
            log for log in logs
            if needle in log.action.lower() or needle in log.user.lower()
        )
