"""
StoreSnapshot -- the immutable five-collection state of the entity store.

Every committed store state is one ``StoreSnapshot``.  Collections are
tuples (newest first for users, suppliers, audit logs and each item's
history); ``history`` maps item id to that item's history tuple and is
wrapped read-only.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from stock_kernel.domain.models import AuditLog, HistoryEntry, StockItem, Supplier, User


@dataclass(frozen=True)
class StoreSnapshot:
    stock_items: tuple[StockItem, ...] = ()
    users: tuple[User, ...] = ()
    suppliers: tuple[Supplier, ...] = ()
    audit_logs: tuple[AuditLog, ...] = ()
    history: Mapping[str, tuple[HistoryEntry, ...]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "stock_items", tuple(self.stock_items))
        object.__setattr__(self, "users", tuple(self.users))
        object.__setattr__(self, "suppliers", tuple(self.suppliers))
        object.__setattr__(self, "audit_logs", tuple(self.audit_logs))
        object.__setattr__(
            self,
            "history",
            MappingProxyType({k: tuple(v) for k, v in self.history.items()}),
        )

    @classmethod
    def empty(cls) -> "StoreSnapshot":
        return cls()

    def counts(self) -> dict[str, int]:
        """Collection sizes, used in log payloads."""
        return {
            "stock_items": len(self.stock_items),
            "users": len(self.users),
            "suppliers": len(self.suppliers),
            "audit_logs": len(self.audit_logs),
            "history_entries": sum(len(v) for v in self.history.values()),
        }
