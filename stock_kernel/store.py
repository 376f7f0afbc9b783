"""
EntityStore -- single source of truth for all dashboard state.

Responsibility:
    Holds the five collections (stock items, users, suppliers, audit logs,
    per-item history) as one immutable ``StoreSnapshot`` and exposes read
    access plus a single write path, ``transaction()``.

Architecture position:
    Kernel > Store.  Written only by the services in ``stock_kernel.services``
    (movement processor, directory manager, backup serializer, audit
    recorder), which is what keeps audit logging from being bypassed.

Invariants enforced:
    - Single writer: a re-entrant lock is held for the whole transaction, so
      a check-then-write (exit stock check + decrement) is atomic under
      concurrent callers.
    - All-or-nothing: a transaction mutates a private working copy; the
      committed snapshot is swapped in one assignment on normal exit and
      discarded on exception.
    - Readers see only committed snapshots, never a half-applied transaction.

Failure modes:
    - Any exception raised inside ``with store.transaction()`` propagates
      after the working copy is discarded.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from stock_kernel.domain.models import AuditLog, HistoryEntry, StockItem, Supplier, User
from stock_kernel.domain.snapshot import StoreSnapshot
from stock_kernel.logging_config import get_logger

logger = get_logger("store")


class StoreTransaction:
    """
    Mutable working copy of a snapshot, valid for one ``transaction()`` block.

    Contract:
        Every write replaces a whole record; records themselves are frozen.
        Lists are kept newest first, so creations prepend.
    """

    def __init__(self, base: StoreSnapshot):
        self._stock_items: list[StockItem] = list(base.stock_items)
        self._users: list[User] = list(base.users)
        self._suppliers: list[Supplier] = list(base.suppliers)
        self._audit_logs: list[AuditLog] = list(base.audit_logs)
        self._history: dict[str, tuple[HistoryEntry, ...]] = dict(base.history)
        self.mutation_count = 0

    # -- reads on the working copy ------------------------------------------

    def find_stock_item(self, item_id: str) -> StockItem | None:
        return next((i for i in self._stock_items if i.id == item_id), None)

    def find_user(self, user_id: str) -> User | None:
        return next((u for u in self._users if u.id == user_id), None)

    def find_supplier(self, supplier_id: str) -> Supplier | None:
        return next((s for s in self._suppliers if s.id == supplier_id), None)

    @property
    def users(self) -> tuple[User, ...]:
        return tuple(self._users)

    # -- writes ---------------------------------------------------------------

    def put_stock_item(self, item: StockItem) -> None:
        """Replace the item with the same id, or append a new one."""
        for idx, existing in enumerate(self._stock_items):
            if existing.id == item.id:
                self._stock_items[idx] = item
                break
        else:
            self._stock_items.append(item)
        self.mutation_count += 1

    def prepend_history(self, item_id: str, entry: HistoryEntry) -> None:
        self._history[item_id] = (entry, *self._history.get(item_id, ()))
        self.mutation_count += 1

    def prepend_audit_log(self, log: AuditLog) -> None:
        self._audit_logs.insert(0, log)
        self.mutation_count += 1

    def prepend_user(self, user: User) -> None:
        self._users.insert(0, user)
        self.mutation_count += 1

    def replace_user(self, user: User) -> bool:
        for idx, existing in enumerate(self._users):
            if existing.id == user.id:
                self._users[idx] = user
                self.mutation_count += 1
                return True
        return False

    def remove_user(self, user_id: str) -> User | None:
        user = self.find_user(user_id)
        if user is not None:
            self._users = [u for u in self._users if u.id != user_id]
            self.mutation_count += 1
        return user

    def prepend_supplier(self, supplier: Supplier) -> None:
        self._suppliers.insert(0, supplier)
        self.mutation_count += 1

    def replace_supplier(self, supplier: Supplier) -> bool:
        for idx, existing in enumerate(self._suppliers):
            if existing.id == supplier.id:
                self._suppliers[idx] = supplier
                self.mutation_count += 1
                return True
        return False

    def remove_supplier(self, supplier_id: str) -> Supplier | None:
        supplier = self.find_supplier(supplier_id)
        if supplier is not None:
            self._suppliers = [s for s in self._suppliers if s.id != supplier_id]
            self.mutation_count += 1
        return supplier

    def replace_all(self, snapshot: StoreSnapshot) -> None:
        """Swap all five collections for those of ``snapshot`` (restore)."""
        self._stock_items = list(snapshot.stock_items)
        self._users = list(snapshot.users)
        self._suppliers = list(snapshot.suppliers)
        self._audit_logs = list(snapshot.audit_logs)
        self._history = dict(snapshot.history)
        self.mutation_count += 1

    def build(self) -> StoreSnapshot:
        return StoreSnapshot(
            stock_items=tuple(self._stock_items),
            users=tuple(self._users),
            suppliers=tuple(self._suppliers),
            audit_logs=tuple(self._audit_logs),
            history=self._history,
        )


class EntityStore:
    """
    In-memory store of all domain records.

    Contract:
        Read methods return immutable values from the last committed
        snapshot.  ``transaction()`` is the only write path.

    Guarantees:
        - ``version`` increases by one per committed transaction that
          changed something.
        - A ``transaction()`` opened while one is already active on the same
          thread joins it: its writes commit (or are discarded) with the
          outer block.

    Non-goals:
        - No persistence.  The initial snapshot is supplied by the caller.
    """

    def __init__(self, snapshot: StoreSnapshot | None = None):
        self._state = snapshot or StoreSnapshot.empty()
        self._lock = threading.RLock()
        self._active: StoreTransaction | None = None
        self._version = 0

    # -- reads -----------------------------------------------------------------

    @property
    def version(self) -> int:
        return self._version

    def snapshot(self) -> StoreSnapshot:
        return self._state

    def list_stock_items(self) -> tuple[StockItem, ...]:
        return self._state.stock_items

    def list_users(self) -> tuple[User, ...]:
        return self._state.users

    def list_suppliers(self) -> tuple[Supplier, ...]:
        return self._state.suppliers

    def list_audit_logs(self) -> tuple[AuditLog, ...]:
        return self._state.audit_logs

    def find_stock_item(self, item_id: str) -> StockItem | None:
        return next((i for i in self._state.stock_items if i.id == item_id), None)

    def find_user(self, user_id: str) -> User | None:
        return next((u for u in self._state.users if u.id == user_id), None)

    def find_supplier(self, supplier_id: str) -> Supplier | None:
        return next((s for s in self._state.suppliers if s.id == supplier_id), None)

    def history_for(self, item_id: str) -> tuple[HistoryEntry, ...]:
        return self._state.history.get(item_id, ())

    # -- writes ----------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        with self._lock:
            if self._active is not None:
                # Same thread (lock is re-entrant): join the outer transaction.
                yield self._active
                return

            tx = StoreTransaction(self._state)
            self._active = tx
            try:
                yield tx
            finally:
                self._active = None

            if tx.mutation_count:
                self._state = tx.build()
                self._version += 1
                logger.debug(
                    "store_committed",
                    extra={
                        "version": self._version,
                        "mutations": tx.mutation_count,
                    },
                )
