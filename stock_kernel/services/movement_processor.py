"""
MovementProcessor -- stock entries and exits.

Responsibility:
    Validates and applies inbound (entry) and outbound (exit) movements to a
    stock item, writing the matching history record and one audit line.

Architecture position:
    Kernel > Services -- the only writer of ``StockItem.system_stock``.

Invariants enforced:
    - ``system_stock`` never goes negative: the exit check and the decrement
      happen inside one store transaction, under the store's writer lock.
    - Ordering inside the transaction is stock change -> history prepend ->
      audit prepend; all three commit together, so no reader observes
      changed stock without its history entry.

Failure modes:
    - InvalidQuantityError: quantity is not a positive integer.
    - ItemNotFoundError: item id does not resolve.
    - InsufficientStockError: exit quantity exceeds current stock.
    In every case the store is unchanged.

Audit relevance:
    Each successful movement appends exactly one audit line naming the
    actor, item code, quantity and movement type.
"""

from stock_kernel.domain.clock import Clock, SystemClock
from stock_kernel.domain.ids import IdGenerator, UuidGenerator
from stock_kernel.domain.models import EntryHistory, ExitHistory, StockItem, is_positive_int
from stock_kernel.exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    ItemNotFoundError,
)
from stock_kernel.logging_config import LogContext, get_logger
from stock_kernel.services.audit_recorder import AuditRecorder
from stock_kernel.store import EntityStore, StoreTransaction

logger = get_logger("services.movements")

NOT_AVAILABLE = "N/A"


def entry_details(supplier: str, invoice_ref: str, notes: str) -> str:
    """Free-text details line stored on an entry history record."""
    return (
        f"Supplier: {supplier or NOT_AVAILABLE}. "
        f"Invoice: {invoice_ref or NOT_AVAILABLE}. "
        f"Notes: {notes or NOT_AVAILABLE}"
    )


class MovementProcessor:
    """
    Registers stock entries and exits.

    Contract:
        Each public method runs one store transaction and returns the
        history record it created.

    Guarantees:
        - Atomicity: stock, history and audit change together or not at all.
        - The returned record is at index 0 of ``store.history_for(item_id)``.

    Non-goals:
        - Does NOT check that ``supplier`` names a known supplier; entry
          details are free text.
    """

    def __init__(
        self,
        store: EntityStore,
        audit: AuditRecorder,
        clock: Clock | None = None,
        id_generator: IdGenerator | None = None,
        actor_name: str = "Administrator",
    ):
        self._store = store
        self._audit = audit
        self._clock = clock or SystemClock()
        self._ids = id_generator or UuidGenerator()
        self._actor_name = actor_name

    def _load_item(self, tx: StoreTransaction, item_id: str, quantity: object) -> StockItem:
        if not is_positive_int(quantity):
            logger.warning(
                "movement_quantity_invalid",
                extra={"item_id": item_id, "quantity": repr(quantity)},
            )
            raise InvalidQuantityError(quantity)
        item = tx.find_stock_item(item_id)
        if item is None:
            logger.warning("movement_item_not_found", extra={"item_id": item_id})
            raise ItemNotFoundError(item_id)
        return item

    def register_entry(
        self,
        item_id: str,
        quantity: int,
        supplier: str = "",
        invoice_ref: str = "",
        notes: str = "",
        actor: str | None = None,
    ) -> EntryHistory:
        """
        Receive ``quantity`` units of an item.

        Preconditions:
            - ``quantity`` is a positive integer.
            - ``item_id`` resolves to an existing stock item.
        Postconditions:
            - ``system_stock`` increased by ``quantity``.
            - A new ``EntryHistory`` heads the item's history.
            - One audit line prepended.

        Raises:
            InvalidQuantityError, ItemNotFoundError
        """
        actor_name = actor or self._actor_name
        with LogContext.bind(actor=actor_name, operation="register_entry", item_id=item_id):
            with self._store.transaction() as tx:
                item = self._load_item(tx, item_id, quantity)
                updated = item.with_stock(item.system_stock + quantity)
                tx.put_stock_item(updated)

                entry = EntryHistory(
                    id=self._ids.next_id(),
                    date=self._clock.now(),
                    quantity=quantity,
                    user=actor_name,
                    details=entry_details(supplier, invoice_ref, notes),
                )
                tx.prepend_history(item_id, entry)

                self._audit.record(
                    actor_name,
                    f"Registered entry of {quantity} unit(s) of item {item.code}. "
                    f"Invoice: {invoice_ref or NOT_AVAILABLE}.",
                )

            logger.info(
                "stock_entry_registered",
                extra={
                    "history_id": entry.id,
                    "code": item.code,
                    "quantity": quantity,
                    "stock_before": item.system_stock,
                    "stock_after": updated.system_stock,
                },
            )
            return entry

    def register_exit(
        self,
        item_id: str,
        quantity: int,
        requester: str,
        responsible: str,
        actor: str | None = None,
    ) -> ExitHistory:
        """
        Issue ``quantity`` units of an item.

        Preconditions:
            - ``quantity`` is a positive integer not above current stock.
            - ``item_id`` resolves to an existing stock item.
        Postconditions:
            - ``system_stock`` decreased by ``quantity`` (never below zero).
            - A new ``ExitHistory`` heads the item's history.
            - One audit line prepended.

        Raises:
            InvalidQuantityError, ItemNotFoundError, InsufficientStockError
        """
        actor_name = actor or self._actor_name
        with LogContext.bind(actor=actor_name, operation="register_exit", item_id=item_id):
            with self._store.transaction() as tx:
                item = self._load_item(tx, item_id, quantity)
                # INVARIANT: check and decrement under the same writer lock
                if quantity > item.system_stock:
                    logger.warning(
                        "stock_exit_rejected",
                        extra={
                            "code": item.code,
                            "requested": quantity,
                            "available": item.system_stock,
                        },
                    )
                    raise InsufficientStockError(
                        item_id=item.id,
                        item_code=item.code,
                        requested=quantity,
                        available=item.system_stock,
                    )
                updated = item.with_stock(item.system_stock - quantity)
                tx.put_stock_item(updated)

                exit_entry = ExitHistory(
                    id=self._ids.next_id(),
                    date=self._clock.now(),
                    quantity=quantity,
                    user=actor_name,
                    requester=requester,
                    responsible=responsible,
                )
                tx.prepend_history(item_id, exit_entry)

                self._audit.record(
                    actor_name,
                    f"Registered exit of {quantity} unit(s) of item {item.code} "
                    f"for {requester}.",
                )

            logger.info(
                "stock_exit_registered",
                extra={
                    "history_id": exit_entry.id,
                    "code": item.code,
                    "quantity": quantity,
                    "stock_before": item.system_stock,
                    "stock_after": updated.system_stock,
                },
            )
            return exit_entry
