"""
Stock Domain Models (``stock_kernel.domain.models``).

Responsibility
--------------
Frozen value records for the nouns of the stock dashboard: users,
suppliers, stock items, per-item movement history and audit logs.

Architecture
------------
Layer: **Domain** -- pure data structures.  All dataclasses are
``frozen=True``; a change is expressed by building a new record with
``dataclasses.replace``.  No record holds a live reference to another --
relations are by id (history is keyed by item id, stock items name their
suppliers).

Invariants
----------
- ``StockItem.system_stock`` and ``StockItem.min_stock`` are non-negative
  integers.
- History ``quantity`` is a positive integer.

Failure Modes
-------------
- Construction of a record that breaks an invariant raises ``ValueError``
  immediately.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from stock_kernel.logging_config import get_logger

logger = get_logger("domain.models")


class Profile(Enum):
    """User role flag. Not an authorization mechanism."""
    ADMINISTRATOR = "Administrator"
    OPERATOR = "Operator"


class MovementType(Enum):
    """History entry discriminator."""
    ENTRY = "Entry"
    EXIT = "Exit"


def is_positive_int(value: object) -> bool:
    """True for ``int`` values > 0 (``bool`` excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True)
class User:
    """A dashboard user. ``email`` is unique case-insensitively across users."""
    id: str
    name: str
    email: str
    profile: Profile
    avatar_url: str = ""

    @property
    def is_administrator(self) -> bool:
        return self.profile is Profile.ADMINISTRATOR


@dataclass(frozen=True)
class Supplier:
    id: str
    name: str
    contact: str = ""
    email: str = ""
    phone: str = ""


@dataclass(frozen=True)
class StockItem:
    """
    A catalog item with its current system stock.

    Contract: Immutable value object.  ``system_stock`` changes only through
    the movement processor, which replaces the record with
    ``with_stock(...)``.

    Raises:
        ValueError: If ``system_stock`` or ``min_stock`` is negative.
    """
    id: str
    code: str
    description: str
    unit: str
    system_stock: int
    min_stock: int = 0
    suppliers: tuple[str, ...] = ()

    def __post_init__(self):
        # INVARIANT: stock never negative
        if self.system_stock < 0:
            logger.warning(
                "stock_item_negative_stock",
                extra={
                    "item_id": self.id,
                    "code": self.code,
                    "system_stock": self.system_stock,
                },
            )
            raise ValueError(
                f"system_stock cannot be negative (got {self.system_stock})"
            )
        if self.min_stock < 0:
            raise ValueError(f"min_stock cannot be negative (got {self.min_stock})")

    @property
    def is_below_minimum(self) -> bool:
        return self.system_stock <= self.min_stock

    @property
    def default_supplier(self) -> str:
        return self.suppliers[0] if self.suppliers else ""

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on code or description."""
        needle = query.lower()
        return needle in self.code.lower() or needle in self.description.lower()

    def with_stock(self, system_stock: int) -> "StockItem":
        return replace(self, system_stock=system_stock)


def _check_quantity(entry_id: str, quantity: int) -> None:
    if not is_positive_int(quantity):
        raise ValueError(
            f"history entry {entry_id} quantity must be a positive integer "
            f"(got {quantity!r})"
        )


@dataclass(frozen=True)
class EntryHistory:
    """Inbound movement record. Immutable once created."""
    id: str
    date: datetime
    quantity: int
    user: str
    details: str = ""

    def __post_init__(self):
        _check_quantity(self.id, self.quantity)

    @property
    def type(self) -> MovementType:
        return MovementType.ENTRY


@dataclass(frozen=True)
class ExitHistory:
    """Outbound movement record. Immutable once created."""
    id: str
    date: datetime
    quantity: int
    user: str
    requester: str = ""
    responsible: str = ""

    def __post_init__(self):
        _check_quantity(self.id, self.quantity)

    @property
    def type(self) -> MovementType:
        return MovementType.EXIT


HistoryEntry = EntryHistory | ExitHistory


@dataclass(frozen=True)
class AuditLog:
    """One line of the global, newest-first audit trail."""
    id: str
    timestamp: datetime
    user: str
    action: str
