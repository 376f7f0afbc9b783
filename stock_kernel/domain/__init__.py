"""
Pure domain layer.

This module contains immutable value records and pure conversions
with NO dependencies on:
- The entity store
- Time/clock (injected)
- I/O

All domain objects are immutable and deterministic.
"""

from stock_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from stock_kernel.domain.drafts import (
    EditSupplierDraft,
    EditUserDraft,
    NewSupplierDraft,
    NewUserDraft,
    PanelDraft,
    PanelMode,
    PanelState,
    PasswordDraft,
)
from stock_kernel.domain.ids import IdGenerator, SequentialIdGenerator, UuidGenerator
from stock_kernel.domain.models import (
    AuditLog,
    EntryHistory,
    ExitHistory,
    HistoryEntry,
    MovementType,
    Profile,
    StockItem,
    Supplier,
    User,
)
from stock_kernel.domain.snapshot import StoreSnapshot

__all__ = [
    "AuditLog",
    "Clock",
    "DeterministicClock",
    "EditSupplierDraft",
    "EditUserDraft",
    "EntryHistory",
    "ExitHistory",
    "HistoryEntry",
    "IdGenerator",
    "MovementType",
    "NewSupplierDraft",
    "NewUserDraft",
    "PanelDraft",
    "PanelMode",
    "PanelState",
    "PasswordDraft",
    "Profile",
    "SequentialIdGenerator",
    "StockItem",
    "StoreSnapshot",
    "Supplier",
    "SystemClock",
    "User",
    "UuidGenerator",
]
