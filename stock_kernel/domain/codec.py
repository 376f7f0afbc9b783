"""
Record codec -- domain records to and from JSON-compatible dicts.

Responsibility:
    Defines the backup document wire shape (camelCase field names,
    ISO-8601 timestamps, ``type`` discriminator on history entries) and
    converts between it and the frozen domain records.

Architecture position:
    Kernel > Domain.  Used by the backup serializer and by the seed loader
    in ``stock_config``; performs no I/O.

Invariants:
    - Decoded timestamps are timezone-aware; naive values are read as UTC.
    - A decoded snapshot has unique ids per collection and unique user
      emails (case-insensitive).

Failure modes:
    - Missing field  -> ``KeyError``.
    - Wrong type (e.g. a string quantity, a record that is not an object)
      -> ``TypeError``.
    - Invalid value (unknown profile, negative stock, bad timestamp,
      duplicate id or email) -> ``ValueError``.
    Callers translate these into their own error type.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

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

BACKUP_KEYS: tuple[str, ...] = (
    "stockItems",
    "users",
    "suppliers",
    "auditLogs",
    "historyData",
)


def _record(data: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"{kind} record must be an object, got {type(data).__name__}")
    return data


def _int(data: Mapping[str, Any], key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key} must be an integer, got {value!r}")
    return value


def _str(data: Mapping[str, Any], key: str, default: str | None = None) -> str:
    if default is not None and data.get(key) is None:
        return default
    value = data[key]
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise TypeError(f"{key} must be a string, got {value!r}")
    return str(value)


def _timestamp(data: Mapping[str, Any], key: str) -> datetime:
    value = data[key]
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    elif not isinstance(value, datetime):
        raise TypeError(f"{key} must be an ISO-8601 string, got {value!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "profile": user.profile.value,
        "avatarUrl": user.avatar_url,
    }


def user_from_dict(data: Mapping[str, Any]) -> User:
    data = _record(data, "user")
    return User(
        id=_str(data, "id"),
        name=_str(data, "name"),
        email=_str(data, "email"),
        profile=Profile(data["profile"]),
        avatar_url=_str(data, "avatarUrl", default=""),
    )


def supplier_to_dict(supplier: Supplier) -> dict[str, Any]:
    return {
        "id": supplier.id,
        "name": supplier.name,
        "contact": supplier.contact,
        "email": supplier.email,
        "phone": supplier.phone,
    }


def supplier_from_dict(data: Mapping[str, Any]) -> Supplier:
    data = _record(data, "supplier")
    return Supplier(
        id=_str(data, "id"),
        name=_str(data, "name"),
        contact=_str(data, "contact", default=""),
        email=_str(data, "email", default=""),
        phone=_str(data, "phone", default=""),
    )


def stock_item_to_dict(item: StockItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "code": item.code,
        "description": item.description,
        "unit": item.unit,
        "systemStock": item.system_stock,
        "minStock": item.min_stock,
        "supplier": list(item.suppliers),
    }


def stock_item_from_dict(data: Mapping[str, Any]) -> StockItem:
    data = _record(data, "stock item")
    raw_suppliers = data.get("supplier") or []
    if isinstance(raw_suppliers, str):
        raw_suppliers = [raw_suppliers]
    if not isinstance(raw_suppliers, list):
        raise TypeError(f"supplier must be a list or string, got {raw_suppliers!r}")
    return StockItem(
        id=_str(data, "id"),
        code=_str(data, "code"),
        description=_str(data, "description"),
        unit=_str(data, "unit"),
        system_stock=_int(data, "systemStock"),
        min_stock=_int(data, "minStock") if "minStock" in data else 0,
        suppliers=tuple(str(s) for s in raw_suppliers),
    )


def history_to_dict(entry: HistoryEntry) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": entry.id,
        "date": entry.date.isoformat(),
        "type": entry.type.value,
        "quantity": entry.quantity,
        "user": entry.user,
    }
    if isinstance(entry, EntryHistory):
        data["details"] = entry.details
    else:
        data["requester"] = entry.requester
        data["responsible"] = entry.responsible
    return data


def history_from_dict(data: Mapping[str, Any]) -> HistoryEntry:
    data = _record(data, "history")
    movement_type = MovementType(data["type"])
    if movement_type is MovementType.ENTRY:
        return EntryHistory(
            id=_str(data, "id"),
            date=_timestamp(data, "date"),
            quantity=_int(data, "quantity"),
            user=_str(data, "user"),
            details=_str(data, "details", default=""),
        )
    return ExitHistory(
        id=_str(data, "id"),
        date=_timestamp(data, "date"),
        quantity=_int(data, "quantity"),
        user=_str(data, "user"),
        requester=_str(data, "requester", default=""),
        responsible=_str(data, "responsible", default=""),
    )


def audit_log_to_dict(log: AuditLog) -> dict[str, Any]:
    return {
        "id": log.id,
        "timestamp": log.timestamp.isoformat(),
        "user": log.user,
        "action": log.action,
    }


def audit_log_from_dict(data: Mapping[str, Any]) -> AuditLog:
    data = _record(data, "audit log")
    return AuditLog(
        id=_str(data, "id"),
        timestamp=_timestamp(data, "timestamp"),
        user=_str(data, "user"),
        action=_str(data, "action"),
    )


# ---------------------------------------------------------------------------
# Whole document
# ---------------------------------------------------------------------------


def snapshot_to_document(snapshot: StoreSnapshot) -> dict[str, Any]:
    """Encode a snapshot as a backup document (plain dicts/lists/scalars)."""
    return {
        "stockItems": [stock_item_to_dict(i) for i in snapshot.stock_items],
        "users": [user_to_dict(u) for u in snapshot.users],
        "suppliers": [supplier_to_dict(s) for s in snapshot.suppliers],
        "auditLogs": [audit_log_to_dict(a) for a in snapshot.audit_logs],
        "historyData": {
            item_id: [history_to_dict(h) for h in entries]
            for item_id, entries in snapshot.history.items()
        },
    }


def _list(document: Mapping[str, Any], key: str) -> list:
    value = document[key]
    if not isinstance(value, list):
        raise TypeError(f"{key} must be a list, got {type(value).__name__}")
    return value


def _require_unique(values: list[str], what: str) -> None:
    seen: set[str] = set()
    for value in values:
        if value in seen:
            raise ValueError(f"duplicate {what} {value!r}")
        seen.add(value)


def snapshot_from_document(document: Mapping[str, Any]) -> StoreSnapshot:
    """
    Decode a backup document into a snapshot.

    Preconditions:
        - ``document`` holds every key in ``BACKUP_KEYS``.
    Raises:
        KeyError, TypeError, ValueError: on any malformed record, and
            ValueError on a duplicate id or user email.
    """
    history_data = document["historyData"]
    if not isinstance(history_data, Mapping):
        raise TypeError(
            f"historyData must be an object, got {type(history_data).__name__}"
        )
    history: dict[str, tuple[HistoryEntry, ...]] = {}
    for item_id, entries in history_data.items():
        if not isinstance(entries, list):
            raise TypeError(f"historyData[{item_id!r}] must be a list")
        history[str(item_id)] = tuple(history_from_dict(h) for h in entries)

    stock_items = tuple(stock_item_from_dict(i) for i in _list(document, "stockItems"))
    users = tuple(user_from_dict(u) for u in _list(document, "users"))
    suppliers = tuple(supplier_from_dict(s) for s in _list(document, "suppliers"))

    _require_unique([i.id for i in stock_items], "stock item id")
    _require_unique([u.id for u in users], "user id")
    _require_unique([u.email.lower() for u in users], "user email")
    _require_unique([s.id for s in suppliers], "supplier id")

    return StoreSnapshot(
        stock_items=stock_items,
        users=users,
        suppliers=suppliers,
        audit_logs=tuple(audit_log_from_dict(a) for a in _list(document, "auditLogs")),
        history=history,
    )
