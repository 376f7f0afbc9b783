"""
Pytest fixtures for the stock kernel test suite.

Provides:
- Structured logging configured once per session, plus a ``captured_logs``
  fixture returning parsed JSON log records
- Deterministic clock and id generator
- A store seeded with a small catalog, directory and history
- Services wired to that store
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO

import pytest

from stock_kernel.domain.clock import DeterministicClock
from stock_kernel.domain.ids import SequentialIdGenerator
from stock_kernel.domain.models import (
    AuditLog,
    EntryHistory,
    ExitHistory,
    Profile,
    StockItem,
    Supplier,
    User,
)
from stock_kernel.domain.snapshot import StoreSnapshot
from stock_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from stock_kernel.selectors import AuditSelector, DirectorySelector, ItemSelector
from stock_kernel.services import (
    AuditRecorder,
    BackupSerializer,
    DirectoryManager,
    MovementProcessor,
    PanelController,
)
from stock_kernel.store import EntityStore

FIXED_NOW = datetime(2024, 6, 1, 8, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture stock_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, movements):
            movements.register_entry("item-1", 5)
            logs = captured_logs()
            assert any(r["message"] == "stock_entry_registered" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("stock_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Determinism
# =============================================================================


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(FIXED_NOW)


@pytest.fixture
def id_generator():
    return SequentialIdGenerator(prefix="gen-")


# =============================================================================
# Seed data
# =============================================================================


@pytest.fixture
def seed_snapshot() -> StoreSnapshot:
    """
    Small but complete store state.

    - item-1 BOLT-01: 20 on hand, min 5, two suppliers, one entry in history
    - item-2 NUT-02: 3 on hand, min 10 (below minimum)
    - item-3 WASH-03: 0 on hand, min 0 (at minimum), no suppliers
    """
    return StoreSnapshot(
        stock_items=(
            StockItem(
                id="item-1",
                code="BOLT-01",
                description="Steel bolt M6",
                unit="un",
                system_stock=20,
                min_stock=5,
                suppliers=("Acme Fasteners", "Bolt Brothers"),
            ),
            StockItem(
                id="item-2",
                code="NUT-02",
                description="Steel nut M6",
                unit="un",
                system_stock=3,
                min_stock=10,
                suppliers=("Acme Fasteners",),
            ),
            StockItem(
                id="item-3",
                code="WASH-03",
                description="Flat washer",
                unit="box",
                system_stock=0,
                min_stock=0,
            ),
        ),
        users=(
            User(
                id="user-1",
                name="Ana Souza",
                email="ana@example.com",
                profile=Profile.ADMINISTRATOR,
                avatar_url="https://i.pravatar.cc/150?u=ana@example.com",
            ),
            User(
                id="user-2",
                name="Bruno Reis",
                email="bruno@example.com",
                profile=Profile.OPERATOR,
            ),
        ),
        suppliers=(
            Supplier(
                id="sup-1",
                name="Acme Fasteners",
                contact="Carla Dias",
                email="sales@acme.example",
                phone="555-0100",
            ),
            Supplier(id="sup-2", name="Bolt Brothers", contact="Davi Melo"),
        ),
        audit_logs=(
            AuditLog(
                id="log-1",
                timestamp=datetime(2024, 5, 31, 17, 0, tzinfo=timezone.utc),
                user="Ana Souza",
                action="Registered entry of 20 unit(s) of item BOLT-01. Invoice: INV-1.",
            ),
        ),
        history={
            "item-1": (
                EntryHistory(
                    id="hist-1",
                    date=datetime(2024, 5, 31, 17, 0, tzinfo=timezone.utc),
                    quantity=20,
                    user="Ana Souza",
                    details="Supplier: Acme Fasteners. Invoice: INV-1. Notes: N/A",
                ),
            ),
            "item-2": (
                ExitHistory(
                    id="hist-2",
                    date=datetime(2024, 5, 30, 9, 0, tzinfo=timezone.utc),
                    quantity=7,
                    user="Ana Souza",
                    requester="Workshop",
                    responsible="Bruno Reis",
                ),
            ),
        },
    )


@pytest.fixture
def store(seed_snapshot) -> EntityStore:
    return EntityStore(seed_snapshot)


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def audit(store, deterministic_clock, id_generator) -> AuditRecorder:
    return AuditRecorder(store, clock=deterministic_clock, id_generator=id_generator)


@pytest.fixture
def movements(store, audit, deterministic_clock, id_generator) -> MovementProcessor:
    return MovementProcessor(
        store, audit, clock=deterministic_clock, id_generator=id_generator
    )


@pytest.fixture
def directory(store, audit, id_generator) -> DirectoryManager:
    return DirectoryManager(store, audit, id_generator=id_generator)


@pytest.fixture
def panel(directory) -> PanelController:
    return PanelController(directory)


@pytest.fixture
def backup(store, audit, deterministic_clock) -> BackupSerializer:
    return BackupSerializer(store, audit, clock=deterministic_clock)


@pytest.fixture
def item_selector(store) -> ItemSelector:
    return ItemSelector(store)


@pytest.fixture
def directory_selector(store) -> DirectorySelector:
    return DirectorySelector(store)


@pytest.fixture
def audit_selector(store) -> AuditSelector:
    return AuditSelector(store)
