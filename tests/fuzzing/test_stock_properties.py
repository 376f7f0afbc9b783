"""
Property-based tests for the stock kernel.

Laws checked over generated inputs:
- Stock never goes negative, whatever sequence of entries and exits runs.
- Each successful mutating call adds exactly one audit line; each failed
  call adds none and leaves the snapshot untouched.
- Restoring an exported backup reproduces the exported state.
"""

from datetime import datetime, timezone

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from stock_kernel.domain.clock import DeterministicClock
from stock_kernel.domain.ids import SequentialIdGenerator
from stock_kernel.domain.models import Profile, StockItem
from stock_kernel.domain.snapshot import StoreSnapshot
from stock_kernel.exceptions import StockKernelError
from stock_kernel.services import (
    AuditRecorder,
    BackupSerializer,
    DirectoryManager,
    MovementProcessor,
)
from stock_kernel.store import EntityStore

pytestmark = pytest.mark.slow

ITEM_IDS = ("item-a", "item-b", "item-c")


def _fresh_kernel(stocks: tuple[int, ...]):
    store = EntityStore(
        StoreSnapshot(
            stock_items=tuple(
                StockItem(
                    id=item_id,
                    code=f"CODE-{n}",
                    description=f"Item {n}",
                    unit="un",
                    system_stock=stock,
                )
                for n, (item_id, stock) in enumerate(zip(ITEM_IDS, stocks))
            )
        )
    )
    clock = DeterministicClock(datetime(2024, 6, 1, tzinfo=timezone.utc))
    ids = SequentialIdGenerator(prefix="p-")
    audit = AuditRecorder(store, clock=clock, id_generator=ids)
    return (
        store,
        clock,
        MovementProcessor(store, audit, clock=clock, id_generator=ids),
        DirectoryManager(store, audit, id_generator=ids),
        BackupSerializer(store, audit, clock=clock),
    )


movement_strategy = st.tuples(
    st.sampled_from(["entry", "exit"]),
    st.sampled_from(ITEM_IDS + ("item-missing",)),
    st.one_of(st.integers(min_value=-5, max_value=60), st.just(0)),
)

starting_stock = st.tuples(*(st.integers(min_value=0, max_value=50) for _ in ITEM_IDS))


class TestStockNeverNegative:

    @given(stocks=starting_stock, operations=st.lists(movement_strategy, max_size=40))
    @settings(max_examples=150, suppress_health_check=[HealthCheck.too_slow])
    def test_random_movements(self, stocks, operations):
        store, clock, movements, _, _ = _fresh_kernel(stocks)
        expected = dict(zip(ITEM_IDS, stocks))

        for kind, item_id, quantity in operations:
            clock.tick()
            try:
                if kind == "entry":
                    movements.register_entry(item_id, quantity)
                    expected[item_id] += quantity
                else:
                    movements.register_exit(item_id, quantity, "Requester", "Responsible")
                    expected[item_id] -= quantity
            except StockKernelError:
                pass

            for item in store.list_stock_items():
                assert item.system_stock >= 0

        assert {i.id: i.system_stock for i in store.list_stock_items()} == expected

    @given(stocks=starting_stock, operations=st.lists(movement_strategy, max_size=30))
    @settings(max_examples=100, suppress_health_check=[HealthCheck.too_slow])
    def test_history_matches_stock_delta(self, stocks, operations):
        store, _, movements, _, _ = _fresh_kernel(stocks)
        for kind, item_id, quantity in operations:
            try:
                if kind == "entry":
                    movements.register_entry(item_id, quantity)
                else:
                    movements.register_exit(item_id, quantity, "R", "S")
            except StockKernelError:
                pass

        for item_id, start in zip(ITEM_IDS, stocks):
            delta = sum(
                h.quantity if h.type.value == "Entry" else -h.quantity
                for h in store.history_for(item_id)
            )
            assert store.find_stock_item(item_id).system_stock == start + delta


class TestAuditGrowth:

    @given(operations=st.lists(movement_strategy, min_size=1, max_size=25))
    @settings(max_examples=100, suppress_health_check=[HealthCheck.too_slow])
    def test_one_line_per_success_none_per_failure(self, operations):
        store, _, movements, _, _ = _fresh_kernel((5, 5, 5))
        for kind, item_id, quantity in operations:
            before = store.snapshot()
            try:
                if kind == "entry":
                    movements.register_entry(item_id, quantity)
                else:
                    movements.register_exit(item_id, quantity, "R", "S")
            except StockKernelError:
                assert store.snapshot() is before
            else:
                assert len(store.list_audit_logs()) == len(before.audit_logs) + 1
                assert store.list_audit_logs()[1:] == before.audit_logs

    @given(
        emails=st.lists(
            st.sampled_from(["a@x.example", "A@X.example", "b@x.example", "c@x.example"]),
            max_size=10,
        )
    )
    @settings(max_examples=60)
    def test_duplicate_emails_never_stored(self, emails):
        store, _, _, directory, _ = _fresh_kernel((0, 0, 0))
        for email in emails:
            try:
                directory.add_user("Someone", email, Profile.OPERATOR)
            except StockKernelError:
                pass
        stored = [u.email.lower() for u in store.list_users()]
        assert len(stored) == len(set(stored))
        assert len(store.list_audit_logs()) == len(stored)


class TestBackupRoundTrip:

    @given(stocks=starting_stock, operations=st.lists(movement_strategy, max_size=15))
    @settings(max_examples=60, suppress_health_check=[HealthCheck.too_slow])
    def test_restore_of_export(self, stocks, operations):
        store, _, movements, _, backup = _fresh_kernel(stocks)
        for kind, item_id, quantity in operations:
            try:
                if kind == "entry":
                    movements.register_entry(item_id, quantity, invoice_ref="INV")
                else:
                    movements.register_exit(item_id, quantity, "R", "S")
            except StockKernelError:
                pass

        exported = store.snapshot()
        text = backup.export_json()
        assert backup.decode(text) == exported

        restored = backup.restore_all(text)
        current = store.snapshot()
        assert restored == exported
        assert current.stock_items == exported.stock_items
        assert current.history == exported.history
        assert current.audit_logs[1:] == exported.audit_logs
