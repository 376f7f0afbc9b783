"""Tests for AuditRecorder."""

import pytest

from stock_kernel.services.audit_recorder import AuditRecorder


class TestRecord:

    def test_prepends_entry(self, store, audit, deterministic_clock):
        log = audit.record("Ana Souza", "Did a thing.")
        assert store.list_audit_logs()[0] == log
        assert log.timestamp == deterministic_clock.now()
        assert log.id == "gen-1"
        assert [a.id for a in store.list_audit_logs()] == ["gen-1", "log-1"]

    def test_newest_first(self, store, audit, deterministic_clock):
        audit.record("Ana Souza", "first")
        deterministic_clock.advance(60)
        audit.record("Ana Souza", "second")
        assert [a.action for a in store.list_audit_logs()[:2]] == ["second", "first"]

    def test_standalone_record_commits(self, store, audit):
        audit.record("Ana Souza", "x")
        assert store.version == 1

    def test_joins_open_transaction(self, store, audit):
        with pytest.raises(RuntimeError):
            with store.transaction():
                audit.record("Ana Souza", "rolled back with its caller")
                raise RuntimeError("abort")
        assert [a.id for a in store.list_audit_logs()] == ["log-1"]

    def test_defaults_to_system_clock_and_uuids(self, store):
        log = AuditRecorder(store).record("Ana Souza", "x")
        assert log.timestamp.tzinfo is not None
        assert len(log.id) == 36
