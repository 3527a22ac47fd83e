"""Unit tests for the operation log."""

from datetime import timedelta

from models.operation_log import OperationLog, describe_operation
from utils.clock import to_iso
from utils.storage import MemoryStorage


def test_describe_operation_prefers_client_text():
    assert describe_operation("POST", "/api/birds", "Added a robin") == "Added a robin"


def test_describe_operation_falls_back_to_method_and_path():
    assert describe_operation("DELETE", "/api/birds/7") == "DELETE /api/birds/7"
    assert describe_operation("PUT", "/api/birds/7", "") == "PUT /api/birds/7"


class TestOperationLog:
    def test_record_writes_full_entry(self, clock, errors):
        storage = MemoryStorage()
        log = OperationLog.with_storage(storage, clock=clock, on_error=errors)

        entry = log.record("10.0.0.1", "POST /api/birds", "POST", "/api/birds", "pytest")

        assert entry == {
            "timestamp": to_iso(clock.now),
            "ip": "10.0.0.1",
            "operation": "POST /api/birds",
            "method": "POST",
            "path": "/api/birds",
            "userAgent": "pytest",
        }
        assert storage.read_all() == [entry]

    def test_entries_older_than_thirty_days_pruned_on_write(self, clock, errors):
        old = {"timestamp": to_iso(clock.now - timedelta(days=31)), "ip": "1.1.1.1"}
        recent = {"timestamp": to_iso(clock.now - timedelta(days=29)), "ip": "2.2.2.2"}
        storage = MemoryStorage([old, recent])
        log = OperationLog.with_storage(storage, clock=clock, on_error=errors)
        log.journal.reload()

        log.record("3.3.3.3", "x", "POST", "/api/birds", None)

        assert [e["ip"] for e in storage.read_all()] == ["2.2.2.2", "3.3.3.3"]

    def test_recent_is_newest_first_and_filterable(self, clock, errors):
        log = OperationLog.with_storage(MemoryStorage(), clock=clock, on_error=errors)
        for ip in ("a", "b", "a"):
            log.record(ip, f"op-{ip}", "POST", "/api/birds", None)
            clock.advance(seconds=1)

        assert [e["ip"] for e in log.recent()] == ["a", "b", "a"][::-1]
        assert len(log.recent(ip="a")) == 2
        assert len(log.recent(limit=1)) == 1

    def test_prune_without_new_entry(self, clock, errors):
        storage = MemoryStorage([{"timestamp": to_iso(clock.now - timedelta(days=40))}])
        log = OperationLog.with_storage(storage, clock=clock, on_error=errors)
        log.journal.reload()

        assert log.prune() == 1
        assert storage.read_all() == []
