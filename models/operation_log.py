from datetime import timedelta

from models.journal import TimeWindowJournal
from utils.clock import to_iso

DEFAULT_RETENTION = timedelta(days=30)


def describe_operation(method: str, path: str, header_value: str | None = None) -> str:
    """Operation text for the log: the client's own description, else "METHOD path"."""
    if header_value:
        return header_value
    return f"{method} {path}"


class OperationLog:
    """Observational record of mutating requests, kept for a retention window."""

    def __init__(self, journal: TimeWindowJournal):
        self.journal = journal

    @classmethod
    def with_storage(cls, storage, retention: timedelta = DEFAULT_RETENTION, **kwargs) -> "OperationLog":
        return cls(TimeWindowJournal(storage, retention, name="operation_log", **kwargs))

    def record(self, ip: str, operation: str, method: str, path: str, user_agent: str | None) -> dict:
        now = self.journal.now()
        entry = {
            "timestamp": to_iso(now),
            "ip": ip,
            "operation": operation,
            "method": method,
            "path": path,
            "userAgent": user_agent,
        }
        return self.journal.append(entry, now=now)

    def recent(self, limit: int = 50, ip: str | None = None) -> list[dict]:
        """Newest first."""
        predicate = (lambda e: e.get("ip") == ip) if ip else None
        rows = self.journal.within_window(predicate)
        rows.reverse()
        return rows[:limit] if limit else rows

    def prune(self) -> int:
        return self.journal.prune()
