"""Append-only, time-windowed journal of timestamped JSON entries.

Entries carry an ISO-8601 ``timestamp``. Anything not strictly newer than
``now - retention`` is pruned whenever the journal is written. The whole
journal is rewritten on every append.
"""

import threading
from datetime import timedelta

from utils.clock import parse_iso, to_iso, utcnow
from utils.log import log_error


class TimeWindowJournal:
    def __init__(self, storage, retention: timedelta, *, name: str = "journal", clock=None, on_error=None):
        self.storage = storage
        self.retention = retention
        self.name = name
        self.on_error = on_error or log_error
        self._clock = clock or utcnow
        # Reentrant so callers can hold it across a read-then-append
        self.lock = threading.RLock()
        self._entries: list[dict] = []

    def now(self):
        return self._clock()

    def cutoff(self, now=None):
        return (now or self.now()) - self.retention

    def reload(self) -> int:
        try:
            raw = self.storage.read_all()
        except (OSError, ValueError) as exc:
            self.on_error("journal_load_failed", exc, journal=self.name, storage=repr(self.storage))
            raw = []
        with self.lock:
            self._entries = [e for e in raw if isinstance(e, dict)]
        return len(self._entries)

    def entries(self) -> list[dict]:
        with self.lock:
            return [dict(e) for e in self._entries]

    def is_recent(self, entry: dict, now=None) -> bool:
        moment = parse_iso(entry.get("timestamp"))
        return moment is not None and moment > self.cutoff(now)

    def within_window(self, predicate=None, now=None) -> list[dict]:
        """Entries inside the retention window, optionally filtered, oldest first."""
        now = now or self.now()
        with self.lock:
            return [
                dict(e)
                for e in self._entries
                if self.is_recent(e, now) and (predicate is None or predicate(e))
            ]

    def append(self, entry: dict, now=None) -> dict:
        """Add ``entry`` (stamped with ``now`` unless it has a timestamp), prune, persist."""
        now = now or self.now()
        entry = dict(entry)
        entry.setdefault("timestamp", to_iso(now))
        with self.lock:
            self._entries.append(entry)
            self._prune_locked(now)
            self._persist_locked()
        return entry

    def prune(self, now=None) -> int:
        """Drop expired entries and persist. Returns how many were removed."""
        with self.lock:
            removed = self._prune_locked(now or self.now())
            self._persist_locked()
        return removed

    def _prune_locked(self, now) -> int:
        before = len(self._entries)
        self._entries = [e for e in self._entries if self.is_recent(e, now)]
        return before - len(self._entries)

    def _persist_locked(self) -> None:
        try:
            self.storage.write_all(self._entries)
        except (OSError, TypeError, ValueError) as exc:
            self.on_error("journal_persist_failed", exc, journal=self.name, storage=repr(self.storage))

    def __len__(self) -> int:
        with self.lock:
            return len(self._entries)
