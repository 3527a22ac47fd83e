import math
from datetime import timedelta
from typing import NamedTuple

from models.journal import TimeWindowJournal
from utils.clock import parse_iso, to_iso

DEFAULT_WINDOW = timedelta(hours=24)
DEFAULT_MAX_REQUESTS = 8


class RateLimitDecision(NamedTuple):
    allowed: bool
    limit: int
    remaining: int
    retry_after: int  # seconds, 0 when allowed


class OperationRateLimiter:
    """Sliding-window cap on mutating operations per IP.

    Accepted operations are journaled; rejected ones are not, and a rejection
    neither prunes nor persists the journal.
    """

    def __init__(self, journal: TimeWindowJournal, max_requests: int = DEFAULT_MAX_REQUESTS):
        self.journal = journal
        self.max_requests = max_requests

    @classmethod
    def with_storage(
        cls, storage, window: timedelta = DEFAULT_WINDOW, max_requests: int = DEFAULT_MAX_REQUESTS, **kwargs
    ) -> "OperationRateLimiter":
        return cls(TimeWindowJournal(storage, window, name="rate_limit", **kwargs), max_requests=max_requests)

    @property
    def window(self) -> timedelta:
        return self.journal.retention

    def recent_for_ip(self, ip: str, now=None) -> list[dict]:
        return self.journal.within_window(lambda e: e.get("ip") == ip, now=now)

    def check_and_record(self, ip: str, method: str, path: str) -> RateLimitDecision:
        with self.journal.lock:
            now = self.journal.now()
            recent = self.recent_for_ip(ip, now)

            if len(recent) >= self.max_requests:
                return RateLimitDecision(
                    allowed=False,
                    limit=self.max_requests,
                    remaining=0,
                    retry_after=self._retry_after(recent, now),
                )

            self.journal.append(
                {"ip": ip, "timestamp": to_iso(now), "method": method, "path": path},
                now=now,
            )

        return RateLimitDecision(
            allowed=True,
            limit=self.max_requests,
            remaining=self.max_requests - len(recent) - 1,
            retry_after=0,
        )

    def _retry_after(self, recent: list[dict], now) -> int:
        # Seconds until the oldest counted entry leaves the window
        oldest = min(parse_iso(e["timestamp"]) for e in recent)
        seconds = (oldest + self.window - now).total_seconds()
        return max(math.ceil(seconds), 1)
