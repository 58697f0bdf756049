from __future__ import annotations

from collections import defaultdict
from threading import Lock
from time import time


class MetricsStore:
    def __init__(self) -> None:
        self._lock = Lock()
        self._counters: dict[str, int] = defaultdict(int)
        self._gauges: dict[str, float] = {}
        self._updated_at: int = int(time())

    def incr(self, key: str, value: int = 1) -> None:
        with self._lock:
            self._counters[key] += value
            self._updated_at = int(time())

    def set_gauge(self, key: str, value: float) -> None:
        with self._lock:
            self._gauges[key] = value
            self._updated_at = int(time())

    def record_removal(self, elapsed_ms: int, failure_kind: str | None = None) -> None:
        if failure_kind is None:
            self.incr("removals_succeeded_total")
        else:
            self.incr("removals_failed_total")
            self.incr(f"removals_failed_{failure_kind}_total")
        self.set_gauge("last_removal_ms", elapsed_ms)

    def snapshot(self) -> dict[str, int | float]:
        with self._lock:
            merged: dict[str, int | float] = dict(self._counters)
            merged.update(self._gauges)
            merged["metrics_last_update_ts"] = self._updated_at
            return merged


metrics = MetricsStore()
