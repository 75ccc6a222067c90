# src/debate_kit/tracking.py

"""Advisory de-duplication of near-simultaneous requests.

The tracker is an LRU map with a TTL, owned by whoever handles requests
and passed in explicitly. Losing it (a restart, a fresh instance) only
costs de-duplication, never correctness.
"""

import logging
import time
from collections import OrderedDict
from collections.abc import Callable

from debate_kit.observability import names
from debate_kit.observability.base import MetricsHook, NoOpMetricsHook

logger = logging.getLogger(__name__)


class RequestTracker:
    def __init__(
        self,
        window_seconds: float = 5.0,
        ttl_seconds: float = 60.0,
        max_entries: int = 1024,
        sweep_interval: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._window = window_seconds
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._sweep_interval = sweep_interval
        self._clock = clock
        self._entries: OrderedDict[str, float] = OrderedDict()
        self._last_sweep = clock()
        self.metrics_hook = metrics_hook

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def should_throttle(self, key: str) -> bool:
        """True if ``key`` was recorded less than ``window_seconds`` ago."""
        self._maybe_sweep()
        last = self._entries.get(key)
        if last is None or self._clock() - last >= self._window:
            return False
        logger.debug("Request throttled: %s", key)
        self.metrics_hook.increment(names.REQUESTS_THROTTLED_TOTAL)
        return True

    def record(self, key: str) -> None:
        self._entries[key] = self._clock()
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted least recently used entry: %s", evicted)
        self.metrics_hook.record_gauge(names.TRACKER_ENTRIES, len(self._entries))

    def is_duplicate_submission(self, file_name: str, file_size: int) -> bool:
        """Check-and-record for an upload, keyed by name and size."""
        key = submission_key(file_name, file_size)
        if self.should_throttle(key):
            return True
        self.record(key)
        return False

    def sweep(self) -> int:
        """Drop entries older than ``ttl_seconds``. Returns how many went."""
        now = self._clock()
        stale = [key for key, seen in self._entries.items() if now - seen > self._ttl]
        for key in stale:
            del self._entries[key]
        self._last_sweep = now
        if stale:
            logger.debug("Swept %d stale request entries", len(stale))
            self.metrics_hook.record_gauge(names.TRACKER_ENTRIES, len(self._entries))
        return len(stale)

    def _maybe_sweep(self) -> None:
        if self._clock() - self._last_sweep >= self._sweep_interval:
            self.sweep()


def submission_key(file_name: str, file_size: int) -> str:
    return f"upload:{file_name}:{file_size}"
