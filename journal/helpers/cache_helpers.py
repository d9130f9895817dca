"""
Caching utilities for the insight engine.

InsightCache is a key -> value memo with per-record TTL, stored through a
Django cache backend. Records are written without a backend timeout and are
never evicted proactively: an expired record is treated as absent on the next
read and overwritten by the recompute. Every compute is timed; slow computes
are logged and recorded as performance warnings.
"""
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional
import hashlib
import logging
import time
import uuid

from django.core.cache.backends.base import BaseCache
from django.core.cache.backends.locmem import LocMemCache

from journal.domain import Entry
from journal.helpers.monitoring import MetricsCollector, now_millis
from journal.utils.constants import DEFAULT_CACHE_TTL_MS, SLOW_COMPUTE_THRESHOLD_MS

logger = logging.getLogger(__name__)

_MISSING = object()

# Cache TTL settings (in milliseconds)
CACHE_TTLS = {
    'patterns': DEFAULT_CACHE_TTL_MS,
    'aggregate': DEFAULT_CACHE_TTL_MS,
    'correlation': DEFAULT_CACHE_TTL_MS,
    'trends': 10 * 60 * 1000,
    'weekly_summary': 10 * 60 * 1000,
}

# Culling would drop live records, so the backend is sized past any snapshot count
BACKEND_MAX_ENTRIES = 1_000_000


def make_backend() -> BaseCache:
    """Private in-process Django cache holding one InsightCache's records."""
    return LocMemCache(
        f"journal-insights-{uuid.uuid4().hex}",
        {'TIMEOUT': None, 'OPTIONS': {'MAX_ENTRIES': BACKEND_MAX_ENTRIES}},
    )


@dataclass
class CacheRecord:
    key: str
    value: Any
    computed_at_epoch_millis: float
    ttl_millis: float

    def is_valid(self, now: float) -> bool:
        return now - self.computed_at_epoch_millis < self.ttl_millis


class InsightCache:
    """
    Memoizing cache for expensive insight computations.

    Args:
        clock: Zero-argument callable returning epoch milliseconds
        slow_threshold_ms: Computes slower than this emit a performance warning
        metrics: Collector receiving 'compute_time' and 'performance_warning'
        on_slow: Optional hook called as on_slow(key, duration_ms)
        backend: Django cache the records live in (default: a private LocMemCache).
            Values are pickled by the backend, so hits return equal copies.

    Usage:
        cache = InsightCache()
        patterns = cache.get_or_compute('patterns:energy', compute_fn, 5000)
    """

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        slow_threshold_ms: float = SLOW_COMPUTE_THRESHOLD_MS,
        metrics: Optional[MetricsCollector] = None,
        on_slow: Optional[Callable[[str, float], None]] = None,
        backend: Optional[BaseCache] = None,
    ):
        self._clock = clock if clock is not None else now_millis
        self._backend = backend if backend is not None else make_backend()
        self._keys = set()
        self.slow_threshold_ms = slow_threshold_ms
        self.metrics = metrics if metrics is not None else MetricsCollector()
        self.on_slow = on_slow
        self.hits = 0
        self.misses = 0

    def _valid_record(self, key: str) -> Optional[CacheRecord]:
        record = self._backend.get(key)
        if record is None or not record.is_valid(self._clock()):
            return None
        return record

    def get_or_compute(self, key: str, compute: Callable[[], Any], ttl_millis: float = DEFAULT_CACHE_TTL_MS) -> Any:
        """
        Return the cached value for key, computing and storing it on miss or expiry.

        Exceptions raised by compute propagate and nothing is stored.
        """
        record = self._valid_record(key)
        if record is not None:
            self.hits += 1
            logger.debug(f"Cache HIT: {key}")
            return record.value

        self.misses += 1
        logger.debug(f"Cache MISS: {key}")

        start = time.perf_counter()
        value = compute()
        duration_ms = (time.perf_counter() - start) * 1000.0

        self._record_timing(key, duration_ms)

        # Last write wins
        record = CacheRecord(
            key=key,
            value=value,
            computed_at_epoch_millis=self._clock(),
            ttl_millis=ttl_millis,
        )
        self._backend.set(key, record, timeout=None)
        self._keys.add(key)
        return value

    def _record_timing(self, key: str, duration_ms: float) -> None:
        self.metrics.record('compute_time', duration_ms, {'key': key})
        logger.debug(f"Computed {key} in {duration_ms:.1f}ms")

        if duration_ms > self.slow_threshold_ms:
            logger.warning(f"SLOW: {key} took {duration_ms:.1f}ms")
            self.metrics.record('performance_warning', duration_ms, {'key': key})
            if self.on_slow is not None:
                self.on_slow(key, duration_ms)

    def get(self, key: str, default: Any = None) -> Any:
        """Valid cached value for key, without computing."""
        record = self._valid_record(key)
        if record is None:
            return default
        return record.value

    def invalidate(self, key: str) -> bool:
        """Drop one record; returns True if it existed."""
        if key not in self._keys:
            return False
        self._keys.discard(key)
        self._backend.delete(key)
        return True

    def clear(self) -> None:
        """Drop every record this cache wrote and reset hit/miss counters."""
        count = len(self._keys)
        self._backend.delete_many(list(self._keys))
        self._keys.clear()
        self.hits = 0
        self.misses = 0
        logger.info(f"Cleared {count} cached insight records")

    def stats(self) -> dict:
        return {
            'hits': self.hits,
            'misses': self.misses,
            'size': len(self._keys),
            'compute_time': self.metrics.get_stats('compute_time'),
            'performance_warnings': self.metrics.get_stats('performance_warning')['count'],
        }

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING


def make_cache_key(prefix, *args, **kwargs):
    """
    Generate a consistent cache key from function arguments.

    Args:
        prefix: Cache key prefix (e.g., 'patterns')
        *args: Positional arguments
        **kwargs: Keyword arguments

    Returns:
        String cache key
    """
    key_parts = [prefix]
    key_parts.extend(str(arg) for arg in args)

    # Keyword args sorted for consistency
    for k, v in sorted(kwargs.items()):
        key_parts.append(f"{k}={v}")

    # Create hash if key is too long
    key_string = ':'.join(key_parts)
    if len(key_string) > 200:
        key_hash = hashlib.md5(key_string.encode()).hexdigest()
        return f"{prefix}:{key_hash}"

    return key_string


def entries_fingerprint(entries: Iterable[Entry]) -> str:
    """
    Short digest of an entry snapshot.

    Two snapshots with identical entries produce the same fingerprint, so a
    cache key built from it changes whenever the underlying data does.
    """
    digest = hashlib.md5()
    for entry in entries:
        digest.update(repr(entry).encode())
    return digest.hexdigest()[:16]
