"""
Performance Monitoring Utilities

Provides decorators and helpers for tracking insight computation time,
identifying slow operations, and recording metrics.
"""
import time
import logging
import statistics
import threading
from functools import wraps
from typing import Callable, Any, Optional

logger = logging.getLogger(__name__)


def now_millis() -> float:
    """Current wall-clock time in epoch milliseconds."""
    return time.time() * 1000.0


def track_performance(threshold_ms: float = 200.0, metrics: Optional['MetricsCollector'] = None):
    """
    Decorator to track function execution time.

    Args:
        threshold_ms: Log warning if execution exceeds this (default: 200ms)
        metrics: Optional collector that receives a 'compute_time' record per call

    Usage:
        @track_performance(threshold_ms=50)
        def slow_function():
            # ... expensive operation
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            func_name = f"{func.__module__}.{func.__name__}"
            start = time.perf_counter()

            result = func(*args, **kwargs)
            duration_ms = (time.perf_counter() - start) * 1000.0

            if metrics is not None:
                metrics.record('compute_time', duration_ms, {'function': func_name})

            if duration_ms > threshold_ms:
                logger.warning(f"SLOW: {func_name} took {duration_ms:.1f}ms")
            else:
                logger.debug(f"{func_name} took {duration_ms:.1f}ms")

            return result
        return wrapper
    return decorator


class PerformanceMonitor:
    """
    Context manager for tracking performance of code blocks.

    Usage:
        with PerformanceMonitor("aggregate_weekly") as monitor:
            # ... expensive operation
        monitor.duration_ms
    """

    def __init__(self, operation_name: str, threshold_ms: Optional[float] = None):
        self.operation_name = operation_name
        self.threshold_ms = threshold_ms
        self.start_time = None
        self.duration_ms = None

    @property
    def is_slow(self) -> bool:
        return (
            self.threshold_ms is not None
            and self.duration_ms is not None
            and self.duration_ms > self.threshold_ms
        )

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000.0

        if exc_type is not None:
            logger.debug(f"PERF: {self.operation_name} failed after {self.duration_ms:.1f}ms")
        elif self.is_slow:
            logger.warning(f"SLOW: {self.operation_name} took {self.duration_ms:.1f}ms")
        else:
            logger.debug(f"PERF: {self.operation_name} - {self.duration_ms:.1f}ms")
        # Never suppress exceptions
        return False


class MetricsCollector:
    """
    Thread-safe in-memory metrics collector.

    One instance per owner (usually an InsightCache); nothing is shared at
    module level.
    """

    def __init__(self, max_size: int = 1000):
        self._metrics = []
        self._max_size = max_size
        self._lock = threading.Lock()

    def record(self, metric_type: str, value: float, metadata: dict = None):
        """Record a metric (thread-safe)"""
        entry = {
            'type': metric_type,
            'value': value,
            'timestamp': time.time(),
            'metadata': metadata or {}
        }

        with self._lock:
            self._metrics.append(entry)

            # Keep only recent metrics
            if len(self._metrics) > self._max_size:
                self._metrics = self._metrics[-self._max_size:]

    def records(self, metric_type: str = None) -> list:
        """Copies of the recorded entries, optionally filtered by type."""
        with self._lock:
            return [dict(m) for m in self._metrics if metric_type is None or m['type'] == metric_type]

    def get_stats(self, metric_type: str = None) -> dict:
        """Get statistics for a metric type (thread-safe)"""
        values = [m['value'] for m in self.records(metric_type)]

        if not values:
            return {'count': 0}

        return {
            'count': len(values),
            'avg': statistics.mean(values),
            'median': statistics.median(values),
            'min': min(values),
            'max': max(values),
        }

    def clear(self):
        """Clear all metrics (thread-safe)"""
        with self._lock:
            self._metrics = []

    def __len__(self):
        with self._lock:
            return len(self._metrics)
