"""
Metric helper functions for journal analytics.
Implements null-safe averaging and correlation over energy/stress readings.

All statistical methods use pure numpy - NO heavy dependencies (scipy/statsmodels/sklearn).
Every function returns None instead of NaN when there is nothing to average.
"""
import numpy as np
from typing import Dict, Iterable, List, Optional, Sequence

from journal.domain import Entry


def safe_mean(values: Iterable[Optional[float]]) -> Optional[float]:
    """
    Mean of the non-None values, or None when none remain.
    """
    present = [float(v) for v in values if v is not None]
    if not present:
        return None
    return float(np.mean(present))


def pooled_readings(entries: Iterable[Entry], metric: str) -> List[float]:
    """
    All populated period readings of the given metric across entries.

    Readings are pooled per period, so an entry with three readings weighs
    three times as much as an entry with one.
    """
    readings: List[float] = []
    for entry in entries:
        readings.extend(entry.levels(metric).values())
    return readings


def pooled_mean(entries: Iterable[Entry], metric: str) -> Optional[float]:
    """Mean of all pooled period readings (None if there are none)."""
    return safe_mean(pooled_readings(entries, metric))


def entry_average(entry: Entry, metric: str) -> Optional[float]:
    """Average of an entry's populated periods; absent periods are excluded."""
    return entry.levels(metric).average()


def compute_pearson_correlation(x: Sequence[float], y: Sequence[float]) -> Dict:
    """
    Compute Pearson correlation without scipy (pure numpy)

    Returns:
        {
            'correlation': float | None (None when either series has no variance),
            'sample_size': int,
            'significant': bool
        }
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)

    if len(x) != len(y) or len(x) < 3:
        return {'correlation': None, 'sample_size': int(min(len(x), len(y))), 'significant': False}

    # Remove NaN values
    mask = ~(np.isnan(x) | np.isnan(y))
    x = x[mask]
    y = y[mask]
    n = len(x)

    if n < 3:
        return {'correlation': None, 'sample_size': n, 'significant': False}

    x_mean = np.mean(x)
    y_mean = np.mean(y)

    numerator = np.sum((x - x_mean) * (y - y_mean))
    denominator = np.sqrt(np.sum((x - x_mean) ** 2) * np.sum((y - y_mean) ** 2))

    if denominator == 0:
        return {'correlation': None, 'sample_size': n, 'significant': False}

    r = float(numerator / denominator)

    # Rough t-test: |t| > 2 is roughly p < 0.05
    t_stat = r * np.sqrt(n - 2) / np.sqrt(1 - r ** 2) if abs(r) < 1 else np.inf

    return {
        'correlation': r,
        'sample_size': n,
        'significant': bool(abs(t_stat) > 2.0),
    }


def correlation_strength(coefficient: Optional[float]) -> str:
    """Label a coefficient as 'strong' (>0.7), 'moderate' (>0.4) or 'weak'."""
    if coefficient is None:
        return 'none'
    strength = abs(coefficient)
    if strength > 0.7:
        return 'strong'
    if strength > 0.4:
        return 'moderate'
    return 'weak'


def correlation_confidence(sample_size: int, coefficient: Optional[float], expected_days: Optional[int] = None) -> float:
    """
    Confidence in a correlation finding, based on sample size.

    Base 0.6, 0.8 from 7 samples, 0.9 from 14; reduced by 20% when fewer
    than 70% of the expected days are present; plus 0.2 * |r|, capped at 1.
    """
    base = 0.6
    if sample_size >= 7:
        base = 0.8
    if sample_size >= 14:
        base = 0.9

    if expected_days and sample_size / expected_days < 0.7:
        base *= 0.8

    strength = abs(coefficient) if coefficient is not None else 0.0
    return min(base + strength * 0.2, 1.0)
