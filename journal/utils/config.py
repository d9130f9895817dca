"""
Insight engine configuration.

InsightContext bundles every tunable threshold. It is constructed explicitly
and passed to the functions that need it; nothing reads global state during
an analysis.

Overrides come from the JOURNAL_INSIGHTS Django setting:

    JOURNAL_INSIGHTS = {
        'ENERGY_HIGH_THRESHOLD': 7.5,
        'CACHE_TTL_MS': 60000,
    }
"""
import logging
from dataclasses import dataclass, field, fields, replace
from typing import Dict

from django.conf import settings

from journal.domain import ScoringProfile
from journal.utils import constants

logger = logging.getLogger(__name__)


def _default_profiles() -> Dict[str, ScoringProfile]:
    # Imported lazily: the category tables import domain types only
    from journal.behavioral.categories import DEFAULT_PROFILES
    return dict(DEFAULT_PROFILES)


@dataclass(frozen=True)
class InsightContext:
    """Thresholds and limits for one insight engine instance."""
    energy_high_threshold: float = constants.ENERGY_HIGH_THRESHOLD
    stress_high_threshold: float = constants.STRESS_HIGH_THRESHOLD
    min_pattern_entries: int = constants.MIN_PATTERN_ENTRIES
    significance_min_count: int = constants.SIGNIFICANCE_MIN_COUNT
    top_pattern_limit: int = constants.TOP_PATTERN_LIMIT
    correlation_min_entries: int = constants.CORRELATION_MIN_ENTRIES
    optimal_sentiment_threshold: float = constants.OPTIMAL_SENTIMENT_THRESHOLD
    risk_sentiment_threshold: float = constants.RISK_SENTIMENT_THRESHOLD
    correlation_min_days: int = constants.CORRELATION_MIN_DAYS
    cache_ttl_ms: int = constants.DEFAULT_CACHE_TTL_MS
    slow_compute_threshold_ms: float = constants.SLOW_COMPUTE_THRESHOLD_MS
    top_sources_limit: int = constants.TOP_SOURCES_LIMIT
    profiles: Dict[str, ScoringProfile] = field(default_factory=_default_profiles, compare=False)

    def __post_init__(self):
        if self.min_pattern_entries < 1:
            raise ValueError("min_pattern_entries must be >= 1")
        if self.significance_min_count < 1:
            raise ValueError("significance_min_count must be >= 1")
        if self.top_pattern_limit < 1:
            raise ValueError("top_pattern_limit must be >= 1")
        if self.cache_ttl_ms <= 0:
            raise ValueError("cache_ttl_ms must be > 0")

    def high_threshold(self, metric: str) -> float:
        """Floor a per-entry average must reach to count toward a pattern."""
        if metric == constants.FIELD_ENERGY:
            return self.energy_high_threshold
        return self.stress_high_threshold

    def profile(self, metric: str) -> ScoringProfile:
        return self.profiles[metric]

    def with_overrides(self, **overrides) -> 'InsightContext':
        return replace(self, **overrides)

    @classmethod
    def from_settings(cls) -> 'InsightContext':
        """
        Build a context from the JOURNAL_INSIGHTS setting.

        Keys are the upper-case field names. Unknown keys are ignored with a
        warning; missing keys keep their defaults.
        """
        overrides = _get_overrides()
        known = {f.name for f in fields(cls) if f.name != 'profiles'}

        kwargs = {}
        for key, value in overrides.items():
            name = str(key).lower()
            if name not in known:
                logger.warning(f"Ignoring unknown JOURNAL_INSIGHTS key: {key}")
                continue
            kwargs[name] = value

        return cls(**kwargs)


def _get_overrides() -> dict:
    """Get insight overrides from settings, or none when unconfigured."""
    if not settings.configured:
        return {}
    return getattr(settings, 'JOURNAL_INSIGHTS', None) or {}


DEFAULT_CONTEXT = InsightContext()
