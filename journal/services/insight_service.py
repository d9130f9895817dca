"""
Insight Service

Runs one insight analysis over the entry store: a single read, then cached
pattern extraction, correlation and aggregation, then formatting.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from journal import analytics
from journal.behavioral import insights_engine
from journal.behavioral.correlation import CorrelationResult, analyze_correlation
from journal.behavioral.insights_engine import (
    DEFAULT_LOCALE, DataStatus, InsightRecord, LocaleContext, Recommendation,
)
from journal.behavioral.pattern_extractor import PatternResult, Patterns, extract_patterns
from journal.domain import AggregateBucket, Entry
from journal.helpers.cache_helpers import CACHE_TTLS, InsightCache, entries_fingerprint, make_cache_key
from journal.helpers.monitoring import PerformanceMonitor
from journal.repositories.base_repository import DateRangeOrCount, EntryStore
from journal.utils.config import InsightContext
from journal.utils.constants import FIELD_ENERGY, FIELD_STRESS, GRANULARITY_AUTO
from journal.utils.logging_utils import clear_analysis_context, log_function_call, log_with_context, set_analysis_id
from journal.utils.time_utils import DateRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InsightReport:
    """Everything one analysis invocation produced."""
    analysis_id: str
    entries_analyzed: int
    data_status: DataStatus
    energy_patterns: PatternResult
    stress_patterns: PatternResult
    correlation: CorrelationResult
    insights: Tuple[InsightRecord, ...]
    recommendations: Tuple[Recommendation, ...]
    granularity: str
    aggregates: Tuple[AggregateBucket, ...]
    trends: Dict[str, Any] = field(default_factory=dict)


class InsightService:
    """
    Orchestrates insight generation for one entry store.

    Usage:
        service = InsightService(InMemoryEntryStore.from_raw(raw_entries))
        report = service.analyze(DateRange.last_days(30))
        for insight in report.insights:
            print(f"{insight.title}: {insight.description}")
    """

    def __init__(
        self,
        store: EntryStore,
        cache: Optional[InsightCache] = None,
        context: Optional[InsightContext] = None,
        locale: LocaleContext = DEFAULT_LOCALE,
    ):
        self.store = store
        self.context = context if context is not None else InsightContext.from_settings()
        if cache is None:
            cache = InsightCache(slow_threshold_ms=self.context.slow_compute_threshold_ms)
        self.cache = cache
        self.locale = locale

    # -------------------------------------------------------------------------
    # Cached stages
    # -------------------------------------------------------------------------

    def _cached(self, prefix: str, entries: List[Entry], compute, *key_parts, ttl_millis: Optional[float] = None):
        key = make_cache_key(prefix, *key_parts, data=entries_fingerprint(entries))
        ttl = ttl_millis or self.context.cache_ttl_ms
        return self.cache.get_or_compute(key, compute, ttl)

    def patterns(self, entries: List[Entry], field: str) -> PatternResult:
        return self._cached(
            'patterns', entries,
            lambda: extract_patterns(entries, field, context=self.context),
            field,
        )

    def correlation(self, entries: List[Entry]) -> CorrelationResult:
        return self._cached(
            'correlation', entries,
            lambda: analyze_correlation(entries, context=self.context),
        )

    def aggregates(self, entries: List[Entry], granularity: str = GRANULARITY_AUTO) -> Tuple[str, List[AggregateBucket]]:
        """
        Aggregate series plus the granularity actually used.

        Raises:
            InvalidGranularityError: For an unknown granularity
        """
        resolved = analytics.resolve_granularity(granularity, len(entries))
        buckets = self._cached(
            'aggregate', entries,
            lambda: analytics.aggregate(entries, resolved, top_n=self.context.top_sources_limit),
            resolved,
        )
        return resolved, buckets

    def trends(self, entries: List[Entry]) -> Dict[str, Any]:
        return self._cached(
            'trends', entries,
            lambda: {
                'correlation': analytics.compute_energy_stress_correlation(entries),
                'weekly_patterns': analytics.analyze_weekly_patterns(entries),
                'energy_trend': analytics.analyze_trends(entries),
                'summary': analytics.summarize_levels(entries),
            },
            ttl_millis=CACHE_TTLS['trends'],
        )

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    @log_function_call()
    def load(self, date_range_or_count: DateRangeOrCount = None) -> List[Entry]:
        """Single read from the entry store."""
        entries = self.store.list_entries(date_range_or_count)
        return [e for e in entries if isinstance(e, Entry)]

    def chart_series(self, date_range_or_count: DateRangeOrCount = None, granularity: str = GRANULARITY_AUTO) -> Tuple[str, List[AggregateBucket]]:
        return self.aggregates(self.load(date_range_or_count), granularity)

    def weekly_summary(self, start=None, end=None) -> Dict[str, Any]:
        """
        Weekly summary for start..end, or for the last complete Monday..Sunday
        week when neither bound is given.

        Raises:
            InvalidDateRangeError: If start is after end
        """
        if start is None and end is None:
            date_range = DateRange.last_complete_week()
        else:
            date_range = DateRange.between(start, end)

        entries = self.load(date_range)
        return self._cached(
            'weekly_summary', entries,
            lambda: analytics.generate_weekly_summary(entries, date_range.start, date_range.end),
            date_range.start, date_range.end,
            ttl_millis=CACHE_TTLS['weekly_summary'],
        )

    def analyze(self, date_range_or_count: DateRangeOrCount = None, granularity: str = GRANULARITY_AUTO) -> InsightReport:
        """
        Full analysis: patterns for both metrics, correlation, aggregates,
        trends, recommendations and data readiness.
        """
        analysis_id = set_analysis_id()
        try:
            with PerformanceMonitor("insight_analysis", self.context.slow_compute_threshold_ms):
                entries = self.load(date_range_or_count)
                return self._build_report(analysis_id, entries, granularity)
        finally:
            clear_analysis_context()

    def _build_report(self, analysis_id: str, entries: List[Entry], granularity: str) -> InsightReport:
        status = insights_engine.analyze_data_requirements(entries)

        energy = self.patterns(entries, FIELD_ENERGY)
        stress = self.patterns(entries, FIELD_STRESS)
        correlation = self.correlation(entries)
        resolved, buckets = self.aggregates(entries, granularity)

        insights = (
            insights_engine.format_patterns(energy, self.locale)
            + insights_engine.format_patterns(stress, self.locale)
            + insights_engine.format_correlation(correlation, self.locale)
        )
        recommendations = []
        if isinstance(energy, Patterns):
            recommendations += insights_engine.build_recommendations(energy.buckets, FIELD_ENERGY, self.locale)
        if isinstance(stress, Patterns):
            recommendations += insights_engine.build_recommendations(stress.buckets, FIELD_STRESS, self.locale)

        log_with_context(
            'info', 'Insight analysis complete',
            entries=len(entries),
            insights=len(insights),
            granularity=resolved,
            has_enough_data=status.has_enough_data,
        )

        return InsightReport(
            analysis_id=analysis_id,
            entries_analyzed=len(entries),
            data_status=status,
            energy_patterns=energy,
            stress_patterns=stress,
            correlation=correlation,
            insights=tuple(insights),
            recommendations=tuple(recommendations),
            granularity=resolved,
            aggregates=tuple(buckets),
            trends=self.trends(entries),
        )
