"""
Correlation Analyzer

Looks for days where energy and stress move together in a recognisable way,
using both the numeric ratings and the tone of what was written:

- optimal days: below-average stress, above-average energy, upbeat energy text
- risk days: above-average stress, below-average energy, negative stress text

Only entries with both ratings and both descriptions take part.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Tuple

from journal.domain import Entry, Sentiment
from journal.helpers import metric_helpers, nlp_helpers
from journal.utils.config import DEFAULT_CONTEXT, InsightContext
from journal.utils.constants import FIELD_ENERGY, FIELD_STRESS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorrelationDay:
    """One qualifying entry with its averages and text tone."""
    date: date
    energy: float
    stress: float
    energy_text_sentiment: float
    stress_text_sentiment: float
    entry: Optional[Entry] = None


@dataclass(frozen=True)
class CorrelationResult:
    """
    Outcome of one correlation pass.

    Attributes:
        optimal_days: Days matching the optimal state (empty if fewer than 2)
        risk_days: Days matching the risk state (empty if fewer than 2)
        mean_energy: Mean of per-entry energy averages over qualifying entries
        mean_stress: Mean of per-entry stress averages over qualifying entries
        qualifying_entries: Entries with both ratings and both descriptions
        sufficient_data: False when qualifying_entries is below the minimum
        positive_energy_ratio: Share of qualifying days with upbeat energy
            text and energy at or above the high threshold
        negative_stress_ratio: Share of qualifying days with negative stress
            text and stress at or above the high threshold
    """
    optimal_days: Tuple[CorrelationDay, ...] = ()
    risk_days: Tuple[CorrelationDay, ...] = ()
    mean_energy: Optional[float] = None
    mean_stress: Optional[float] = None
    qualifying_entries: int = 0
    sufficient_data: bool = False
    positive_energy_ratio: float = 0.0
    negative_stress_ratio: float = 0.0


def is_qualifying(entry) -> bool:
    return (
        isinstance(entry, Entry)
        and entry.energy_levels.has_data
        and entry.stress_levels.has_data
        and entry.has_source_text(FIELD_ENERGY)
        and entry.has_source_text(FIELD_STRESS)
    )


def _to_day(entry: Entry) -> CorrelationDay:
    return CorrelationDay(
        date=entry.date,
        energy=entry.energy_levels.average(),
        stress=entry.stress_levels.average(),
        energy_text_sentiment=nlp_helpers.compute_text_sentiment(entry.energy_source_text),
        stress_text_sentiment=nlp_helpers.compute_text_sentiment(entry.stress_source_text),
        entry=entry,
    )


def analyze_correlation(
    entries: Iterable,
    min_entries: Optional[int] = None,
    context: Optional[InsightContext] = None,
) -> CorrelationResult:
    """
    Detect optimal and risk days across entries.

    Args:
        entries: Journal entries; non-Entry items are skipped
        min_entries: Qualifying entries required (default from context, 5)
        context: Thresholds (defaults to DEFAULT_CONTEXT)
    """
    if context is None:
        context = DEFAULT_CONTEXT
    if min_entries is None:
        min_entries = context.correlation_min_entries

    days = [_to_day(e) for e in entries if is_qualifying(e)]
    if not days or len(days) < min_entries:
        logger.debug(f"Correlation skipped: {len(days)} of {min_entries} qualifying entries")
        return CorrelationResult(qualifying_entries=len(days), sufficient_data=False)

    mean_energy = metric_helpers.safe_mean(d.energy for d in days)
    mean_stress = metric_helpers.safe_mean(d.stress for d in days)

    optimal = [
        d for d in days
        if d.stress < mean_stress
        and d.energy > mean_energy
        and d.energy_text_sentiment > context.optimal_sentiment_threshold
    ]
    risk = [
        d for d in days
        if d.stress > mean_stress
        and d.energy < mean_energy
        and d.stress_text_sentiment < context.risk_sentiment_threshold
    ]

    positive_energy = sum(
        1 for d in days
        if nlp_helpers.classify_sentiment(d.energy_text_sentiment) is Sentiment.POSITIVE
        and d.energy >= context.energy_high_threshold
    )
    negative_stress = sum(
        1 for d in days
        if nlp_helpers.classify_sentiment(d.stress_text_sentiment) is Sentiment.NEGATIVE
        and d.stress >= context.stress_high_threshold
    )

    result = CorrelationResult(
        optimal_days=_reportable(optimal, context.correlation_min_days),
        risk_days=_reportable(risk, context.correlation_min_days),
        mean_energy=mean_energy,
        mean_stress=mean_stress,
        qualifying_entries=len(days),
        sufficient_data=True,
        positive_energy_ratio=positive_energy / len(days),
        negative_stress_ratio=negative_stress / len(days),
    )
    logger.info(
        f"Correlation: {len(result.optimal_days)} optimal, {len(result.risk_days)} risk "
        f"days over {len(days)} entries"
    )
    return result


def _reportable(days: List[CorrelationDay], min_days: int) -> Tuple[CorrelationDay, ...]:
    """A state is only reported once it has occurred on min_days days."""
    return tuple(days) if len(days) >= min_days else ()
