"""
Pattern Extractor

Groups high-scoring days by what the user wrote about them. Each qualifying
entry's source text is categorized, and entries whose average rating crosses
the metric's floor are bucketed by (category, sentiment/intensity). Buckets
seen fewer than twice are discarded; the rest are ranked by composite score.

Shortage of data is reported through the result type, never raised.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union

from journal.domain import (
    CategorizedObservation, CategoryDefinition, Entry, PatternBucket,
)
from journal.exceptions import InvalidFieldError
from journal.helpers import nlp_helpers
from journal.utils.config import DEFAULT_CONTEXT, InsightContext
from journal.utils.constants import (
    FIELD_CHOICES, FIELD_ENERGY,
    COMPOSITE_VALUE_WEIGHT, COMPOSITE_CONFIDENCE_WEIGHT, COMPOSITE_COUNT_WEIGHT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InsufficientData:
    """Fewer qualifying entries than the extractor needs."""
    required: int
    available: int

    @property
    def progress(self) -> float:
        return min(1.0, self.available / self.required) if self.required else 1.0


@dataclass(frozen=True)
class NoPatternsFound:
    """Enough data, but no bucket reached significance."""
    entries_analyzed: int


@dataclass(frozen=True)
class Patterns:
    """Top-ranked significant buckets, best first."""
    buckets: Tuple[PatternBucket, ...]
    entries_analyzed: int

    def __iter__(self):
        return iter(self.buckets)

    def __len__(self):
        return len(self.buckets)


PatternResult = Union[InsufficientData, NoPatternsFound, Patterns]


def observe(entry: Entry, field: str, categories: Sequence[CategoryDefinition], context: InsightContext) -> Optional[CategorizedObservation]:
    """
    Categorize one entry's source text for field.

    Returns None when the entry has no text or no numeric readings.
    """
    if not entry.has_source_text(field):
        return None
    average = entry.levels(field).average()
    if average is None:
        return None

    text = entry.source_text(field)
    match = nlp_helpers.categorize(text, categories, context.profile(field))
    return CategorizedObservation(
        source_text=text,
        date=entry.date,
        category=match.category,
        sentiment_or_intensity=match.sentiment_or_intensity,
        confidence=match.confidence,
        numeric_value=average,
        text_sentiment=nlp_helpers.compute_text_sentiment(text),
        has_trigger=match.has_trigger,
    )


def composite_score(bucket: PatternBucket) -> float:
    """
    Ranking score for a bucket.

    Energy rewards categorizer confidence; stress rewards negative language
    (1 - average text sentiment).
    """
    if bucket.metric == FIELD_ENERGY:
        second_term = bucket.average_confidence
    else:
        second_term = 1.0 - bucket.average_text_sentiment
    return (
        COMPOSITE_VALUE_WEIGHT * bucket.average_value
        + COMPOSITE_CONFIDENCE_WEIGHT * second_term
        + COMPOSITE_COUNT_WEIGHT * bucket.count
    )


def extract_patterns(
    entries: Iterable,
    field: str,
    categories: Optional[Sequence[CategoryDefinition]] = None,
    context: Optional[InsightContext] = None,
) -> PatternResult:
    """
    Find recurring (category, tone) groups among high-rated days.

    Args:
        entries: Journal entries; anything that is not an Entry is skipped
        field: 'energy' or 'stress'
        categories: Category table (defaults to the field's profile table)
        context: Thresholds (defaults to DEFAULT_CONTEXT)

    Returns:
        InsufficientData, NoPatternsFound or Patterns
    """
    if field not in FIELD_CHOICES:
        raise InvalidFieldError(field, FIELD_CHOICES)

    if context is None:
        context = DEFAULT_CONTEXT
    if categories is None:
        categories = context.profile(field).categories

    qualifying = [
        e for e in entries
        if isinstance(e, Entry) and e.has_source_text(field)
    ]
    if len(qualifying) < context.min_pattern_entries:
        logger.debug(f"{field} patterns: {len(qualifying)} of {context.min_pattern_entries} entries with text")
        return InsufficientData(required=context.min_pattern_entries, available=len(qualifying))

    floor = context.high_threshold(field)
    buckets: Dict[Tuple[str, str], PatternBucket] = {}

    for entry in qualifying:
        observation = observe(entry, field, categories, context)
        if observation is None or observation.numeric_value < floor:
            continue

        key = (observation.category, observation.sentiment_or_intensity.value)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = PatternBucket(
                metric=field,
                category=observation.category,
                sentiment_or_intensity=observation.sentiment_or_intensity,
            )
            buckets[key] = bucket
        bucket.add(observation)

    significant = [b for b in buckets.values() if b.count >= context.significance_min_count]
    for bucket in significant:
        bucket.composite_score = composite_score(bucket)

    if not significant:
        logger.debug(f"{field} patterns: none significant across {len(qualifying)} entries")
        return NoPatternsFound(entries_analyzed=len(qualifying))

    # sorted() is stable: equal scores keep first-seen order
    ranked = sorted(significant, key=lambda b: b.composite_score, reverse=True)
    top = tuple(ranked[:context.top_pattern_limit])

    logger.info(f"{field} patterns: {len(top)} of {len(significant)} significant buckets returned")
    return Patterns(buckets=top, entries_analyzed=len(qualifying))
