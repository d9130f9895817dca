"""
Behavioral Insights Formatter

Turns extracted patterns, aggregate buckets and correlation results into
user-facing records (title, description, confidence) and pairs patterns with
category-specific strategies.

No AI/ML - templating over the numbers computed upstream.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from journal.behavioral.correlation import CorrelationResult
from journal.behavioral.pattern_extractor import PatternResult, Patterns
from journal.domain import AggregateBucket, Entry, PatternBucket, PatternExample, Sentiment
from journal.utils.constants import (
    FIELD_ENERGY, FIELD_STRESS, FIELD_CHOICES, GRANULARITY_DAILY, MAX_CONFIDENCE,
    MIN_TOTAL_ENTRIES, MIN_ENERGY_SOURCE_ENTRIES, MIN_STRESS_SOURCE_ENTRIES, MIN_ADVANCED_ENTRIES,
    STRESS_HIGH_THRESHOLD, format_category_name,
)
from journal.exceptions import InvalidFieldError
from journal.utils.time_utils import format_bucket_label


class InsightType(Enum):
    """Types of rendered insights"""
    ENERGY_PATTERN = "energy_pattern"
    STRESS_PATTERN = "stress_pattern"
    AGGREGATE = "aggregate"
    OPTIMAL_DAYS = "optimal_days"
    RISK_DAYS = "risk_days"
    POSITIVE_LANGUAGE = "positive_language"
    NEGATIVE_LANGUAGE = "negative_language"


class Priority(Enum):
    """Priority levels for recommendations"""
    HIGH = "high"
    MEDIUM = "medium"


@dataclass(frozen=True)
class LocaleContext:
    """Display preferences for rendered text."""
    date_format: str = '%b %d, %Y'
    decimal_places: int = 1

    def number(self, value: Optional[float]) -> str:
        if value is None:
            return "n/a"
        return f"{value:.{self.decimal_places}f}"

    def date(self, value) -> str:
        return value.strftime(self.date_format)


DEFAULT_LOCALE = LocaleContext()


@dataclass(frozen=True)
class InsightRecord:
    """
    A rendered insight.

    Attributes:
        title: Short headline
        description: Sentence-level explanation with the supporting numbers
        confidence: 0-1, capped at 0.95
        insight_type: What produced the record
        metric: 'energy' / 'stress' where applicable
        category: Category name for pattern insights
        examples: Supporting (date, text, value) examples, most relevant first
    """
    title: str
    description: str
    confidence: float
    insight_type: InsightType
    metric: Optional[str] = None
    category: Optional[str] = None
    examples: Tuple[PatternExample, ...] = ()

    @property
    def kind(self) -> str:
        return self.insight_type.value


@dataclass(frozen=True)
class Recommendation:
    title: str
    description: str
    strategies: Tuple[str, ...]
    priority: Priority
    category: str
    has_trigger_pattern: bool = False


# =============================================================================
# CONFIDENCE
# =============================================================================

def insight_confidence(count: int, categorizer_confidence: float = 0.0) -> float:
    """min(0.95, 0.6 + 0.1 * count + 0.2 * categorizer_confidence)"""
    return min(MAX_CONFIDENCE, 0.6 + 0.1 * count + 0.2 * categorizer_confidence)


# =============================================================================
# FORMATTING
# =============================================================================

def format_insight(
    bucket: Union[PatternBucket, AggregateBucket],
    locale: LocaleContext = DEFAULT_LOCALE,
    granularity: str = GRANULARITY_DAILY,
) -> InsightRecord:
    """
    Render a pattern or aggregate bucket.

    Args:
        bucket: PatternBucket from extract_patterns or AggregateBucket from aggregate
        locale: Number and date display settings
        granularity: Bucket width, used to label aggregate buckets

    Raises:
        TypeError: For any other object
    """
    if isinstance(bucket, PatternBucket):
        if bucket.metric == FIELD_ENERGY:
            return _format_energy_pattern(bucket, locale)
        return _format_stress_pattern(bucket, locale)
    if isinstance(bucket, AggregateBucket):
        return _format_aggregate(bucket, locale, granularity)
    raise TypeError(f"Cannot format {type(bucket).__name__} as an insight")


def _format_energy_pattern(bucket: PatternBucket, locale: LocaleContext) -> InsightRecord:
    name = format_category_name(bucket.category)
    tone = bucket.sentiment_or_intensity.value
    if bucket.sentiment_or_intensity is Sentiment.POSITIVE:
        title = f"{name} activities significantly boost your energy"
    elif bucket.sentiment_or_intensity is Sentiment.NEGATIVE:
        title = f"Negative {name} experiences still show up on high-energy days"
    else:
        title = f"{name} activities impact your energy"

    description = (
        f"Your highest energy levels (avg: {locale.number(bucket.average_value)}) correlate with "
        f"{tone} {bucket.category.replace('_', ' ')} activities. "
        f"Pattern detected {bucket.count} times{_last_seen(bucket, locale)}."
    )
    return InsightRecord(
        title=title,
        description=description,
        confidence=insight_confidence(bucket.count, bucket.average_confidence),
        insight_type=InsightType.ENERGY_PATTERN,
        metric=FIELD_ENERGY,
        category=bucket.category,
        examples=tuple(bucket.examples[:2]),
    )


def _format_stress_pattern(bucket: PatternBucket, locale: LocaleContext) -> InsightRecord:
    name = format_category_name(bucket.category)
    triggers = " with recurring trigger patterns" if bucket.trigger_ratio > 0.5 else ""
    description = (
        f"This category causes your highest stress levels (avg: {locale.number(bucket.average_value)}) "
        f"at {bucket.sentiment_or_intensity.value} intensity. "
        f"Pattern detected {bucket.count} times{triggers}{_last_seen(bucket, locale)}."
    )
    return InsightRecord(
        title=f"{name} issues are your primary stress trigger",
        description=description,
        confidence=insight_confidence(bucket.count, bucket.average_confidence),
        insight_type=InsightType.STRESS_PATTERN,
        metric=FIELD_STRESS,
        category=bucket.category,
        examples=tuple(bucket.examples[:2]),
    )


def _last_seen(bucket: PatternBucket, locale: LocaleContext) -> str:
    if not bucket.examples:
        return ""
    latest = max(example.date for example in bucket.examples)
    return f", most recently on {locale.date(latest)}"


def _format_aggregate(bucket: AggregateBucket, locale: LocaleContext, granularity: str) -> InsightRecord:
    label = format_bucket_label(bucket.bucket_key, granularity, locale.date_format)
    plural = "entry" if bucket.entry_count == 1 else "entries"
    parts = [
        f"Energy averaged {locale.number(bucket.average_energy)} and stress "
        f"{locale.number(bucket.average_stress)} across {bucket.entry_count} {plural}."
    ]
    if bucket.top_energy_sources:
        parts.append(f"Top energy sources: {', '.join(bucket.top_energy_sources)}.")
    if bucket.top_stress_sources:
        parts.append(f"Top stress sources: {', '.join(bucket.top_stress_sources)}.")

    return InsightRecord(
        title=label,
        description=" ".join(parts),
        confidence=insight_confidence(bucket.entry_count, 0.0),
        insight_type=InsightType.AGGREGATE,
    )


def format_patterns(result: PatternResult, locale: LocaleContext = DEFAULT_LOCALE) -> List[InsightRecord]:
    """One record per ranked bucket; empty for InsufficientData / NoPatternsFound."""
    if not isinstance(result, Patterns):
        return []
    return [format_insight(bucket, locale) for bucket in result.buckets]


def format_correlation(result: CorrelationResult, locale: LocaleContext = DEFAULT_LOCALE) -> List[InsightRecord]:
    """Render optimal/risk day findings and language ratios."""
    if not result.sufficient_data:
        return []

    records = []
    n = result.qualifying_entries

    if result.optimal_days:
        count = len(result.optimal_days)
        dates = ", ".join(locale.date(d.date) for d in result.optimal_days[:3])
        records.append(InsightRecord(
            title="Your optimal days share a pattern",
            description=(
                f"On {count} days energy was above your average of {locale.number(result.mean_energy)} "
                f"and stress below your average of {locale.number(result.mean_stress)}, "
                f"with upbeat energy descriptions (e.g. {dates})."
            ),
            confidence=insight_confidence(count),
            insight_type=InsightType.OPTIMAL_DAYS,
        ))

    if result.risk_days:
        count = len(result.risk_days)
        dates = ", ".join(locale.date(d.date) for d in result.risk_days[:3])
        records.append(InsightRecord(
            title="Watch for high-stress, low-energy days",
            description=(
                f"On {count} days stress was above your average of {locale.number(result.mean_stress)} "
                f"while energy fell below {locale.number(result.mean_energy)}, "
                f"and stress descriptions were negative (e.g. {dates})."
            ),
            confidence=insight_confidence(count),
            insight_type=InsightType.RISK_DAYS,
        ))

    if result.positive_energy_ratio > 0.6:
        records.append(InsightRecord(
            title="Positive language correlates with high energy",
            description=(
                f"{result.positive_energy_ratio * 100:.0f}% of your analyzed days pair positive energy "
                f"descriptions with high energy."
            ),
            confidence=insight_confidence(n),
            insight_type=InsightType.POSITIVE_LANGUAGE,
        ))

    if result.negative_stress_ratio > 0.5:
        records.append(InsightRecord(
            title="Negative language indicates stress escalation",
            description=(
                f"{result.negative_stress_ratio * 100:.0f}% of your analyzed days pair negative stress "
                f"descriptions with high stress."
            ),
            confidence=insight_confidence(n),
            insight_type=InsightType.NEGATIVE_LANGUAGE,
        ))

    return records


# =============================================================================
# RECOMMENDATIONS
# =============================================================================

ENERGY_STRATEGIES = {
    'physical': (
        'Physical activities are your primary energy source.',
        (
            'Schedule regular exercise during your peak energy windows',
            'Maintain consistent sleep schedule for sustained energy',
            'Plan nutritious meals and stay hydrated throughout the day',
            'Take movement breaks every 60-90 minutes',
        ),
    ),
    'work': (
        'Work achievements significantly boost your energy.',
        (
            'Break large projects into smaller, achievable milestones',
            'Celebrate completed tasks to maintain momentum',
            'Focus on collaboration and teamwork when possible',
            'Schedule important work during your high-energy periods',
        ),
    ),
    'social': (
        'Social connections are energizing for you.',
        (
            'Schedule regular social activities throughout your week',
            'Engage in meaningful conversations and relationship building',
            'Participate in team activities and collaborative projects',
            'Make time for family and close friends regularly',
        ),
    ),
    'mental': (
        'Mental stimulation and learning energize you.',
        (
            'Dedicate time to creative pursuits and learning',
            'Practice mindfulness and meditation regularly',
            'Read books and consume inspiring content',
            'Engage in intellectually stimulating conversations',
        ),
    ),
    'environment': (
        'Your physical environment significantly affects your energy.',
        (
            'Organize and clean your workspace regularly',
            'Spend time in nature or natural settings',
            'Ensure adequate lighting and comfortable temperature',
            'Create quiet, peaceful spaces for focused work',
        ),
    ),
}

DEFAULT_ENERGY_STRATEGY = (
    'These activities boost your energy levels.',
    (
        'Continue engaging in activities that make you feel energized',
        'Notice patterns in what works best for you',
    ),
)

STRESS_STRATEGIES = {
    'work_pressure': (
        'Work pressure is your main stress source. Focus on proactive planning and boundary setting.',
        (
            'Break large projects into smaller, manageable tasks',
            'Set realistic deadlines with buffer time for unexpected issues',
            'Practice saying no to non-essential requests',
            'Schedule regular breaks during intensive work periods',
        ),
    ),
    'technical': (
        'Technical issues cause significant stress. Prepare backup plans and support resources.',
        (
            'Keep a list of technical support contacts and resources',
            'Learn basic troubleshooting skills for common issues',
            'Always have backup plans for important technical tasks',
            'Allow extra time for technical work and testing',
        ),
    ),
    'interruptions': (
        'Interruptions disrupt your flow. Create better boundaries and focus blocks.',
        (
            'Use "Do Not Disturb" modes during focus time',
            'Batch process emails and messages at set times',
            'Communicate your focus hours to colleagues and family',
            'Find or create quiet workspaces when possible',
        ),
    ),
    'personal': (
        'Personal matters affect your well-being. Address them proactively.',
        (
            'Schedule dedicated time for personal tasks and relationships',
            'Create clear boundaries between work and personal concerns',
            'Build a support network and ask for help when needed',
            'Practice regular self-care and stress management techniques',
        ),
    ),
    'time': (
        'Time pressure creates stress. Improve your time management and planning.',
        (
            'Plan your day the night before with realistic time estimates',
            'Leave buffer time between appointments and commitments',
            'Identify and eliminate time-wasting activities',
            'Use time-blocking techniques for important tasks',
        ),
    ),
}

DEFAULT_STRESS_STRATEGY = (
    'Manage this stress source with mindful planning.',
    (
        'Identify specific triggers and patterns',
        'Develop personalized coping strategies',
        'Seek support when needed',
    ),
)

TRIGGER_AWARENESS_TIP = 'Pay attention to early warning signs and trigger patterns'

HIGH_PRIORITY_AVERAGE = 8.0
ENERGY_RECOMMENDATION_LIMIT = 2
STRESS_RECOMMENDATION_LIMIT = 3


def build_recommendations(
    buckets: Iterable[PatternBucket],
    field: str,
    locale: LocaleContext = DEFAULT_LOCALE,
) -> List[Recommendation]:
    """
    Strategy lists for the strongest patterns.

    Energy: up to 2 positive buckets, highest average first.
    Stress: up to 3 buckets at or above the stress floor, highest average
    first; a trigger-awareness tip leads when over half the days had triggers.
    Priority is high when the bucket average is 8 or more.
    """
    if field not in FIELD_CHOICES:
        raise InvalidFieldError(field, FIELD_CHOICES)

    buckets = [b for b in buckets if b.count and b.average_value is not None]

    if field == FIELD_ENERGY:
        chosen = sorted(
            (b for b in buckets if b.sentiment_or_intensity is Sentiment.POSITIVE),
            key=lambda b: b.average_value, reverse=True,
        )[:ENERGY_RECOMMENDATION_LIMIT]
        return [_energy_recommendation(b, locale) for b in chosen]

    chosen = sorted(
        (b for b in buckets if b.average_value >= STRESS_HIGH_THRESHOLD),
        key=lambda b: b.average_value, reverse=True,
    )[:STRESS_RECOMMENDATION_LIMIT]
    return [_stress_recommendation(b) for b in chosen]


def _priority(average: float) -> Priority:
    return Priority.HIGH if average >= HIGH_PRIORITY_AVERAGE else Priority.MEDIUM


def _energy_recommendation(bucket: PatternBucket, locale: LocaleContext) -> Recommendation:
    summary, strategies = ENERGY_STRATEGIES.get(bucket.category, DEFAULT_ENERGY_STRATEGY)
    return Recommendation(
        title=f"Maximize {format_category_name(bucket.category)} energy gains",
        description=(
            f"These activities consistently boost your energy to "
            f"{locale.number(bucket.average_value)}/10. {summary}"
        ),
        strategies=strategies,
        priority=_priority(bucket.average_value),
        category=bucket.category,
    )


def _stress_recommendation(bucket: PatternBucket) -> Recommendation:
    summary, strategies = STRESS_STRATEGIES.get(bucket.category, DEFAULT_STRESS_STRATEGY)
    has_triggers = bucket.trigger_ratio > 0.5
    if has_triggers:
        strategies = (TRIGGER_AWARENESS_TIP,) + strategies
    return Recommendation(
        title=f"Prevent {format_category_name(bucket.category)} stress escalation",
        description=summary,
        strategies=strategies,
        priority=_priority(bucket.average_value),
        category=bucket.category,
        has_trigger_pattern=has_triggers,
    )


# =============================================================================
# DATA READINESS
# =============================================================================

@dataclass(frozen=True)
class Requirement:
    name: str
    current: int
    needed: int

    @property
    def met(self) -> bool:
        return self.current >= self.needed

    @property
    def remaining(self) -> int:
        return max(0, self.needed - self.current)

    @property
    def percentage(self) -> int:
        if self.needed <= 0:
            return 100
        return min(100, round(self.current / self.needed * 100))


@dataclass(frozen=True)
class DataStatus:
    """
    Progress toward the minimum data each analysis needs.

    blocking is the first unmet basic requirement (None when basic analysis
    can run); advanced tracks complete entries for correlation analysis.
    """
    has_enough_data: bool
    requirements: Tuple[Requirement, ...]
    advanced: Requirement
    message: str
    blocking: Optional[Requirement] = None

    @property
    def can_do_advanced_analysis(self) -> bool:
        return self.has_enough_data and self.advanced.met


def analyze_data_requirements(entries: Iterable) -> DataStatus:
    """
    Report how far the entry history is from each analysis minimum.

    Basic analysis needs 5 entries, 3 with energy descriptions and 3 with
    stress descriptions; advanced analysis needs 7 entries with both
    descriptions and both kinds of rating.
    """
    valid = [e for e in entries or [] if isinstance(e, Entry)]
    with_energy = sum(1 for e in valid if e.has_source_text(FIELD_ENERGY))
    with_stress = sum(1 for e in valid if e.has_source_text(FIELD_STRESS))
    complete = sum(
        1 for e in valid
        if e.has_source_text(FIELD_ENERGY) and e.has_source_text(FIELD_STRESS)
        and e.energy_levels.has_data and e.stress_levels.has_data
    )

    requirements = (
        Requirement('entries', len(valid), MIN_TOTAL_ENTRIES),
        Requirement('energy_descriptions', with_energy, MIN_ENERGY_SOURCE_ENTRIES),
        Requirement('stress_descriptions', with_stress, MIN_STRESS_SOURCE_ENTRIES),
    )
    advanced = Requirement('complete_entries', complete, MIN_ADVANCED_ENTRIES)
    blocking = next((r for r in requirements if not r.met), None)

    return DataStatus(
        has_enough_data=blocking is None,
        requirements=requirements,
        advanced=advanced,
        message=_status_message(blocking, advanced),
        blocking=blocking,
    )


_REQUIREMENT_NOUNS = {
    'entries': ('entry', 'entries'),
    'energy_descriptions': ('energy description', 'energy descriptions'),
    'stress_descriptions': ('stress description', 'stress descriptions'),
}


def _status_message(blocking: Optional[Requirement], advanced: Requirement) -> str:
    if blocking is not None:
        if blocking.name == 'entries' and blocking.current == 0:
            return "Add your first entry to get started."
        singular, plural = _REQUIREMENT_NOUNS[blocking.name]
        noun = singular if blocking.remaining == 1 else plural
        return f"Need {blocking.remaining} more {noun} for insights."
    if not advanced.met:
        return (
            f"Insights are ready. Add {advanced.remaining} more complete entries "
            f"for advanced correlation analysis."
        )
    return "Insights and advanced correlation analysis are ready."
