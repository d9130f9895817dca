"""
Domain data structures for the journal insight engine.

- Entry / PeriodLevels: one calendar day's ratings and source descriptions
- CategoryDefinition: static keyword table row used by the categorizer
- CategorizedObservation: derived per analysis call, never persisted
- PatternBucket / PatternExample: aggregated during one extraction pass
- AggregateBucket: one point of a charted time series
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple, Union

from journal.utils.constants import (
    LEVEL_MIN, LEVEL_MAX, PERIOD_CHOICES, SIGNIFICANCE_MIN_COUNT,
    BOOST_WORD_WEIGHT, DRAIN_WORD_WEIGHT, INTENSITY_WORD_WEIGHT, TRIGGER_BONUS,
    CONFIDENCE_NORMALIZER,
)


class Sentiment(Enum):
    """Tone of an energy source description"""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Intensity(Enum):
    """Strength of language in a stress source description"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


SentimentOrIntensity = Union[Sentiment, Intensity]


@dataclass(frozen=True)
class PeriodLevels:
    """Ratings for the three day periods; None means not logged."""
    morning: Optional[float] = None
    afternoon: Optional[float] = None
    evening: Optional[float] = None

    def __post_init__(self):
        for period in PERIOD_CHOICES:
            value = getattr(self, period)
            if value is not None and not (LEVEL_MIN <= value <= LEVEL_MAX):
                raise ValueError(
                    f"{period} level must be between {LEVEL_MIN} and {LEVEL_MAX}, got {value}"
                )

    def values(self) -> List[float]:
        """Populated readings in period order."""
        return [v for v in (self.morning, self.afternoon, self.evening) if v is not None]

    def average(self) -> Optional[float]:
        readings = self.values()
        if not readings:
            return None
        return sum(readings) / len(readings)

    @property
    def has_data(self) -> bool:
        return bool(self.values())


@dataclass(frozen=True)
class Entry:
    """One day of journal data."""
    date: date
    energy_levels: PeriodLevels = field(default_factory=PeriodLevels)
    stress_levels: PeriodLevels = field(default_factory=PeriodLevels)
    energy_source_text: str = ""
    stress_source_text: str = ""

    def __post_init__(self):
        # Missing fields read as "not logged"
        for attr in ('energy_levels', 'stress_levels'):
            if getattr(self, attr) is None:
                object.__setattr__(self, attr, PeriodLevels())
        for attr in ('energy_source_text', 'stress_source_text'):
            if not isinstance(getattr(self, attr), str):
                object.__setattr__(self, attr, "")

    def levels(self, metric: str) -> PeriodLevels:
        return self.energy_levels if metric == "energy" else self.stress_levels

    def source_text(self, metric: str) -> str:
        return self.energy_source_text if metric == "energy" else self.stress_source_text

    def has_source_text(self, metric: str) -> bool:
        text = self.source_text(metric)
        return isinstance(text, str) and bool(text.strip())


@dataclass(frozen=True)
class CategoryDefinition:
    """
    Keyword table row for one behavioral category.

    Attributes:
        name: Category identifier (e.g. 'physical', 'work_pressure')
        keywords: Substrings that place text in this category
        weight: Multiplier applied per keyword hit (must be > 0)
        boost_words: Words signalling a positive experience
        drain_words: Words signalling a negative experience
        intensity_words: Words signalling strong stress language
        trigger_words: Phrases signalling a recurring trigger
    """
    name: str
    keywords: FrozenSet[str]
    weight: float = 1.0
    boost_words: FrozenSet[str] = frozenset()
    drain_words: FrozenSet[str] = frozenset()
    intensity_words: FrozenSet[str] = frozenset()
    trigger_words: FrozenSet[str] = frozenset()

    def __post_init__(self):
        if self.weight <= 0:
            raise ValueError(f"Category '{self.name}' weight must be > 0, got {self.weight}")
        # Normalise any iterable into frozensets so definitions stay immutable
        for attr in ('keywords', 'boost_words', 'drain_words', 'intensity_words', 'trigger_words'):
            object.__setattr__(self, attr, frozenset(w.lower() for w in getattr(self, attr)))


@dataclass(frozen=True)
class ScoringProfile:
    """
    Configuration of one categorizer variant.

    Attributes:
        name: Profile identifier ('energy' or 'stress')
        categories: Ordered category table; earlier rows win ties
        boost_weight: Score added per boost word hit
        drain_weight: Score added per drain word hit
        intensity_weight: Score added per intensity word hit
        trigger_bonus: Score added once when any trigger phrase is present
        normalizing_constant: Divisor turning a raw score into confidence
        normalize_by_tokens: Divide keyword-hit score by token count
        grades_intensity: Report Intensity instead of Sentiment
    """
    name: str
    categories: Tuple[CategoryDefinition, ...] = ()
    boost_weight: float = BOOST_WORD_WEIGHT
    drain_weight: float = DRAIN_WORD_WEIGHT
    intensity_weight: float = INTENSITY_WORD_WEIGHT
    trigger_bonus: float = TRIGGER_BONUS
    normalizing_constant: float = CONFIDENCE_NORMALIZER
    normalize_by_tokens: bool = False
    grades_intensity: bool = False


@dataclass(frozen=True)
class CategoryMatch:
    """Result of categorizing one text fragment."""
    category: str
    confidence: float
    sentiment_or_intensity: SentimentOrIntensity = Sentiment.NEUTRAL
    score: float = 0.0
    has_trigger: bool = False


@dataclass(frozen=True)
class CategorizedObservation:
    """One entry's source text scored against the category table."""
    source_text: str
    date: date
    category: str
    sentiment_or_intensity: SentimentOrIntensity
    confidence: float
    numeric_value: float
    text_sentiment: float = 0.5
    has_trigger: bool = False


@dataclass(frozen=True)
class PatternExample:
    date: date
    text: str
    value: float


@dataclass
class PatternBucket:
    """
    Observations sharing (category, sentiment/intensity) within one extraction pass.

    Running totals are accumulated with add(); derived averages are read-only
    properties so a bucket never exposes a half-updated state.
    """
    metric: str
    category: str
    sentiment_or_intensity: SentimentOrIntensity
    count: int = 0
    total_value: float = 0.0
    examples: List[PatternExample] = field(default_factory=list)
    total_confidence: float = 0.0
    total_text_sentiment: float = 0.0
    trigger_count: int = 0
    composite_score: float = 0.0

    def add(self, observation: CategorizedObservation) -> None:
        self.count += 1
        self.total_value += observation.numeric_value
        self.total_confidence += observation.confidence
        self.total_text_sentiment += observation.text_sentiment
        if observation.has_trigger:
            self.trigger_count += 1
        self.examples.append(PatternExample(
            date=observation.date,
            text=observation.source_text,
            value=observation.numeric_value,
        ))

    @property
    def key(self) -> Tuple[str, str]:
        return self.category, self.sentiment_or_intensity.value

    @property
    def average_value(self) -> Optional[float]:
        return self.total_value / self.count if self.count else None

    @property
    def average_confidence(self) -> float:
        return self.total_confidence / self.count if self.count else 0.0

    @property
    def average_text_sentiment(self) -> float:
        return self.total_text_sentiment / self.count if self.count else 0.5

    @property
    def trigger_ratio(self) -> float:
        return self.trigger_count / self.count if self.count else 0.0

    @property
    def is_significant(self) -> bool:
        return self.count >= SIGNIFICANCE_MIN_COUNT


@dataclass(frozen=True)
class AggregateBucket:
    """One charted point of the aggregate energy/stress series."""
    bucket_key: str
    average_energy: Optional[float]
    average_stress: Optional[float]
    top_energy_sources: Tuple[str, ...] = ()
    top_stress_sources: Tuple[str, ...] = ()
    entry_count: int = 0
