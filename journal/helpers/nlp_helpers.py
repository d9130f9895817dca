"""
NLP utilities for text analysis on journal source descriptions.
Uses weighted keyword matching only: no models, no lexicon downloads.
Tokenization is plain whitespace/punctuation splitting.
"""
import re
import logging
from collections import Counter
from typing import List, Optional, Sequence

from journal.domain import (
    CategoryDefinition, CategoryMatch, ScoringProfile, Sentiment, Intensity,
)
from journal.utils.constants import (
    CATEGORY_OTHER, MAX_CONFIDENCE, SOURCE_DELIMITERS, MIN_SOURCE_FRAGMENT_LENGTH,
)

logger = logging.getLogger(__name__)

_TOKEN_SPLIT = re.compile(r"[\s\W_]+", re.UNICODE)
_SOURCE_SPLIT = re.compile(SOURCE_DELIMITERS)

# Generic polarity vocabulary shared by both metrics
POSITIVE_WORDS = (
    'good', 'great', 'excellent', 'amazing', 'wonderful', 'fantastic', 'perfect',
    'love', 'enjoy', 'happy', 'satisfied', 'productive', 'successful', 'energizing',
    'refreshing', 'inspiring',
)
NEGATIVE_WORDS = (
    'bad', 'terrible', 'awful', 'hate', 'frustrated', 'tired', 'exhausted',
    'overwhelming', 'stressful', 'difficult', 'annoying', 'disappointing',
    'draining', 'toxic',
)

# Energy-style weights with no table of its own; used when no profile is given
DEFAULT_SCORING = ScoringProfile(name='default')


def preprocess_text(text: str) -> str:
    """
    Normalizes text: lowercase, strip whitespace.
    """
    if not text or not isinstance(text, str):
        return ""
    return text.strip().lower()


def tokenize(text: str) -> List[str]:
    """
    Splits text into lower-case tokens on whitespace and punctuation.
    """
    text = preprocess_text(text)
    if not text:
        return []
    return [t for t in _TOKEN_SPLIT.split(text) if t]


def count_hits(text: str, words) -> int:
    """Number of distinct words/phrases present in text as substrings."""
    return sum(1 for word in words if word in text)


def categorize(
    text: str,
    categories: Sequence[CategoryDefinition],
    profile: Optional[ScoringProfile] = None,
) -> CategoryMatch:
    """
    Assigns text to the best-scoring category.

    Score per category:
        sum(weight per keyword present)
        + boost_weight * boost hits + drain_weight * drain hits
        + intensity_weight * intensity hits + trigger_bonus if any trigger

    The highest score wins and earlier categories win ties. Confidence is
    min(0.95, score / normalizing_constant). Text that matches nothing (or is
    empty / not a string) is reported as 'other' with confidence 0.

    Returns:
        CategoryMatch with category, confidence, sentiment_or_intensity,
        score and has_trigger
    """
    profile = profile or DEFAULT_SCORING
    neutral = Intensity.LOW if profile.grades_intensity else Sentiment.NEUTRAL

    lowered = preprocess_text(text)
    if not lowered:
        return CategoryMatch(category=CATEGORY_OTHER, confidence=0.0, sentiment_or_intensity=neutral)

    token_count = len(tokenize(lowered)) or 1
    best = CategoryMatch(category=CATEGORY_OTHER, confidence=0.0, sentiment_or_intensity=neutral)

    for definition in categories:
        keyword_score = count_hits(lowered, definition.keywords) * definition.weight
        if profile.normalize_by_tokens:
            keyword_score /= token_count

        boost_hits = count_hits(lowered, definition.boost_words)
        drain_hits = count_hits(lowered, definition.drain_words)
        intensity_hits = count_hits(lowered, definition.intensity_words)
        has_trigger = any(trigger in lowered for trigger in definition.trigger_words)

        score = (
            keyword_score
            + profile.boost_weight * boost_hits
            + profile.drain_weight * drain_hits
            + profile.intensity_weight * intensity_hits
            + (profile.trigger_bonus if has_trigger else 0.0)
        )

        # Strict comparison: first-registered category keeps a tie
        if score > best.score:
            if profile.grades_intensity:
                grade = _grade_intensity(intensity_hits)
            else:
                grade = _grade_sentiment(boost_hits, drain_hits)
            best = CategoryMatch(
                category=definition.name,
                confidence=min(MAX_CONFIDENCE, score / profile.normalizing_constant),
                sentiment_or_intensity=grade,
                score=score,
                has_trigger=has_trigger,
            )

    if best.score <= 0:
        logger.debug("No category matched text: %r", lowered[:50])
    return best


def _grade_sentiment(boost_hits: int, drain_hits: int) -> Sentiment:
    if boost_hits > drain_hits:
        return Sentiment.POSITIVE
    if drain_hits > boost_hits:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def _grade_intensity(intensity_hits: int) -> Intensity:
    if intensity_hits > 1:
        return Intensity.HIGH
    if intensity_hits == 1:
        return Intensity.MEDIUM
    return Intensity.LOW


def compute_text_sentiment(text: str) -> float:
    """
    Keyword-count polarity of a description.

    Returns:
        float in [0, 1]: positive_hits / (positive_hits + negative_hits),
        or 0.5 when the text carries no polarity words.
    """
    lowered = preprocess_text(text)
    if not lowered:
        return 0.5

    positive = count_hits(lowered, POSITIVE_WORDS)
    negative = count_hits(lowered, NEGATIVE_WORDS)
    if positive + negative == 0:
        return 0.5
    return positive / (positive + negative)


def classify_sentiment(score: float, positive_above: float = 0.6, negative_below: float = 0.4) -> Sentiment:
    """Maps a polarity score onto Sentiment using the correlation thresholds."""
    if score > positive_above:
        return Sentiment.POSITIVE
    if score < negative_below:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def split_source_fragments(text: str) -> List[str]:
    """
    Splits a source description into normalised fragments.

    Splits on ',', ';' and '.', trims and lower-cases each piece, and drops
    fragments of two characters or fewer.
    """
    if not text or not isinstance(text, str):
        return []
    fragments = (piece.strip().lower() for piece in _SOURCE_SPLIT.split(text))
    return [f for f in fragments if len(f) >= MIN_SOURCE_FRAGMENT_LENGTH]


def rank_fragments(fragments: Sequence[str], top_n: int) -> List[str]:
    """
    Ranks fragments by occurrence count, ties broken by first-seen order.
    """
    if not fragments or top_n <= 0:
        return []
    # Counter keeps insertion order and most_common() sorts stably
    counter = Counter(fragments)
    return [fragment for fragment, _ in counter.most_common(top_n)]
