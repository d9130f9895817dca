# journal/utils/constants.py
"""
Central constants file for consistent values across the insight engine.
Use these constants instead of hardcoded strings to prevent validation errors.
"""

# ============================================
# METRIC FIELDS
# ============================================
FIELD_ENERGY = "energy"
FIELD_STRESS = "stress"

FIELD_CHOICES = [
    FIELD_ENERGY,
    FIELD_STRESS,
]

# ============================================
# DAY PERIODS
# ============================================
PERIOD_MORNING = "morning"
PERIOD_AFTERNOON = "afternoon"
PERIOD_EVENING = "evening"

PERIOD_CHOICES = [
    PERIOD_MORNING,
    PERIOD_AFTERNOON,
    PERIOD_EVENING,
]

LEVEL_MIN = 1
LEVEL_MAX = 10

# ============================================
# GRANULARITY VALUES
# ============================================
GRANULARITY_AUTO = "auto"
GRANULARITY_NONE = "none"
GRANULARITY_DAILY = "daily"
GRANULARITY_WEEKLY = "weekly"
GRANULARITY_MONTHLY = "monthly"

GRANULARITY_CHOICES = [
    GRANULARITY_AUTO,
    GRANULARITY_NONE,
    GRANULARITY_DAILY,
    GRANULARITY_WEEKLY,
    GRANULARITY_MONTHLY,
]

# Upper entry-count bound (inclusive) for each automatic granularity
AUTO_GRANULARITY_LIMITS = [
    (31, GRANULARITY_NONE),
    (90, GRANULARITY_DAILY),
    (365, GRANULARITY_WEEKLY),
]

# ============================================
# CATEGORIZER
# ============================================
CATEGORY_OTHER = "other"

BOOST_WORD_WEIGHT = 0.5
DRAIN_WORD_WEIGHT = 0.3
INTENSITY_WORD_WEIGHT = 0.8
TRIGGER_BONUS = 1.0

CONFIDENCE_NORMALIZER = 3.0
MAX_CONFIDENCE = 0.95

# Source-text split characters used by the aggregator
SOURCE_DELIMITERS = r"[,;.]"
MIN_SOURCE_FRAGMENT_LENGTH = 3

# ============================================
# PATTERN THRESHOLDS
# ============================================
ENERGY_HIGH_THRESHOLD = 7.0
STRESS_HIGH_THRESHOLD = 6.0
MIN_PATTERN_ENTRIES = 3
SIGNIFICANCE_MIN_COUNT = 2
TOP_PATTERN_LIMIT = 3

# Composite score weights
COMPOSITE_VALUE_WEIGHT = 0.4
COMPOSITE_CONFIDENCE_WEIGHT = 0.3
COMPOSITE_COUNT_WEIGHT = 0.3

# ============================================
# CORRELATION THRESHOLDS
# ============================================
CORRELATION_MIN_ENTRIES = 5
OPTIMAL_SENTIMENT_THRESHOLD = 0.6
RISK_SENTIMENT_THRESHOLD = 0.4
CORRELATION_MIN_DAYS = 2

# ============================================
# DATA REQUIREMENTS
# ============================================
MIN_TOTAL_ENTRIES = 5
MIN_ENERGY_SOURCE_ENTRIES = 3
MIN_STRESS_SOURCE_ENTRIES = 3
MIN_ADVANCED_ENTRIES = 7

# ============================================
# WEEKLY SUMMARY
# ============================================
WEEKLY_SUMMARY_TOP_SOURCES = 3
# Stand-in average for a metric the day never logged
NEUTRAL_LEVEL = 5.0

WEEK_STATE_GETTING_STARTED = "Getting Started"
WEEK_STATE_BALANCED = "Balanced"
WEEK_STATE_ENERGIZED = "Energized"
WEEK_STATE_CALM = "Calm"
WEEK_STATE_CHALLENGING = "Challenging"
WEEK_STATE_TIRED = "Tired"
WEEK_STATE_STRESSED = "Stressed"
WEEK_STATE_MIXED = "Mixed"

WEEK_STATE_DESCRIPTIONS = {
    WEEK_STATE_GETTING_STARTED: "Keep tracking to see patterns",
    WEEK_STATE_BALANCED: "Energy was good, stress was low",
    WEEK_STATE_ENERGIZED: "High energy this week",
    WEEK_STATE_CALM: "Very low stress levels",
    WEEK_STATE_CHALLENGING: "Energy was low, stress was high",
    WEEK_STATE_TIRED: "Energy was lower than usual",
    WEEK_STATE_STRESSED: "Stress was higher than usual",
    WEEK_STATE_MIXED: "A mix of ups and downs",
}

BALANCED_MIN_ENERGY = 6.5
BALANCED_MAX_STRESS = 4.5
ENERGIZED_MIN_ENERGY = 7.5
CALM_MAX_STRESS = 3.5
CHALLENGING_ENERGY_BELOW = 5.0
CHALLENGING_STRESS_ABOVE = 6.0
TIRED_ENERGY_BELOW = 5.5
STRESSED_STRESS_ABOVE = 6.5

# ============================================
# CACHE / PERFORMANCE
# ============================================
DEFAULT_CACHE_TTL_MS = 5 * 60 * 1000    # 5 minutes
SLOW_COMPUTE_THRESHOLD_MS = 200
TOP_SOURCES_LIMIT = 5

# ============================================
# DISPLAY HELPERS
# ============================================

FIELD_DISPLAY = {
    FIELD_ENERGY: "Energy",
    FIELD_STRESS: "Stress",
}

GRANULARITY_DISPLAY = {
    GRANULARITY_NONE: "Per entry",
    GRANULARITY_DAILY: "Daily",
    GRANULARITY_WEEKLY: "Weekly",
    GRANULARITY_MONTHLY: "Monthly",
}


def is_valid_field(field: str) -> bool:
    """Check if metric field is valid."""
    return field in FIELD_CHOICES


def is_valid_granularity(granularity: str) -> bool:
    """Check if granularity is valid."""
    return granularity in GRANULARITY_CHOICES


def normalize_granularity(granularity: str) -> str:
    """
    Normalize granularity to lowercase.
    Handles common input variations.
    """
    granularity_map = {
        'day': GRANULARITY_DAILY,
        'week': GRANULARITY_WEEKLY,
        'month': GRANULARITY_MONTHLY,
        'raw': GRANULARITY_NONE,
    }
    value = (granularity or '').strip().lower()
    return granularity_map.get(value, value)


def format_category_name(category: str) -> str:
    """Format category names for display ('work_pressure' -> 'Work Pressure')."""
    return ' '.join(word.capitalize() for word in category.replace('_', ' ').split())
