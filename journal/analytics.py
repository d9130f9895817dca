"""
Journal Analytics Engine
Buckets energy/stress entries into charted time series and derives
trend statistics (correlation, day-of-week patterns, week-over-week change)
and weekly summaries.

Aggregation is volume-adaptive: the bucket width is chosen from the number of
entries so a chart never carries more than a few dozen points per screen.
Trend functions return structured dicts with a 'metric_name' and a
'sufficient_data' flag instead of raising when there is too little data.
"""
import logging
import pandas as pd
from typing import Dict, Iterable, List, Optional

from journal.domain import AggregateBucket, Entry
from journal.exceptions import InvalidGranularityError
from journal.helpers import metric_helpers
from journal.helpers import nlp_helpers
from journal.helpers.monitoring import track_performance
from journal.utils import constants
from journal.utils.constants import (
    FIELD_ENERGY, FIELD_STRESS, FIELD_CHOICES,
    GRANULARITY_AUTO, GRANULARITY_NONE, GRANULARITY_MONTHLY, GRANULARITY_CHOICES,
    AUTO_GRANULARITY_LIMITS, TOP_SOURCES_LIMIT, SLOW_COMPUTE_THRESHOLD_MS,
    NEUTRAL_LEVEL, WEEKLY_SUMMARY_TOP_SOURCES,
    normalize_granularity,
)
from journal.utils.time_utils import DateRange, format_range_label, get_bucket_key

logger = logging.getLogger(__name__)

TREND_WINDOW = 7
TREND_MIN_WINDOW_ENTRIES = 5
TREND_CHANGE_THRESHOLD = 0.5

WEEKLY_MIN_ENTRIES = 7
WEEKDAY_MIN_ENTRIES = 2
WEEKLY_MIN_WEEKDAYS = 3

CORRELATION_MIN_POINTS = 3

DAY_NAMES = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']


def _valid_entries(entries: Iterable) -> List[Entry]:
    """Entry objects only, in ascending date order (stable for equal dates)."""
    return sorted((e for e in entries or [] if isinstance(e, Entry)), key=lambda e: e.date)


def entries_to_dataframe(entries: Iterable) -> pd.DataFrame:
    """
    One row per entry: date, per-entry energy/stress averages (NaN when the
    entry has no readings) and the raw source descriptions.
    """
    rows = [
        {
            'date': pd.Timestamp(e.date),
            'energy': e.energy_levels.average(),
            'stress': e.stress_levels.average(),
            'energy_sources': e.energy_source_text,
            'stress_sources': e.stress_source_text,
        }
        for e in _valid_entries(entries)
    ]
    df = pd.DataFrame(rows, columns=['date', 'energy', 'stress', 'energy_sources', 'stress_sources'])
    df['energy'] = pd.to_numeric(df['energy'], errors='coerce')
    df['stress'] = pd.to_numeric(df['stress'], errors='coerce')
    return df


def _mean_or_none(series: pd.Series) -> Optional[float]:
    series = series.dropna()
    if series.empty:
        return None
    return float(series.mean())


# ====================================================================
# TIME AGGREGATION
# ====================================================================

def select_granularity(entry_count: int) -> str:
    """
    Pick the bucket width for a series of entry_count entries.

    <= 31 entries: one point per entry; <= 90: daily; <= 365: weekly;
    anything larger: monthly.
    """
    for upper_bound, granularity in AUTO_GRANULARITY_LIMITS:
        if entry_count <= upper_bound:
            return granularity
    return GRANULARITY_MONTHLY


def resolve_granularity(granularity: str, entry_count: int) -> str:
    """
    Validate a requested granularity and resolve 'auto'.

    Raises:
        InvalidGranularityError: For anything outside auto/none/daily/weekly/monthly
    """
    normalized = normalize_granularity(granularity) if isinstance(granularity, str) else granularity
    if normalized not in GRANULARITY_CHOICES:
        raise InvalidGranularityError(str(granularity), GRANULARITY_CHOICES)
    if normalized == GRANULARITY_AUTO:
        return select_granularity(entry_count)
    return normalized


def aggregate(
    entries: Iterable,
    granularity: str = GRANULARITY_AUTO,
    top_n: int = TOP_SOURCES_LIMIT,
) -> List[AggregateBucket]:
    """
    Buckets entries into an energy/stress time series using pandas.

    Averages pool every populated period reading in the bucket, so a day with
    three readings weighs more than a day with one. Source descriptions are
    split into fragments and the top_n most frequent are kept per metric.

    Returns:
        AggregateBucket list in ascending bucket_key order ([] for no entries)
    """
    valid = _valid_entries(entries)
    resolved = resolve_granularity(granularity, len(valid))
    if not valid:
        return []

    entry_rows = []
    reading_rows = []
    for position, entry in enumerate(valid):
        bucket_key = get_bucket_key(entry.date, resolved)
        # Per-entry buckets group on position so equal dates stay separate
        group = position if resolved == GRANULARITY_NONE else bucket_key
        entry_rows.append({'group': group, 'bucket_key': bucket_key, 'position': position})
        for metric in FIELD_CHOICES:
            for value in entry.levels(metric).values():
                reading_rows.append({'group': group, 'metric': metric, 'value': float(value)})

    entries_df = pd.DataFrame(entry_rows)
    readings_df = pd.DataFrame(reading_rows, columns=['group', 'metric', 'value'])

    if readings_df.empty:
        means = {}
    else:
        means = readings_df.groupby(['group', 'metric'])['value'].mean().to_dict()

    grouped = (
        entries_df.groupby('group', sort=False)
        .agg(bucket_key=('bucket_key', 'first'), entry_count=('position', 'size'),
             first_position=('position', 'min'), positions=('position', list))
        .sort_values(['bucket_key', 'first_position'], kind='mergesort')
    )

    buckets = []
    for group, row in grouped.iterrows():
        members = [valid[p] for p in row['positions']]
        buckets.append(AggregateBucket(
            bucket_key=row['bucket_key'],
            average_energy=_pooled(means, group, FIELD_ENERGY),
            average_stress=_pooled(means, group, FIELD_STRESS),
            top_energy_sources=tuple(top_sources(members, FIELD_ENERGY, top_n)),
            top_stress_sources=tuple(top_sources(members, FIELD_STRESS, top_n)),
            entry_count=int(row['entry_count']),
        ))

    logger.debug(f"Aggregated {len(valid)} entries into {len(buckets)} {resolved} buckets")
    return buckets


def _pooled(means: Dict, group, metric: str) -> Optional[float]:
    value = means.get((group, metric))
    if value is None or pd.isna(value):
        return None
    return float(value)


def top_sources(entries: Iterable[Entry], metric: str, top_n: int = TOP_SOURCES_LIMIT) -> List[str]:
    """
    Most frequent source fragments across entries (processed in the given order).
    """
    fragments = []
    for entry in entries:
        fragments.extend(nlp_helpers.split_source_fragments(entry.source_text(metric)))
    return nlp_helpers.rank_fragments(fragments, top_n)


# ====================================================================
# TREND ANALYTICS
# ====================================================================

@track_performance(threshold_ms=SLOW_COMPUTE_THRESHOLD_MS)
def compute_energy_stress_correlation(entries: Iterable, expected_days: Optional[int] = None) -> Dict:
    """
    Pearson correlation between per-entry energy and stress averages.

    Returns:
        {
            'metric_name': 'energy_stress_correlation',
            'coefficient': float | None (None when either series is constant),
            'strength': 'strong' | 'moderate' | 'weak' | 'none',
            'direction': 'positive' | 'negative' | None,
            'confidence': float (0-1),
            'sample_size': int,
            'significant': bool,
            'sufficient_data': bool
        }
    """
    df = entries_to_dataframe(entries).dropna(subset=['energy', 'stress'])
    sample_size = len(df)

    if sample_size < CORRELATION_MIN_POINTS:
        return {
            'metric_name': 'energy_stress_correlation',
            'coefficient': None,
            'strength': 'none',
            'direction': None,
            'confidence': 0.0,
            'sample_size': sample_size,
            'required': CORRELATION_MIN_POINTS,
            'significant': False,
            'sufficient_data': False,
        }

    result = metric_helpers.compute_pearson_correlation(df['energy'].values, df['stress'].values)
    coefficient = result['correlation']

    if coefficient is None:
        # No variance: a steady routine, nothing to correlate
        confidence = 0.5
        direction = None
    else:
        confidence = metric_helpers.correlation_confidence(sample_size, coefficient, expected_days)
        direction = 'negative' if coefficient < 0 else 'positive'

    return {
        'metric_name': 'energy_stress_correlation',
        'coefficient': coefficient,
        'strength': metric_helpers.correlation_strength(coefficient),
        'direction': direction,
        'confidence': confidence,
        'sample_size': sample_size,
        'required': CORRELATION_MIN_POINTS,
        'significant': result['significant'],
        'sufficient_data': True,
    }


@track_performance(threshold_ms=SLOW_COMPUTE_THRESHOLD_MS)
def analyze_weekly_patterns(entries: Iterable) -> Dict:
    """
    Day-of-week energy/stress averages.

    Needs at least 7 entries; only weekdays with 2+ entries are reported and
    at least 3 such weekdays are required.

    Returns:
        {
            'metric_name': 'weekly_patterns',
            'days': [{'day', 'name', 'avg_energy', 'avg_stress', 'count'}, ...],
            'best_energy_day': str | None,
            'lowest_stress_day': str | None,
            'sufficient_data': bool
        }
    """
    df = entries_to_dataframe(entries)
    df = df[df['energy'].notna() | df['stress'].notna()]

    empty = {
        'metric_name': 'weekly_patterns',
        'days': [],
        'best_energy_day': None,
        'lowest_stress_day': None,
        'sufficient_data': False,
    }
    if len(df) < WEEKLY_MIN_ENTRIES:
        return empty

    df = df.assign(weekday=df['date'].dt.weekday)
    by_day = df.groupby('weekday').agg(
        avg_energy=('energy', 'mean'),
        avg_stress=('stress', 'mean'),
        count=('date', 'size'),
    )
    by_day = by_day[by_day['count'] >= WEEKDAY_MIN_ENTRIES]

    if len(by_day) < WEEKLY_MIN_WEEKDAYS:
        return empty

    days = [
        {
            'day': int(weekday),
            'name': DAY_NAMES[weekday],
            'avg_energy': None if pd.isna(row['avg_energy']) else float(row['avg_energy']),
            'avg_stress': None if pd.isna(row['avg_stress']) else float(row['avg_stress']),
            'count': int(row['count']),
        }
        for weekday, row in by_day.iterrows()
    ]

    energy = by_day['avg_energy'].dropna()
    stress = by_day['avg_stress'].dropna()

    return {
        'metric_name': 'weekly_patterns',
        'days': days,
        'best_energy_day': DAY_NAMES[int(energy.idxmax())] if not energy.empty else None,
        'lowest_stress_day': DAY_NAMES[int(stress.idxmin())] if not stress.empty else None,
        'sufficient_data': True,
    }


@track_performance(threshold_ms=SLOW_COMPUTE_THRESHOLD_MS)
def analyze_trends(entries: Iterable, window: int = TREND_WINDOW) -> Dict:
    """
    Compares the average energy of the last `window` entries with the
    `window` entries before them.

    Returns:
        {
            'metric_name': 'energy_trend',
            'trend_direction': 'improving' | 'declining' | 'stable' | None,
            'recent_average': float | None,
            'previous_average': float | None,
            'change': float | None,
            'sufficient_data': bool
        }
    """
    df = entries_to_dataframe(entries)

    recent = df.iloc[-window:] if len(df) else df
    previous = df.iloc[-2 * window:-window] if len(df) > window else df.iloc[0:0]

    result = {
        'metric_name': 'energy_trend',
        'trend_direction': None,
        'recent_average': None,
        'previous_average': None,
        'change': None,
        'sufficient_data': False,
    }

    if len(recent) < TREND_MIN_WINDOW_ENTRIES or len(previous) < TREND_MIN_WINDOW_ENTRIES:
        return result

    recent_avg = _mean_or_none(recent['energy'])
    previous_avg = _mean_or_none(previous['energy'])
    if recent_avg is None or previous_avg is None:
        return result

    change = recent_avg - previous_avg
    if change > TREND_CHANGE_THRESHOLD:
        direction = 'improving'
    elif change < -TREND_CHANGE_THRESHOLD:
        direction = 'declining'
    else:
        direction = 'stable'

    result.update({
        'trend_direction': direction,
        'recent_average': recent_avg,
        'previous_average': previous_avg,
        'change': change,
        'sufficient_data': True,
    })
    return result


def summarize_levels(entries: Iterable) -> Dict:
    """
    Overall pooled averages for both metrics.

    Returns:
        {'metric_name': 'level_summary', 'average_energy', 'average_stress', 'entry_count'}
    """
    valid = _valid_entries(entries)
    return {
        'metric_name': 'level_summary',
        'average_energy': metric_helpers.pooled_mean(valid, FIELD_ENERGY),
        'average_stress': metric_helpers.pooled_mean(valid, FIELD_STRESS),
        'entry_count': len(valid),
    }


# ====================================================================
# WEEKLY SUMMARY
# ====================================================================

def determine_week_state(average_energy: Optional[float], average_stress: Optional[float]) -> Dict:
    """
    One-word label for a week from its overall averages.

    Rules are checked in order: Balanced, Energized, Calm, Challenging,
    Tired, Stressed, then Mixed. Without both averages the week is
    'Getting Started'.
    """
    if average_energy is None or average_stress is None:
        label = constants.WEEK_STATE_GETTING_STARTED
    elif average_energy >= constants.BALANCED_MIN_ENERGY and average_stress <= constants.BALANCED_MAX_STRESS:
        label = constants.WEEK_STATE_BALANCED
    elif average_energy >= constants.ENERGIZED_MIN_ENERGY:
        label = constants.WEEK_STATE_ENERGIZED
    elif average_stress <= constants.CALM_MAX_STRESS:
        label = constants.WEEK_STATE_CALM
    elif average_energy < constants.CHALLENGING_ENERGY_BELOW and average_stress > constants.CHALLENGING_STRESS_ABOVE:
        label = constants.WEEK_STATE_CHALLENGING
    elif average_energy < constants.TIRED_ENERGY_BELOW:
        label = constants.WEEK_STATE_TIRED
    elif average_stress > constants.STRESSED_STRESS_ABOVE:
        label = constants.WEEK_STATE_STRESSED
    else:
        label = constants.WEEK_STATE_MIXED

    return {'label': label, 'description': constants.WEEK_STATE_DESCRIPTIONS[label]}


def _level_stats(entries: List[Entry], metric: str) -> Dict:
    readings = pd.Series(metric_helpers.pooled_readings(entries, metric), dtype=float)
    if readings.empty:
        return {'average': None, 'min': None, 'max': None, 'count': 0}
    return {
        'average': round(float(readings.mean()), 1),
        'min': float(readings.min()),
        'max': float(readings.max()),
        'count': int(readings.size),
    }


def _day_summary(row: pd.Series) -> Dict:
    day = row['date'].date()
    return {
        'date': day.isoformat(),
        'day_name': DAY_NAMES[day.weekday()],
        'energy': round(float(row['energy']), 1),
        'stress': round(float(row['stress']), 1),
        'score': round(float(row['score']), 1),
        'energy_sources': row['energy_sources'],
        'stress_sources': row['stress_sources'],
    }


@track_performance(threshold_ms=SLOW_COMPUTE_THRESHOLD_MS)
def generate_weekly_summary(entries: Iterable, start, end, top_n: int = WEEKLY_SUMMARY_TOP_SOURCES) -> Dict:
    """
    Summary of the entries dated start..end (inclusive).

    start/end may be dates, datetimes or ISO strings. Best and hardest days
    are scored as energy minus stress over the day's averages; a metric the
    day never logged counts as 5. Ties go to the earlier day.

    Returns:
        {
            'metric_name': 'weekly_summary',
            'start', 'end': ISO dates,
            'label': e.g. 'Dec 14-20, 2025',
            'day_count': int (calendar days in the range),
            'entry_count': int,
            'energy', 'stress': {'average', 'min', 'max', 'count'},
            'best_day', 'hardest_day': day dict | None,
            'week_state': {'label', 'description'},
            'top_energy_sources', 'top_stressors': [str, ...],
            'sufficient_data': bool
        }

    Raises:
        InvalidDateRangeError: If start is after end
    """
    date_range = DateRange.between(start, end)
    week = [e for e in _valid_entries(entries) if e.date in date_range]

    energy = _level_stats(week, FIELD_ENERGY)
    stress = _level_stats(week, FIELD_STRESS)

    df = entries_to_dataframe(week)
    df = df[df['energy'].notna() | df['stress'].notna()]
    best_day = hardest_day = None
    if not df.empty:
        df = df.fillna({'energy': NEUTRAL_LEVEL, 'stress': NEUTRAL_LEVEL})
        df = df.assign(score=df['energy'] - df['stress'])
        best_day = _day_summary(df.loc[df['score'].idxmax()])
        hardest_day = _day_summary(df.loc[df['score'].idxmin()])

    logger.debug(f"Weekly summary {date_range.start}..{date_range.end}: {len(week)} entries")

    return {
        'metric_name': 'weekly_summary',
        'start': date_range.start.isoformat(),
        'end': date_range.end.isoformat(),
        'label': format_range_label(date_range.start, date_range.end),
        'day_count': date_range.days,
        'entry_count': len(week),
        'energy': energy,
        'stress': stress,
        'best_day': best_day,
        'hardest_day': hardest_day,
        'week_state': determine_week_state(energy['average'], stress['average']),
        'top_energy_sources': top_sources(week, FIELD_ENERGY, top_n),
        'top_stressors': top_sources(week, FIELD_STRESS, top_n),
        'sufficient_data': bool(week),
    }
