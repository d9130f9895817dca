"""
Tests for journal/behavioral/correlation.py
"""
import pytest
from datetime import date

from journal.behavioral.correlation import CorrelationResult, analyze_correlation, is_qualifying
from journal.domain import Entry
from journal.tests.factories import EntryFactory
from journal.utils.config import InsightContext


def make_day(day, energy, stress, energy_text, stress_text):
    return EntryFactory.create(
        date(2024, 3, day), energy=energy, stress=stress,
        energy_text=energy_text, stress_text=stress_text,
    )


@pytest.fixture
def mixed_week():
    """
    Six complete days; means are 32/6 for both metrics.

    Days 1-2 are optimal, days 4-5 are risk days.
    """
    return [
        make_day(1, 9, 2, "great run", "calm"),
        make_day(2, 8, 3, "great happy walk", "email"),
        make_day(3, 5, 5, "usual", "meeting"),
        make_day(4, 3, 8, "tired", "awful deadline"),
        make_day(5, 2, 9, "bad", "terrible boss"),
        make_day(6, 5, 5, "lunch", "traffic"),
    ]


class TestAnalyzeCorrelation:
    """Tests for optimal/risk day detection."""

    def test_means(self, mixed_week):
        result = analyze_correlation(mixed_week)

        assert result.sufficient_data is True
        assert result.qualifying_entries == 6
        assert result.mean_energy == pytest.approx(32 / 6)
        assert result.mean_stress == pytest.approx(32 / 6)

    def test_optimal_days(self, mixed_week):
        result = analyze_correlation(mixed_week)

        assert [d.date.day for d in result.optimal_days] == [1, 2]

    def test_risk_days(self, mixed_week):
        result = analyze_correlation(mixed_week)

        assert [d.date.day for d in result.risk_days] == [4, 5]

    def test_language_ratios(self, mixed_week):
        result = analyze_correlation(mixed_week)

        assert result.positive_energy_ratio == pytest.approx(2 / 6)
        assert result.negative_stress_ratio == pytest.approx(2 / 6)

    def test_single_optimal_day_is_not_reported(self, mixed_week):
        mixed_week[1] = make_day(2, 8, 3, "walk", "email")

        result = analyze_correlation(mixed_week)

        assert result.optimal_days == ()
        assert len(result.risk_days) == 2

    def test_neutral_energy_text_is_not_optimal(self, mixed_week):
        """Energy text must be upbeat (sentiment above 0.6) for an optimal day."""
        mixed_week[0] = make_day(1, 9, 2, "great run, tired legs", "calm")
        mixed_week[1] = make_day(2, 8, 3, "walk", "email")

        assert analyze_correlation(mixed_week).optimal_days == ()

    def test_custom_min_days(self, mixed_week):
        mixed_week[1] = make_day(2, 8, 3, "walk", "email")
        context = InsightContext(correlation_min_days=1)

        result = analyze_correlation(mixed_week, context=context)

        assert [d.date.day for d in result.optimal_days] == [1]


class TestQualifyingEntries:
    """Only entries with both ratings and both descriptions take part."""

    def test_insufficient_data(self, mixed_week):
        result = analyze_correlation(mixed_week[:4])

        assert result == CorrelationResult(qualifying_entries=4, sufficient_data=False)

    def test_min_entries_override(self, mixed_week):
        result = analyze_correlation(mixed_week[:4], min_entries=4)
        assert result.sufficient_data is True

    def test_empty(self):
        result = analyze_correlation([])

        assert result.sufficient_data is False
        assert result.qualifying_entries == 0

    def test_missing_text_excluded(self, mixed_week):
        mixed_week.append(EntryFactory.create(date(2024, 3, 7), energy=9, stress=1, energy_text="great"))

        assert analyze_correlation(mixed_week).qualifying_entries == 6

    def test_is_qualifying(self):
        complete = make_day(1, 5, 5, "walk", "email")
        no_stress = EntryFactory.create(date(2024, 3, 1), energy=5, energy_text="walk", stress_text="email")

        assert is_qualifying(complete) is True
        assert is_qualifying(no_stress) is False
        assert is_qualifying({'date': '2024-03-01'}) is False

    def test_entry_missing_fields_is_not_qualifying(self, mixed_week):
        mixed_week.append(Entry(date(2024, 3, 7), energy_levels=None, stress_levels=None,
                                energy_source_text=None, stress_source_text=None))

        assert analyze_correlation(mixed_week).qualifying_entries == 6


class TestCorrelationDays:
    """Reported days keep the entry they came from."""

    def test_optimal_days_carry_entries(self, mixed_week):
        result = analyze_correlation(mixed_week)

        assert [d.entry for d in result.optimal_days] == mixed_week[:2]
        assert result.optimal_days[0].entry.energy_source_text == "great run"

    def test_risk_days_carry_entries(self, mixed_week):
        result = analyze_correlation(mixed_week)

        assert [d.entry.stress_source_text for d in result.risk_days] == ["awful deadline", "terrible boss"]
