"""
Unit tests for journal/helpers/metric_helpers.py

Tests null-safe averaging and correlation helpers.
"""
import pytest
from datetime import date

from journal.domain import PeriodLevels
from journal.helpers.metric_helpers import (
    compute_pearson_correlation,
    correlation_confidence,
    correlation_strength,
    entry_average,
    pooled_mean,
    pooled_readings,
    safe_mean,
)
from journal.tests.factories import EntryFactory


class TestSafeMean:
    """Tests for safe_mean."""

    def test_ignores_none(self):
        assert safe_mean([2, None, 4]) == 3.0

    def test_all_none_is_none(self):
        assert safe_mean([None, None]) is None

    def test_empty_is_none(self):
        assert safe_mean([]) is None


class TestPooling:
    """Tests for pooled readings across entries."""

    def test_pooled_readings_flatten_periods(self):
        entries = [
            EntryFactory.create(date(2024, 1, 1), energy=(8, 6, 4)),
            EntryFactory.create(date(2024, 1, 2), energy=(2, None, None)),
        ]

        assert pooled_readings(entries, 'energy') == [8, 6, 4, 2]

    def test_pooled_mean_weights_each_reading(self):
        """Pooled mean of {8,6,4} and {2} is 5.0, not the mean of entry averages (4.0)."""
        entries = [
            EntryFactory.create(date(2024, 1, 1), energy=(8, 6, 4)),
            EntryFactory.create(date(2024, 1, 2), energy=(2, None, None)),
        ]

        assert pooled_mean(entries, 'energy') == 5.0

    def test_pooled_mean_without_readings(self):
        entries = [EntryFactory.create(date(2024, 1, 1))]
        assert pooled_mean(entries, 'stress') is None

    def test_entry_average_excludes_missing_periods(self):
        entry = EntryFactory.create(date(2024, 1, 1), stress=PeriodLevels(morning=3, evening=5))
        assert entry_average(entry, 'stress') == 4.0

    def test_entry_average_empty(self):
        entry = EntryFactory.create(date(2024, 1, 1))
        assert entry_average(entry, 'energy') is None


class TestPearsonCorrelation:
    """Tests for compute_pearson_correlation."""

    def test_perfect_negative(self):
        result = compute_pearson_correlation([1, 2, 3, 4], [8, 6, 4, 2])

        assert result['correlation'] == pytest.approx(-1.0)
        assert result['sample_size'] == 4
        assert result['significant'] is True

    def test_too_few_points(self):
        result = compute_pearson_correlation([1, 2], [2, 1])

        assert result['correlation'] is None
        assert result['significant'] is False

    def test_zero_variance(self):
        result = compute_pearson_correlation([5, 5, 5], [1, 2, 3])

        assert result['correlation'] is None
        assert result['sample_size'] == 3

    def test_nan_pairs_removed(self):
        result = compute_pearson_correlation([1, 2, float('nan'), 4], [2, 4, 6, 8])

        assert result['sample_size'] == 3
        assert result['correlation'] == pytest.approx(1.0)

    def test_mismatched_lengths(self):
        result = compute_pearson_correlation([1, 2, 3], [1, 2])
        assert result['correlation'] is None


class TestCorrelationLabels:
    """Tests for correlation_strength and correlation_confidence."""

    @pytest.mark.parametrize("coefficient,expected", [
        (0.9, 'strong'),
        (-0.75, 'strong'),
        (0.5, 'moderate'),
        (0.4, 'weak'),
        (0.0, 'weak'),
        (None, 'none'),
    ])
    def test_strength(self, coefficient, expected):
        assert correlation_strength(coefficient) == expected

    def test_confidence_base_by_sample_size(self):
        assert correlation_confidence(5, 0.0) == pytest.approx(0.6)
        assert correlation_confidence(7, 0.0) == pytest.approx(0.8)
        assert correlation_confidence(14, 0.0) == pytest.approx(0.9)

    def test_confidence_adds_strength(self):
        assert correlation_confidence(14, -0.5) == pytest.approx(1.0)
        assert correlation_confidence(5, 0.5) == pytest.approx(0.7)

    def test_confidence_penalised_for_sparse_days(self):
        """7 entries over 30 expected days is below 70% coverage."""
        assert correlation_confidence(7, 0.0, expected_days=30) == pytest.approx(0.64)

    def test_confidence_capped(self):
        assert correlation_confidence(20, 1.0) == 1.0
