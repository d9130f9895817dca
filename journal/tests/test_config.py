"""
Tests for journal/utils/config.py and the Django app configuration.
"""
import pytest
from unittest.mock import patch

from django.apps import apps

from journal.behavioral.categories import ENERGY_PROFILE, STRESS_PROFILE
from journal.utils.config import DEFAULT_CONTEXT, InsightContext


class TestInsightContext:
    """Tests for the threshold bundle."""

    def test_defaults(self):
        context = InsightContext()

        assert context.energy_high_threshold == 7.0
        assert context.stress_high_threshold == 6.0
        assert context.min_pattern_entries == 3
        assert context.significance_min_count == 2
        assert context.top_pattern_limit == 3
        assert context.cache_ttl_ms == 300000

    def test_high_threshold(self):
        assert DEFAULT_CONTEXT.high_threshold('energy') == 7.0
        assert DEFAULT_CONTEXT.high_threshold('stress') == 6.0

    def test_profiles(self):
        assert DEFAULT_CONTEXT.profile('energy') is ENERGY_PROFILE
        assert DEFAULT_CONTEXT.profile('stress') is STRESS_PROFILE

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_CONTEXT.energy_high_threshold = 5

    def test_with_overrides(self):
        context = DEFAULT_CONTEXT.with_overrides(top_pattern_limit=5)

        assert context.top_pattern_limit == 5
        assert DEFAULT_CONTEXT.top_pattern_limit == 3

    @pytest.mark.parametrize("overrides", [
        {'min_pattern_entries': 0},
        {'significance_min_count': 0},
        {'top_pattern_limit': 0},
        {'cache_ttl_ms': 0},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            InsightContext(**overrides)


class TestFromSettings:
    """Tests for building a context from JOURNAL_INSIGHTS."""

    def test_reads_settings(self, settings):
        settings.JOURNAL_INSIGHTS = {'ENERGY_HIGH_THRESHOLD': 7.5, 'CACHE_TTL_MS': 60000}

        context = InsightContext.from_settings()

        assert context.energy_high_threshold == 7.5
        assert context.cache_ttl_ms == 60000
        assert context.stress_high_threshold == 6.0

    def test_missing_setting(self, settings):
        del settings.JOURNAL_INSIGHTS

        assert InsightContext.from_settings() == InsightContext()

    @patch('journal.utils.config.logger')
    def test_unknown_key_ignored(self, mock_logger, settings):
        settings.JOURNAL_INSIGHTS = {'COLOR': 'blue'}

        assert InsightContext.from_settings() == InsightContext()
        mock_logger.warning.assert_called_once()

    def test_profiles_cannot_be_overridden(self, settings):
        settings.JOURNAL_INSIGHTS = {'PROFILES': {}}

        assert InsightContext.from_settings().profile('energy') is ENERGY_PROFILE

    def test_invalid_value_raises(self, settings):
        settings.JOURNAL_INSIGHTS = {'TOP_PATTERN_LIMIT': 0}

        with pytest.raises(ValueError):
            InsightContext.from_settings()


def test_app_is_registered():
    config = apps.get_app_config('journal')
    assert config.verbose_name == "Journal Insights"
