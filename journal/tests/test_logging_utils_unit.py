"""
Unit tests for journal/utils/logging_utils.py

Tests structured logging utilities:
- Analysis ID management
- StructuredFormatter
- log_with_context
- log_function_call decorator
"""
import json
import logging
import sys

import pytest
from unittest.mock import patch

from journal.utils.logging_utils import (
    StructuredFormatter,
    clear_analysis_context,
    get_analysis_id,
    log_function_call,
    log_with_context,
    new_analysis_id,
    set_analysis_id,
)


@pytest.fixture(autouse=True)
def clean_context():
    clear_analysis_context()
    yield
    clear_analysis_context()


def make_record(message="hello", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name='journal.test', level=level, pathname=__file__, lineno=1,
        msg=message, args=(), exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# ============================================================================
# Tests for analysis ID management
# ============================================================================

class TestAnalysisId:
    """Tests for the thread-local analysis ID."""

    def test_default_is_none(self):
        assert get_analysis_id() is None

    def test_set_and_get(self):
        set_analysis_id('abc123')
        assert get_analysis_id() == 'abc123'

    def test_set_generates_when_omitted(self):
        analysis_id = set_analysis_id()

        assert len(analysis_id) == 8
        assert get_analysis_id() == analysis_id

    def test_clear(self):
        set_analysis_id('abc123')
        clear_analysis_context()
        assert get_analysis_id() is None

    def test_clear_without_id_is_safe(self):
        clear_analysis_context()
        assert get_analysis_id() is None

    def test_new_ids_differ(self):
        assert new_analysis_id() != new_analysis_id()


# ============================================================================
# Tests for StructuredFormatter
# ============================================================================

class TestStructuredFormatter:
    """Tests for JSON log formatting."""

    def test_outputs_json(self):
        output = StructuredFormatter().format(make_record("Patterns extracted"))
        data = json.loads(output)

        assert data['message'] == "Patterns extracted"
        assert data['level'] == 'INFO'
        assert data['logger'] == 'journal.test'
        assert 'timestamp' in data

    def test_includes_analysis_id(self):
        set_analysis_id('run-1')
        data = json.loads(StructuredFormatter().format(make_record()))

        assert data['analysis_id'] == 'run-1'

    def test_includes_extra_fields(self):
        data = json.loads(StructuredFormatter().format(make_record(field='energy', count=2)))

        assert data['field'] == 'energy'
        assert data['count'] == 2

    def test_non_serializable_extra_uses_str(self):
        data = json.loads(StructuredFormatter().format(make_record(when=object)))

        assert isinstance(data['when'], str)

    def test_includes_exception(self):
        try:
            raise ValueError("broken")
        except ValueError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(StructuredFormatter().format(record))
        assert 'ValueError' in data['exception']


# ============================================================================
# Tests for log_with_context and log_function_call
# ============================================================================

class TestLogWithContext:
    """Tests for log_with_context."""

    @patch('journal.utils.logging_utils.logger')
    def test_logs_at_level_with_extra(self, mock_logger):
        log_with_context('warning', 'Few entries', entries=2)

        mock_logger.warning.assert_called_once_with('Few entries', extra={'entries': 2})

    @patch('journal.utils.logging_utils.logger')
    def test_unknown_level_falls_back_to_info(self, mock_logger):
        mock_logger.mock_add_spec(['info'])
        log_with_context('verbose', 'message')

        mock_logger.info.assert_called_once()


class TestLogFunctionCall:
    """Tests for log_function_call decorator."""

    @patch('journal.utils.logging_utils.logger')
    def test_returns_result(self, mock_logger):
        @log_function_call(log_args=True, log_result=True)
        def double(x):
            return x * 2

        assert double(4) == 8
        assert mock_logger.debug.call_count == 2

    @patch('journal.utils.logging_utils.logger')
    def test_logs_and_reraises_errors(self, mock_logger):
        @log_function_call()
        def fail():
            raise RuntimeError("nope")

        with pytest.raises(RuntimeError):
            fail()

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args[1]['extra']['error_type'] == 'RuntimeError'
