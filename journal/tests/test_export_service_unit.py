"""
Unit tests for journal/services/export_service.py

Tests aggregate series export to rows, DataFrame, CSV and JSON.
"""
import json

import pytest

from journal.behavioral.insights_engine import InsightRecord, InsightType
from journal.domain import AggregateBucket
from journal.exceptions import ExportError
from journal.services.export_service import EXPORT_COLUMNS, ExportService


@pytest.fixture
def buckets():
    return [
        AggregateBucket(
            bucket_key='2024-01-01', average_energy=6.5, average_stress=None,
            top_energy_sources=('coffee', 'walk'), entry_count=2,
        ),
        AggregateBucket(
            bucket_key='2024-01-02', average_energy=7.0, average_stress=3.25,
            top_stress_sources=('deadline',), entry_count=1,
        ),
    ]


class TestToRows:
    """Tests for ExportService.to_rows."""

    def test_rows(self, buckets):
        rows = ExportService.to_rows(buckets)

        assert rows[0] == {
            'date': '2024-01-01',
            'energy': 6.5,
            'stress': None,
            'entryCount': 2,
            'topEnergySources': ['coffee', 'walk'],
            'topStressSources': [],
        }
        assert rows[1]['stress'] == 3.25

    def test_empty(self):
        assert ExportService.to_rows([]) == []


class TestToDataFrame:
    """Tests for ExportService.to_dataframe."""

    def test_columns(self, buckets):
        df = ExportService.to_dataframe(buckets)

        assert list(df.columns) == EXPORT_COLUMNS
        assert len(df) == 2
        assert df['stress'].isna().tolist() == [True, False]

    def test_empty_keeps_columns(self):
        df = ExportService.to_dataframe([])

        assert df.empty
        assert list(df.columns) == EXPORT_COLUMNS


class TestToCsv:
    """Tests for ExportService.to_csv."""

    def test_csv(self, buckets):
        expected = (
            '"date","energy","stress","entryCount","topEnergySources","topStressSources"\n'
            '"2024-01-01","6.50","","2","coffee; walk",""\n'
            '"2024-01-02","7.00","3.25","1","","deadline"\n'
        )

        assert ExportService.to_csv(buckets) == expected

    def test_empty(self):
        assert ExportService.to_csv([]) == ''


class TestToJson:
    """Tests for JSON export."""

    def test_json(self, buckets):
        data = json.loads(ExportService.to_json(buckets))

        assert data == ExportService.to_rows(buckets)
        assert data[0]['stress'] is None

    def test_insights_to_json(self):
        record = InsightRecord(
            title="Physical activities significantly boost your energy",
            description="Pattern detected 3 times.",
            confidence=0.95,
            insight_type=InsightType.ENERGY_PATTERN,
            metric='energy',
            category='physical',
        )

        data = json.loads(ExportService.insights_to_json([record]))

        assert data == [{
            'kind': 'energy_pattern',
            'metric': 'energy',
            'category': 'physical',
            'title': "Physical activities significantly boost your energy",
            'description': "Pattern detected 3 times.",
            'confidence': 0.95,
        }]


class TestExport:
    """Tests for ExportService.export."""

    def test_csv(self, buckets):
        assert ExportService.export(buckets, 'csv') == ExportService.to_csv(buckets)

    def test_json_default(self, buckets):
        assert ExportService.export(iter(buckets)) == ExportService.to_json(buckets)

    def test_unsupported_format(self, buckets):
        with pytest.raises(ExportError) as exc_info:
            ExportService.export(buckets, 'xlsx')

        assert exc_info.value.export_type == 'xlsx'
