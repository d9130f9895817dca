"""
Export Service
Handles export of aggregate series and insights (rows, DataFrame, CSV, JSON)
"""
import csv
import json
import logging
from typing import Iterable, List

import pandas as pd

from journal.behavioral.insights_engine import InsightRecord
from journal.domain import AggregateBucket
from journal.exceptions import ExportError
from journal.schemas import AggregateRowSchema, InsightRecordSchema

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ['date', 'energy', 'stress', 'entryCount', 'topEnergySources', 'topStressSources']
SOURCE_JOINER = '; '
EXPORT_FORMATS = ('csv', 'json')


def _format_level(value) -> str:
    if value is None or pd.isna(value):
        return ''
    return f"{value:.2f}"


class ExportService:
    """Service for exporting aggregate series in tabular form"""

    @staticmethod
    def to_rows(buckets: Iterable[AggregateBucket]) -> List[dict]:
        """One dict per bucket with the export column names."""
        return AggregateRowSchema(many=True).dump(list(buckets))

    @staticmethod
    def to_dataframe(buckets: Iterable[AggregateBucket]) -> pd.DataFrame:
        """
        Aggregate series as a DataFrame.

        Missing averages are NaN here; source columns hold lists.
        """
        rows = ExportService.to_rows(buckets)
        df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
        df['energy'] = pd.to_numeric(df['energy'], errors='coerce')
        df['stress'] = pd.to_numeric(df['stress'], errors='coerce')
        return df

    @staticmethod
    def to_csv(buckets: Iterable[AggregateBucket]) -> str:
        """
        CSV text with every cell quoted.

        Averages use two decimals (blank when absent); source lists are
        joined with '; '. An empty series exports as an empty string.
        """
        df = ExportService.to_dataframe(buckets)
        if df.empty:
            return ''

        df['energy'] = df['energy'].map(_format_level)
        df['stress'] = df['stress'].map(_format_level)
        df['topEnergySources'] = df['topEnergySources'].map(SOURCE_JOINER.join)
        df['topStressSources'] = df['topStressSources'].map(SOURCE_JOINER.join)

        return df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator='\n')

    @staticmethod
    def to_json(buckets: Iterable[AggregateBucket]) -> str:
        return json.dumps(ExportService.to_rows(buckets), indent=2)

    @staticmethod
    def insights_to_json(records: Iterable[InsightRecord]) -> str:
        schema = InsightRecordSchema(many=True)
        return json.dumps(schema.dump(list(records)), indent=2)

    @staticmethod
    def export(buckets: Iterable[AggregateBucket], format: str = 'json') -> str:
        """
        Export an aggregate series in the requested format.

        Raises:
            ExportError: For an unsupported format
        """
        buckets = list(buckets)
        if format == 'csv':
            content = ExportService.to_csv(buckets)
        elif format == 'json':
            content = ExportService.to_json(buckets)
        else:
            raise ExportError(format, f"Unsupported format. Valid options: {', '.join(EXPORT_FORMATS)}")

        logger.info(f"Exported {len(buckets)} aggregate rows as {format}")
        return content
