"""
Custom Exception Classes

Provides specific exception types for the insight engine.

Shortages of data are never raised: analysis functions return explicit
flagged results (see journal.behavioral.pattern_extractor) so callers can
show progress instead of an error.
"""


class JournalException(Exception):
    """Base exception for all journal-related errors"""
    pass


class InvalidGranularityError(JournalException, ValueError):
    """Raised when an unknown aggregation granularity is requested"""
    def __init__(self, granularity: str, valid_choices: list):
        self.granularity = granularity
        self.valid_choices = valid_choices
        super().__init__(
            f"Invalid granularity '{granularity}'. Valid options: {', '.join(valid_choices)}"
        )


class InvalidFieldError(JournalException, ValueError):
    """Raised when a metric field other than energy/stress is requested"""
    def __init__(self, field: str, valid_fields: list):
        self.field = field
        self.valid_fields = valid_fields
        super().__init__(
            f"Invalid field '{field}'. Valid options: {', '.join(valid_fields)}"
        )


class InvalidDateRangeError(JournalException, ValueError):
    """Raised when date range is invalid (e.g., start > end)"""
    def __init__(self, start_date, end_date):
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(f"Invalid date range: {start_date} to {end_date}")


class MalformedEntryError(JournalException):
    """Raised by the strict loader when a raw entry fails validation"""
    def __init__(self, errors: dict, raw: dict = None):
        self.errors = errors
        self.raw = raw
        super().__init__(f"Malformed entry: {errors}")


class ExportError(JournalException):
    """Raised when data export fails"""
    def __init__(self, export_type: str, reason: str):
        self.export_type = export_type
        self.reason = reason
        super().__init__(f"Export failed ({export_type}): {reason}")
