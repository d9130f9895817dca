"""
Test factories for creating journal entries.

Usage:
    from journal.tests.factories import EntryFactory

    entry = EntryFactory.create(energy=8, energy_text="good sleep")
    series = EntryFactory.series(date(2024, 1, 1), days=40, energy=6)
"""
from datetime import date, timedelta

from journal.domain import Entry, PeriodLevels


class EntryFactory:
    """Factory for creating test entries."""

    counter = 0

    @classmethod
    def create(cls, entry_date=None, energy=None, stress=None,
               energy_text="", stress_text="", **kwargs):
        """
        Build an Entry.

        energy/stress may be a number (morning reading only), a tuple of up to
        three readings (morning, afternoon, evening) or a PeriodLevels.
        """
        cls.counter += 1
        if entry_date is None:
            entry_date = date(2024, 1, 1) + timedelta(days=cls.counter)

        defaults = {
            'date': entry_date,
            'energy_levels': _levels(energy),
            'stress_levels': _levels(stress),
            'energy_source_text': energy_text,
            'stress_source_text': stress_text,
        }
        defaults.update(kwargs)
        return Entry(**defaults)

    @classmethod
    def series(cls, start, days, **kwargs):
        """One entry per consecutive day starting at start."""
        return [cls.create(start + timedelta(days=i), **kwargs) for i in range(days)]


def _levels(value):
    if value is None:
        return PeriodLevels()
    if isinstance(value, PeriodLevels):
        return value
    if isinstance(value, (int, float)):
        return PeriodLevels(morning=value)
    readings = list(value) + [None] * (3 - len(value))
    return PeriodLevels(*readings[:3])


def raw_entry(entry_date='2024-01-01', **overrides):
    """Raw dict shaped like the capture UI's stored entries."""
    data = {
        'date': entry_date,
        'energyLevels': {'morning': 7, 'afternoon': 6, 'evening': None},
        'stressLevels': {'morning': 3, 'afternoon': None, 'evening': 4},
        'energySources': 'good sleep, morning walk',
        'stressSources': 'deadline pressure',
    }
    data.update(overrides)
    return data
