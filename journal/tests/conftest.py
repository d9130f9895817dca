"""
Pytest configuration and fixtures for journal insight tests.

This module provides reusable fixtures for testing.
"""
import pytest
from datetime import date

from journal.helpers.cache_helpers import InsightCache
from journal.repositories.base_repository import InMemoryEntryStore
from journal.tests.factories import EntryFactory
from journal.utils.config import InsightContext


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, start=1_700_000_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, millis):
        self.now += millis


@pytest.fixture
def clock():
    """Returns a controllable clock."""
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Returns an InsightCache driven by the fake clock."""
    return InsightCache(clock=clock)


@pytest.fixture
def context():
    """Returns the default insight context."""
    return InsightContext()


@pytest.fixture
def good_sleep_entries():
    """
    2024-01-01..05 with "good sleep" on three days averaging 8.0, 8.2 and 7.9.
    """
    return [
        EntryFactory.create(date(2024, 1, 1), energy=8.0, energy_text="good sleep"),
        EntryFactory.create(date(2024, 1, 2), energy=5),
        EntryFactory.create(date(2024, 1, 3), energy=8.2, energy_text="good sleep"),
        EntryFactory.create(date(2024, 1, 4), energy=6),
        EntryFactory.create(date(2024, 1, 5), energy=7.9, energy_text="good sleep"),
    ]


@pytest.fixture
def store(good_sleep_entries):
    """Returns an in-memory store holding the good sleep entries."""
    return InMemoryEntryStore(good_sleep_entries)
