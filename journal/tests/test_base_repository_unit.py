"""
Unit tests for journal/repositories/base_repository.py

Tests the entry store access layer:
- Raw entry validation through EntrySchema
- Lenient bulk loading
- InMemoryEntryStore queries
"""
import pytest
from datetime import date
from unittest.mock import patch

from journal.domain import Entry, PeriodLevels
from journal.exceptions import MalformedEntryError
from journal.repositories.base_repository import (
    EntryStore,
    InMemoryEntryStore,
    load_entries,
    load_entry,
)
from journal.tests.factories import EntryFactory, raw_entry
from journal.utils.time_utils import DateRange


# ============================================================================
# Tests for load_entry
# ============================================================================

class TestLoadEntry:
    """Tests for strict single-entry loading."""

    def test_loads_camel_case_dict(self):
        entry = load_entry(raw_entry('2024-02-03'))

        assert entry.date == date(2024, 2, 3)
        assert entry.energy_levels == PeriodLevels(morning=7, afternoon=6)
        assert entry.stress_levels == PeriodLevels(morning=3, evening=4)
        assert entry.energy_source_text == 'good sleep, morning walk'
        assert entry.stress_source_text == 'deadline pressure'

    def test_missing_levels_default_to_empty(self):
        entry = load_entry({'date': '2024-02-03'})

        assert entry.energy_levels == PeriodLevels()
        assert entry.stress_levels.has_data is False
        assert entry.energy_source_text == ""

    def test_null_levels_and_text(self):
        entry = load_entry(raw_entry(energyLevels=None, stressSources=None))

        assert entry.energy_levels == PeriodLevels()
        assert entry.stress_source_text == ""

    def test_unknown_keys_ignored(self):
        entry = load_entry(raw_entry(mood='fine'))
        assert isinstance(entry, Entry)

    def test_missing_date(self):
        raw = raw_entry()
        del raw['date']

        with pytest.raises(MalformedEntryError) as exc_info:
            load_entry(raw)

        assert 'date' in exc_info.value.errors

    def test_invalid_date(self):
        with pytest.raises(MalformedEntryError):
            load_entry(raw_entry('not-a-date'))

    @pytest.mark.parametrize("value", [0, 11, -3])
    def test_level_out_of_range(self, value):
        with pytest.raises(MalformedEntryError) as exc_info:
            load_entry(raw_entry(energyLevels={'morning': value}))

        assert 'energyLevels' in exc_info.value.errors

    def test_level_not_a_number(self):
        with pytest.raises(MalformedEntryError):
            load_entry(raw_entry(stressLevels={'evening': 'high'}))

    def test_keeps_raw_on_error(self):
        raw = raw_entry('bad')

        with pytest.raises(MalformedEntryError) as exc_info:
            load_entry(raw)

        assert exc_info.value.raw is raw


# ============================================================================
# Tests for load_entries
# ============================================================================

class TestLoadEntries:
    """Tests for lenient bulk loading."""

    def test_skips_malformed(self):
        raw = [raw_entry('2024-01-01'), raw_entry('oops'), raw_entry('2024-01-02')]

        entries, skipped = load_entries(raw)

        assert [e.date for e in entries] == [date(2024, 1, 1), date(2024, 1, 2)]
        assert skipped == 1

    @patch('journal.repositories.base_repository.logger')
    def test_logs_skipped_index(self, mock_logger):
        load_entries([raw_entry('2024-01-01'), raw_entry('oops')])

        mock_logger.warning.assert_called_once()
        assert 'index 1' in mock_logger.warning.call_args[0][0]

    def test_passes_entries_through(self):
        entry = EntryFactory.create(date(2024, 1, 1), energy=5)

        entries, skipped = load_entries([entry])

        assert entries == [entry]
        assert skipped == 0

    def test_non_dict_is_skipped(self):
        entries, skipped = load_entries([None, 42])

        assert entries == []
        assert skipped == 2

    def test_none_input(self):
        assert load_entries(None) == ([], 0)


# ============================================================================
# Tests for InMemoryEntryStore
# ============================================================================

class TestInMemoryEntryStore:
    """Tests for the in-memory entry store."""

    @pytest.fixture
    def month(self):
        return InMemoryEntryStore(EntryFactory.series(date(2024, 1, 1), 31, energy=5))

    def test_satisfies_protocol(self, month):
        assert isinstance(month, EntryStore)

    def test_list_all_ascending(self):
        entries = EntryFactory.series(date(2024, 1, 1), 3, energy=5)
        store = InMemoryEntryStore(reversed(entries))

        assert store.list_entries() == entries

    def test_list_by_date_range(self, month):
        result = month.list_entries(DateRange(date(2024, 1, 10), date(2024, 1, 12)))

        assert [e.date.day for e in result] == [10, 11, 12]

    def test_list_last_n(self, month):
        result = month.list_entries(3)

        assert [e.date.day for e in result] == [29, 30, 31]

    def test_list_more_than_available(self, month):
        assert len(month.list_entries(100)) == 31

    def test_list_zero(self, month):
        assert month.list_entries(0) == []

    def test_list_invalid_argument(self, month):
        with pytest.raises(TypeError):
            month.list_entries('last week')

    def test_bool_is_not_a_count(self, month):
        with pytest.raises(TypeError):
            month.list_entries(True)

    def test_add_replaces_same_date(self):
        store = InMemoryEntryStore()
        store.add(EntryFactory.create(date(2024, 1, 1), energy=3))
        store.add(EntryFactory.create(date(2024, 1, 1), energy=9))

        assert len(store) == 1
        assert store.list_entries()[0].energy_levels.morning == 9

    def test_add_rejects_non_entries(self):
        with pytest.raises(TypeError):
            InMemoryEntryStore().add({'date': '2024-01-01'})

    def test_remove(self, month):
        assert month.remove(date(2024, 1, 1)) is True
        assert month.remove(date(2024, 1, 1)) is False
        assert len(month) == 30

    def test_from_raw(self):
        store = InMemoryEntryStore.from_raw([raw_entry('2024-01-02'), raw_entry('bad'), raw_entry('2024-01-01')])

        assert [e.date for e in store.list_entries()] == [date(2024, 1, 1), date(2024, 1, 2)]
