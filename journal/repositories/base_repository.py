"""
Entry store access layer.

The insight engine reads journal entries through the EntryStore protocol and
never writes them back. InMemoryEntryStore is the reference implementation,
filled from raw entry dicts via the marshmallow EntrySchema.
"""
import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Protocol, Tuple, Union, runtime_checkable

from marshmallow import ValidationError

from journal.domain import Entry
from journal.exceptions import MalformedEntryError
from journal.schemas import EntrySchema
from journal.utils.time_utils import DateRange

logger = logging.getLogger(__name__)

DateRangeOrCount = Union[DateRange, int, None]

_entry_schema = EntrySchema()


@runtime_checkable
class EntryStore(Protocol):
    """Read-only source of journal entries."""

    def list_entries(self, date_range_or_count: DateRangeOrCount = None) -> List[Entry]:
        ...


# =============================================================================
# LOADING
# =============================================================================

def load_entry(raw: dict) -> Entry:
    """
    Validate and convert one raw entry dict.

    Raises:
        MalformedEntryError: If the dict fails validation
    """
    try:
        return _entry_schema.load(raw)
    except ValidationError as e:
        raise MalformedEntryError(e.messages, raw=raw) from e
    except (TypeError, ValueError) as e:
        raise MalformedEntryError({'_schema': [str(e)]}, raw=raw) from e


def load_entries(raw_entries: Iterable) -> Tuple[List[Entry], int]:
    """
    Convert raw entry dicts, skipping malformed ones.

    Returns:
        (entries, skipped_count)
    """
    entries = []
    skipped = 0
    for index, raw in enumerate(raw_entries or []):
        if isinstance(raw, Entry):
            entries.append(raw)
            continue
        try:
            entries.append(load_entry(raw))
        except MalformedEntryError as e:
            skipped += 1
            logger.warning(f"Skipping malformed entry at index {index}: {e.errors}")

    if skipped:
        logger.info(f"Loaded {len(entries)} entries, skipped {skipped} malformed")
    return entries, skipped


# =============================================================================
# IN-MEMORY STORE
# =============================================================================

class InMemoryEntryStore:
    """
    Entry store backed by a dict keyed on date.

    Holds at most one entry per calendar date; adding an entry for an
    existing date replaces it.
    """

    def __init__(self, entries: Optional[Iterable[Entry]] = None):
        self._entries: Dict[date, Entry] = {}
        for entry in entries or []:
            self.add(entry)

    @classmethod
    def from_raw(cls, raw_entries: Iterable) -> 'InMemoryEntryStore':
        entries, _ = load_entries(raw_entries)
        return cls(entries)

    def add(self, entry: Entry) -> None:
        if not isinstance(entry, Entry):
            raise TypeError(f"Expected Entry, got {type(entry).__name__}")
        if entry.date in self._entries:
            logger.debug(f"Replacing entry for {entry.date}")
        self._entries[entry.date] = entry

    def remove(self, entry_date: date) -> bool:
        return self._entries.pop(entry_date, None) is not None

    def list_entries(self, date_range_or_count: DateRangeOrCount = None) -> List[Entry]:
        """
        Entries in ascending date order.

        Args:
            date_range_or_count: DateRange to filter by, an int for the most
                recent N entries, or None for everything
        """
        ordered = [self._entries[d] for d in sorted(self._entries)]

        if date_range_or_count is None:
            return ordered
        if isinstance(date_range_or_count, DateRange):
            return [e for e in ordered if e.date in date_range_or_count]
        if isinstance(date_range_or_count, int) and not isinstance(date_range_or_count, bool):
            if date_range_or_count <= 0:
                return []
            return ordered[-date_range_or_count:]
        raise TypeError(
            f"list_entries expects DateRange, int or None, got {type(date_range_or_count).__name__}"
        )

    def __len__(self) -> int:
        return len(self._entries)
