"""
History filtering and frequency aggregation.
Pure functions of the record slice they are given.
"""
from collections import Counter
from dlt_ai.config import RECENT_WINDOW


def filter_history(records):
    """Drop blocked draws, keeping chronological order"""
    return [r for r in records if not r.blocked]


def window_slice(records, window=RECENT_WINDOW):
    """Last `window` records (all of them when window is None)"""
    if window is None:
        return list(records)
    start = max(0, len(records) - window)
    return list(records[start:])


def zone_numbers(record, zone):
    return record.front if zone == "front" else record.back


class FrequencyTable:
    """
    Occurrence counts per number for one zone.
    Absent numbers count as zero; `seen` holds every number with count > 0.
    """

    def __init__(self, counts=None):
        self._counts = Counter(counts or {})

    @classmethod
    def from_records(cls, records, zone, window=RECENT_WINDOW):
        counts = Counter()
        for record in window_slice(records, window):
            for n in zone_numbers(record, zone):
                counts[n] += 1
        return cls(counts)

    @classmethod
    def from_groups(cls, groups, zone):
        """Counts over the numbers used by already generated groups"""
        counts = Counter()
        for group in groups:
            numbers = group.front if zone == "front" else group.back
            for n in numbers:
                counts[n] += 1
        return cls(counts)

    def count(self, number):
        return self._counts.get(number, 0)

    @property
    def seen(self):
        return {n for n, c in self._counts.items() if c > 0}

    def as_dict(self):
        return {n: c for n, c in self._counts.items() if c > 0}

    def __getitem__(self, number):
        return self.count(number)

    def __len__(self):
        return len(self.seen)

    def __repr__(self):
        return f"FrequencyTable({dict(sorted(self.as_dict().items()))})"


class WindowStats:
    """
    Near-term statistics used by the frequency policies:
    counts and seen sets for both zones over the trailing window.
    """

    def __init__(self, records, window=RECENT_WINDOW):
        self.window = window
        self.size = len(window_slice(records, window))
        self.front = FrequencyTable.from_records(records, "front", window)
        self.back = FrequencyTable.from_records(records, "back", window)

    def zone(self, zone):
        return self.front if zone == "front" else self.back


def appearance_positions(records, zone):
    """number -> list of record indices where it appeared"""
    positions = {}
    for idx, record in enumerate(records):
        for n in zone_numbers(record, zone):
            positions.setdefault(n, []).append(idx)
    return positions


def has_consecutive_numbers(numbers):
    """True when the numbers contain two adjacent integers"""
    ordered = sorted(numbers)
    return any(ordered[i + 1] - ordered[i] == 1 for i in range(len(ordered) - 1))
