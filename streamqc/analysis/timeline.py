"""Fixed-capacity loudness timeline."""
from __future__ import annotations

import numpy as np

from streamqc.types import TimelineSample

TIMELINE_HZ = 20.0
TIMELINE_MAX_SECONDS = 600.0


class TimelineStore:
    """
    Circular buffer of ``(t, short_term_db, momentary_db)`` samples.

    Backing storage is three preallocated float64 arrays; the buffer never
    grows and the oldest samples are overwritten once it is full. Readers
    get an ordered, immutable snapshot which is cached until the next
    write or reset.
    """

    def __init__(
        self,
        *,
        sample_rate_hz: float = TIMELINE_HZ,
        max_duration_s: float = TIMELINE_MAX_SECONDS,
        capacity: int | None = None
    ):
        if sample_rate_hz <= 0:
            raise ValueError("sample_rate_hz must be > 0.")
        if capacity is None:
            capacity = int(round(float(sample_rate_hz) * float(max_duration_s)))
        capacity = int(capacity)
        if capacity <= 0:
            raise ValueError("timeline capacity must be > 0.")
        self.sample_rate_hz = float(sample_rate_hz)
        self.capacity = capacity
        self._t = np.zeros(capacity, dtype=np.float64)
        self._st = np.zeros(capacity, dtype=np.float64)
        self._m = np.zeros(capacity, dtype=np.float64)
        self.write_index = 0
        self.size = 0
        self.total_writes = 0
        self._version = 0
        self._cache: tuple[TimelineSample, ...] = ()
        self._cache_version = 0

    @property
    def interval_s(self) -> float:
        """Minimum spacing between admitted samples."""
        return 1.0 / self.sample_rate_hz

    def __len__(self) -> int:
        return self.size

    def record(self, sample: TimelineSample) -> None:
        i = self.write_index
        self._t[i] = sample.t
        self._st[i] = sample.short_term_db
        self._m[i] = sample.momentary_db
        self.write_index = (i + 1) % self.capacity
        self.size = min(self.capacity, self.size + 1)
        self.total_writes += 1
        self._version += 1

    def reset(self) -> None:
        self.write_index = 0
        self.size = 0
        self.total_writes = 0
        self._version += 1

    def _ordered_indices(self) -> np.ndarray:
        start = (self.write_index - self.size + self.capacity) % self.capacity
        return (start + np.arange(self.size)) % self.capacity

    def arrays(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return ordered copies of the time, short-term and momentary columns."""
        idx = self._ordered_indices()
        return self._t[idx], self._st[idx], self._m[idx]

    def snapshot(self) -> tuple[TimelineSample, ...]:
        """Chronological samples, oldest first."""
        if self._cache_version == self._version:
            return self._cache
        t, st, m = self.arrays()
        self._cache = tuple(
            TimelineSample(t=float(a), short_term_db=float(b), momentary_db=float(c))
            for a, b, c in zip(t, st, m)
        )
        self._cache_version = self._version
        return self._cache
