"""Windowed and cumulative loudness aggregation."""
from __future__ import annotations

from collections import deque

from streamqc.types import InstantMetrics
from streamqc.utils.numeric import FLOOR_DB, finite_or

SHORT_TERM_MS = 3000.0
MOMENTARY_MS = 400.0


class RollingAggregator:
    """
    Rolling loudness windows plus lifetime aggregates for one session.

    The sample queue holds ``(timestamp_ms, loudness_db)`` pairs for the
    last ``short_term_ms``; the momentary window is the newest
    ``momentary_ms`` of the same queue. ``max_true_peak_db`` never
    decreases and ``min_correlation`` never increases until ``reset()``.
    """

    def __init__(
        self,
        *,
        short_term_ms: float = SHORT_TERM_MS,
        momentary_ms: float = MOMENTARY_MS,
        floor_db: float = FLOOR_DB
    ):
        if short_term_ms <= 0 or momentary_ms <= 0:
            raise ValueError("window lengths must be > 0.")
        if momentary_ms > short_term_ms:
            raise ValueError("momentary window must fit in the short-term window.")
        self.short_term_ms = float(short_term_ms)
        self.momentary_ms = float(momentary_ms)
        self.floor_db = float(floor_db)
        self.reset()

    def reset(self) -> None:
        self._samples: deque[tuple[float, float]] = deque()
        self._sum = 0.0
        self._count = 0
        self.short_term_db = self.floor_db
        self.momentary_db = self.floor_db
        self.max_true_peak_db = self.floor_db
        self.min_correlation = 1.0

    @property
    def count(self) -> int:
        return self._count

    @property
    def window_size(self) -> int:
        return len(self._samples)

    @property
    def average_db(self) -> float:
        """Lifetime mean loudness; never windowed, never decays."""
        if self._count == 0:
            return self.floor_db
        return self._sum / self._count

    def observe_peak(self, true_peak_db: float) -> None:
        """Fold a peak reading into the lifetime maximum."""
        tp = finite_or(true_peak_db, self.floor_db)
        if tp > self.max_true_peak_db:
            self.max_true_peak_db = tp

    def observe_correlation(self, correlation: float) -> None:
        """Fold a correlation reading into the lifetime minimum."""
        corr = finite_or(correlation, 0.0)
        if corr < self.min_correlation:
            self.min_correlation = corr

    def update(self, metrics: InstantMetrics, now_ms: float) -> None:
        """
        Fold one tick of instantaneous metrics into the aggregates.

        Args:
            metrics: The tick's instantaneous metrics
            now_ms: Monotonic wall-clock timestamp in milliseconds
        """
        now_ms = float(now_ms)
        loudness = finite_or(metrics.loudness_db, self.floor_db)

        self._samples.append((now_ms, loudness))
        cutoff_short = now_ms - self.short_term_ms
        while self._samples and self._samples[0][0] < cutoff_short:
            self._samples.popleft()

        if self._samples:
            short_avg = sum(v for _, v in self._samples) / len(self._samples)
        else:
            short_avg = loudness
        self.short_term_db = short_avg

        cutoff_mom = now_ms - self.momentary_ms
        mom_sum = 0.0
        mom_count = 0
        for t, v in reversed(self._samples):
            if t < cutoff_mom:
                break
            mom_sum += v
            mom_count += 1
        self.momentary_db = mom_sum / mom_count if mom_count > 0 else short_avg

        self._sum += loudness
        self._count += 1

        self.observe_peak(metrics.true_peak_db)
        self.observe_correlation(metrics.correlation)
