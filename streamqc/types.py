from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import numpy as np


class Status(str, Enum):
    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


class MonoCompat(str, Enum):
    SAFE = "safe"
    WATCH = "watch"
    RISK = "risk"


_STATUS_SEVERITY = {Status.OK: 0, Status.WARN: 1, Status.FAIL: 2}
_MONO_SEVERITY = {MonoCompat.SAFE: 0, MonoCompat.WATCH: 1, MonoCompat.RISK: 2}


def status_severity(status: Status) -> int:
    """Severity rank used for latch comparisons (FAIL > WARN > OK)."""
    return _STATUS_SEVERITY[Status(status)]


def mono_severity(state: MonoCompat) -> int:
    """Severity rank for mono compatibility (RISK > WATCH > SAFE)."""
    return _MONO_SEVERITY[MonoCompat(state)]


@dataclass(frozen=True)
class AudioBuffer:
    samples: np.ndarray
    fs: float
    duration: float
    channels: int = 2
    backend: str = "unknown"
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class StereoFrame:
    left: np.ndarray
    right: np.ndarray


@dataclass(frozen=True)
class InstantMetrics:
    loudness_db: float
    true_peak_db: float
    correlation: float
    width: float
    rms_db: float
    dynamic_range_db: float


@dataclass(frozen=True)
class TimelineSample:
    t: float
    short_term_db: float
    momentary_db: float


@dataclass(frozen=True)
class Segment:
    start_index: int
    end_index: int

    @property
    def length(self) -> int:
        return self.end_index - self.start_index + 1


@dataclass(frozen=True)
class TargetProfile:
    id: str
    label: str
    target_lufs: float
    tolerance_lu: float = 1.0


@dataclass(frozen=True)
class VerdictSnapshot:
    max_true_peak_db_ever: float
    min_correlation_ever: float
    loudness_status: Status
    true_peak_status: Status
    stereo_status: Status
    verdict: Status


@dataclass(frozen=True)
class MetricDecision:
    metric: str
    value: float
    units: str
    raw_status: Status
    status: Status
    notes: str = ""


@dataclass(frozen=True)
class PublishedMeters:
    loudness_db: float
    short_term_db: float
    momentary_db: float
    average_db: float
    rms_db: float
    true_peak_db: float
    dynamic_range_db: float
    width: float
    correlation: float
    media_time_s: float
