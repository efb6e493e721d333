"""
StreamQC - Streaming loudness compliance meter

Real-time loudness, peak and stereo-image metering of a stereo stream
against a mastering target, with debounced pass/warn/fail status.
"""
from streamqc.version import __version__
from streamqc.types import (
    Status,
    MonoCompat,
    StereoFrame,
    InstantMetrics,
    TimelineSample,
    Segment,
    TargetProfile,
    VerdictSnapshot,
    PublishedMeters,
)
from streamqc.config import EngineConfig
from streamqc.engine import MeteringEngine

__all__ = [
    "__version__",
    "Status",
    "MonoCompat",
    "StereoFrame",
    "InstantMetrics",
    "TimelineSample",
    "Segment",
    "TargetProfile",
    "VerdictSnapshot",
    "PublishedMeters",
    "EngineConfig",
    "MeteringEngine",
]
