"""Mutable per-session engine state."""
from __future__ import annotations

from dataclasses import dataclass

from streamqc.analysis.rolling import RollingAggregator
from streamqc.analysis.timeline import TimelineStore
from streamqc.config import EngineConfig
from streamqc.engine.throttle import RateGate
from streamqc.metrics.instant import silent_metrics
from streamqc.metrics.smoothing import ExponentialSmoother
from streamqc.thresholds.evaluator import VerdictLatches, VerdictResult
from streamqc.thresholds.latch import StatusLatch
from streamqc.types import InstantMetrics, MonoCompat, PublishedMeters, mono_severity


def _silent_published(floor_db: float) -> PublishedMeters:
    return PublishedMeters(
        loudness_db=floor_db,
        short_term_db=floor_db,
        momentary_db=floor_db,
        average_db=floor_db,
        rms_db=floor_db,
        true_peak_db=floor_db,
        dynamic_range_db=0.0,
        width=0.0,
        correlation=0.0,
        media_time_s=0.0,
    )


@dataclass
class EngineState:
    """
    Everything one tick reads and writes.

    Owned by a single writer (the tick driver). A reset builds a fresh
    instance instead of clearing fields one by one.
    """
    rolling: RollingAggregator
    timeline: TimelineStore
    latches: VerdictLatches
    mono_smoother: ExponentialSmoother
    mono_latch: StatusLatch
    timeline_gate: RateGate
    publish_gate: RateGate
    instant: InstantMetrics
    published: PublishedMeters
    mono_status: MonoCompat | None = None
    verdict: VerdictResult | None = None
    media_time_s: float = 0.0
    ticks: int = 0
    next_media_time_s: float = 0.0


def new_engine_state(config: EngineConfig) -> EngineState:
    """Build a fresh state for a new session."""
    return EngineState(
        rolling=RollingAggregator(
            short_term_ms=config.short_term_ms,
            momentary_ms=config.momentary_ms,
            floor_db=config.floor_db,
        ),
        timeline=TimelineStore(
            sample_rate_hz=config.timeline_hz,
            capacity=config.timeline_capacity,
        ),
        latches=VerdictLatches(hold_ms=config.hold_ms),
        mono_smoother=ExponentialSmoother(config.mono_smoothing_alpha),
        mono_latch=StatusLatch(
            MonoCompat.SAFE,
            hold_ms=config.mono_hold_ms,
            severity=mono_severity,
        ),
        timeline_gate=RateGate(config.timeline_hz),
        publish_gate=RateGate(config.ui_hz),
        instant=silent_metrics(config.floor_db),
        published=_silent_published(config.floor_db),
    )
