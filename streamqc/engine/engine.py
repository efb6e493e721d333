"""Streaming metering engine."""
from __future__ import annotations

import logging
import time
from typing import Protocol

from streamqc.analysis.segments import detect_problem_segments, segment_time_spans
from streamqc.config import EngineConfig
from streamqc.engine.state import EngineState, new_engine_state
from streamqc.metrics.instant import compute_instant_metrics
from streamqc.profiles.targets import DEFAULT_PROFILE_ID, resolve_target_profile
from streamqc.thresholds.classify import classify_mono_compat
from streamqc.thresholds.evaluator import VerdictResult, evaluate_verdict
from streamqc.types import (
    InstantMetrics,
    MonoCompat,
    PublishedMeters,
    Segment,
    Status,
    StereoFrame,
    TargetProfile,
    TimelineSample,
    VerdictSnapshot,
)

logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    def next_frame(self) -> StereoFrame | None:
        """Return the next stereo block, or None when nothing is available."""
        ...


def advance(
    state: EngineState,
    config: EngineConfig,
    profile: TargetProfile,
    frame: StereoFrame,
    *,
    now_ms: float,
    media_time_s: float,
    playing: bool = True
) -> VerdictResult:
    """
    Run one full-rate tick against ``state``.

    Order within the tick is fixed: instantaneous metrics, then rolling
    aggregation, then latch evaluation, so every stage sees the same
    frame. Timeline writes and published meters are throttled to
    ``timeline_hz`` and ``ui_hz``. While paused only the loudness/peak
    readings and the lifetime peak move.
    """
    metrics = compute_instant_metrics(
        frame, playing=playing, previous=state.instant, floor_db=config.floor_db
    )
    state.instant = metrics
    state.ticks += 1
    state.media_time_s = float(media_time_s)
    state.next_media_time_s = state.media_time_s
    rolling = state.rolling

    if playing:
        state.next_media_time_s += len(frame.left) / config.sample_rate_hz
        rolling.update(metrics, now_ms)

        smooth = state.mono_smoother.update(metrics.correlation)
        state.mono_status = state.mono_latch.update(
            classify_mono_compat(smooth), now_ms
        )

        if state.timeline_gate.ready(now_ms):
            state.timeline.record(
                TimelineSample(
                    t=float(media_time_s),
                    short_term_db=rolling.short_term_db,
                    momentary_db=rolling.momentary_db,
                )
            )

        if state.publish_gate.ready(now_ms):
            state.published = PublishedMeters(
                loudness_db=metrics.loudness_db,
                short_term_db=rolling.short_term_db,
                momentary_db=rolling.momentary_db,
                average_db=rolling.average_db,
                rms_db=metrics.rms_db,
                true_peak_db=metrics.true_peak_db,
                dynamic_range_db=metrics.dynamic_range_db,
                width=metrics.width,
                correlation=metrics.correlation,
                media_time_s=float(media_time_s),
            )
    else:
        rolling.observe_peak(metrics.true_peak_db)

    previous = state.verdict.snapshot.verdict if state.verdict else Status.OK
    result = evaluate_verdict(
        state.latches,
        average_lufs=rolling.average_db,
        profile=profile,
        max_true_peak_db=rolling.max_true_peak_db,
        min_correlation=rolling.min_correlation,
        now_ms=now_ms,
    )
    state.verdict = result
    if result.snapshot.verdict != previous:
        logger.info(
            "Verdict %s -> %s at %.2fs (%s)",
            previous.value,
            result.snapshot.verdict.value,
            state.media_time_s,
            result.label,
        )
    return result


class MeteringEngine:
    """
    In-process loudness/peak/stereo compliance engine.

    Feed it frames with ``tick`` (or ``pull`` from a FrameSource) and read
    the outputs between ticks from the same thread. Readers on other
    threads need their own single-writer guard around ``tick``.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        profile: TargetProfile | None = None,
        *,
        clock=None
    ):
        self.config = (config or EngineConfig()).validate()
        self.profile = profile or resolve_target_profile(DEFAULT_PROFILE_ID)
        self._clock = clock or (lambda: time.perf_counter() * 1000.0)
        self._state = new_engine_state(self.config)

    @property
    def state(self) -> EngineState:
        return self._state

    # ----- inputs -----

    def set_target(self, profile: TargetProfile) -> None:
        """Swap the target profile; takes effect on the next tick."""
        if profile != self.profile:
            logger.info(
                "Target profile %s: %.1f LUFS +/- %.1f LU",
                profile.id,
                profile.target_lufs,
                profile.tolerance_lu,
            )
        self.profile = profile

    def reset(self) -> None:
        """Drop all session state (new media loaded)."""
        self._state = new_engine_state(self.config)
        logger.info("Engine reset")

    def tick(
        self,
        frame: StereoFrame,
        *,
        now_ms: float | None = None,
        media_time_s: float | None = None,
        playing: bool = True
    ) -> VerdictResult:
        """
        Process one frame.

        Without ``media_time_s`` the frame is stamped with the position
        where the previous playing frame ended (``sample_rate_hz`` from
        the config); passing a time repositions the media clock.
        """
        if now_ms is None:
            now_ms = self._clock()
        if media_time_s is None:
            media_time_s = self._state.next_media_time_s
        return advance(
            self._state,
            self.config,
            self.profile,
            frame,
            now_ms=now_ms,
            media_time_s=media_time_s,
            playing=playing,
        )

    def pull(
        self,
        source: FrameSource,
        *,
        now_ms: float | None = None,
        media_time_s: float | None = None
    ) -> bool:
        """Pull one frame from ``source`` and tick; False when none was available."""
        frame = source.next_frame()
        if frame is None:
            return False
        self.tick(frame, now_ms=now_ms, media_time_s=media_time_s)
        return True

    # ----- outputs -----

    def instant_metrics(self) -> InstantMetrics:
        return self._state.instant

    def short_term_loudness(self) -> float:
        return self._state.rolling.short_term_db

    def momentary_loudness(self) -> float:
        return self._state.rolling.momentary_db

    def cumulative_average_loudness(self) -> float:
        return self._state.rolling.average_db

    def published(self) -> PublishedMeters:
        return self._state.published

    def mono_compatibility(self) -> MonoCompat | None:
        return self._state.mono_status

    def verdict(self) -> VerdictResult | None:
        return self._state.verdict

    def verdict_snapshot(self) -> VerdictSnapshot:
        st = self._state
        if st.verdict is not None:
            return st.verdict.snapshot
        return VerdictSnapshot(
            max_true_peak_db_ever=st.rolling.max_true_peak_db,
            min_correlation_ever=st.rolling.min_correlation,
            loudness_status=st.latches.loudness.stable,
            true_peak_status=st.latches.true_peak.stable,
            stereo_status=st.latches.stereo.stable,
            verdict=st.latches.verdict.stable,
        )

    def timeline_snapshot(self) -> tuple[TimelineSample, ...]:
        return self._state.timeline.snapshot()

    def problem_segments(
        self,
        target_lufs: float | None = None,
        tolerance_lu: float | None = None
    ) -> list[Segment]:
        """Recompute problem segments from the latest timeline snapshot."""
        if target_lufs is None:
            target_lufs = self.profile.target_lufs
        if tolerance_lu is None:
            tolerance_lu = self.profile.tolerance_lu
        return detect_problem_segments(
            self.timeline_snapshot(),
            target_lufs,
            tolerance_lu,
            min_len=self.config.min_segment_len,
            gap_merge=self.config.segment_gap_merge,
        )

    def problem_spans(
        self,
        target_lufs: float | None = None,
        tolerance_lu: float | None = None,
        *,
        pad_samples: int = 1
    ) -> list[tuple[float, float]]:
        """Media-time spans of the current problem segments."""
        return segment_time_spans(
            self.timeline_snapshot(),
            self.problem_segments(target_lufs, tolerance_lu),
            pad_samples=pad_samples,
        )
