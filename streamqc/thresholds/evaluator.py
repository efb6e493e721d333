from __future__ import annotations
from dataclasses import dataclass, field
from streamqc.thresholds.classify import (
    TRUE_PEAK_LIMIT_DBTP,
    classify_loudness,
    classify_stereo,
    classify_true_peak,
    worst_status,
)
from streamqc.thresholds.latch import HOLD_MS, StatusLatch, status_latch
from streamqc.types import MetricDecision, Status, TargetProfile, VerdictSnapshot
from streamqc.utils.numeric import is_finite

VERDICT_LABELS = {
    Status.OK: "STREAMING READY",
    Status.WARN: "NEEDS ADJUSTMENT",
    Status.FAIL: "MASTER RISK",
}


def _fmt_signed(x: float) -> str:
    if not is_finite(x):
        return "--"
    return f"{x:+.1f}"


def _loudness_note(diff: float, status: Status) -> str:
    if status == Status.OK:
        return "On target"
    if not is_finite(diff):
        return "Loudness cannot be evaluated against this target"
    direction = "above" if diff >= 0 else "below"
    return f"{_fmt_signed(diff)} LU {direction} target"


def _true_peak_note(tp: float, status: Status) -> str:
    if status == Status.OK:
        return "Safe"
    if not is_finite(tp):
        return "True peak unavailable"
    if status == Status.WARN:
        return f"{tp:.1f} dBTP (aim <= {TRUE_PEAK_LIMIT_DBTP:.1f})"
    return f"{tp:.1f} dBTP (clipping risk)"


def _stereo_note(corr: float, status: Status) -> str:
    if status == Status.OK:
        return "Mono compatible"
    if not is_finite(corr):
        return "Correlation unavailable"
    if status == Status.WARN:
        return f"Correlation {corr:.2f} (check mono fold-down)"
    return f"Correlation {corr:.2f} (phase cancellation risk)"


@dataclass
class VerdictLatches:
    """The three per-metric latches plus the latch on the combined verdict."""
    hold_ms: float = HOLD_MS
    loudness: StatusLatch = field(init=False)
    true_peak: StatusLatch = field(init=False)
    stereo: StatusLatch = field(init=False)
    verdict: StatusLatch = field(init=False)

    def __post_init__(self):
        self.loudness = status_latch(self.hold_ms)
        self.true_peak = status_latch(self.hold_ms)
        self.stereo = status_latch(self.hold_ms)
        self.verdict = status_latch(self.hold_ms)

    def reset(self) -> None:
        for latch in (self.loudness, self.true_peak, self.stereo, self.verdict):
            latch.reset()


@dataclass(frozen=True)
class VerdictResult:
    snapshot: VerdictSnapshot
    decisions: tuple[MetricDecision, ...]
    raw_verdict: Status
    issue_count: int
    label: str


def evaluate_verdict(
    latches: VerdictLatches,
    *,
    average_lufs: float,
    profile: TargetProfile,
    max_true_peak_db: float,
    min_correlation: float,
    now_ms: float
) -> VerdictResult:
    """
    Run one evaluation tick through the latches.

    Each metric is classified and latched on its own; the worst latched
    status is then latched again as the overall verdict.

    Args:
        latches: Latch set owned by the caller (mutated)
        average_lufs: Cumulative average loudness
        profile: Current target profile
        max_true_peak_db: Lifetime max true peak
        min_correlation: Lifetime min correlation
        now_ms: Evaluation timestamp in milliseconds

    Returns:
        VerdictResult with stable statuses and per-metric decisions
    """
    loud_raw = classify_loudness(average_lufs, profile.target_lufs, profile.tolerance_lu)
    tp_raw = classify_true_peak(max_true_peak_db)
    stereo_raw = classify_stereo(min_correlation)

    loud = latches.loudness.update(loud_raw, now_ms)
    tp = latches.true_peak.update(tp_raw, now_ms)
    stereo = latches.stereo.update(stereo_raw, now_ms)

    verdict_raw = worst_status((loud, tp, stereo))
    verdict = latches.verdict.update(verdict_raw, now_ms)

    diff = float(average_lufs) - float(profile.target_lufs)
    decisions = (
        MetricDecision(
            metric="loudness",
            value=float(average_lufs),
            units="LUFS",
            raw_status=loud_raw,
            status=loud,
            notes=_loudness_note(diff, loud_raw),
        ),
        MetricDecision(
            metric="true_peak",
            value=float(max_true_peak_db),
            units="dBTP",
            raw_status=tp_raw,
            status=tp,
            notes=_true_peak_note(float(max_true_peak_db), tp_raw),
        ),
        MetricDecision(
            metric="stereo",
            value=float(min_correlation),
            units="corr",
            raw_status=stereo_raw,
            status=stereo,
            notes=_stereo_note(float(min_correlation), stereo_raw),
        ),
    )
    issue_count = sum(1 for s in (loud, tp, stereo) if s != Status.OK)
    snapshot = VerdictSnapshot(
        max_true_peak_db_ever=float(max_true_peak_db),
        min_correlation_ever=float(min_correlation),
        loudness_status=loud,
        true_peak_status=tp,
        stereo_status=stereo,
        verdict=verdict,
    )
    return VerdictResult(
        snapshot=snapshot,
        decisions=decisions,
        raw_verdict=verdict_raw,
        issue_count=issue_count,
        label=VERDICT_LABELS[verdict],
    )
