from __future__ import annotations
from typing import Sequence
import numpy as np
from streamqc.analysis.segments import segment_time_spans
from streamqc.reporting.alerts import build_alerts, build_segment_alerts
from streamqc.thresholds.evaluator import VerdictResult
from streamqc.types import PublishedMeters, Segment, TargetProfile, TimelineSample
from streamqc.utils.hashing import sha256_hex_canonical_json
from streamqc.utils.quantize import q


def _decision_dict(d) -> dict:
    return {
        "metric": d.metric,
        "value": q(d.value),
        "units": d.units,
        "raw_status": d.raw_status.value,
        "status": d.status.value,
        "notes": d.notes,
    }


def _timeline_summary(snapshot: Sequence[TimelineSample]) -> dict:
    """Count and range statistics over the finite short-term values."""
    if not snapshot:
        return {"samples": 0, "start_s": None, "end_s": None,
                "short_term_min_db": None, "short_term_max_db": None,
                "short_term_mean_db": None}
    st = np.array([s.short_term_db for s in snapshot], dtype=np.float64)
    finite = st[np.isfinite(st)]
    return {
        "samples": len(snapshot),
        "start_s": q(snapshot[0].t),
        "end_s": q(snapshot[-1].t),
        "short_term_min_db": q(float(np.min(finite))) if finite.size else None,
        "short_term_max_db": q(float(np.max(finite))) if finite.size else None,
        "short_term_mean_db": q(float(np.mean(finite))) if finite.size else None,
    }


def build_session_report(
    *,
    engine: dict,
    input_meta: dict,
    profile: TargetProfile,
    meters: PublishedMeters,
    average_lufs: float,
    verdict: VerdictResult,
    timeline: Sequence[TimelineSample],
    segments: Sequence[Segment],
    analysis: dict | None = None
) -> dict:
    """
    Build a session report dictionary with quantized values and an
    integrity hash.

    Args:
        engine: Engine metadata (name, version, config)
        input_meta: Input file metadata
        profile: Target profile the session was judged against
        meters: Last published meter values
        average_lufs: Cumulative average loudness
        verdict: Latest verdict evaluation
        timeline: Timeline snapshot
        segments: Problem segments found on ``timeline``
        analysis: Optional analysis metadata (report id, timestamps)

    Returns:
        Report dictionary; ``integrity.report_hash_sha256`` covers all
        other keys
    """
    analysis = analysis or {}
    spans = segment_time_spans(timeline, segments)
    segment_dicts = [
        {
            "start_index": int(seg.start_index),
            "end_index": int(seg.end_index),
            "start_s": q(span[0]),
            "end_s": q(span[1]),
        }
        for seg, span in zip(segments, spans)
    ]
    decisions = [_decision_dict(d) for d in verdict.decisions]
    snap = verdict.snapshot

    report = {
        "schema_version": "1.0",
        "report_id": analysis.get("report_id", "session_local"),
        "created_utc": analysis.get("created_utc", "1970-01-01T00:00:00Z"),
        "engine": engine,
        "input": input_meta,
        "profile": {
            "id": profile.id,
            "label": profile.label,
            "target_lufs": q(profile.target_lufs),
            "tolerance_lu": q(profile.tolerance_lu),
        },
        "analysis": analysis,
        "metrics": {
            "average_lufs": q(average_lufs),
            "short_term_lufs": q(meters.short_term_db),
            "momentary_lufs": q(meters.momentary_db),
            "rms_db": q(meters.rms_db),
            "true_peak_db": q(meters.true_peak_db),
            "dynamic_range_db": q(meters.dynamic_range_db),
            "stereo_width": q(meters.width),
            "correlation": q(meters.correlation),
            "max_true_peak_db_ever": q(snap.max_true_peak_db_ever),
            "min_correlation_ever": q(snap.min_correlation_ever),
        },
        "decisions": {
            "verdict": snap.verdict.value,
            "verdict_label": verdict.label,
            "issue_count": int(verdict.issue_count),
            "metrics": decisions,
        },
        "timeline": _timeline_summary(timeline),
        "problem_segments": segment_dicts,
        "alerts": build_alerts(decisions) + build_segment_alerts(segment_dicts),
    }
    report["integrity"] = {
        "report_hash_sha256": sha256_hex_canonical_json(report),
        "hash_algo": "sha256",
        "canonicalization": "json_sorted_keys_no_whitespace_utf8",
    }
    return report
