from __future__ import annotations

import copy

from streamqc.engine import MeteringEngine
from streamqc.profiles.targets import resolve_target_profile
from streamqc.reporting.alerts import build_alerts, build_segment_alerts
from streamqc.reporting.report import build_session_report
from streamqc.utils.hashing import sha256_hex_canonical_json
from tests.conftest import dc_frame


def _report(engine: MeteringEngine) -> dict:
    return build_session_report(
        engine={"name": "streamqc", "version": "test"},
        input_meta={"path": "memory"},
        profile=engine.profile,
        meters=engine.published(),
        average_lufs=engine.cumulative_average_loudness(),
        verdict=engine.verdict(),
        timeline=engine.timeline_snapshot(),
        segments=engine.problem_segments(),
    )


def test_report_integrity_hash():
    engine = MeteringEngine(profile=resolve_target_profile("spotify"))
    for i in range(20):
        engine.tick(dc_frame(1.0, -1.0), now_ms=i * 50.0, media_time_s=i * 0.05)
    report = _report(engine)

    body = copy.deepcopy(report)
    integrity = body.pop("integrity")
    assert integrity["report_hash_sha256"] == sha256_hex_canonical_json(body)
    assert report["decisions"]["verdict"] == "fail"
    assert report["decisions"]["verdict_label"] == "MASTER RISK"
    assert report["metrics"]["max_true_peak_db_ever"] == 0.0
    assert report["metrics"]["min_correlation_ever"] == -1.0
    assert report["timeline"]["samples"] == 20
    assert {a["metric"] for a in report["alerts"]} >= {"loudness", "true_peak", "stereo"}


def test_alerts_skip_ok_metrics():
    decisions = [
        {"metric": "loudness", "status": "ok", "notes": "On target"},
        {"metric": "true_peak", "status": "warn", "notes": "-0.5 dBTP (aim <= -1.0)"},
    ]
    alerts = build_alerts(decisions)
    assert len(alerts) == 1
    assert alerts[0]["message"] == "True peak: -0.5 dBTP (aim <= -1.0). Status: warn."


def test_segment_alerts():
    alerts = build_segment_alerts(
        [{"start_s": 1.0, "end_s": 2.5}, {"start_s": None, "end_s": 3.0}]
    )
    assert len(alerts) == 1
    assert "1.00s to 2.50s" in alerts[0]["message"]
