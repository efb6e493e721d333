from __future__ import annotations


_METRIC_LABELS = {
    "loudness": "Loudness",
    "true_peak": "True peak",
    "stereo": "Stereo correlation",
}


def _metric_label(metric: str) -> str:
    return _METRIC_LABELS.get(metric, metric.replace("_", " "))


def build_alerts(decisions: list[dict]) -> list[dict]:
    """One alert per metric whose stable status is warn or fail."""
    alerts: list[dict] = []
    for d in decisions:
        status = d.get("status")
        if status not in ("warn", "fail"):
            continue
        metric = str(d.get("metric", "metric"))
        notes = d.get("notes")
        label = _metric_label(metric)
        prefix = f"{label}: {notes}." if notes else f"{label}."
        alerts.append(
            {
                "metric": metric,
                "status": status,
                "message": f"{prefix} Status: {status}.",
            }
        )
    return alerts


def build_segment_alerts(segments: list[dict]) -> list[dict]:
    """Alerts pointing at out-of-tolerance stretches of the timeline."""
    alerts: list[dict] = []
    for seg in segments:
        start_s = seg.get("start_s")
        end_s = seg.get("end_s")
        if start_s is None or end_s is None:
            continue
        alerts.append(
            {
                "metric": "short_term_loudness",
                "status": "warn",
                "message": (
                    f"Short-term loudness outside tolerance from "
                    f"{start_s:.2f}s to {end_s:.2f}s."
                ),
            }
        )
    return alerts
