"""Engine configuration."""
from __future__ import annotations
import json
from dataclasses import asdict, dataclass, fields


@dataclass(frozen=True)
class EngineConfig:
    frame_size: int = 1024
    sample_rate_hz: float = 48000.0
    short_term_ms: float = 3000.0
    momentary_ms: float = 400.0
    timeline_hz: float = 20.0
    timeline_max_seconds: float = 600.0
    ui_hz: float = 15.0
    hold_ms: float = 650.0
    mono_hold_ms: float = 250.0
    mono_smoothing_alpha: float = 0.18
    floor_db: float = -70.0
    min_segment_len: int = 3
    segment_gap_merge: int = 1

    @property
    def timeline_capacity(self) -> int:
        return int(round(self.timeline_hz * self.timeline_max_seconds))

    def validate(self) -> "EngineConfig":
        """Raise ValueError for settings the engine cannot run with."""
        positive = (
            "frame_size",
            "sample_rate_hz",
            "short_term_ms",
            "momentary_ms",
            "timeline_hz",
            "timeline_max_seconds",
            "ui_hz",
        )
        for name in positive:
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} must be > 0.")
        if self.momentary_ms > self.short_term_ms:
            raise ValueError("momentary_ms must not exceed short_term_ms.")
        if self.hold_ms < 0 or self.mono_hold_ms < 0:
            raise ValueError("hold durations must be >= 0.")
        if not (0.0 < self.mono_smoothing_alpha <= 1.0):
            raise ValueError("mono_smoothing_alpha must be in (0, 1].")
        if self.min_segment_len < 1:
            raise ValueError("min_segment_len must be >= 1.")
        if self.segment_gap_merge < 0:
            raise ValueError("segment_gap_merge must be >= 0.")
        if self.timeline_capacity < 1:
            raise ValueError("timeline_hz * timeline_max_seconds must be >= 1.")
        return self

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_ENGINE_CONFIG = EngineConfig().to_dict()


def _merge_config(base: dict, overrides: dict | None) -> dict:
    return {**base, **(overrides or {})}


def build_engine_config(overrides: dict | None = None) -> EngineConfig:
    """Return a validated EngineConfig with defaults applied."""
    merged = _merge_config(DEFAULT_ENGINE_CONFIG, overrides)
    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise ValueError(f"Unknown engine config keys: {', '.join(unknown)}")
    ints = {"frame_size", "min_segment_len", "segment_gap_merge"}
    kwargs = {
        k: (int(v) if k in ints else float(v)) for k, v in merged.items()
    }
    return EngineConfig(**kwargs).validate()


def load_engine_config(path: str) -> EngineConfig:
    """Load engine settings from a JSON file (``{"engine": {...}}`` or flat)."""
    with open(path, "r", encoding="utf-8") as f:
        j = json.load(f)
    if not isinstance(j, dict):
        raise ValueError("engine config must be a JSON object.")
    return build_engine_config(j.get("engine", j))
