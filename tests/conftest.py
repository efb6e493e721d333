from __future__ import annotations

import json
import math
import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from streamqc.types import StereoFrame  # noqa: E402

FRAME_SIZE = 1024


def dc_frame(left: float, right: float | None = None, n: int = FRAME_SIZE) -> StereoFrame:
    """Constant-valued frame; RMS and peak both equal |value|."""
    r = left if right is None else right
    return StereoFrame(
        left=np.full(n, float(left), dtype=np.float64),
        right=np.full(n, float(r), dtype=np.float64),
    )


def amplitude_for_loudness(loudness_db: float) -> float:
    """DC amplitude whose frame loudness equals ``loudness_db``."""
    return 10.0 ** ((loudness_db + 0.691) / 20.0)


def sine_frame(
    amp: float,
    *,
    freq: float = 1000.0,
    fs: float = 48000.0,
    n: int = FRAME_SIZE,
    invert_right: bool = False
) -> StereoFrame:
    t = np.arange(n) / fs
    x = amp * np.sin(2.0 * math.pi * freq * t)
    return StereoFrame(left=x, right=-x if invert_right else x.copy())


def write_target_profile(tmp_path: Path, profile: dict) -> Path:
    path = tmp_path / "target.json"
    path.write_text(json.dumps(profile), encoding="utf-8")
    return path
