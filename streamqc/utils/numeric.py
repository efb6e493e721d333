"""Small numeric helpers shared by the metering code."""
from __future__ import annotations
import math
import numpy as np

FLOOR_DB = -70.0
EPSILON = 1e-6


def is_finite(x) -> bool:
    """Return True for a real, finite number."""
    try:
        return math.isfinite(float(x))
    except (TypeError, ValueError):
        return False


def finite_or(x, default: float) -> float:
    """Return float(x) when finite, otherwise the default."""
    return float(x) if is_finite(x) else float(default)


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def sanitize_samples(x) -> np.ndarray:
    """Return a 1D float64 copy with NaN/Inf replaced by silence."""
    arr = np.asarray(x, dtype=np.float64).reshape(-1)
    if arr.size and not np.all(np.isfinite(arr)):
        arr = np.where(np.isfinite(arr), arr, 0.0)
    return arr


def amplitude_to_db(
    amplitude: float,
    *,
    offset_db: float = 0.0,
    floor_db: float = FLOOR_DB,
    epsilon: float = EPSILON
) -> float:
    """Convert a linear amplitude to dB, floored at floor_db."""
    a = float(amplitude)
    if not math.isfinite(a) or a < epsilon:
        a = epsilon
    return max(floor_db, 20.0 * math.log10(a) - offset_db)
