from __future__ import annotations
import math


def q(x: float | None, step: float = 0.01) -> float | None:
    """Round half away from zero to ``step``; None for missing or non-finite."""
    if x is None:
        return None
    x = float(x)
    if math.isnan(x) or math.isinf(x):
        return None
    inv = 1.0 / step
    y = x * inv
    if y >= 0:
        yq = math.floor(y + 0.5)
    else:
        yq = -math.floor(-y + 0.5)
    return yq / inv
