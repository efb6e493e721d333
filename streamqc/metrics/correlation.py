"""Stereo width and correlation metrics."""
from __future__ import annotations

import math

import numpy as np

from streamqc.utils.numeric import clamp, sanitize_samples

DENOM_EPSILON = 1e-12


def stereo_width_correlation(
    left: np.ndarray,
    right: np.ndarray,
) -> tuple[float, float]:
    """
    Compute mid/side width and Pearson-style correlation for one block.

    Args:
        left: Left channel samples.
        right: Right channel samples (truncated with left to the shorter
            length).

    Returns:
        ``(width, correlation)`` with width in [0, 1] and correlation in
        [-1, 1]. Both are 0 for silent or degenerate blocks.
    """
    l = sanitize_samples(left)
    r = sanitize_samples(right)
    n = min(l.size, r.size)
    if n == 0:
        return 0.0, 0.0
    l = l[:n]
    r = r[:n]

    mid = 0.5 * (l + r)
    side = 0.5 * (l - r)
    sum_m2 = float(np.dot(mid, mid))
    sum_s2 = float(np.dot(side, side))
    sum_lr = float(np.dot(l, r))
    sum_l2 = float(np.dot(l, l))
    sum_r2 = float(np.dot(r, r))

    denom_ms = sum_m2 + sum_s2
    width = sum_s2 / denom_ms if denom_ms > DENOM_EPSILON else 0.0

    denom_corr = math.sqrt(sum_l2 * sum_r2)
    corr = sum_lr / denom_corr if denom_corr > DENOM_EPSILON else 0.0

    if not math.isfinite(width):
        width = 0.0
    if not math.isfinite(corr):
        corr = 0.0
    return clamp(width, 0.0, 1.0), clamp(corr, -1.0, 1.0)
