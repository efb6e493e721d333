"""Frame loudness measurement.

The loudness figure is an approximation: the RMS of the left channel in dB
minus a fixed 0.691 dB offset borrowed from the BS.1770 K-weighting
constant. There is no K-weighting filter and no gating, so values are not
comparable to a standards-compliant integrated LUFS reading. The
thresholds in ``streamqc.thresholds`` are tuned against this figure.
"""
from __future__ import annotations
import numpy as np
from streamqc.utils.numeric import (
    EPSILON,
    FLOOR_DB,
    amplitude_to_db,
    sanitize_samples,
)

K_WEIGHT_OFFSET_DB = 0.691


def frame_rms(x: np.ndarray) -> float:
    """Root mean square of a channel; 0.0 for an empty block."""
    x = sanitize_samples(x)
    if x.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(x * x)))


def frame_loudness_db(
    x: np.ndarray,
    *,
    floor_db: float = FLOOR_DB,
    epsilon: float = EPSILON
) -> float:
    """
    Approximate loudness of one channel block in LUFS.

    Args:
        x: Channel samples in [-1, 1]
        floor_db: Lowest value reported (silence)
        epsilon: RMS floor guarding log10(0)

    Returns:
        ``max(floor_db, 20*log10(rms) - 0.691)``
    """
    return amplitude_to_db(
        frame_rms(x),
        offset_db=K_WEIGHT_OFFSET_DB,
        floor_db=floor_db,
        epsilon=epsilon,
    )


def frame_rms_db(
    x: np.ndarray,
    *,
    floor_db: float = FLOOR_DB,
    epsilon: float = EPSILON
) -> float:
    """RMS level of one channel block in dBFS (no loudness offset)."""
    return amplitude_to_db(frame_rms(x), floor_db=floor_db, epsilon=epsilon)
