"""Peak level measurement module."""
from __future__ import annotations
import numpy as np
from streamqc.utils.numeric import (
    EPSILON,
    FLOOR_DB,
    amplitude_to_db,
    sanitize_samples,
)


def frame_peak(left: np.ndarray, right: np.ndarray) -> float:
    """Largest absolute sample across both channels."""
    peak = 0.0
    for ch in (left, right):
        x = sanitize_samples(ch)
        if x.size:
            peak = max(peak, float(np.max(np.abs(x))))
    return peak


def frame_true_peak_db(
    left: np.ndarray,
    right: np.ndarray,
    *,
    floor_db: float = FLOOR_DB,
    epsilon: float = EPSILON
) -> float:
    """
    Peak level of a stereo block in dBTP.

    This is the sample peak of the block; no oversampling is applied, so
    inter-sample overs are not detected.
    """
    return amplitude_to_db(
        frame_peak(left, right), floor_db=floor_db, epsilon=epsilon
    )
