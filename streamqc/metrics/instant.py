"""Per-frame metric computation."""
from __future__ import annotations

from streamqc.metrics.correlation import stereo_width_correlation
from streamqc.metrics.loudness import frame_loudness_db, frame_rms_db
from streamqc.metrics.truepeak import frame_true_peak_db
from streamqc.types import InstantMetrics, StereoFrame
from streamqc.utils.numeric import FLOOR_DB


def silent_metrics(floor_db: float = FLOOR_DB) -> InstantMetrics:
    """Metrics reported before the first frame arrives."""
    return InstantMetrics(
        loudness_db=floor_db,
        true_peak_db=floor_db,
        correlation=0.0,
        width=0.0,
        rms_db=floor_db,
        dynamic_range_db=0.0,
    )


def compute_instant_metrics(
    frame: StereoFrame,
    *,
    playing: bool = True,
    previous: InstantMetrics | None = None,
    floor_db: float = FLOOR_DB
) -> InstantMetrics:
    """
    Convert one stereo frame into instantaneous metrics.

    Loudness and RMS are measured on the left channel, peak on both.
    Width and correlation only mean something on live transport, so when
    ``playing`` is False they carry over from ``previous`` (or 0).

    Args:
        frame: Stereo block
        playing: Whether transport is running
        previous: Metrics from the preceding tick
        floor_db: dB floor for silence

    Returns:
        InstantMetrics for this frame
    """
    loudness = frame_loudness_db(frame.left, floor_db=floor_db)
    rms_db = frame_rms_db(frame.left, floor_db=floor_db)
    peak_db = frame_true_peak_db(frame.left, frame.right, floor_db=floor_db)

    if playing:
        width, corr = stereo_width_correlation(frame.left, frame.right)
    elif previous is not None:
        width, corr = previous.width, previous.correlation
    else:
        width, corr = 0.0, 0.0

    return InstantMetrics(
        loudness_db=loudness,
        true_peak_db=peak_db,
        correlation=corr,
        width=width,
        rms_db=rms_db,
        dynamic_range_db=peak_db - rms_db,
    )
