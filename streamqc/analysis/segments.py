"""Out-of-tolerance region detection on a loudness timeline."""
from __future__ import annotations

from typing import Sequence

import numpy as np

from streamqc.types import Segment, TimelineSample

MIN_SEGMENT_LEN = 3
SEGMENT_GAP_MERGE = 1


def bad_sample_mask(
    short_term_db: np.ndarray,
    target_lufs: float,
    tolerance_lu: float
) -> np.ndarray:
    """True where a finite short-term value sits outside target±tolerance."""
    st = np.asarray(short_term_db, dtype=np.float64)
    finite = np.isfinite(st)
    dev = np.abs(np.where(finite, st, target_lufs) - target_lufs)
    return finite & (dev > tolerance_lu)


def detect_problem_segments(
    snapshot: Sequence[TimelineSample],
    target_lufs: float,
    tolerance_lu: float,
    *,
    min_len: int = MIN_SEGMENT_LEN,
    gap_merge: int = SEGMENT_GAP_MERGE
) -> list[Segment]:
    """
    Find merged runs of short-term loudness outside the tolerance band.

    Runs shorter than ``min_len`` samples are dropped. An accepted run
    starting no more than ``gap_merge + 1`` samples after the previous
    accepted run's end extends that run instead of starting a new one.

    Args:
        snapshot: Chronological timeline samples
        target_lufs: Target loudness
        tolerance_lu: Allowed deviation
        min_len: Minimum run length in samples
        gap_merge: Largest gap (in samples) bridged by merging

    Returns:
        Chronological, non-overlapping inclusive index ranges
    """
    n = len(snapshot)
    if n < 2 or not np.isfinite(target_lufs):
        return []
    if not np.isfinite(tolerance_lu) or tolerance_lu < 0:
        return []

    st = np.fromiter(
        (s.short_term_db for s in snapshot), dtype=np.float64, count=n
    )
    bad = bad_sample_mask(st, float(target_lufs), float(tolerance_lu))

    segments: list[Segment] = []

    def _accept(start: int, end: int) -> None:
        if end - start + 1 < min_len:
            return
        if segments and start - segments[-1].end_index <= gap_merge + 1:
            segments[-1] = Segment(segments[-1].start_index, end)
        else:
            segments.append(Segment(start, end))

    in_run = False
    run_start = 0
    for i, is_bad in enumerate(bad):
        if is_bad:
            if not in_run:
                in_run = True
                run_start = i
            continue
        if in_run:
            _accept(run_start, i - 1)
            in_run = False

    if in_run:
        _accept(run_start, n - 1)

    return segments


def segment_time_spans(
    snapshot: Sequence[TimelineSample],
    segments: Sequence[Segment],
    *,
    pad_samples: int = 1
) -> list[tuple[float, float]]:
    """Map index ranges to padded ``(start_s, end_s)`` media-time spans."""
    n = len(snapshot)
    spans: list[tuple[float, float]] = []
    if n == 0:
        return spans
    for seg in segments:
        i0 = max(0, seg.start_index - pad_samples)
        i1 = min(n - 1, seg.end_index + pad_samples)
        spans.append((float(snapshot[i0].t), float(snapshot[i1].t)))
    return spans
