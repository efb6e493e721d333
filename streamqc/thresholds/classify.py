"""Raw (undebounced) per-metric classification."""
from __future__ import annotations
from streamqc.types import MonoCompat, Status
from streamqc.utils.numeric import is_finite

LOUDNESS_HYST_LU = 0.25
TRUE_PEAK_LIMIT_DBTP = -1.0
TRUE_PEAK_HYST_DB = 0.2
TRUE_PEAK_FAIL_DBTP = 0.0
CORR_LIMIT = 0.0
CORR_HYST = 0.05
CORR_FAIL = -0.2
MONO_SAFE_ABOVE = 0.2
MONO_WATCH_FROM = 0.0


def classify_loudness(
    average_lufs: float,
    target_lufs: float,
    tolerance_lu: float
) -> Status:
    """
    Classify loudness against target±tolerance with a 0.25 LU deadband.

    OK inside ``tol - 0.25``, FAIL at or beyond ``2*tol + 0.25``, WARN
    between. Non-finite readings, a non-finite target or a negative
    tolerance cannot be judged and give WARN.
    """
    if not (is_finite(average_lufs) and is_finite(target_lufs) and is_finite(tolerance_lu)):
        return Status.WARN
    tol = float(tolerance_lu)
    if tol < 0:
        return Status.WARN
    ad = abs(float(average_lufs) - float(target_lufs))
    ok_thresh = max(0.0, tol - LOUDNESS_HYST_LU)
    fail_thresh = tol * 2.0 + LOUDNESS_HYST_LU
    if ad <= ok_thresh:
        return Status.OK
    if ad >= fail_thresh:
        return Status.FAIL
    return Status.WARN


def classify_true_peak(true_peak_dbtp: float) -> Status:
    """
    OK at or below -1.2 dBTP, FAIL at full scale or above, WARN between.

    The FAIL boundary is inclusive: a single sample at exactly 1.0 reads
    0.0 dBTP and has to fail, so 0.0 itself is FAIL rather than WARN.
    """
    if not is_finite(true_peak_dbtp):
        return Status.WARN
    tp = float(true_peak_dbtp)
    if tp <= TRUE_PEAK_LIMIT_DBTP - TRUE_PEAK_HYST_DB:
        return Status.OK
    if tp >= TRUE_PEAK_FAIL_DBTP:
        return Status.FAIL
    return Status.WARN


def classify_stereo(correlation: float) -> Status:
    """OK above +0.05, FAIL at or below -0.2, WARN between."""
    if not is_finite(correlation):
        return Status.WARN
    c = float(correlation)
    if c > CORR_LIMIT + CORR_HYST:
        return Status.OK
    if c <= CORR_FAIL:
        return Status.FAIL
    return Status.WARN


def classify_mono_compat(smoothed_correlation: float) -> MonoCompat:
    """SAFE above 0.2, WATCH from 0 up, RISK below 0."""
    if not is_finite(smoothed_correlation):
        return MonoCompat.WATCH
    c = float(smoothed_correlation)
    if c > MONO_SAFE_ABOVE:
        return MonoCompat.SAFE
    if c >= MONO_WATCH_FROM:
        return MonoCompat.WATCH
    return MonoCompat.RISK


def worst_status(statuses) -> Status:
    """FAIL if any FAIL, else WARN if any WARN, else OK."""
    seen = {Status(s) for s in statuses}
    if Status.FAIL in seen:
        return Status.FAIL
    if Status.WARN in seen:
        return Status.WARN
    return Status.OK
