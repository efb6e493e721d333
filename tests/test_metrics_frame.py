from __future__ import annotations

import math

import numpy as np

from streamqc.metrics.correlation import stereo_width_correlation
from streamqc.metrics.instant import compute_instant_metrics, silent_metrics
from streamqc.metrics.loudness import frame_loudness_db, frame_rms_db
from streamqc.metrics.truepeak import frame_true_peak_db
from streamqc.types import StereoFrame
from tests.conftest import amplitude_for_loudness, dc_frame, sine_frame


def test_loudness_uses_rms_minus_offset():
    x = np.full(1024, 0.5)
    expected = 20.0 * math.log10(0.5) - 0.691
    assert np.isclose(frame_loudness_db(x), expected)
    assert np.isclose(frame_rms_db(x), 20.0 * math.log10(0.5))


def test_loudness_floors_silence_and_garbage():
    assert frame_loudness_db(np.zeros(1024)) == -70.0
    assert frame_loudness_db(np.array([])) == -70.0
    x = np.array([np.nan, np.inf, -np.inf, 0.0])
    assert frame_loudness_db(x) == -70.0


def test_amplitude_helper_round_trips_loudness():
    a = amplitude_for_loudness(-10.0)
    assert np.isclose(frame_loudness_db(np.full(512, a)), -10.0)


def test_true_peak_full_scale_is_zero_db():
    left = np.array([0.1, -1.0, 0.2])
    right = np.array([0.0, 0.3, 0.4])
    assert frame_true_peak_db(left, right) == 0.0


def test_true_peak_takes_louder_channel():
    left = np.full(8, 0.25)
    right = np.full(8, -0.5)
    assert np.isclose(frame_true_peak_db(left, right), 20.0 * math.log10(0.5))


def test_width_and_correlation_extremes():
    frame = sine_frame(0.5)
    width, corr = stereo_width_correlation(frame.left, frame.right)
    assert np.isclose(width, 0.0)
    assert np.isclose(corr, 1.0)

    inv = sine_frame(0.5, invert_right=True)
    width, corr = stereo_width_correlation(inv.left, inv.right)
    assert np.isclose(width, 1.0)
    assert np.isclose(corr, -1.0)


def test_width_and_correlation_degenerate_inputs():
    assert stereo_width_correlation(np.zeros(16), np.zeros(16)) == (0.0, 0.0)
    assert stereo_width_correlation(np.array([]), np.array([])) == (0.0, 0.0)
    # one silent channel: correlation undefined -> 0, width 0.5
    width, corr = stereo_width_correlation(np.full(16, 0.5), np.zeros(16))
    assert corr == 0.0
    assert np.isclose(width, 0.5)


def test_width_and_correlation_mismatched_lengths():
    width, corr = stereo_width_correlation(np.full(10, 0.3), np.full(4, 0.3))
    assert np.isclose(corr, 1.0)
    assert np.isclose(width, 0.0)


def test_instant_metrics_dynamic_range():
    m = compute_instant_metrics(dc_frame(0.5))
    assert np.isclose(m.dynamic_range_db, 0.0)
    s = compute_instant_metrics(sine_frame(1.0, n=4800))
    # crest factor of a sine is ~3.01 dB
    assert np.isclose(s.dynamic_range_db, 3.01, atol=0.05)


def test_instant_metrics_paused_keeps_previous_stereo():
    playing = compute_instant_metrics(sine_frame(0.5, invert_right=True))
    paused = compute_instant_metrics(dc_frame(0.5), playing=False, previous=playing)
    assert paused.correlation == playing.correlation
    assert paused.width == playing.width
    fresh = compute_instant_metrics(dc_frame(0.5), playing=False)
    assert fresh.correlation == 0.0
    assert fresh.width == 0.0


def test_silent_metrics_defaults():
    m = silent_metrics()
    assert m.loudness_db == -70.0
    assert m.true_peak_db == -70.0
    assert m.correlation == 0.0


def test_instant_metrics_from_malformed_frame():
    frame = StereoFrame(left=np.array([np.nan] * 8), right=np.array([np.inf] * 8))
    m = compute_instant_metrics(frame)
    assert m.loudness_db == -70.0
    assert m.true_peak_db == -70.0
    assert m.correlation == 0.0
    assert m.width == 0.0
