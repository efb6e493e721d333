from __future__ import annotations

import pytest

from streamqc.thresholds.latch import StatusLatch, status_latch
from streamqc.types import MonoCompat, Status, mono_severity

HOLD = 650.0


def test_upgrade_is_immediate():
    latch = status_latch(HOLD)
    assert latch.update(Status.FAIL, 0.0) == Status.FAIL
    assert latch.state.pending == Status.FAIL
    assert latch.state.pending_since_ms is None


def test_upgrade_from_warn_to_fail_is_immediate():
    latch = status_latch(HOLD)
    latch.update(Status.WARN, 0.0)
    assert latch.update(Status.FAIL, 1.0) == Status.FAIL


def test_downgrade_waits_for_hold():
    latch = status_latch(HOLD)
    latch.update(Status.FAIL, 0.0)
    assert latch.update(Status.OK, 100.0) == Status.FAIL
    assert latch.state.pending_since_ms == 100.0
    assert latch.update(Status.OK, 100.0 + HOLD - 1) == Status.FAIL
    assert latch.update(Status.OK, 100.0 + HOLD) == Status.OK
    assert latch.state.pending_since_ms is None


def test_interruption_restarts_hold():
    latch = status_latch(HOLD)
    latch.update(Status.FAIL, 0.0)
    latch.update(Status.OK, 0.0)
    latch.update(Status.OK, HOLD - 1)
    # one raw FAIL confirms the stable state and cancels the pending downgrade
    assert latch.update(Status.FAIL, HOLD - 0.5) == Status.FAIL
    assert latch.state.pending_since_ms is None
    assert latch.update(Status.OK, HOLD) == Status.FAIL
    assert latch.update(Status.OK, 2 * HOLD - 1) == Status.FAIL
    assert latch.update(Status.OK, 2 * HOLD) == Status.OK


def test_changing_pending_target_restarts_hold():
    latch = status_latch(HOLD)
    latch.update(Status.FAIL, 0.0)
    latch.update(Status.WARN, 0.0)
    latch.update(Status.OK, 500.0)
    assert latch.update(Status.OK, HOLD) == Status.FAIL
    assert latch.update(Status.OK, 500.0 + HOLD) == Status.OK


def test_generic_latch_with_mono_severity():
    latch = StatusLatch(MonoCompat.SAFE, hold_ms=250.0, severity=mono_severity)
    assert latch.update(MonoCompat.RISK, 0.0) == MonoCompat.RISK
    assert latch.update(MonoCompat.WATCH, 10.0) == MonoCompat.RISK
    assert latch.update(MonoCompat.WATCH, 260.0) == MonoCompat.WATCH
    latch.reset()
    assert latch.stable == MonoCompat.SAFE


def test_zero_hold_commits_on_second_tick():
    latch = status_latch(0.0)
    latch.update(Status.FAIL, 0.0)
    assert latch.update(Status.OK, 1.0) == Status.FAIL
    assert latch.update(Status.OK, 1.0) == Status.OK


def test_negative_hold_rejected():
    with pytest.raises(ValueError):
        status_latch(-1.0)
