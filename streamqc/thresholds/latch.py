"""Hysteresis latch for flicker-free status reporting."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

from streamqc.types import Status, status_severity

S = TypeVar("S", bound=Hashable)

HOLD_MS = 650.0
MONO_HOLD_MS = 250.0


@dataclass
class LatchState(Generic[S]):
    stable: S
    pending: S
    pending_since_ms: float | None = None


class StatusLatch(Generic[S]):
    """
    Debounce a raw classification into a stable one.

    A more severe raw value is adopted on the same update. A less severe
    value must be reported continuously for ``hold_ms`` before it is
    committed; any interruption restarts the hold.

    Args:
        initial: Starting stable state
        hold_ms: Hold required before a downgrade commits
        severity: Maps a state to a comparable rank (higher is worse)
    """

    def __init__(
        self,
        initial: S,
        *,
        hold_ms: float = HOLD_MS,
        severity: Callable[[S], int] = status_severity
    ):
        if hold_ms < 0:
            raise ValueError("hold_ms must be >= 0.")
        self.initial = initial
        self.hold_ms = float(hold_ms)
        self.severity = severity
        self.state: LatchState[S] = LatchState(stable=initial, pending=initial)

    @property
    def stable(self) -> S:
        return self.state.stable

    def reset(self) -> None:
        self.state = LatchState(stable=self.initial, pending=self.initial)

    def update(self, raw: S, now_ms: float) -> S:
        st = self.state
        if raw == st.stable:
            st.pending = raw
            st.pending_since_ms = None
            return st.stable

        if self.severity(raw) > self.severity(st.stable):
            st.stable = raw
            st.pending = raw
            st.pending_since_ms = None
            return st.stable

        if st.pending != raw or st.pending_since_ms is None:
            st.pending = raw
            st.pending_since_ms = float(now_ms)
            return st.stable

        if float(now_ms) - st.pending_since_ms >= self.hold_ms:
            st.stable = raw
            st.pending_since_ms = None
        return st.stable


def status_latch(hold_ms: float = HOLD_MS) -> StatusLatch[Status]:
    """Latch over Status starting at OK."""
    return StatusLatch(Status.OK, hold_ms=hold_ms, severity=status_severity)
