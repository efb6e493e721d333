from __future__ import annotations


class RateGate:
    """
    Admit events at most ``rate_hz`` times per second.

    The first event is always admitted; later ones pass once at least
    ``1000 / rate_hz`` ms have elapsed since the last admitted event.
    """

    def __init__(self, rate_hz: float):
        if rate_hz <= 0:
            raise ValueError("rate_hz must be > 0.")
        self.interval_ms = 1000.0 / float(rate_hz)
        self.last_ms: float | None = None

    def ready(self, now_ms: float) -> bool:
        now_ms = float(now_ms)
        if self.last_ms is not None and now_ms - self.last_ms < self.interval_ms:
            return False
        self.last_ms = now_ms
        return True

    def reset(self) -> None:
        self.last_ms = None
