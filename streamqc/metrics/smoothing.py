from __future__ import annotations
import math


class ExponentialSmoother:
    """
    One-pole exponential moving average.

    ``value += alpha * (x - value)`` per update; non-finite inputs are
    ignored so a single bad frame cannot poison the average.
    """

    def __init__(self, alpha: float, initial: float = 0.0):
        alpha = float(alpha)
        if not (0.0 < alpha <= 1.0):
            raise ValueError("alpha must be in (0, 1].")
        self.alpha = alpha
        self.initial = float(initial)
        self.value = float(initial)

    def update(self, x: float) -> float:
        x = float(x)
        if math.isfinite(x):
            self.value += self.alpha * (x - self.value)
        return self.value

    def reset(self) -> None:
        self.value = self.initial
