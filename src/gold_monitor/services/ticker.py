"""Cosmetic sub-second price motion between polled snapshots.

The displayed value follows a mean-reverting random walk around the anchor
(the real converted price). Each tick removes 10% of the gap to the anchor and
adds jitter bounded by 0.01% of the anchor, so it never diverges.
"""
import logging
import random

from gold_monitor.schemas import TickerState
from gold_monitor.services.timers import AsyncioIntervalTimer, TimerFactory, TimerSlot

logger = logging.getLogger(__name__)

VOLATILITY_FRACTION = 0.0002
DRIFT_FACTOR = 0.1


def next_displayed_value(displayed: float, anchor: float, jitter: float) -> float:
    """One interpolation step; ``jitter`` is uniform in [-0.5, 0.5)."""
    volatility = anchor * VOLATILITY_FRACTION
    noise = jitter * volatility
    drift = (anchor - displayed) * DRIFT_FACTOR
    return displayed + noise + drift


class TickerSynthesizer:
    """Animates the displayed price on its own timer, anchored to confirmed prices."""

    def __init__(
        self,
        *,
        interval: float = 1.5,
        rng: random.Random | None = None,
        timer_factory: TimerFactory = AsyncioIntervalTimer,
    ) -> None:
        self._interval = interval
        self._rng = rng or random.Random()
        self._timer = TimerSlot(timer_factory)
        self.state: TickerState | None = None

    @property
    def running(self) -> bool:
        return self._timer.active

    @property
    def displayed_value(self) -> float | None:
        return self.state.displayed_value if self.state is not None else None

    @property
    def anchor_value(self) -> float | None:
        return self.state.anchor_value if self.state is not None else None

    def anchor(self, value: float, *, run: bool = True) -> None:
        """Hard-reset to ``value`` and restart the animation timer if ``run``."""
        self._timer.clear()
        self.state = TickerState(displayed_value=value, anchor_value=value)
        if run:
            self._timer.start(self._interval, self.tick)

    def stop(self) -> None:
        """Stop animating; the last displayed value stays readable."""
        self._timer.clear()

    def tick(self) -> float | None:
        if self.state is None:
            return None
        jitter = self._rng.random() - 0.5
        self.state.displayed_value = next_displayed_value(
            self.state.displayed_value, self.state.anchor_value, jitter
        )
        return self.state.displayed_value
