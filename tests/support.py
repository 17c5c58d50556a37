"""Test doubles: virtual timers, a scripted provider and fixed random sources."""
import asyncio

from gold_monitor.providers.core import GoldPriceProviderABC
from gold_monitor.schemas import ChartPoint, PriceRow, PriceSnapshot


class ManualTimer:
    def __init__(self, interval: float, callback) -> None:
        self.interval_ms = round(interval * 1000)
        self.callback = callback
        self.elapsed_ms = 0
        self.active = True
        self.fired = 0

    def cancel(self) -> None:
        self.active = False


class ManualTimerFactory:
    """Timer factory driven by ``advance(ms)`` instead of the event loop clock."""

    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def __call__(self, interval: float, callback) -> ManualTimer:
        timer = ManualTimer(interval, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> list[ManualTimer]:
        return [t for t in self.timers if t.active]

    def with_interval(self, seconds: float) -> list[ManualTimer]:
        return [t for t in self.active if t.interval_ms == round(seconds * 1000)]

    def advance(self, ms: int) -> None:
        for timer in self.active:
            timer.elapsed_ms += ms
            while timer.active and timer.elapsed_ms >= timer.interval_ms:
                timer.elapsed_ms -= timer.interval_ms
                timer.fired += 1
                timer.callback()


class FixedRandom:
    """Stand-in for random.Random returning a constant from random()."""

    def __init__(self, value: float = 0.5) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


def make_snapshot(
    source_id: str = "pax-gold",
    usd: float = 2000.0,
    usd_change: float | None = 1.5,
    **prices: float,
) -> PriceSnapshot:
    rows = {"usd": PriceRow(price=usd, change_24h=usd_change, volume_24h=12345.0)}
    for code, price in prices.items():
        rows[code] = PriceRow(price=price)
    return PriceSnapshot(source_id=source_id, rows=rows)


class FakeProvider(GoldPriceProviderABC):
    """Scripted provider. Results may be values or exceptions to raise.

    Set ``gate`` to an unset asyncio.Event to hold responses until it is set.
    """

    def __init__(self, snapshot=None, history=()) -> None:
        self.snapshot_result = snapshot if snapshot is not None else make_snapshot()
        self.history_result = history
        self.snapshot_calls: list[tuple[str, list[str]]] = []
        self.history_calls: list[tuple[str, str, int]] = []
        self.relay = False
        self.closed = False
        self.gate: asyncio.Event | None = None

    @property
    def using_relay(self) -> bool:
        return self.relay

    async def get_snapshot(self, source_id, currency_codes):
        self.snapshot_calls.append((source_id, list(currency_codes)))
        result = self.snapshot_result
        if self.gate is not None:
            await self.gate.wait()
        if isinstance(result, Exception):
            raise result
        return result

    async def get_history(self, source_id, currency_code, days):
        self.history_calls.append((source_id, currency_code, days))
        result = self.history_result
        if self.gate is not None:
            await self.gate.wait()
        if isinstance(result, Exception):
            raise result
        return tuple(result)

    async def close(self) -> None:
        self.closed = True


def points(*pairs: tuple[int, float]) -> tuple[ChartPoint, ...]:
    return tuple(ChartPoint(ts, price) for ts, price in pairs)
