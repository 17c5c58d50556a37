"""Engine facade tying polling, chart history and the ticker to the viewer's selections.

GoldMonitor is the only object the presentation layer talks to: it reads
``dashboard()`` and ``chart_view()`` and writes selections through ``dispatch``.
"""
import logging
import random
from collections.abc import Callable
from datetime import datetime

from gold_monitor.catalog import find_currency, find_range, find_source, find_unit
from gold_monitor.providers.core import GoldPriceProviderABC
from gold_monitor.schemas import (
    ChartView,
    ChartViewPoint,
    DashboardView,
    FeedStatus,
    PriceSnapshot,
)
from gold_monitor.services.chart import ChartHistoryFetcher
from gold_monitor.services.formatting import (
    change_badge,
    format_axis_time,
    format_compact,
    format_price,
)
from gold_monitor.services.scheduler import PriceScheduler
from gold_monitor.services.state import (
    Action,
    Effect,
    MonitorConfig,
    effects_between,
    reduce,
)
from gold_monitor.services.ticker import TickerSynthesizer
from gold_monitor.services.timers import (
    AsyncioIntervalTimer,
    BackgroundTasks,
    TimerFactory,
)
from gold_monitor.services.units import convert, convert_series
from gold_monitor.utils import now_ms

logger = logging.getLogger(__name__)


class GoldMonitor:
    """Owns the session state and every timer and request derived from it.

    All methods must be called from the event loop that runs the monitor.
    """

    def __init__(
        self,
        provider: GoldPriceProviderABC,
        *,
        config: MonitorConfig | None = None,
        poll_interval: float = 60.0,
        tick_interval: float = 1.5,
        timer_factory: TimerFactory = AsyncioIntervalTimer,
        rng: random.Random | None = None,
        clock_ms: Callable[[], int] = now_ms,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the monitor; nothing runs until ``start()``.

        Args:
            provider: Market-data provider for snapshots and history.
            config: Initial selections (defaults: first source, USD, oz, 24H, Live).
            poll_interval: Seconds between snapshot polls.
            tick_interval: Seconds between ticker animation steps.
            timer_factory: Creates recurring timers (swap for virtual time in tests).
            rng: Random source for ticker jitter.
            clock_ms: Epoch-millisecond clock used to slice chart history.
            clock: Clock used to stamp snapshot acquisitions.
        """
        self._provider = provider
        self._config = config or MonitorConfig()
        self._tasks = BackgroundTasks()
        self._started = False
        self.scheduler = PriceScheduler(
            provider,
            source_id=self._config.source_id,
            interval=poll_interval,
            live=self._config.live,
            timer_factory=timer_factory,
            tasks=self._tasks,
            on_snapshot=self._on_snapshot,
            clock=clock,
        )
        self.chart = ChartHistoryFetcher(provider, clock=clock_ms, tasks=self._tasks)
        self.ticker = TickerSynthesizer(
            interval=tick_interval, rng=rng, timer_factory=timer_factory
        )

    @property
    def provider(self) -> GoldPriceProviderABC:
        return self._provider

    @property
    def config(self) -> MonitorConfig:
        return self._config

    @property
    def in_flight(self) -> int:
        return self._tasks.pending

    async def start(self) -> None:
        """Kick off polling and the first chart fetch, then wait for both to settle."""
        self._started = True
        self.scheduler.source_id = self._config.source_id
        if self._config.live:
            self.scheduler.resume()
        else:
            self.scheduler.pause()
        self._request_chart()
        await self.settle()

    async def settle(self) -> None:
        """Wait for every in-flight request to complete."""
        await self._tasks.join()

    async def close(self) -> None:
        """Cancel every timer and in-flight request."""
        self._started = False
        self.scheduler.stop()
        self.ticker.stop()
        await self._tasks.cancel_all()

    def dispatch(self, action: Action) -> MonitorConfig:
        """Apply a viewer action and run the effects it implies."""
        old = self._config
        self._config = reduce(old, action)
        effects = effects_between(old, self._config)
        if effects:
            logger.debug("%r -> %s", action, sorted(e.value for e in effects))
        if self._started:
            self._apply(effects)
        return self._config

    def _apply(self, effects: set[Effect]) -> None:
        config = self._config
        self.scheduler.source_id = config.source_id
        if Effect.STOP_POLLING in effects:
            self.scheduler.pause()
        if Effect.RESTART_POLLING in effects:
            self.scheduler.resume()
        if Effect.REFETCH_CHART in effects:
            self._request_chart()
        if Effect.REANCHOR_TICKER in effects:
            self._reanchor()

    def _request_chart(self) -> None:
        config = self._config
        self.chart.request(
            find_source(config.source_id),
            find_currency(config.currency),
            find_range(config.range_label),
        )

    def _on_snapshot(self, snapshot: PriceSnapshot) -> None:
        self._reanchor(snapshot)

    def _reanchor(self, snapshot: PriceSnapshot | None = None) -> None:
        if snapshot is None:
            snapshot = self.scheduler.snapshot
        if snapshot is None:
            self.ticker.stop()
            return
        config = self._config
        anchor = convert(snapshot.price(config.currency), find_unit(config.unit))
        self.ticker.anchor(anchor, run=config.live)

    def dashboard(self) -> DashboardView:
        config = self._config
        currency = find_currency(config.currency)
        snapshot = self.scheduler.snapshot
        row = snapshot.row(currency.code) if snapshot is not None else None
        status = self.scheduler.status
        displayed = self.ticker.displayed_value
        return DashboardView(
            source=find_source(config.source_id),
            currency=currency,
            unit=find_unit(config.unit),
            range_label=config.range_label,
            live=config.live,
            dark_mode=config.dark_mode,
            pan_mode=config.pan_mode,
            loading=status is FeedStatus.LOADING,
            status=status,
            status_message=self.scheduler.error,
            using_relay=self._provider.using_relay,
            displayed_value=displayed,
            display_price=format_price(displayed, currency),
            anchor_value=self.ticker.anchor_value,
            change=change_badge(row.change_24h if row is not None else None),
            volume_24h=row.volume_24h if row is not None else None,
            last_updated=self.scheduler.last_updated,
        )

    def chart_view(self) -> ChartView:
        config = self._config
        currency = find_currency(config.currency)
        points = [
            ChartViewPoint(
                timestamp_ms=p.timestamp_ms,
                price=p.price,
                time_label=format_axis_time(p.timestamp_ms, config.range_label),
                price_label=format_price(p.price, currency),
                axis_label=format_compact(p.price),
            )
            for p in convert_series(self.chart.history, config.unit)
        ]
        return ChartView(
            source_id=config.source_id,
            currency=currency.code,
            unit=config.unit,
            range_label=config.range_label,
            loading=self.chart.loading,
            points=points,
        )
