"""Chart history: resolve a range label into a provider window and a local slice."""
import asyncio
import logging
from collections.abc import Callable, Iterable

from gold_monitor.providers.core import GoldPriceProviderABC, ProviderError
from gold_monitor.schemas import (
    ChartHistory,
    ChartPoint,
    Currency,
    RangeSelector,
    SliceMode,
    Source,
)
from gold_monitor.services.timers import BackgroundTasks
from gold_monitor.utils import now_ms

logger = logging.getLogger(__name__)

HOUR_MS = 60 * 60 * 1000

# Slice modes missing here (NONE and LAST_24_HOURS) keep the whole window.
SLICE_WINDOWS_MS: dict[SliceMode, int] = {
    SliceMode.LAST_HOUR: HOUR_MS,
    SliceMode.LAST_8_HOURS: 8 * HOUR_MS,
}


def apply_slice(
    points: Iterable[ChartPoint], slice_mode: SliceMode, now: int
) -> ChartHistory:
    """Keep the points inside the slice window ending at ``now`` (epoch ms)."""
    window = SLICE_WINDOWS_MS.get(slice_mode)
    if window is None:
        return tuple(points)
    cutoff = now - window
    return tuple(p for p in points if p.timestamp_ms >= cutoff)


class ChartHistoryFetcher:
    """Fetches and slices history for the chart; keeps the last good series on failure.

    Failures are logged only. The previous series (empty on first load) stays
    in place, unlike snapshot failures which can surface a status message.
    """

    def __init__(
        self,
        provider: GoldPriceProviderABC,
        *,
        clock: Callable[[], int] = now_ms,
        tasks: BackgroundTasks | None = None,
    ) -> None:
        self._provider = provider
        self._clock = clock
        self._tasks = tasks or BackgroundTasks()
        self._in_flight = 0
        self.history: ChartHistory = ()

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def request(
        self, source: Source, currency: Currency, selector: RangeSelector
    ) -> asyncio.Task:
        """Resolve in the background. Earlier requests are not cancelled."""
        return self._tasks.spawn(self.resolve(source, currency, selector))

    async def resolve(
        self, source: Source, currency: Currency, selector: RangeSelector
    ) -> ChartHistory:
        """Fetch ``selector.days`` of history and apply its slice mode.

        Returns:
            The new series, or the retained previous one if the fetch failed.
        """
        self._in_flight += 1
        try:
            raw = await self._provider.get_history(source.id, currency.code, selector.days)
        except ProviderError as exc:
            logger.error(
                "Chart fetch failed for %s/%s (%s): %s",
                source.id,
                currency.code,
                selector.label,
                exc,
            )
            return self.history
        finally:
            self._in_flight -= 1

        self.history = apply_slice(raw, selector.slice_mode, self._clock())
        logger.debug(
            "Chart %s/%s %s: %d of %d points kept",
            source.id,
            currency.code,
            selector.label,
            len(self.history),
            len(raw),
        )
        return self.history
