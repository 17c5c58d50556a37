"""Live/Paused polling of the current price snapshot."""
import logging
from collections.abc import Callable
from datetime import datetime

from gold_monitor.catalog import SOURCES, wire_currency_codes
from gold_monitor.providers.core import (
    GoldPriceProviderABC,
    MissingKeyError,
    NetworkError,
)
from gold_monitor.schemas import FeedStatus, PriceSnapshot
from gold_monitor.services.timers import (
    AsyncioIntervalTimer,
    BackgroundTasks,
    TimerFactory,
    TimerSlot,
)

logger = logging.getLogger(__name__)

CONNECTING_MESSAGE = "Connecting to market data..."


class PriceScheduler:
    """State machine (Live, Paused) that acquires a snapshot now and then every interval.

    Failures are handled with an anti-flicker policy: while no snapshot has ever
    been obtained a soft "connecting" status is exposed; afterwards failures are
    swallowed and the stale snapshot stays visible.

    In-flight acquisitions are neither deduplicated nor cancelled by pausing;
    whichever response completes last wins.
    """

    def __init__(
        self,
        provider: GoldPriceProviderABC,
        *,
        source_id: str = SOURCES[0].id,
        interval: float = 60.0,
        live: bool = True,
        timer_factory: TimerFactory = AsyncioIntervalTimer,
        tasks: BackgroundTasks | None = None,
        on_snapshot: Callable[[PriceSnapshot], None] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the scheduler. Nothing is fetched until ``start()``.

        Args:
            provider: Source of price snapshots.
            source_id: Asset pool to poll.
            interval: Seconds between scheduled acquisitions.
            live: Initial state; Live unless told otherwise.
            timer_factory: Creates the recurring poll timer.
            tasks: Tracker for in-flight acquisitions (shared with the owner).
            on_snapshot: Called with every newly applied snapshot.
            clock: Returns the acquisition timestamp.
        """
        self._provider = provider
        self.source_id = source_id
        self._interval = interval
        self._live = live
        self._timer = TimerSlot(timer_factory)
        self._tasks = tasks or BackgroundTasks()
        self._on_snapshot = on_snapshot
        self._clock = clock

        self.snapshot: PriceSnapshot | None = None
        self.last_updated: datetime | None = None
        self.error: str | None = None
        self.loading = True

    @property
    def live(self) -> bool:
        return self._live

    @property
    def polling(self) -> bool:
        """Whether the recurring timer is currently armed."""
        return self._timer.active

    @property
    def status(self) -> FeedStatus:
        if self.error is not None:
            return FeedStatus.CONNECTING
        if self.loading and self.snapshot is None:
            return FeedStatus.LOADING
        return FeedStatus.READY

    def start(self) -> None:
        """Begin polling if Live; a Paused scheduler waits for ``resume()``."""
        if self._live:
            self._restart()

    def pause(self) -> None:
        """Live -> Paused: stop the timer. An in-flight request still applies."""
        self._live = False
        self._timer.clear()
        logger.info("Polling paused for %s", self.source_id)

    def resume(self) -> None:
        """Paused -> Live (or a parameter change while Live): acquire now, then re-arm."""
        self._live = True
        self._restart()

    def stop(self) -> None:
        """Tear down the timer without changing Live/Paused."""
        self._timer.clear()

    def _restart(self) -> None:
        self._timer.clear()
        self._spawn_acquisition()
        self._timer.start(self._interval, self._spawn_acquisition)

    def _spawn_acquisition(self) -> None:
        self._tasks.spawn(self.acquire())

    async def acquire(self) -> bool:
        """Fetch one snapshot for the current source and apply it.

        Returns:
            True if a new snapshot replaced the previous one.
        """
        source_id = self.source_id
        try:
            snapshot = await self._provider.get_snapshot(source_id, wire_currency_codes())
        except NetworkError as exc:
            if self.snapshot is None:
                self.error = CONNECTING_MESSAGE
                logger.warning("Price fetch failed for %s: %s", source_id, exc)
            else:
                logger.info(
                    "Price fetch failed for %s, keeping snapshot from %s: %s",
                    source_id,
                    self.last_updated,
                    exc,
                )
            return False
        except MissingKeyError as exc:
            logger.warning("No price update for %s: %s", source_id, exc)
            return False
        finally:
            self.loading = False

        self.snapshot = snapshot
        self.last_updated = self._clock()
        self.error = None
        logger.debug("Snapshot for %s applied at %s", source_id, self.last_updated)
        if self._on_snapshot is not None:
            self._on_snapshot(snapshot)
        return True
