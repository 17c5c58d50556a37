import asyncio
import unittest
from datetime import datetime

from gold_monitor.providers import NetworkError
from gold_monitor.schemas import FeedStatus
from gold_monitor.services import GoldMonitor, MonitorConfig
from gold_monitor.services.state import (
    SelectCurrency,
    SelectRange,
    SelectSource,
    SelectUnit,
    SetLive,
    ToggleLive,
)
from tests.support import (
    FakeProvider,
    FixedRandom,
    ManualTimerFactory,
    make_snapshot,
    points,
)

NOW_MS = 1_700_000_000_000
HISTORY = points((NOW_MS - 7_200_000, 1990.0), (NOW_MS - 1_800_000, 1995.0), (NOW_MS, 2000.0))


class MonitorTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.provider = FakeProvider(
            snapshot=make_snapshot(usd=2000.0, usd_change=1.5, hkd=15600.0), history=HISTORY
        )
        self.timers = ManualTimerFactory()
        self.monitor = self.make_monitor()

    def make_monitor(self, config=None, rng=None) -> GoldMonitor:
        return GoldMonitor(
            self.provider,
            config=config,
            timer_factory=self.timers,
            rng=rng or FixedRandom(0.5),
            clock_ms=lambda: NOW_MS,
            clock=lambda: datetime(2024, 5, 1, 12, 0),
        )

    async def asyncTearDown(self):
        await self.monitor.close()

    def poll_timers(self):
        return self.timers.with_interval(60.0)

    def tick_timers(self):
        return self.timers.with_interval(1.5)


class TestStartup(MonitorTestCase):
    async def test_start_fetches_snapshot_and_chart(self):
        await self.monitor.start()

        self.assertEqual(len(self.provider.snapshot_calls), 1)
        self.assertEqual(self.provider.history_calls, [("pax-gold", "USD", 1)])
        self.assertEqual(self.monitor.chart.history, HISTORY)
        self.assertEqual(len(self.poll_timers()), 1)
        self.assertEqual(len(self.tick_timers()), 1)

    async def test_dashboard_example_scenario(self):
        await self.monitor.start()
        view = self.monitor.dashboard()

        self.assertEqual(view.anchor_value, 2000.0)
        self.assertEqual(view.displayed_value, 2000.0)
        self.assertEqual(view.display_price, "$2,000.00")
        self.assertEqual(view.change.text, "+1.50%")
        self.assertEqual(view.change.direction, "up")
        self.assertEqual(view.status, FeedStatus.READY)
        self.assertFalse(view.loading)
        self.assertEqual(view.last_updated, datetime(2024, 5, 1, 12, 0))

    async def test_dashboard_before_data(self):
        view = self.monitor.dashboard()
        self.assertTrue(view.loading)
        self.assertEqual(view.display_price, "---")
        self.assertIsNone(view.displayed_value)

    async def test_first_failure_shows_connecting(self):
        self.provider.snapshot_result = NetworkError()
        self.provider.history_result = NetworkError()
        await self.monitor.start()

        view = self.monitor.dashboard()
        self.assertEqual(view.status, FeedStatus.CONNECTING)
        self.assertEqual(view.status_message, "Connecting to market data...")
        self.assertEqual(self.monitor.chart_view().points, [])
        self.assertEqual(self.tick_timers(), [])

    async def test_start_paused_does_not_poll(self):
        self.monitor = self.make_monitor(config=MonitorConfig(live=False))
        await self.monitor.start()

        self.assertEqual(self.provider.snapshot_calls, [])
        self.assertEqual(len(self.provider.history_calls), 1)
        self.assertEqual(self.poll_timers(), [])

    async def test_relay_flag_is_exposed(self):
        self.provider.relay = True
        await self.monitor.start()
        self.assertTrue(self.monitor.dashboard().using_relay)


class TestSelections(MonitorTestCase):
    async def asyncSetUp(self):
        await self.monitor.start()

    async def test_unit_switch_hard_resets_to_new_anchor(self):
        self.monitor.ticker.state.displayed_value = 1999.0
        self.monitor.dispatch(SelectUnit("tael"))

        view = self.monitor.dashboard()
        self.assertAlmostEqual(view.anchor_value, 2406.74, places=2)
        self.assertEqual(view.displayed_value, view.anchor_value)
        self.assertEqual(len(self.provider.snapshot_calls), 1)
        self.assertEqual(len(self.provider.history_calls), 1)
        self.assertEqual(len(self.tick_timers()), 1)

    async def test_currency_switch_reanchors_and_refetches_chart(self):
        self.monitor.dispatch(SelectCurrency("HKD"))
        await self.monitor.settle()

        self.assertEqual(self.monitor.dashboard().displayed_value, 15600.0)
        self.assertEqual(self.provider.history_calls[-1], ("pax-gold", "HKD", 1))
        self.assertEqual(len(self.provider.snapshot_calls), 1)

    async def test_currency_missing_from_snapshot_anchors_at_zero(self):
        self.monitor.dispatch(SelectCurrency("EUR"))
        self.assertEqual(self.monitor.dashboard().anchor_value, 0.0)

    async def test_range_switch_only_refetches_chart(self):
        self.monitor.dispatch(SelectRange("1H"))
        await self.monitor.settle()

        self.assertEqual(self.provider.history_calls[-1], ("pax-gold", "USD", 1))
        self.assertTrue(
            all(p.timestamp_ms >= NOW_MS - 3_600_000 for p in self.monitor.chart.history)
        )
        self.assertEqual(len(self.monitor.chart.history), 2)
        self.assertEqual(len(self.provider.snapshot_calls), 1)

    async def test_source_switch_restarts_polling(self):
        self.monitor.dispatch(SelectSource("tether-gold"))
        await self.monitor.settle()

        self.assertEqual(self.provider.snapshot_calls[-1][0], "tether-gold")
        self.assertEqual(self.provider.history_calls[-1][0], "tether-gold")
        self.assertEqual(len(self.poll_timers()), 1)

    async def test_pause_stops_poll_and_ticker(self):
        self.monitor.dispatch(ToggleLive())
        self.timers.advance(600_000)
        await self.monitor.settle()

        self.assertEqual(len(self.provider.snapshot_calls), 1)
        self.assertEqual(self.poll_timers(), [])
        self.assertEqual(self.tick_timers(), [])
        self.assertFalse(self.monitor.dashboard().live)

    async def test_resume_acquires_immediately(self):
        self.monitor.dispatch(SetLive(False))
        self.monitor.dispatch(SetLive(True))
        await self.monitor.settle()

        self.assertEqual(len(self.provider.snapshot_calls), 2)
        self.assertEqual(len(self.poll_timers()), 1)
        self.assertEqual(len(self.tick_timers()), 1)

    async def test_source_switch_while_paused_does_not_poll(self):
        self.monitor.dispatch(SetLive(False))
        self.monitor.dispatch(SelectSource("tether-gold"))
        await self.monitor.settle()
        self.assertEqual(len(self.provider.snapshot_calls), 1)

        self.monitor.dispatch(SetLive(True))
        await self.monitor.settle()
        self.assertEqual(self.provider.snapshot_calls[-1][0], "tether-gold")

    async def test_polling_over_time(self):
        self.timers.advance(150_000)
        await self.monitor.settle()
        self.assertEqual(len(self.provider.snapshot_calls), 3)

    async def test_new_snapshot_hard_resets_ticker(self):
        self.monitor.ticker.state.displayed_value = 1950.0
        self.provider.snapshot_result = make_snapshot(usd=2050.0)
        self.timers.advance(60_000)
        await self.monitor.settle()

        self.assertEqual(self.monitor.dashboard().displayed_value, 2050.0)

    async def test_stale_snapshot_survives_later_failures(self):
        self.provider.snapshot_result = NetworkError()
        self.timers.advance(60_000)
        await self.monitor.settle()

        view = self.monitor.dashboard()
        self.assertEqual(view.status, FeedStatus.READY)
        self.assertIsNone(view.status_message)
        self.assertEqual(view.anchor_value, 2000.0)

    async def test_chart_view_converts_to_unit(self):
        self.monitor.dispatch(SelectUnit("tael"))
        view = self.monitor.chart_view()

        self.assertEqual(view.unit, "tael")
        self.assertAlmostEqual(view.points[-1].price, 2000.0 * 1.20337)
        self.assertEqual(view.points[-1].price_label, "$2,406.74")
        self.assertEqual(view.points[-1].axis_label, "2.4K")


class TestTeardown(MonitorTestCase):
    async def test_close_cancels_timers_and_in_flight_requests(self):
        await self.monitor.start()
        self.provider.gate = asyncio.Event()
        self.monitor.dispatch(SelectCurrency("HKD"))
        await asyncio.sleep(0)
        self.assertEqual(self.monitor.in_flight, 1)

        await self.monitor.close()

        self.assertEqual(self.timers.active, [])
        self.assertEqual(self.monitor.in_flight, 0)


if __name__ == "__main__":
    unittest.main()
