"""Service layer: polling, chart history, ticker animation and the engine facade."""
from gold_monitor.services.chart import ChartHistoryFetcher
from gold_monitor.services.monitor import GoldMonitor
from gold_monitor.services.scheduler import PriceScheduler
from gold_monitor.services.state import MonitorConfig
from gold_monitor.services.ticker import TickerSynthesizer

__all__ = [
    "ChartHistoryFetcher",
    "GoldMonitor",
    "MonitorConfig",
    "PriceScheduler",
    "TickerSynthesizer",
]
