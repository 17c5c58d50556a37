"""Main module for the gold price monitor."""
import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from gold_monitor.config import Settings, get_settings
from gold_monitor.providers import CoinGeckoGoldProvider, TransportResolver
from gold_monitor.routers import dashboard_router
from gold_monitor.services import GoldMonitor

logger = logging.getLogger(__name__)

MonitorFactory = Callable[[Settings], GoldMonitor]


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_monitor(settings: Settings) -> GoldMonitor:
    """Wire transport, provider and monitor from settings (composition root)."""
    transport = TransportResolver(settings.relay_url, timeout=settings.request_timeout)
    provider = CoinGeckoGoldProvider(transport, base_url=settings.api_url)
    return GoldMonitor(
        provider,
        poll_interval=settings.poll_interval,
        tick_interval=settings.tick_interval,
    )


def create_app(
    settings: Settings | None = None,
    monitor_factory: MonitorFactory = build_monitor,
) -> FastAPI:
    """Build the app; the monitor is created at startup and closed on shutdown."""

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        app_settings = settings or get_settings()
        monitor = monitor_factory(app_settings)
        fastapi_app.state.settings = app_settings
        fastapi_app.state.monitor = monitor
        await monitor.start()

        yield

        await monitor.close()
        try:
            await monitor.provider.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning(
                "Error closing provider %s: %s", type(monitor.provider).__name__, exc
            )

    fastapi_app = FastAPI(
        title="Gold Price Monitor",
        description="Precious-metal spot prices across currencies and weight units",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.include_router(dashboard_router)

    @fastapi_app.get("/")
    def health():
        """Return health check status."""
        return {"status": "ok"}

    return fastapi_app


app = create_app()


def run():
    """Run the local server (uvicorn). Use for `start`."""
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run("gold_monitor.main:app", host=settings.host, port=settings.port)
