"""Dashboard routes: the presentation layer's read and write access to the monitor."""
import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from gold_monitor.dependencies import Monitor, MonitorWs, SettingsWs
from gold_monitor.schemas import ChartView, ControlUpdate, DashboardView
from gold_monitor.services.state import (
    Action,
    SelectCurrency,
    SelectRange,
    SelectSource,
    SelectUnit,
    SetDarkMode,
    SetLive,
    SetPanMode,
    ToggleLive,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard"])


def actions_from_update(update: ControlUpdate) -> list[Action]:
    """Translate a partial control update into reducer actions, in a stable order."""
    actions: list[Action] = []
    if update.source is not None:
        actions.append(SelectSource(update.source))
    if update.currency is not None:
        actions.append(SelectCurrency(update.currency))
    if update.unit is not None:
        actions.append(SelectUnit(update.unit))
    if update.range is not None:
        actions.append(SelectRange(update.range))
    if update.live is not None:
        actions.append(SetLive(update.live))
    if update.dark_mode is not None:
        actions.append(SetDarkMode(update.dark_mode))
    if update.pan_mode is not None:
        actions.append(SetPanMode(update.pan_mode))
    return actions


@router.get("/dashboard", response_model=DashboardView)
async def get_dashboard(monitor: Monitor) -> DashboardView:
    """Current ticker card: animated price, 24h change, status and selections."""
    return monitor.dashboard()


@router.get("/chart", response_model=ChartView)
async def get_chart(monitor: Monitor) -> ChartView:
    """Chart series for the selected range, converted to the selected unit."""
    return monitor.chart_view()


@router.post("/controls", response_model=DashboardView)
async def update_controls(update: ControlUpdate, monitor: Monitor) -> DashboardView:
    """Change selections. Unknown codes fall back to the first catalog entry.

    Re-fetches triggered by the change run in the background.
    """
    for action in actions_from_update(update):
        monitor.dispatch(action)
    return monitor.dashboard()


@router.post("/live/toggle", response_model=DashboardView)
async def toggle_live(monitor: Monitor) -> DashboardView:
    monitor.dispatch(ToggleLive())
    return monitor.dashboard()


@router.websocket("/ticker/stream")
async def stream_ticker(
    websocket: WebSocket, monitor: MonitorWs, settings: SettingsWs
) -> None:
    """Push the dashboard view every tick interval until the client disconnects.

    A per-connection stop_event is set by a watcher that drains incoming
    messages, so the push loop ends as soon as the disconnect arrives.
    """
    await websocket.accept()
    stop_event = asyncio.Event()

    async def watch_disconnect() -> None:
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            logger.debug("Ticker stream client disconnected")
        finally:
            stop_event.set()

    watcher = asyncio.create_task(watch_disconnect())
    try:
        while not stop_event.is_set():
            await websocket.send_json(monitor.dashboard().model_dump(mode="json"))
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=settings.tick_interval)
            except asyncio.TimeoutError:
                pass
    except WebSocketDisconnect:
        logger.debug("Ticker stream closed while sending")
    finally:
        watcher.cancel()
