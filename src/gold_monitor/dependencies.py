"""FastAPI dependency injection: app.state holds the monitor; Depends() resolves it.

Lifespan (main.py) creates the monitor once and attaches it to app.state.
"""
from typing import Annotated

from fastapi import Depends, Request, WebSocket

from gold_monitor.config import Settings
from gold_monitor.services import GoldMonitor


def get_monitor(request: Request) -> GoldMonitor:
    """Resolve the GoldMonitor created at startup."""
    return request.app.state.monitor


def get_monitor_ws(websocket: WebSocket) -> GoldMonitor:
    return websocket.scope["app"].state.monitor


def get_app_settings_ws(websocket: WebSocket) -> Settings:
    return websocket.scope["app"].state.settings


Monitor = Annotated[GoldMonitor, Depends(get_monitor)]
MonitorWs = Annotated[GoldMonitor, Depends(get_monitor_ws)]
SettingsWs = Annotated[Settings, Depends(get_app_settings_ws)]
