"""API routers."""
from gold_monitor.routers.dashboard import router as dashboard_router

__all__ = ["dashboard_router"]
