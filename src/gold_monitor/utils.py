"""Shared time helpers."""
import time
from datetime import datetime


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def parse_timestamp(ts: float | None) -> datetime | None:
    """Convert an optional Unix timestamp (seconds) to a local datetime."""
    return datetime.fromtimestamp(ts) if ts is not None else None
