"""Display formatting for prices, 24h change and chart axes."""
from datetime import datetime

from gold_monitor.catalog import INTRADAY_RANGE_LABELS
from gold_monitor.schemas import ChangeBadge, Currency

PLACEHOLDER = "---"

_COMPACT_SUFFIXES = ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K"))


def format_price(value: float | None, currency: Currency) -> str:
    """Currency symbol, thousands separators and exactly two decimals."""
    if value is None:
        return PLACEHOLDER
    rounded = round(value, 2)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{currency.symbol}{abs(rounded):,.2f}"


def change_badge(change_pct: float | None) -> ChangeBadge:
    pct = change_pct or 0.0
    if pct == 0:
        pct = 0.0  # no "-0.00%"
    return ChangeBadge(
        text=f"{pct:+.2f}%",
        direction="up" if pct >= 0 else "down",
        value=pct,
    )


def format_axis_time(timestamp_ms: int, range_label: str) -> str:
    """Clock time for intraday ranges, month and day otherwise."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000)
    if range_label in INTRADAY_RANGE_LABELS:
        return moment.strftime("%H:%M")
    return f"{moment:%b} {moment.day}"


def format_compact(value: float) -> str:
    """Short axis label, e.g. 2406.74 -> "2.4K", 12345 -> "12K"."""
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    suffix = ""
    for threshold, name in _COMPACT_SUFFIXES:
        if magnitude >= threshold:
            magnitude /= threshold
            suffix = name
            break
    if magnitude >= 10:
        digits = 0
    elif magnitude >= 1:
        digits = 1
    else:
        digits = 2
    text = f"{magnitude:.{digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{sign}{text}{suffix}"
