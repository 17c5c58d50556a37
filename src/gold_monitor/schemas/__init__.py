"""Pydantic schemas for runtime and view use. Nothing here is persisted."""
from datetime import datetime
from enum import Enum
from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class SliceMode(str, Enum):
    """Post-fetch temporal filter applied to a raw history window."""

    NONE = "none"
    LAST_HOUR = "lastHour"
    LAST_8_HOURS = "last8Hours"
    # Declared by the 24H range but never filtered; behaves exactly like NONE.
    LAST_24_HOURS = "24h"


class FeedStatus(str, Enum):
    """Connectivity of the snapshot feed as seen by the viewer."""

    LOADING = "loading"
    CONNECTING = "connecting"
    READY = "ready"


class Source(BaseModel):
    """Underlying asset pool prices are drawn from (a CoinGecko coin ID)."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    symbol: str


class Currency(BaseModel):
    """Fiat denomination; ``code`` is lowercased on the wire."""

    model_config = ConfigDict(frozen=True)

    code: str
    symbol: str
    name: str


class Unit(BaseModel):
    """Weight unit; ``multiplier`` is relative to one troy ounce."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    multiplier: float


class RangeSelector(BaseModel):
    """Chart range: provider query window plus local slice mode."""

    model_config = ConfigDict(frozen=True)

    label: str
    days: int
    slice_mode: SliceMode


class PriceRow(BaseModel):
    """Price of one source in one currency, as of the provider's last update."""

    price: float
    change_24h: float | None = None
    volume_24h: float | None = None
    last_updated_at: datetime | None = None


class PriceSnapshot(BaseModel):
    """Prices of one source across all supported currencies.

    Replaced wholesale on every successful poll; never merged.
    """

    model_config = ConfigDict(frozen=True)

    source_id: str
    rows: dict[str, PriceRow]  # keyed by lowercase currency code
    acquired_at: datetime = Field(default_factory=datetime.now)

    def row(self, currency_code: str) -> PriceRow | None:
        return self.rows.get(currency_code.lower())

    def price(self, currency_code: str) -> float:
        """Base (troy ounce) price in the currency; 0.0 when absent."""
        row = self.row(currency_code)
        return row.price if row is not None else 0.0


class ChartPoint(NamedTuple):
    """A single (timestamp in ms, price per troy ounce) history sample."""

    timestamp_ms: int
    price: float


# Time-ordered, ascending by timestamp; replaced wholesale per fetch.
ChartHistory = tuple[ChartPoint, ...]


class TickerState(BaseModel):
    """Animated price shown to the viewer and the real price it reverts to."""

    displayed_value: float
    anchor_value: float


class ChangeBadge(BaseModel):
    """24h change rendered for display."""

    text: str
    direction: Literal["up", "down"]
    value: float


class DashboardView(BaseModel):
    """Everything the presentation layer reads for the main ticker card."""

    source: Source
    currency: Currency
    unit: Unit
    range_label: str
    live: bool
    dark_mode: bool
    pan_mode: bool
    loading: bool
    status: FeedStatus
    status_message: str | None = None
    using_relay: bool = False
    displayed_value: float | None = None
    display_price: str
    anchor_value: float | None = None
    change: ChangeBadge
    volume_24h: float | None = None
    last_updated: datetime | None = None


class ChartViewPoint(BaseModel):
    """Chart sample already converted to the selected unit."""

    timestamp_ms: int
    price: float
    time_label: str
    price_label: str
    axis_label: str


class ChartView(BaseModel):
    """Chart series for the selected source, currency, unit and range."""

    source_id: str
    currency: str
    unit: str
    range_label: str
    loading: bool
    points: list[ChartViewPoint]


class ControlUpdate(BaseModel):
    """Partial update of the viewer's selections; omitted fields are unchanged."""

    source: str | None = None
    currency: str | None = None
    unit: str | None = None
    range: str | None = None
    live: bool | None = None
    dark_mode: bool | None = None
    pan_mode: bool | None = None


__all__ = [
    "ChangeBadge",
    "ChartHistory",
    "ChartPoint",
    "ChartView",
    "ChartViewPoint",
    "ControlUpdate",
    "Currency",
    "DashboardView",
    "FeedStatus",
    "PriceRow",
    "PriceSnapshot",
    "RangeSelector",
    "SliceMode",
    "Source",
    "TickerState",
    "Unit",
]
