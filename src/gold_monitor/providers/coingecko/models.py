"""Query parameter models for the CoinGecko endpoints used by the monitor."""
from pydantic import BaseModel


class CoinGeckoSimplePriceParams(BaseModel):
    """Params for /simple/price (current snapshot across currencies)."""

    ids: str
    vs_currencies: str
    include_24hr_change: str = "true"
    include_24hr_vol: str = "true"
    include_last_updated_at: str = "true"


class CoinGeckoMarketChartParams(BaseModel):
    """Params for /coins/{id}/market_chart (raw price history)."""

    vs_currency: str
    days: int
