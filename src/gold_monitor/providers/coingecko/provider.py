"""CoinGecko price provider for gold-backed tokens."""
import logging

import httpx

from gold_monitor.config import DEFAULT_API_URL
from gold_monitor.providers.coingecko.models import (
    CoinGeckoMarketChartParams,
    CoinGeckoSimplePriceParams,
)
from gold_monitor.providers.core import (
    GoldPriceProviderABC,
    MissingKeyError,
    TransportResolver,
)
from gold_monitor.providers.core.utils import normalize_currency_code, to_float
from gold_monitor.schemas import ChartHistory, ChartPoint, PriceRow, PriceSnapshot
from gold_monitor.utils import parse_timestamp

logger = logging.getLogger(__name__)


class CoinGeckoGoldProvider(GoldPriceProviderABC):
    """Spot prices and history of gold-backed tokens via the public CoinGecko API.

    Uses CoinGecko IDs as sources (e.g. "pax-gold", "tether-gold"). One token
    tracks one troy ounce, so prices are per ounce. Every request goes through a
    TransportResolver, which falls back to a relay when the direct call fails.
    """

    def __init__(
        self,
        transport: TransportResolver | None = None,
        base_url: str = DEFAULT_API_URL,
    ) -> None:
        """Initialize the provider.

        Args:
            transport: Resolver used for every request. A default one is created if omitted.
            base_url: CoinGecko API root.
        """
        self._transport = transport or TransportResolver()
        self._base_url = base_url.rstrip("/")

    @property
    def using_relay(self) -> bool:
        return self._transport.using_relay

    def snapshot_url(self, source_id: str, currency_codes: list[str]) -> str:
        params = CoinGeckoSimplePriceParams(
            ids=source_id,
            vs_currencies=",".join(normalize_currency_code(c) for c in currency_codes),
        ).model_dump()
        return str(httpx.URL(f"{self._base_url}/simple/price", params=params))

    def history_url(self, source_id: str, currency_code: str, days: int) -> str:
        params = CoinGeckoMarketChartParams(
            vs_currency=normalize_currency_code(currency_code), days=days
        ).model_dump()
        return str(
            httpx.URL(f"{self._base_url}/coins/{source_id}/market_chart", params=params)
        )

    async def get_snapshot(
        self, source_id: str, currency_codes: list[str]
    ) -> PriceSnapshot:
        """Fetch the current snapshot of a source across currencies.

        Raises:
            NetworkError: Provider unreachable through both transports.
            MissingKeyError: Response has no entry for ``source_id``.
        """
        data = await self._transport.acquire(self.snapshot_url(source_id, currency_codes))
        entry = data.get(source_id) if isinstance(data, dict) else None
        if not isinstance(entry, dict) or not entry:
            raise MissingKeyError(f"Source '{source_id}' not found in provider response")

        rows: dict[str, PriceRow] = {}
        for code in (normalize_currency_code(c) for c in currency_codes):
            price = to_float(entry.get(code))
            if price is None:
                continue
            rows[code] = PriceRow(
                price=price,
                change_24h=to_float(entry.get(f"{code}_24h_change")),
                volume_24h=to_float(entry.get(f"{code}_24h_vol")),
                last_updated_at=parse_timestamp(to_float(entry.get("last_updated_at"))),
            )
        if not rows:
            raise MissingKeyError(f"No requested currency priced for '{source_id}'")
        return PriceSnapshot(source_id=source_id, rows=rows)

    async def get_history(
        self, source_id: str, currency_code: str, days: int
    ) -> ChartHistory:
        """Fetch ``days`` days of raw history; malformed samples are skipped."""
        data = await self._transport.acquire(
            self.history_url(source_id, currency_code, days)
        )
        raw = data.get("prices") if isinstance(data, dict) else None
        points: list[ChartPoint] = []
        for sample in raw or []:
            if not isinstance(sample, (list, tuple)) or len(sample) < 2:
                continue
            ts, price = to_float(sample[0]), to_float(sample[1])
            if ts is None or price is None:
                continue
            points.append(ChartPoint(int(ts), price))
        if raw and len(points) < len(raw):
            logger.debug(
                "Skipped %d malformed history samples for %s", len(raw) - len(points), source_id
            )
        points.sort(key=lambda p: p.timestamp_ms)
        return tuple(points)

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._transport.close()
