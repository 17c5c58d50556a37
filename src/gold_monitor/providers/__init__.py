"""Market-data providers for gold-backed tokens.

- CoinGeckoGoldProvider: spot snapshots and history via the CoinGecko API,
  routed through a TransportResolver with relay fallback.

Example:
    async with CoinGeckoGoldProvider() as provider:
        snapshot = await provider.get_snapshot("pax-gold", ["usd", "hkd"])
        print(snapshot.price("usd"))
"""
from gold_monitor.providers.coingecko import CoinGeckoGoldProvider
from gold_monitor.providers.core import (
    GoldPriceProviderABC,
    MissingKeyError,
    NetworkError,
    ProviderError,
    TransportResolver,
)

__all__ = [
    "CoinGeckoGoldProvider",
    "GoldPriceProviderABC",
    "MissingKeyError",
    "NetworkError",
    "ProviderError",
    "TransportResolver",
]
