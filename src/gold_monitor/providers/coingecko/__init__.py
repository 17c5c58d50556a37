"""CoinGecko price provider."""
from gold_monitor.providers.coingecko.provider import CoinGeckoGoldProvider

__all__ = ["CoinGeckoGoldProvider"]
