"""Core provider abstractions."""
from gold_monitor.providers.core.exceptions import (
    MissingKeyError,
    NetworkError,
    ProviderError,
)
from gold_monitor.providers.core.provider_abc import GoldPriceProviderABC
from gold_monitor.providers.core.transport import TransportResolver

__all__ = [
    "GoldPriceProviderABC",
    "MissingKeyError",
    "NetworkError",
    "ProviderError",
    "TransportResolver",
]
