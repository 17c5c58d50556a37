"""Abstract base class for precious-metal price providers."""
from abc import ABC, abstractmethod

from gold_monitor.schemas import ChartHistory, PriceSnapshot


class GoldPriceProviderABC(ABC):
    """Base interface for providers of spot snapshots and price history.

    Prices are always per troy ounce; unit conversion happens downstream.
    """

    @property
    def using_relay(self) -> bool:
        """Whether the most recent successful request went through a relay."""
        return False

    @abstractmethod
    async def get_snapshot(
        self, source_id: str, currency_codes: list[str]
    ) -> PriceSnapshot:
        """Fetch current prices of a source in every given currency.

        Args:
            source_id: Provider ID of the asset pool (e.g. "pax-gold").
            currency_codes: Currency codes to request (any case).

        Returns:
            A complete PriceSnapshot keyed by lowercase currency code.
        """

    @abstractmethod
    async def get_history(
        self, source_id: str, currency_code: str, days: int
    ) -> ChartHistory:
        """Fetch raw price history for the last ``days`` days, ascending by time."""

    async def close(self) -> None:
        """Clean up resources (connections, clients).

        Override in subclasses if cleanup is needed.
        """

    async def __aenter__(self) -> "GoldPriceProviderABC":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.close()
