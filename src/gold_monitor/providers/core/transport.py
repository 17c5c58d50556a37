"""HTTP transport with a relay fallback for when the provider is unreachable directly."""
import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx

from gold_monitor.config import DEFAULT_RELAY_URL
from gold_monitor.providers.core.exceptions import NetworkError

logger = logging.getLogger(__name__)

# Failures that make an attempt count as unsuccessful. Anything else is a bug and propagates.
_ATTEMPT_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.HTTPError,
    ValueError,  # includes json.JSONDecodeError
    TimeoutError,
    OSError,
    asyncio.TimeoutError,
)


class TransportResolver:
    """Fetch JSON directly, falling back once to a relay that proxies the original URL.

    The relay is called as ``{relay_url}?url={percent-encoded original URL}`` and
    must return the original body unchanged. No retries happen beyond these two
    attempts; retry cadence belongs to the caller.

    ``using_relay`` reports which path served the most recent successful call.
    """

    def __init__(
        self,
        relay_url: str = DEFAULT_RELAY_URL,
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            relay_url: Base URL of the relay endpoint.
            timeout: Per-request timeout in seconds (ignored when ``client`` is given).
            client: Optional preconfigured client; the resolver then does not close it.
        """
        self._relay_url = relay_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout, headers={"Accept": "application/json"}
        )
        self.using_relay = False

    def relay_url_for(self, url: str) -> str:
        """Relay request URL embedding ``url`` as a query-escaped parameter."""
        return f"{self._relay_url}?url={quote(url, safe='')}"

    async def acquire(self, url: str) -> Any:
        """Fetch ``url`` and decode its JSON body.

        Raises:
            NetworkError: Both the direct and the relay attempt failed.
        """
        try:
            data = await self._get_json(url)
        except _ATTEMPT_EXCEPTIONS as exc:
            logger.warning("Direct fetch failed for %s, attempting relay: %s", url, exc)
        else:
            self.using_relay = False
            return data

        try:
            data = await self._get_json(self.relay_url_for(url))
        except _ATTEMPT_EXCEPTIONS as exc:
            logger.error("Relay fetch failed for %s: %s", url, exc)
            raise NetworkError() from None
        self.using_relay = True
        return data

    async def _get_json(self, url: str) -> Any:
        response = await self._client.get(url)
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the HTTP client if this resolver created it."""
        if self._owns_client:
            await self._client.aclose()
