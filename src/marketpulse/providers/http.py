"""Shared JSON-over-HTTP transport for the REST providers (CoinGecko, alternative.me).

Wraps a single aiohttp.ClientSession. The session is created lazily so the
client can be constructed outside a running event loop, and must be closed
via close() to release the connector.
"""

from typing import Any

import aiohttp

from marketpulse.exceptions import ProviderError
from marketpulse.logging import get_logger

logger = get_logger(__name__)


class JsonHttpClient:
    """Performs unauthenticated JSON GET requests.

    Args:
        user_agent: User-Agent header sent with every request.
        timeout_seconds: aiohttp total timeout per request. Provider clients
            apply their own per-call timeout on top of this.
    """

    def __init__(self, user_agent: str = "MarketPulse/1.0", timeout_seconds: float = 10.0) -> None:
        self._headers = {"Accept": "application/json", "User-Agent": user_agent}
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers=self._headers,
                timeout=self._timeout,
            )
        return self._session

    async def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``url`` and decode the JSON body.

        Raises:
            ProviderError: On non-2xx status or connection failure.
        """
        session = await self._get_session()
        query = {k: str(v) for k, v in (params or {}).items() if v is not None}
        try:
            async with session.get(url, params=query) as resp:
                if resp.status >= 400:
                    raise ProviderError(f"GET {url} returned HTTP {resp.status}")
                # Some providers send JSON with a text/plain content type
                return await resp.json(content_type=None)
        except aiohttp.ClientError as e:
            raise ProviderError(f"GET {url} failed: {e}") from e

    async def close(self) -> None:
        """Close the underlying session. Safe to call more than once."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
            logger.debug("http_session_closed")
        self._session = None
