"""alternative.me Fear & Greed index client.

The provider returns the most recent day first with timestamps in Unix
seconds and values as strings; the client normalizes to ascending
millisecond TimePoints.
"""

from typing import Any

from marketpulse.models import Series
from marketpulse.providers.base import ProviderClient
from marketpulse.providers.coercion import build_series, dig, require_list
from marketpulse.providers.http import JsonHttpClient


def parse_fear_greed(payload: Any) -> Series:
    """Map a /fng payload to an ascending daily index series."""
    rows = require_list(dig(payload, "data"), "fear_greed.data")
    return build_series(rows, "timestamp", "value", seconds=True)


class FearGreedClient(ProviderClient):
    """Fetches the trailing daily Fear & Greed index."""

    def __init__(
        self,
        http: JsonHttpClient,
        url: str = "https://api.alternative.me/fng/",
        timeout_seconds: float = 10.0,
    ) -> None:
        super().__init__("alternative_me", timeout_seconds)
        self._http = http
        self._url = url

    async def fetch_index(self, limit: int = 60) -> Series | None:
        """Last ``limit`` daily index values (0-100), ascending."""
        return await self.guarded(
            "fetch_fear_greed",
            lambda: self._http.get_json(self._url, {"limit": limit}),
            parse_fear_greed,
            limit=limit,
        )
