"""CoinGecko market data client.

Covers the four spot-side feeds: free-text token search, OHLC candles, the
daily market chart (volume history), and the coin detail endpoint for current
price, 24h/7d change, volume and market cap.

Each method performs exactly one GET and returns None on any failure.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from marketpulse.exceptions import MalformedPayloadError
from marketpulse.models import Candle, Series, SpotMarketData, Token
from marketpulse.providers.base import ProviderClient
from marketpulse.providers.coercion import (
    build_pair_series,
    dig,
    require_list,
    to_decimal,
    to_timestamp_ms,
)
from marketpulse.providers.http import JsonHttpClient

SEARCH_RESULT_LIMIT = 20


def parse_search(payload: Any, limit: int = SEARCH_RESULT_LIMIT) -> list[Token]:
    """Map a /search payload to Tokens, keeping provider relevance order."""
    coins = require_list(dig(payload, "coins"), "search")
    tokens: list[Token] = []
    for coin in coins:
        if not isinstance(coin, Mapping) or not coin.get("id"):
            continue
        tokens.append(
            Token(
                catalog_id=str(coin["id"]),
                symbol=str(coin.get("symbol") or "").upper(),
                futures_ticker=None,  # search results are never wired to futures data
                name=coin.get("name"),
            )
        )
        if len(tokens) >= limit:
            break
    return tokens


def parse_ohlc(payload: Any) -> tuple[Candle, ...]:
    """Map ``[[ts, open, high, low, close], ...]`` to ascending Candles."""
    rows = require_list(payload, "ohlc")
    candles = []
    for row in rows:
        if not isinstance(row, (list, tuple)) or len(row) < 5:
            continue
        ts = to_timestamp_ms(row[0])
        open_, high, low, close = (to_decimal(v) for v in row[1:5])
        if ts is None or None in (open_, high, low, close):
            continue
        candles.append(Candle(timestamp_ms=ts, open=open_, high=high, low=low, close=close))
    candles.sort(key=lambda candle: candle.timestamp_ms)
    return tuple(candles)


def parse_market_chart(payload: Any) -> Series:
    """Extract the daily ``total_volumes`` series from a /market_chart payload."""
    volumes = require_list(dig(payload, "total_volumes"), "market_chart.total_volumes")
    return build_pair_series(volumes)


def parse_market_data(payload: Any) -> SpotMarketData:
    """Extract spot figures from a /coins/{id} payload.

    Individual fields that are missing or non-numeric become None; only a
    missing ``market_data`` object invalidates the whole record.
    """
    market = dig(payload, "market_data")
    if not isinstance(market, Mapping):
        raise MalformedPayloadError("market_data: missing market_data object")
    return SpotMarketData(
        price=to_decimal(dig(market, "current_price", "usd")),
        price_change_24h=to_decimal(market.get("price_change_percentage_24h")),
        price_change_7d=to_decimal(market.get("price_change_percentage_7d")),
        volume_24h=to_decimal(dig(market, "total_volume", "usd")),
        market_cap=to_decimal(dig(market, "market_cap", "usd")),
    )


class CoinGeckoClient(ProviderClient):
    """CoinGecko free API client.

    Args:
        http: Shared JSON transport.
        base_url: API root, e.g. ``https://api.coingecko.com/api/v3``.
        api_key: Optional CoinGecko demo API key for higher rate limits.
        timeout_seconds: Per-call timeout.
    """

    def __init__(
        self,
        http: JsonHttpClient,
        base_url: str = "https://api.coingecko.com/api/v3",
        api_key: str | None = None,
        timeout_seconds: float = 10.0,
        search_limit: int = SEARCH_RESULT_LIMIT,
    ) -> None:
        super().__init__("coingecko", timeout_seconds)
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key or None
        self._search_limit = search_limit

    def _get(self, path: str, params: dict[str, Any]) -> Callable[[], Awaitable[Any]]:
        if self._api_key:
            params = {**params, "x_cg_demo_api_key": self._api_key}
        return lambda: self._http.get_json(f"{self._base_url}{path}", params)

    async def search_tokens(self, query: str) -> list[Token] | None:
        """Search the coin catalog; up to ``search_limit`` candidates in relevance order."""
        return await self.guarded(
            "search_tokens",
            self._get("/search", {"query": query}),
            lambda payload: parse_search(payload, self._search_limit),
            query=query,
        )

    async def fetch_ohlc(self, catalog_id: str, days: int = 30) -> tuple[Candle, ...] | None:
        """OHLC candles over the trailing ``days`` window, ascending."""
        return await self.guarded(
            "fetch_ohlc",
            self._get(f"/coins/{catalog_id}/ohlc", {"vs_currency": "usd", "days": days}),
            parse_ohlc,
            catalog_id=catalog_id,
        )

    async def fetch_market_chart(self, catalog_id: str, days: int = 30) -> Series | None:
        """Daily volume history over the trailing ``days`` window, ascending."""
        return await self.guarded(
            "fetch_market_chart",
            self._get(
                f"/coins/{catalog_id}/market_chart",
                {"vs_currency": "usd", "days": days, "interval": "daily"},
            ),
            parse_market_chart,
            catalog_id=catalog_id,
        )

    async def fetch_market_data(self, catalog_id: str) -> SpotMarketData | None:
        """Current price, 24h/7d change, 24h volume and market cap."""
        return await self.guarded(
            "fetch_market_data",
            self._get(
                f"/coins/{catalog_id}",
                {
                    "localization": "false",
                    "tickers": "false",
                    "market_data": "true",
                    "community_data": "false",
                    "developer_data": "false",
                    "sparkline": "false",
                },
            ),
            parse_market_data,
            catalog_id=catalog_id,
        )
