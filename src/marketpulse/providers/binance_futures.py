"""Binance USD-M futures public data client via ccxt async.

Wraps the implicit (raw endpoint) methods of ccxt.async_support.binance for
the five derivatives feeds: open interest, funding rate history, taker
buy/sell ratio, global long/short account ratio and top-trader long/short
account ratio. None of these endpoints need API keys.

Binance returns numeric fields as strings ("0.00010000") and timestamps as
integer milliseconds. Every method short-circuits to None, without any
network call, when the token has no futures ticker.
"""

from decimal import Decimal
from typing import Any

import ccxt.async_support as ccxt_async

from marketpulse.exceptions import MalformedPayloadError
from marketpulse.logging import get_logger
from marketpulse.models import Series, Token
from marketpulse.providers.base import ProviderClient
from marketpulse.providers.coercion import build_series, require_list, to_decimal

logger = get_logger(__name__)

QUOTE_ASSET = "USDT"


def futures_contract(token: Token) -> str | None:
    """Return the USDT-margined contract symbol (e.g. "SOLUSDT"), or None."""
    if not token.has_futures:
        return None
    return f"{token.futures_ticker}{QUOTE_ASSET}"


def parse_open_interest(payload: Any) -> Decimal | None:
    """Return the USD notional of the most recent open interest bucket."""
    rows = require_list(payload, "open_interest")
    rows = [r for r in rows if isinstance(r, dict)]
    if not rows:
        raise MalformedPayloadError("open_interest: empty response")
    latest = max(rows, key=lambda r: to_decimal(r.get("timestamp")) or 0)
    return to_decimal(latest.get("sumOpenInterestValue"))


def parse_funding_history(payload: Any) -> Series:
    return build_series(require_list(payload, "funding_history"), "fundingTime", "fundingRate")


def parse_taker_ratio(payload: Any) -> Series:
    return build_series(require_list(payload, "taker_ratio"), "timestamp", "buySellRatio")


def parse_long_short_ratio(payload: Any) -> Series:
    return build_series(require_list(payload, "long_short_ratio"), "timestamp", "longShortRatio")


class BinanceFuturesClient(ProviderClient):
    """Binance USD-M futures market data client.

    Args:
        exchange: ccxt async Binance instance. Markets are never loaded; only
            the implicit public endpoints are used.
        timeout_seconds: Per-call timeout.
    """

    def __init__(self, exchange: ccxt_async.binance, timeout_seconds: float = 10.0) -> None:
        super().__init__("binance_futures", timeout_seconds)
        self._exchange = exchange

    @classmethod
    def create(cls, timeout_seconds: float = 10.0, rate_limit: bool = True) -> "BinanceFuturesClient":
        """Build a client around a fresh public-only ccxt Binance instance."""
        exchange = ccxt_async.binance(
            {
                "enableRateLimit": rate_limit,
                "timeout": int(timeout_seconds * 1000),
                "options": {"defaultType": "future"},
            }
        )
        return cls(exchange, timeout_seconds)

    async def close(self) -> None:
        """Clean up ccxt async resources. CRITICAL: must be called to avoid resource leaks."""
        await self._exchange.close()
        logger.debug("binance_connection_closed")

    async def fetch_open_interest(self, token: Token, period: str = "5m") -> Decimal | None:
        """Latest open interest in USD notional (most recent ``period`` bucket)."""
        contract = futures_contract(token)
        if contract is None:
            return None
        return await self.guarded(
            "fetch_open_interest",
            lambda: self._exchange.fapiDataGetOpenInterestHist(
                {"symbol": contract, "period": period, "limit": 1}
            ),
            parse_open_interest,
            contract=contract,
        )

    async def fetch_funding_history(self, token: Token, limit: int = 60) -> Series | None:
        """Trailing ``limit`` funding events, ascending."""
        contract = futures_contract(token)
        if contract is None:
            return None
        return await self.guarded(
            "fetch_funding_history",
            lambda: self._exchange.fapiPublicGetFundingRate({"symbol": contract, "limit": limit}),
            parse_funding_history,
            contract=contract,
        )

    async def fetch_taker_ratio(
        self, token: Token, period: str = "1h", limit: int = 100
    ) -> Series | None:
        """Taker buy/sell volume ratio points, ascending."""
        contract = futures_contract(token)
        if contract is None:
            return None
        return await self.guarded(
            "fetch_taker_ratio",
            lambda: self._exchange.fapiDataGetTakerlongshortRatio(
                {"symbol": contract, "period": period, "limit": limit}
            ),
            parse_taker_ratio,
            contract=contract,
        )

    async def fetch_global_long_short(
        self, token: Token, period: str = "1h", limit: int = 100
    ) -> Series | None:
        """Global account long/short ratio points, ascending."""
        contract = futures_contract(token)
        if contract is None:
            return None
        return await self.guarded(
            "fetch_global_long_short",
            lambda: self._exchange.fapiDataGetGlobalLongShortAccountRatio(
                {"symbol": contract, "period": period, "limit": limit}
            ),
            parse_long_short_ratio,
            contract=contract,
        )

    async def fetch_top_trader_long_short(
        self, token: Token, period: str = "1h", limit: int = 100
    ) -> Series | None:
        """Top-trader account long/short ratio points, ascending."""
        contract = futures_contract(token)
        if contract is None:
            return None
        return await self.guarded(
            "fetch_top_trader_long_short",
            lambda: self._exchange.fapiDataGetTopLongShortAccountRatio(
                {"symbol": contract, "period": period, "limit": limit}
            ),
            parse_long_short_ratio,
            contract=contract,
        )
