"""Tests for BinanceFuturesClient.

All tests use mocked ccxt exchange objects to avoid real API calls.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import ccxt.async_support as ccxt_async
import pytest

from marketpulse.models import Token
from marketpulse.providers.binance_futures import BinanceFuturesClient, futures_contract

# ---------------------------------------------------------------------------
# Sample payloads (raw Binance futures responses; numbers arrive as strings)
# ---------------------------------------------------------------------------

MOCK_OPEN_INTEREST = [
    {
        "symbol": "SOLUSDT",
        "sumOpenInterest": "12000000.00",
        "sumOpenInterestValue": "1850000000.12345678",
        "timestamp": 1700000300000,
    }
]

MOCK_FUNDING = [
    {"symbol": "SOLUSDT", "fundingTime": 1700000000000, "fundingRate": "0.00010000", "markPrice": "60.1"},
    {"symbol": "SOLUSDT", "fundingTime": 1700028800000, "fundingRate": "-0.00025000", "markPrice": "60.4"},
    {"symbol": "SOLUSDT", "fundingTime": 1700057600000, "fundingRate": "0.00005000", "markPrice": "61.0"},
]

MOCK_TAKER = [
    {"buySellRatio": "1.0500", "buyVol": "1050", "sellVol": "1000", "timestamp": 1700000000000},
    {"buySellRatio": "0.9200", "buyVol": "920", "sellVol": "1000", "timestamp": 1700003600000},
]

MOCK_LONG_SHORT = [
    {"symbol": "SOLUSDT", "longShortRatio": "2.3100", "longAccount": "0.6979", "shortAccount": "0.3021", "timestamp": 1700003600000},
    {"symbol": "SOLUSDT", "longShortRatio": "2.1000", "longAccount": "0.6774", "shortAccount": "0.3226", "timestamp": 1700000000000},
]


@pytest.fixture
def client(mock_exchange: MagicMock) -> BinanceFuturesClient:
    return BinanceFuturesClient(mock_exchange, timeout_seconds=1.0)


class TestFuturesContract:
    """Tests for contract symbol mapping."""

    def test_usdt_contract(self, sol_token: Token) -> None:
        assert futures_contract(sol_token) == "SOLUSDT"

    def test_multiplied_ticker(self) -> None:
        bonk = Token(catalog_id="bonk", symbol="BONK", futures_ticker="1000BONK")
        assert futures_contract(bonk) == "1000BONKUSDT"

    def test_no_futures_market(self, spot_only_token: Token) -> None:
        assert futures_contract(spot_only_token) is None

    def test_blank_ticker_is_no_futures_market(self) -> None:
        blank = Token(catalog_id="mystery", symbol="MYS", futures_ticker="")
        assert blank.has_futures is False
        assert futures_contract(blank) is None


class TestShortCircuit:
    """Tokens without a futures ticker never touch the network."""

    @pytest.mark.asyncio
    async def test_all_feeds_none_without_call(
        self, client: BinanceFuturesClient, mock_exchange: MagicMock, spot_only_token: Token
    ) -> None:
        assert await client.fetch_open_interest(spot_only_token) is None
        assert await client.fetch_funding_history(spot_only_token) is None
        assert await client.fetch_taker_ratio(spot_only_token) is None
        assert await client.fetch_global_long_short(spot_only_token) is None
        assert await client.fetch_top_trader_long_short(spot_only_token) is None

        mock_exchange.fapiDataGetOpenInterestHist.assert_not_awaited()
        mock_exchange.fapiPublicGetFundingRate.assert_not_awaited()
        mock_exchange.fapiDataGetTakerlongshortRatio.assert_not_awaited()
        mock_exchange.fapiDataGetGlobalLongShortAccountRatio.assert_not_awaited()
        mock_exchange.fapiDataGetTopLongShortAccountRatio.assert_not_awaited()


class TestOpenInterest:
    """Tests for fetch_open_interest."""

    @pytest.mark.asyncio
    async def test_latest_usd_notional(
        self, client: BinanceFuturesClient, mock_exchange: MagicMock, sol_token: Token
    ) -> None:
        mock_exchange.fapiDataGetOpenInterestHist.return_value = MOCK_OPEN_INTEREST
        oi = await client.fetch_open_interest(sol_token)

        assert oi == Decimal("1850000000.12345678")
        mock_exchange.fapiDataGetOpenInterestHist.assert_awaited_once_with(
            {"symbol": "SOLUSDT", "period": "5m", "limit": 1}
        )

    @pytest.mark.asyncio
    async def test_empty_response_returns_none(
        self, client: BinanceFuturesClient, mock_exchange: MagicMock, sol_token: Token
    ) -> None:
        mock_exchange.fapiDataGetOpenInterestHist.return_value = []
        assert await client.fetch_open_interest(sol_token) is None

    @pytest.mark.asyncio
    async def test_uncoercible_value_returns_none(
        self, client: BinanceFuturesClient, mock_exchange: MagicMock, sol_token: Token
    ) -> None:
        mock_exchange.fapiDataGetOpenInterestHist.return_value = [
            {"sumOpenInterestValue": "", "timestamp": 1700000300000}
        ]
        assert await client.fetch_open_interest(sol_token) is None


class TestFundingHistory:
    """Tests for fetch_funding_history."""

    @pytest.mark.asyncio
    async def test_series_ascending_with_decimal_rates(
        self, client: BinanceFuturesClient, mock_exchange: MagicMock, sol_token: Token
    ) -> None:
        mock_exchange.fapiPublicGetFundingRate.return_value = list(reversed(MOCK_FUNDING))
        series = await client.fetch_funding_history(sol_token, limit=60)

        assert series is not None
        assert [p.timestamp_ms for p in series] == [1700000000000, 1700028800000, 1700057600000]
        assert series[1].value == Decimal("-0.00025")
        assert series[-1].value == Decimal("0.00005")
        mock_exchange.fapiPublicGetFundingRate.assert_awaited_once_with(
            {"symbol": "SOLUSDT", "limit": 60}
        )

    @pytest.mark.asyncio
    async def test_exchange_error_returns_none(
        self, client: BinanceFuturesClient, mock_exchange: MagicMock, sol_token: Token
    ) -> None:
        mock_exchange.fapiPublicGetFundingRate.side_effect = ccxt_async.BadSymbol(
            'binance {"code":-1121,"msg":"Invalid symbol."}'
        )
        assert await client.fetch_funding_history(sol_token) is None

    @pytest.mark.asyncio
    async def test_network_error_returns_none(
        self, client: BinanceFuturesClient, mock_exchange: MagicMock, sol_token: Token
    ) -> None:
        mock_exchange.fapiPublicGetFundingRate.side_effect = ccxt_async.NetworkError("timed out")
        assert await client.fetch_funding_history(sol_token) is None


class TestRatios:
    """Tests for taker and long/short ratio feeds."""

    @pytest.mark.asyncio
    async def test_taker_ratio(
        self, client: BinanceFuturesClient, mock_exchange: MagicMock, sol_token: Token
    ) -> None:
        mock_exchange.fapiDataGetTakerlongshortRatio.return_value = MOCK_TAKER
        series = await client.fetch_taker_ratio(sol_token, period="1h", limit=100)

        assert [p.value for p in series] == [Decimal("1.05"), Decimal("0.92")]
        mock_exchange.fapiDataGetTakerlongshortRatio.assert_awaited_once_with(
            {"symbol": "SOLUSDT", "period": "1h", "limit": 100}
        )

    @pytest.mark.asyncio
    async def test_global_long_short_sorted(
        self, client: BinanceFuturesClient, mock_exchange: MagicMock, sol_token: Token
    ) -> None:
        mock_exchange.fapiDataGetGlobalLongShortAccountRatio.return_value = MOCK_LONG_SHORT
        series = await client.fetch_global_long_short(sol_token)

        assert series[-1].value == Decimal("2.31")
        assert series[0].timestamp_ms < series[-1].timestamp_ms

    @pytest.mark.asyncio
    async def test_top_trader_long_short(
        self, client: BinanceFuturesClient, mock_exchange: MagicMock, sol_token: Token
    ) -> None:
        mock_exchange.fapiDataGetTopLongShortAccountRatio.return_value = MOCK_LONG_SHORT
        series = await client.fetch_top_trader_long_short(sol_token)
        assert len(series) == 2

    @pytest.mark.asyncio
    async def test_error_dict_returns_none(
        self, client: BinanceFuturesClient, mock_exchange: MagicMock, sol_token: Token
    ) -> None:
        mock_exchange.fapiDataGetTakerlongshortRatio.return_value = {"code": -1130, "msg": "bad"}
        assert await client.fetch_taker_ratio(sol_token) is None


class TestClose:
    """Resource cleanup."""

    @pytest.mark.asyncio
    async def test_close_closes_exchange(
        self, client: BinanceFuturesClient, mock_exchange: MagicMock
    ) -> None:
        await client.close()
        mock_exchange.close.assert_awaited_once()
