"""Shared test fixtures for the market metrics engine."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from marketpulse.config import AppSettings, ProviderSettings, WindowSettings
from marketpulse.models import Candle, SpotMarketData, TimePoint, Token


def make_series(*values: str, start_ms: int = 1_700_000_000_000, step_ms: int = 3_600_000) -> tuple:
    """Build an ascending TimePoint series from Decimal strings."""
    return tuple(
        TimePoint(timestamp_ms=start_ms + i * step_ms, value=Decimal(v))
        for i, v in enumerate(values)
    )


def make_candles(*closes: str, start_ms: int = 1_700_000_000_000, step_ms: int = 86_400_000) -> tuple:
    """Build ascending candles whose open/high/low all equal the close."""
    return tuple(
        Candle(
            timestamp_ms=start_ms + i * step_ms,
            open=Decimal(c),
            high=Decimal(c),
            low=Decimal(c),
            close=Decimal(c),
        )
        for i, c in enumerate(closes)
    )


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (short timeouts, default windows)."""
    return AppSettings(
        log_level="DEBUG",
        provider=ProviderSettings(timeout_seconds=1.0),
        window=WindowSettings(),
    )


@pytest.fixture
def sol_token() -> Token:
    return Token(catalog_id="solana", symbol="SOL", futures_ticker="SOL")


@pytest.fixture
def spot_only_token() -> Token:
    """A token with no derivatives market."""
    return Token(catalog_id="fartcoin", symbol="FARTCOIN", futures_ticker=None)


@pytest.fixture
def spot_data() -> SpotMarketData:
    return SpotMarketData(
        price=Decimal("150.25"),
        price_change_24h=Decimal("8"),
        price_change_7d=Decimal("-3.5"),
        volume_24h=Decimal("2500000000"),
        market_cap=Decimal("70000000000"),
    )


@pytest.fixture
def mock_coingecko(spot_data: SpotMarketData) -> MagicMock:
    """CoinGecko client double returning healthy data."""
    client = MagicMock()
    client.fetch_ohlc = AsyncMock(return_value=make_candles("140", "145", "150"))
    client.fetch_market_data = AsyncMock(return_value=spot_data)
    client.fetch_market_chart = AsyncMock(return_value=make_series("1000", "1100", step_ms=86_400_000))
    client.search_tokens = AsyncMock(return_value=[])
    return client


@pytest.fixture
def mock_fear_greed() -> MagicMock:
    client = MagicMock()
    client.fetch_index = AsyncMock(return_value=make_series("40", "20", "15", step_ms=86_400_000))
    return client


@pytest.fixture
def mock_futures() -> MagicMock:
    """Futures client double returning healthy data for every feed."""
    client = MagicMock()
    client.fetch_open_interest = AsyncMock(return_value=Decimal("1234567.89"))
    client.fetch_funding_history = AsyncMock(return_value=make_series("0.0001", "-0.005", "-0.02"))
    client.fetch_taker_ratio = AsyncMock(return_value=make_series("0.9", "1.1", "1.3"))
    client.fetch_global_long_short = AsyncMock(return_value=make_series("1.5", "1.8"))
    client.fetch_top_trader_long_short = AsyncMock(return_value=make_series("2.1", "2.4"))
    client.close = AsyncMock()
    return client


@pytest.fixture
def mock_http() -> MagicMock:
    """JsonHttpClient double; set get_json.return_value / side_effect per test."""
    http = MagicMock()
    http.get_json = AsyncMock()
    http.close = AsyncMock()
    return http


@pytest.fixture
def mock_exchange() -> MagicMock:
    """ccxt Binance double exposing the implicit public endpoints used."""
    exchange = MagicMock()
    exchange.fapiDataGetOpenInterestHist = AsyncMock()
    exchange.fapiPublicGetFundingRate = AsyncMock()
    exchange.fapiDataGetTakerlongshortRatio = AsyncMock()
    exchange.fapiDataGetGlobalLongShortAccountRatio = AsyncMock()
    exchange.fapiDataGetTopLongShortAccountRatio = AsyncMock()
    exchange.close = AsyncMock()
    return exchange
