"""Metrics aggregator: concurrent fan-out to every provider, fan-in to one snapshot.

For a selected token the aggregator issues all nine provider calls at once
(none depends on another's result), waits for every one to settle, and
assembles a MarketSnapshot. It never fails as a whole: any subset of calls
may come back None and the corresponding fields are simply null.

Reconciliation rules (first non-null wins):
- price: spot price, else the last OHLC close
- 24h change: spot value, else computed from the last two OHLC closes
- funding / taker / fear-greed current: last point of the respective series
- long/short and top-trader ratios: last point only, history is dropped

The aggregator holds no state between invocations.
"""

import asyncio
import time
from decimal import Decimal
from typing import Any

import structlog

from marketpulse.config import WindowSettings
from marketpulse.logging import get_logger
from marketpulse.models import Candle, MarketSnapshot, MarketView, Series, SpotMarketData, Token
from marketpulse.providers.binance_futures import BinanceFuturesClient
from marketpulse.providers.coingecko import CoinGeckoClient
from marketpulse.providers.fear_greed import FearGreedClient
from marketpulse.signals.engine import signal_from_snapshot

logger = get_logger(__name__)


def latest_value(series: Series | None) -> Decimal | None:
    """Value of the chronologically latest point, or None for a missing/empty series."""
    if not series:
        return None
    return series[-1].value


def reconcile_price(
    spot: SpotMarketData | None, ohlc: tuple[Candle, ...] | None
) -> Decimal | None:
    """Current price: spot snapshot first, else the last OHLC close."""
    if spot is not None and spot.price is not None:
        return spot.price
    if ohlc:
        return ohlc[-1].close
    return None


def reconcile_change_24h(
    spot: SpotMarketData | None, ohlc: tuple[Candle, ...] | None
) -> Decimal | None:
    """24h change %: spot snapshot first, else from the last two OHLC closes.

    Formula: (latest - previous) / previous * 100. Needs at least two
    candles and a non-zero previous close.
    """
    if spot is not None and spot.price_change_24h is not None:
        return spot.price_change_24h
    if not ohlc or len(ohlc) < 2:
        return None
    latest = ohlc[-1].close
    previous = ohlc[-2].close
    if previous == 0:
        return None
    return (latest - previous) / previous * Decimal("100")


class MetricsAggregator:
    """Builds MarketSnapshots from the provider clients.

    Args:
        coingecko: Spot-side client (OHLC, market data, market chart).
        fear_greed: Fear & Greed index client.
        futures: Derivatives client (open interest, funding, taker, L/S ratios).
        windows: Default window parameters for the series.
    """

    def __init__(
        self,
        coingecko: CoinGeckoClient,
        fear_greed: FearGreedClient,
        futures: BinanceFuturesClient,
        windows: WindowSettings | None = None,
    ) -> None:
        self._coingecko = coingecko
        self._fear_greed = fear_greed
        self._futures = futures
        self._windows = windows or WindowSettings()

    async def get_snapshot(self, token: Token) -> MarketSnapshot:
        """Fetch every metric for ``token`` concurrently and assemble a snapshot.

        Always returns a snapshot, even if every provider failed.
        """
        w = self._windows
        start = time.monotonic()

        with structlog.contextvars.bound_contextvars(token=token.catalog_id):
            calls = {
                "ohlc": self._coingecko.fetch_ohlc(token.catalog_id, days=w.ohlc_days),
                "spot": self._coingecko.fetch_market_data(token.catalog_id),
                "market_chart": self._coingecko.fetch_market_chart(
                    token.catalog_id, days=w.market_chart_days
                ),
                "fear_greed": self._fear_greed.fetch_index(limit=w.fear_greed_limit),
                "open_interest": self._futures.fetch_open_interest(
                    token, period=w.open_interest_period
                ),
                "funding": self._futures.fetch_funding_history(token, limit=w.funding_limit),
                "taker": self._futures.fetch_taker_ratio(
                    token, period=w.ratio_period, limit=w.ratio_limit
                ),
                "long_short": self._futures.fetch_global_long_short(
                    token, period=w.ratio_period, limit=w.ratio_limit
                ),
                "top_trader": self._futures.fetch_top_trader_long_short(
                    token, period=w.ratio_period, limit=w.ratio_limit
                ),
            }
            settled = await asyncio.gather(*calls.values(), return_exceptions=True)
            results = dict(zip(calls.keys(), settled))

            for name, result in results.items():
                if isinstance(result, BaseException):
                    if isinstance(result, asyncio.CancelledError):
                        raise result
                    # Provider clients convert their own failures to None; this is a bug path
                    logger.warning(
                        "provider_unexpected_error",
                        metric=name,
                        error=str(result),
                        error_type=type(result).__name__,
                    )
                    results[name] = None

            snapshot = self._assemble(token, results)

            logger.info(
                "snapshot_assembled",
                symbol=token.symbol,
                available=snapshot.available_fields(),
                missing=[name for name, value in results.items() if value is None],
                duration_ms=round((time.monotonic() - start) * 1000),
            )
        return snapshot

    async def get_view(self, token: Token) -> MarketView:
        """Snapshot for ``token`` together with the signal computed from it."""
        snapshot = await self.get_snapshot(token)
        return MarketView(snapshot=snapshot, signal=signal_from_snapshot(snapshot))

    @staticmethod
    def _assemble(token: Token, results: dict[str, Any]) -> MarketSnapshot:
        spot: SpotMarketData | None = results["spot"]
        ohlc: tuple[Candle, ...] | None = results["ohlc"]
        funding: Series | None = results["funding"]
        taker: Series | None = results["taker"]
        fear_greed: Series | None = results["fear_greed"]

        return MarketSnapshot(
            token=token,
            price=reconcile_price(spot, ohlc),
            price_change_24h=reconcile_change_24h(spot, ohlc),
            price_change_7d=spot.price_change_7d if spot else None,
            volume_24h=spot.volume_24h if spot else None,
            market_cap=spot.market_cap if spot else None,
            open_interest=results["open_interest"],
            funding_rate=latest_value(funding),
            funding_series=funding,
            long_short_ratio=latest_value(results["long_short"]),
            top_trader_ratio=latest_value(results["top_trader"]),
            taker_ratio=latest_value(taker),
            taker_series=taker,
            fear_greed=latest_value(fear_greed),
            fear_greed_series=fear_greed,
            ohlc=ohlc,
            volume_series=results["market_chart"],
        )
