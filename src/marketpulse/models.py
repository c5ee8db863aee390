"""Shared data models for the market metrics engine.

CRITICAL: All prices, rates, ratios and percentages use Decimal. Never use float
for market values. Timestamps are integer Unix milliseconds.

Every model is frozen: snapshots and signals are replaced, never mutated.
"""

import time
from dataclasses import dataclass, field, fields
from decimal import Decimal
from enum import Enum


@dataclass(frozen=True)
class Token:
    """A selectable token.

    Identity is ``catalog_id`` (the market-data catalog's stable id). ``symbol``
    is display-only and may collide between search results.
    """

    catalog_id: str
    symbol: str = field(compare=False)
    futures_ticker: str | None = field(default=None, compare=False)  # None = no derivatives market
    name: str | None = field(default=None, compare=False)

    @property
    def has_futures(self) -> bool:
        return bool(self.futures_ticker)


@dataclass(frozen=True)
class TimePoint:
    """A single timestamped value in a metric series."""

    timestamp_ms: int
    value: Decimal


@dataclass(frozen=True)
class Candle:
    """A single OHLC candle."""

    timestamp_ms: int
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal


#: A metric series, ascending by timestamp. Empty is valid; None means unavailable.
Series = tuple[TimePoint, ...]


@dataclass(frozen=True)
class SpotMarketData:
    """Point-in-time spot market figures for one token. Each field independently nullable."""

    price: Decimal | None = None
    price_change_24h: Decimal | None = None  # percent
    price_change_7d: Decimal | None = None  # percent
    volume_24h: Decimal | None = None  # USD
    market_cap: Decimal | None = None  # USD


@dataclass(frozen=True)
class MarketSnapshot:
    """Unified point-in-time view of all metrics for one token.

    Every metric field is independently nullable; a missing field never
    invalidates the others. Long/short and top-trader ratios keep only the
    latest value, their history is not retained.
    """

    token: Token
    fetched_at_ms: int = field(default_factory=lambda: int(time.time() * 1000))

    price: Decimal | None = None
    price_change_24h: Decimal | None = None
    price_change_7d: Decimal | None = None
    volume_24h: Decimal | None = None
    market_cap: Decimal | None = None

    open_interest: Decimal | None = None
    funding_rate: Decimal | None = None
    funding_series: Series | None = None
    long_short_ratio: Decimal | None = None
    top_trader_ratio: Decimal | None = None
    taker_ratio: Decimal | None = None
    taker_series: Series | None = None

    fear_greed: Decimal | None = None
    fear_greed_series: Series | None = None

    ohlc: tuple[Candle, ...] | None = None
    volume_series: Series | None = None

    def signal_inputs(self) -> tuple[Decimal | None, Decimal | None, Decimal | None, Decimal | None]:
        """Return the only four fields the trading signal depends on."""
        return (self.price_change_24h, self.funding_rate, self.taker_ratio, self.fear_greed)

    def available_fields(self) -> list[str]:
        """Names of populated metric fields (non-null; empty series count as populated)."""
        return [
            f.name
            for f in fields(self)
            if f.name not in ("token", "fetched_at_ms") and getattr(self, f.name) is not None
        ]


class SignalLabel(str, Enum):
    """Composite trading signal classification."""

    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    NEUTRAL = "NEUTRAL"
    SELL = "SELL"
    STRONG_SELL = "STRONG_SELL"

    @property
    def display(self) -> str:
        """Human-readable label, e.g. ``"STRONG BUY"``."""
        return self.value.replace("_", " ")


@dataclass(frozen=True)
class Signal:
    """Composite trading signal with an explainable score.

    ``reasons`` lists one rationale per contributing rule, in evaluation order.
    """

    label: SignalLabel
    score: int  # bounded to [-100, 100] by the rule weights
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class MarketView:
    """A snapshot paired with the signal computed from it.

    This is the unit the presentation layer receives; it is always replaced
    whole so a consumer never sees fields from two different tokens.
    """

    snapshot: MarketSnapshot
    signal: Signal

    @property
    def token(self) -> Token:
        return self.snapshot.token
