"""Market metrics aggregation and signal scoring for a token dashboard."""

from marketpulse.app import MarketPulse, build_components
from marketpulse.directory import PRIORITY_TOKENS, TokenDirectory, resolve_priority_tokens
from marketpulse.models import (
    Candle,
    MarketSnapshot,
    MarketView,
    Signal,
    SignalLabel,
    SpotMarketData,
    TimePoint,
    Token,
)
from marketpulse.signals import compute_signal, signal_from_snapshot

__all__ = [
    "PRIORITY_TOKENS",
    "Candle",
    "MarketPulse",
    "MarketSnapshot",
    "MarketView",
    "Signal",
    "SignalLabel",
    "SpotMarketData",
    "TimePoint",
    "Token",
    "TokenDirectory",
    "build_components",
    "compute_signal",
    "resolve_priority_tokens",
    "signal_from_snapshot",
]
