"""Signal scoring -- pure rules and the composite engine."""

from marketpulse.signals.engine import classify_score, compute_signal, signal_from_snapshot
from marketpulse.signals.rules import (
    score_fear_greed,
    score_funding,
    score_momentum,
    score_taker_ratio,
)

__all__ = [
    "classify_score",
    "compute_signal",
    "score_fear_greed",
    "score_funding",
    "score_momentum",
    "score_taker_ratio",
    "signal_from_snapshot",
]
