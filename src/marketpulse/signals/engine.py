"""Signal engine combining the scoring rules into a composite trading signal.

compute_signal is a pure function of four scalars: 24h price change, current
funding rate, current taker buy/sell ratio and current Fear & Greed value.
No other snapshot field influences the result, it performs no I/O, and it
is deterministic for identical inputs.

Every applicable rule contributes (rules are not mutually exclusive), and
reasons are appended in rule evaluation order: momentum, funding, taker,
fear & greed. Maximum magnitude is 30 + 25 + 25 + 20 = 100.
"""

from decimal import Decimal

from marketpulse.models import MarketSnapshot, Signal, SignalLabel
from marketpulse.signals.rules import (
    as_decimal,
    score_fear_greed,
    score_funding,
    score_momentum,
    score_taker_ratio,
)

STRONG_THRESHOLD = 40
THRESHOLD = 15

Number = Decimal | int | float


def classify_score(score: int) -> SignalLabel:
    """Map a composite score to a label.

    > 40 STRONG_BUY, (15, 40] BUY, [-40, -15) SELL, < -40 STRONG_SELL,
    otherwise NEUTRAL.
    """
    if score > STRONG_THRESHOLD:
        return SignalLabel.STRONG_BUY
    if score > THRESHOLD:
        return SignalLabel.BUY
    if score < -STRONG_THRESHOLD:
        return SignalLabel.STRONG_SELL
    if score < -THRESHOLD:
        return SignalLabel.SELL
    return SignalLabel.NEUTRAL


def compute_signal(
    price_change_24h: Number | None = None,
    funding_rate: Number | None = None,
    taker_ratio: Number | None = None,
    fear_greed: Number | None = None,
) -> Signal:
    """Compute the composite trading signal.

    Any input may be None, in which case its rule is skipped. With all
    inputs None the result is NEUTRAL with score 0 and no reasons.

    Args:
        price_change_24h: 24h price change in percent (e.g. 5.0 for +5%).
        funding_rate: Current funding rate per period (e.g. 0.0001).
        taker_ratio: Current taker buy/sell volume ratio.
        fear_greed: Current Fear & Greed index value (0-100).

    Returns:
        Signal with label, integer score and ordered reasons.
    """
    contributions = (
        score_momentum(as_decimal(price_change_24h)),
        score_funding(as_decimal(funding_rate)),
        score_taker_ratio(as_decimal(taker_ratio)),
        score_fear_greed(as_decimal(fear_greed)),
    )

    score = sum(points for points, _ in contributions)
    reasons = tuple(reason for _, reason in contributions if reason is not None)

    return Signal(label=classify_score(score), score=score, reasons=reasons)


def signal_from_snapshot(snapshot: MarketSnapshot) -> Signal:
    """Compute the signal from the four snapshot fields it depends on."""
    return compute_signal(*snapshot.signal_inputs())
