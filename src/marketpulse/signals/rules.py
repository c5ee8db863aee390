"""Individual scoring rules for the composite trading signal.

Each rule maps one market input to a (points, reason) contribution. Rules are
independent and additive; a rule that does not fire returns (0, None).

Boundary policy: an input exactly on a neutral boundary contributes nothing.
That is, a 24h change of exactly 0 and a taker ratio of exactly 1.0 are
neither positive nor negative, and funding/fear-greed thresholds are strict.

CRITICAL: Thresholds are Decimal. Float inputs are converted through str()
so that 5.01 compares as Decimal("5.01"), not its binary approximation.
"""

from decimal import Decimal

from marketpulse.providers.coercion import to_decimal

Contribution = tuple[int, str | None]

NO_CONTRIBUTION: Contribution = (0, None)

# Momentum (24h price change, percent), max +/-30
MOMENTUM_STRONG = Decimal("5")
MOMENTUM_NEUTRAL = Decimal("0")
MOMENTUM_STRONG_POINTS = 30
MOMENTUM_POINTS = 15

# Funding rate, max +/-25
FUNDING_THRESHOLD = Decimal("0.01")
FUNDING_POINTS = 25

# Taker buy/sell ratio, max +/-25
TAKER_STRONG_BUY = Decimal("1.2")
TAKER_NEUTRAL = Decimal("1.0")
TAKER_STRONG_SELL = Decimal("0.8")
TAKER_STRONG_POINTS = 25
TAKER_POINTS = 12

# Fear & Greed index, max +/-20
FEAR_THRESHOLD = Decimal("25")
GREED_THRESHOLD = Decimal("75")
FEAR_GREED_POINTS = 20


def as_decimal(value: Decimal | int | float | None) -> Decimal | None:
    """Normalize an input to Decimal the same way provider payloads are read.

    None, booleans, non-numeric strings and non-finite values all become
    None, so the rule they feed is skipped rather than raising.
    """
    return to_decimal(value)


def score_momentum(price_change_24h: Decimal | None) -> Contribution:
    """Score 24h price momentum."""
    if price_change_24h is None:
        return NO_CONTRIBUTION
    if price_change_24h > MOMENTUM_STRONG:
        return MOMENTUM_STRONG_POINTS, "Strong upward momentum"
    if price_change_24h > MOMENTUM_NEUTRAL:
        return MOMENTUM_POINTS, "Positive momentum"
    if price_change_24h < -MOMENTUM_STRONG:
        return -MOMENTUM_STRONG_POINTS, "Strong downward momentum"
    if price_change_24h < MOMENTUM_NEUTRAL:
        return -MOMENTUM_POINTS, "Negative momentum"
    return NO_CONTRIBUTION


def score_funding(funding_rate: Decimal | None) -> Contribution:
    """Score the current funding rate. Negative funding (shorts pay longs) is bullish."""
    if funding_rate is None:
        return NO_CONTRIBUTION
    if funding_rate < -FUNDING_THRESHOLD:
        return FUNDING_POINTS, "Negative funding (shorts paying longs)"
    if funding_rate > FUNDING_THRESHOLD:
        return -FUNDING_POINTS, "High funding (longs paying shorts)"
    return NO_CONTRIBUTION


def score_taker_ratio(taker_ratio: Decimal | None) -> Contribution:
    """Score aggressive buy/sell pressure."""
    if taker_ratio is None:
        return NO_CONTRIBUTION
    if taker_ratio > TAKER_STRONG_BUY:
        return TAKER_STRONG_POINTS, "Strong buying pressure"
    if taker_ratio > TAKER_NEUTRAL:
        return TAKER_POINTS, "Moderate buying pressure"
    if taker_ratio < TAKER_STRONG_SELL:
        return -TAKER_STRONG_POINTS, "Strong selling pressure"
    if taker_ratio < TAKER_NEUTRAL:
        return -TAKER_POINTS, "Moderate selling pressure"
    return NO_CONTRIBUTION


def score_fear_greed(fear_greed: Decimal | None) -> Contribution:
    """Contrarian sentiment: extreme fear is a buy, extreme greed is a sell."""
    if fear_greed is None:
        return NO_CONTRIBUTION
    if fear_greed < FEAR_THRESHOLD:
        return FEAR_GREED_POINTS, "Extreme fear (contrarian buy)"
    if fear_greed > GREED_THRESHOLD:
        return -FEAR_GREED_POINTS, "Extreme greed (contrarian sell)"
    return NO_CONTRIBUTION
