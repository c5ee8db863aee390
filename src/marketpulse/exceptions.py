"""Custom exceptions for the market metrics engine.

Provider exceptions are raised only inside provider clients and are
converted to a null result at the client boundary. Nothing in this module
reaches callers of the aggregator or the signal engine.
"""


class MarketPulseError(Exception):
    """Base exception for all engine errors."""


class ProviderError(MarketPulseError):
    """Raised when a provider call fails at the transport level (network, non-2xx)."""


class MalformedPayloadError(ProviderError):
    """Raised when a provider response is missing expected keys or has the wrong shape."""
