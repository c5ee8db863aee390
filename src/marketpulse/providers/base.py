"""Provider client boundary.

Every provider client performs exactly one network call per public method and
must never raise past its own boundary. ProviderClient.guarded is that
boundary: it applies the per-call timeout and converts any failure (transport,
HTTP status, timeout, malformed payload) into None with a WARNING log.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from marketpulse.exceptions import MalformedPayloadError
from marketpulse.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ProviderClient:
    """Base class for provider clients.

    Args:
        name: Provider name used in log events (e.g. "coingecko").
        timeout_seconds: Upper bound on a single call. A timeout yields None.
    """

    def __init__(self, name: str, timeout_seconds: float = 10.0) -> None:
        self.name = name
        self._timeout = timeout_seconds

    async def guarded(
        self,
        operation: str,
        call: Callable[[], Awaitable[Any]],
        parse: Callable[[Any], T],
        **context: Any,
    ) -> T | None:
        """Run one provider call and parse its payload, returning None on any failure.

        Args:
            operation: Short operation name for logging (e.g. "fetch_ohlc").
            call: Zero-argument coroutine factory performing the network call.
            parse: Maps the raw payload to the normalized record. May raise
                MalformedPayloadError (or KeyError/TypeError/ValueError) for
                unexpected shapes.
            **context: Extra fields bound into the failure log (token id, limit, ...).
        """
        try:
            payload = await asyncio.wait_for(call(), timeout=self._timeout)
            return parse(payload)
        except asyncio.TimeoutError:
            logger.warning(
                "provider_call_timeout",
                provider=self.name,
                operation=operation,
                timeout_seconds=self._timeout,
                **context,
            )
        except (MalformedPayloadError, KeyError, TypeError, ValueError, IndexError) as e:
            logger.warning(
                "provider_payload_malformed",
                provider=self.name,
                operation=operation,
                error=str(e),
                **context,
            )
        except Exception as e:
            logger.warning(
                "provider_call_failed",
                provider=self.name,
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
                **context,
            )
        return None
