"""Per-user dashboard session: current token selection and the current view.

Selecting a token is a pure state transition: it replaces the current token,
clears the current view, and triggers a fresh aggregation. In-flight
aggregations are never cancelled on a token switch; instead each one is
tagged with a request id and its token, and a result is published only if
it is still the latest request for the current selection. This keeps a slow
response for an old token from overwriting a newer one.

The published MarketView is frozen and replaced by a single assignment, so a
reader never observes a mixture of two tokens' data.
"""

import itertools

from marketpulse.aggregator import MetricsAggregator
from marketpulse.directory import default_token
from marketpulse.logging import get_logger
from marketpulse.models import MarketView, Token

logger = get_logger(__name__)


class DashboardSession:
    """Holds the selected token and the latest published MarketView.

    Args:
        aggregator: Builds snapshot + signal for a token.
        initial_token: Starting selection (defaults to the first priority token).
    """

    def __init__(self, aggregator: MetricsAggregator, initial_token: Token | None = None) -> None:
        self._aggregator = aggregator
        self._token = initial_token or default_token()
        self._view: MarketView | None = None
        self._request_ids = itertools.count(1)
        self._latest_request = 0
        self._pending: set[int] = set()

    @property
    def token(self) -> Token:
        return self._token

    @property
    def view(self) -> MarketView | None:
        """The current view, or None until the first aggregation for the selection settles."""
        return self._view

    @property
    def loading(self) -> bool:
        """True while the latest requested aggregation is outstanding."""
        return self._latest_request in self._pending

    async def select_token(self, token: Token) -> MarketView | None:
        """Switch the selection to ``token`` and aggregate it.

        The previous view is cleared immediately. Returns the published view,
        or None if a newer request superseded this one before it settled.
        """
        self._token = token
        self._view = None
        logger.info("token_selected", token=token.catalog_id, symbol=token.symbol)
        return await self.refresh()

    async def refresh(self) -> MarketView | None:
        """Re-aggregate the current token (manual re-trigger; there is no automatic retry)."""
        request_id = next(self._request_ids)
        token = self._token
        self._latest_request = request_id
        self._pending.add(request_id)

        try:
            view = await self._aggregator.get_view(token)
        finally:
            self._pending.discard(request_id)

        if request_id != self._latest_request or token != self._token:
            logger.debug(
                "stale_view_discarded",
                token=token.catalog_id,
                request_id=request_id,
                latest_request=self._latest_request,
                current_token=self._token.catalog_id,
            )
            return None

        self._view = view
        return view
