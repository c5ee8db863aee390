"""Token directory: curated priority tokens plus free-text catalog search.

Priority tokens carry a futures ticker where a USDT-margined perpetual exists
on the futures venue. Search results are ad hoc catalog entries and are
never wired to futures data.
"""

from marketpulse.logging import get_logger
from marketpulse.models import Token
from marketpulse.providers.coingecko import CoinGeckoClient

logger = get_logger(__name__)

# Ordered; the first entry is the default selection.
PRIORITY_TOKENS: tuple[Token, ...] = (
    Token(catalog_id="solana", symbol="SOL", futures_ticker="SOL"),
    Token(catalog_id="bitcoin", symbol="BTC", futures_ticker="BTC"),
    Token(catalog_id="ethereum", symbol="ETH", futures_ticker="ETH"),
    Token(catalog_id="bonk", symbol="BONK", futures_ticker="1000BONK"),
    Token(catalog_id="dogwifcoin", symbol="WIF", futures_ticker="WIF"),
    Token(catalog_id="popcat", symbol="POPCAT", futures_ticker="POPCAT"),
    Token(catalog_id="jupiter-exchange-solana", symbol="JUP", futures_ticker="JUP"),
    Token(catalog_id="fartcoin", symbol="FARTCOIN", futures_ticker=None),
)


def resolve_priority_tokens() -> list[Token]:
    """Return the fixed, ordered list of priority tokens."""
    return list(PRIORITY_TOKENS)


def default_token() -> Token:
    return PRIORITY_TOKENS[0]


class TokenDirectory:
    """Resolves tokens for selection.

    Args:
        search_client: Catalog search provider.
        min_query_length: Queries shorter than this (after trimming) return
            an empty list without a network call.
    """

    def __init__(self, search_client: CoinGeckoClient, min_query_length: int = 2) -> None:
        self._search_client = search_client
        self._min_query_length = min_query_length

    def priority_tokens(self) -> list[Token]:
        return resolve_priority_tokens()

    async def search_tokens(self, query: str) -> list[Token]:
        """Free-text search against the token catalog.

        Always resolves: provider failure yields an empty list.
        """
        query = (query or "").strip()
        if len(query) < self._min_query_length:
            return []

        results = await self._search_client.search_tokens(query)
        if results is None:
            return []

        logger.debug("token_search", query=query, results=len(results))
        return results

    async def display_tokens(self, query: str = "") -> list[Token]:
        """Tokens to offer for selection: priority list when the query is empty, else search results."""
        if not (query or "").strip():
            return self.priority_tokens()
        return await self.search_tokens(query)
