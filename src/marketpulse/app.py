"""Component wiring and resource lifecycle for the market metrics engine.

MarketPulse is the single entry point for the presentation layer. It wires
all components together and owns the two network resources (the aiohttp
session and the ccxt exchange), closing them on exit.

Component wiring order (in build_components):
1. AppSettings (configuration)
2. JsonHttpClient (shared aiohttp transport)
3. CoinGeckoClient, FearGreedClient (REST providers)
4. BinanceFuturesClient (ccxt public endpoints)
5. TokenDirectory (priority tokens + search)
6. MetricsAggregator (fan-out/fan-in)
7. DashboardSession (selection + stale-result guard)

Usage:
    async with MarketPulse() as pulse:
        snapshot = await pulse.get_snapshot(pulse.resolve_priority_tokens()[0])
        signal = pulse.compute_signal(*snapshot.signal_inputs())
"""

from dataclasses import dataclass

from marketpulse.aggregator import MetricsAggregator
from marketpulse.config import AppSettings
from marketpulse.directory import TokenDirectory, resolve_priority_tokens
from marketpulse.logging import get_logger, setup_logging
from marketpulse.models import MarketSnapshot, MarketView, Signal, Token
from marketpulse.providers.binance_futures import BinanceFuturesClient
from marketpulse.providers.coingecko import CoinGeckoClient
from marketpulse.providers.fear_greed import FearGreedClient
from marketpulse.providers.http import JsonHttpClient
from marketpulse.session import DashboardSession
from marketpulse.signals.engine import Number, compute_signal

logger = get_logger(__name__)


@dataclass
class Components:
    """The wired dependency graph."""

    http: JsonHttpClient
    coingecko: CoinGeckoClient
    fear_greed: FearGreedClient
    futures: BinanceFuturesClient
    directory: TokenDirectory
    aggregator: MetricsAggregator
    session: DashboardSession


def build_components(settings: AppSettings) -> Components:
    """Build all engine components from settings.

    Does not open any connection; the aiohttp session is created lazily on
    the first request and ccxt connects per call.
    """
    provider = settings.provider
    http = JsonHttpClient(user_agent=provider.user_agent, timeout_seconds=provider.timeout_seconds)
    coingecko = CoinGeckoClient(
        http,
        base_url=provider.coingecko_base_url,
        api_key=provider.coingecko_api_key.get_secret_value(),
        timeout_seconds=provider.timeout_seconds,
        search_limit=settings.search.max_results,
    )
    fear_greed = FearGreedClient(
        http, url=provider.fear_greed_url, timeout_seconds=provider.timeout_seconds
    )
    futures = BinanceFuturesClient.create(
        timeout_seconds=provider.timeout_seconds, rate_limit=provider.binance_rate_limit
    )
    directory = TokenDirectory(coingecko, min_query_length=settings.search.min_query_length)
    aggregator = MetricsAggregator(coingecko, fear_greed, futures, windows=settings.window)
    session = DashboardSession(aggregator)

    return Components(
        http=http,
        coingecko=coingecko,
        fear_greed=fear_greed,
        futures=futures,
        directory=directory,
        aggregator=aggregator,
        session=session,
    )


class MarketPulse:
    """Outbound interface of the engine.

    Args:
        settings: Application settings. Defaults to AppSettings() (env + .env).
        components: Pre-built components (tests inject doubles here).
        configure_logging: Whether to call setup_logging on construction.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        components: Components | None = None,
        configure_logging: bool = False,
    ) -> None:
        self.settings = settings or AppSettings()
        if configure_logging:
            setup_logging(self.settings.log_level, self.settings.log_format)
        self.components = components or build_components(self.settings)

    async def __aenter__(self) -> "MarketPulse":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def session(self) -> DashboardSession:
        return self.components.session

    async def get_snapshot(self, token: Token) -> MarketSnapshot:
        """Aggregate all metrics for ``token``. Never raises for provider failure."""
        return await self.components.aggregator.get_snapshot(token)

    async def get_view(self, token: Token) -> MarketView:
        return await self.components.aggregator.get_view(token)

    @staticmethod
    def compute_signal(
        price_change_24h: Number | None = None,
        funding_rate: Number | None = None,
        taker_ratio: Number | None = None,
        fear_greed: Number | None = None,
    ) -> Signal:
        """Pure signal scoring from the four snapshot scalars."""
        return compute_signal(price_change_24h, funding_rate, taker_ratio, fear_greed)

    async def search_tokens(self, query: str) -> list[Token]:
        """Free-text token search; resolves to [] on failure or short queries."""
        return await self.components.directory.search_tokens(query)

    @staticmethod
    def resolve_priority_tokens() -> list[Token]:
        return resolve_priority_tokens()

    async def close(self) -> None:
        """Release network resources. CRITICAL: must be called to avoid resource leaks."""
        logger.info("closing_market_pulse")
        try:
            await self.components.futures.close()
        finally:
            # The aiohttp session is released even if the exchange close fails
            await self.components.http.close()
