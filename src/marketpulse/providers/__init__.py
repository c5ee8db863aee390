"""Provider clients -- one adapter per external data source.

Each client isolates one vendor's endpoint paths and JSON shapes behind
methods that return normalized models or None, so swapping a vendor
touches only its adapter.
"""

from marketpulse.providers.base import ProviderClient
from marketpulse.providers.binance_futures import BinanceFuturesClient, futures_contract
from marketpulse.providers.coingecko import CoinGeckoClient
from marketpulse.providers.fear_greed import FearGreedClient
from marketpulse.providers.http import JsonHttpClient

__all__ = [
    "BinanceFuturesClient",
    "CoinGeckoClient",
    "FearGreedClient",
    "JsonHttpClient",
    "ProviderClient",
    "futures_contract",
]
