"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderSettings(BaseSettings):
    """External data provider endpoints and transport behavior."""

    model_config = SettingsConfigDict(env_prefix="PROVIDER_")

    timeout_seconds: float = 10.0  # per call; a timeout becomes a null field
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coingecko_api_key: SecretStr = SecretStr("")  # optional demo key
    fear_greed_url: str = "https://api.alternative.me/fng/"
    user_agent: str = "MarketPulse/1.0"
    binance_rate_limit: bool = True


class WindowSettings(BaseSettings):
    """Default window parameters for provider series.

    All fields configurable via WINDOW_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="WINDOW_")

    ohlc_days: int = 30
    market_chart_days: int = 30
    fear_greed_limit: int = 60
    funding_limit: int = 60
    ratio_period: str = "1h"
    ratio_limit: int = 100
    open_interest_period: str = "5m"


class SearchSettings(BaseSettings):
    """Free-text token search behavior."""

    model_config = SettingsConfigDict(env_prefix="SEARCH_")

    min_query_length: int = 2  # shorter queries never hit the network
    max_results: int = 20


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    provider: ProviderSettings = ProviderSettings()
    window: WindowSettings = WindowSettings()
    search: SearchSettings = SearchSettings()
