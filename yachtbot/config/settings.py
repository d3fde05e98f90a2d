"""
YachtBot — Central Configuration
All settings are loaded once from environment variables with sensible defaults.
"""
from pydantic_settings import BaseSettings
from typing import Optional


class MarketDataSettings(BaseSettings):
    """Market data provider endpoint and request budget."""
    base_url: str = "https://api.coinmarketcap.com/v1"  # MARKET_BASE_URL
    timeout_seconds: float = 10.0  # MARKET_TIMEOUT_SECONDS

    class Config:
        env_prefix = "MARKET_"
        env_file = ".env"
        extra = "ignore"


class SlackSettings(BaseSettings):
    """Slack bot configuration."""
    bot_token: str = ""  # SLACK_BOT_TOKEN
    signing_secret: str = ""  # SLACK_SIGNING_SECRET

    class Config:
        env_prefix = "SLACK_"
        env_file = ".env"
        extra = "ignore"


class DatabaseSettings(BaseSettings):
    """Ticker lookup store configuration."""
    url: str = "sqlite+aiosqlite:///yachtbot.db"  # DB_URL
    table: str = "tickers"  # DB_TABLE
    timeout_seconds: float = 10.0  # DB_TIMEOUT_SECONDS
    echo_sql: bool = False  # DB_ECHO_SQL

    class Config:
        env_prefix = "DB_"
        env_file = ".env"
        extra = "ignore"


class AppSettings(BaseSettings):
    """Top-level application settings."""
    app_name: str = "YachtBot"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    market: MarketDataSettings = MarketDataSettings()
    slack: SlackSettings = SlackSettings()
    database: DatabaseSettings = DatabaseSettings()

    class Config:
        env_file = ".env"
        extra = "ignore"


# Singleton
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings
