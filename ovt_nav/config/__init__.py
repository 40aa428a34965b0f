"""
Application Settings
Load from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Application
    # ======================
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # ======================
    # Rune (token distribution source)
    # ======================
    RUNE_API_URL: str = "http://localhost:3001/api/runes"
    RUNE_ID: str = "240249:101"
    RUNE_SYMBOL: str = "OVT"
    TREASURY_ADDRESSES: List[str] = []
    LP_ADDRESSES: List[str] = []

    # ======================
    # Arch (portfolio valuation source)
    # ======================
    ARCH_API_URL: str = "http://localhost:3001/api/arch"

    # ======================
    # Bitcoin price
    # ======================
    BTC_PRICE_API_URL: str = "https://api.coingecko.com/api/v3/simple/price"
    BTC_PRICE_API_KEY: str = ""  # CoinGecko demo key, sent as x_cg_demo_api_key
    BTC_PRICE_REFRESH_SECONDS: int = 60
    BTC_PRICE_CACHE_TTL: int = 30

    # ======================
    # Trading
    # ======================
    TRADE_API_URL: str = "http://localhost:3001/api/trade"

    # ======================
    # Polling
    # ======================
    POLLING_ENABLED: bool = True
    NAV_POLL_INTERVAL_SECONDS: float = 60.0
    SOURCE_TIMEOUT_SECONDS: float = 30.0

    # ======================
    # Currency preference
    # ======================
    PREFERENCE_STORE_DIR: str = ".ovt"
    PREFERENCE_SCOPE: str = "default"

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="forbid",
    )


settings = Settings()
