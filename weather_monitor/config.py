"""Application configuration loaded from environment variables."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment."""

    def __init__(self):
        self.openweather_api_key: str = os.getenv("OPENWEATHER_API_KEY", "")
        self.database_url: str = os.getenv(
            "DATABASE_URL", "sqlite+aiosqlite:///./weather.db"
        )
        self.cache_ttl_minutes: int = int(os.getenv("CACHE_TTL_MINUTES", "10"))
        self.forecast_cache_ttl_minutes: int = int(
            os.getenv("FORECAST_CACHE_TTL_MINUTES", "30")
        )
        self.request_timeout: float = float(
            os.getenv("OPENWEATHER_TIMEOUT_SECONDS", "10")
        )
        self.pref_cookie_name: str = os.getenv("PREF_COOKIE_NAME", "prefId")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def openweather_base_url(self) -> str:
        return "https://api.openweathermap.org/data/2.5"

    @property
    def openweather_geo_base_url(self) -> str:
        return "https://api.openweathermap.org/geo/1.0"

    @property
    def openweather_onecall_base_url(self) -> str:
        return "https://api.openweathermap.org/data/3.0"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
