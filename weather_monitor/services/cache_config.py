"""Cache TTL configuration for provider data.

TTL values are in minutes for each kind of data:
- Current conditions: CACHE_TTL_MINUTES (default 10)
- Forecast: FORECAST_CACHE_TTL_MINUTES (default 30, the 3-hour forecast
  changes less often upstream)
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from weather_monitor.config import Settings, get_settings


class CacheKind(str, Enum):
    """Kinds of provider data cached per city."""

    CURRENT = "current"
    FORECAST = "forecast"


def ttl_for(kind: CacheKind, settings: Optional[Settings] = None) -> int:
    """Get the configured TTL in minutes for a kind of data."""
    settings = settings or get_settings()
    if kind == CacheKind.FORECAST:
        return settings.forecast_cache_ttl_minutes
    return settings.cache_ttl_minutes


def expiry_from(now: datetime, ttl_minutes: int) -> datetime:
    """Get the expiry timestamp for an entry written at ``now``."""
    return now + timedelta(minutes=ttl_minutes)


def is_cache_valid(expires_at: Optional[datetime], now: datetime) -> bool:
    """Check if a cache entry is still valid.

    An entry expiring exactly at ``now`` is already stale.
    """
    if expires_at is None:
        return False
    return expires_at > now
