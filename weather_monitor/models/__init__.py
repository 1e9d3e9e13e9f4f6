"""Database models."""

from weather_monitor.models.city import City
from weather_monitor.models.weather_cache import WeatherCache
from weather_monitor.models.favorite import UserPreference, FavoriteCity

__all__ = [
    "City",
    "WeatherCache",
    "UserPreference",
    "FavoriteCity",
]
