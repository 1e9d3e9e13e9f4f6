"""Domain services: city directory, weather cache, provider client, favorites."""

from weather_monitor.services.cache_config import CacheKind
from weather_monitor.services.openweather_api import OpenWeatherClient
from weather_monitor.services.weather_service import CityWeather, WeatherQueryService
from weather_monitor.services.visitor import VisitorContext, ensure_identity, peek_identity

__all__ = [
    "CacheKind",
    "OpenWeatherClient",
    "CityWeather",
    "WeatherQueryService",
    "VisitorContext",
    "ensure_identity",
    "peek_identity",
]
