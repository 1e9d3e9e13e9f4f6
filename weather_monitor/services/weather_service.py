"""Cached weather lookups for cities.

A lookup resolves the city, serves the cached payload while it is fresh and
otherwise fetches from the provider, refines the city's coordinates and
writes the result through to the cache. Provider failures propagate
unchanged: stale entries are never served and nothing is retried.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from weather_monitor.config import Settings, get_settings
from weather_monitor.models import City
from weather_monitor.services import city_directory, weather_cache
from weather_monitor.services.cache_config import CacheKind, ttl_for
from weather_monitor.services.openweather_api import OpenWeatherClient

logger = logging.getLogger(__name__)


@dataclass
class CityWeather:
    """Dashboard card data for one city."""

    city: dict
    current: Optional[dict] = None
    forecast: Optional[dict] = None
    error: Optional[str] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None


def _provider_location(kind: CacheKind, data: dict) -> tuple[Optional[str], Optional[str], Optional[dict]]:
    """Extract the provider's canonical name, country and coordinates."""
    if kind == CacheKind.CURRENT:
        return data.get("name"), (data.get("sys") or {}).get("country"), data.get("coord")
    city = data.get("city") or {}
    return city.get("name"), city.get("country"), city.get("coord")


class WeatherQueryService:
    """Answers current-conditions and forecast queries for cities.

    Every lookup runs in its own session from ``session_factory`` so lookups
    can be gathered concurrently.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        client: OpenWeatherClient,
        settings: Optional[Settings] = None,
    ):
        self.session_factory = session_factory
        self.client = client
        self.settings = settings or get_settings()

    async def current_for(self, name: str, country: Optional[str] = None) -> dict:
        """Get current conditions for a city."""
        return await self._lookup(CacheKind.CURRENT, name, country)

    async def forecast_for(self, name: str, country: Optional[str] = None) -> dict:
        """Get the 5-day / 3-hour forecast for a city."""
        return await self._lookup(CacheKind.FORECAST, name, country)

    async def weather_for(self, name: str, country: Optional[str] = None) -> dict[str, Any]:
        """Get current conditions and forecast together.

        Raises:
            The first lookup failure, once both lookups have finished
        """
        current, forecast = await asyncio.gather(
            self.current_for(name, country),
            self.forecast_for(name, country),
            return_exceptions=True,
        )
        for result in (current, forecast):
            if isinstance(result, BaseException):
                raise result
        return {"current": current, "forecast": forecast}

    async def weather_for_cities(self, cities: list[dict]) -> list[CityWeather]:
        """Fetch weather for several cities concurrently.

        Failures are recorded on the affected city's card and never raised,
        so one bad city cannot take down the others.
        """

        async def fetch_one(city: dict) -> CityWeather:
            current, forecast = await asyncio.gather(
                self.current_for(city["name"], city.get("country")),
                self.forecast_for(city["name"], city.get("country")),
                return_exceptions=True,
            )
            card = CityWeather(city=city)
            for kind, result in ((CacheKind.CURRENT, current), (CacheKind.FORECAST, forecast)):
                if isinstance(result, Exception):
                    logger.warning("Failed to fetch %s weather for %s: %s", kind.value, city["name"], result)
                    card.error = card.error or str(result)
                elif isinstance(result, BaseException):
                    raise result
                else:
                    setattr(card, kind.value, result)
            return card

        return list(await asyncio.gather(*(fetch_one(city) for city in cities)))

    async def _lookup(self, kind: CacheKind, name: str, country: Optional[str]) -> dict:
        async with self.session_factory() as db:
            city = await city_directory.resolve_or_create(db, name, country)

            cached = await weather_cache.get(db, city.id, kind)
            if cached is not None:
                logger.debug("Cache hit for %s %s (%s)", kind.value, city.name, city.country or "-")
                return cached

            if kind == CacheKind.CURRENT:
                data = await self.client.fetch_current(city.name, city.country or None)
            else:
                data = await self.client.fetch_forecast(city.name, city.country or None)

            await self._refine_city(db, city, kind, data)
            await weather_cache.put(db, city.id, kind, data, ttl_for(kind, self.settings))
            return data

    async def _refine_city(self, db: AsyncSession, city: City, kind: CacheKind, data: dict) -> None:
        """Store the coordinates the provider reported for this city."""
        provider_name, provider_country, coord = _provider_location(kind, data)
        if not coord or coord.get("lat") is None or coord.get("lon") is None:
            return
        lat, lon = coord["lat"], coord["lon"]

        await city_directory.record_coordinates(db, city.name, city.country, lat, lon)

        # The provider may know the city under a canonical name or country code
        if provider_name and (
            provider_name != city.name
            or city_directory.normalize_country(provider_country) != city.country
        ):
            await city_directory.record_coordinates(db, provider_name, provider_country, lat, lon)
