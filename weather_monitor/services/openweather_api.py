"""OpenWeatherMap client for geocoding, current conditions, forecasts and alerts."""

import logging
from typing import Any, AsyncIterator, Optional

import httpx

from weather_monitor.config import get_settings
from weather_monitor.exceptions import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)

GEOCODE_LIMIT = 5
ALERTS_HOURLY_LIMIT = 24
ALERTS_DAILY_LIMIT = 7


class OpenWeatherClient:
    """Client for the OpenWeatherMap API.

    Every call opens a fresh ``httpx.AsyncClient``; nothing is retried. A
    non-success status from the provider becomes ``ProviderError`` carrying
    the status code and reason phrase.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        geo_base_url: Optional[str] = None,
        onecall_base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.api_key = settings.openweather_api_key if api_key is None else api_key
        self.base_url = base_url or settings.openweather_base_url
        self.geo_base_url = geo_base_url or settings.openweather_geo_base_url
        self.onecall_base_url = onecall_base_url or settings.openweather_onecall_base_url
        self.timeout = timeout or settings.request_timeout
        self.transport = transport

    def _require_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("Missing OPENWEATHER_API_KEY")
        return self.api_key

    async def _get(self, url: str, params: dict, label: str) -> Any:
        """GET a provider endpoint and decode the JSON body."""
        api_key = self._require_key()
        logger.info("%s request: %s %s", label, url, params)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, params={**params, "appid": api_key})
        except httpx.RequestError as e:
            reason = str(e) or e.__class__.__name__
            logger.error("%s request to %s failed: %s", label, url, reason)
            raise ProviderError(None, reason, label=label) from e

        if not response.is_success:
            logger.error(
                "%s error: status=%s reason=%s response=%s",
                label, response.status_code, response.reason_phrase, response.text[:500],
            )
            raise ProviderError(response.status_code, response.reason_phrase, label=label)

        return response.json()

    @staticmethod
    def _city_query(name: str, country: Optional[str] = None) -> str:
        return f"{name},{country}" if country else name

    async def geocode(self, query: str, limit: int = GEOCODE_LIMIT) -> AsyncIterator[dict]:
        """Search places matching a free-text query.

        Yields up to ``limit`` candidates as ``{name, country, lat, lon}``.
        Each call performs its own round-trip when iterated.
        """
        data = await self._get(
            f"{self.geo_base_url}/direct",
            {"q": query, "limit": limit},
            label="Geocoding API",
        )
        for place in data[:limit]:
            yield {
                "name": place.get("name"),
                "country": place.get("country"),
                "lat": place.get("lat"),
                "lon": place.get("lon"),
            }

    async def fetch_current(self, name: str, country: Optional[str] = None) -> dict:
        """Get current conditions for a city, as returned by the provider."""
        return await self._get(
            f"{self.base_url}/weather",
            {"q": self._city_query(name, country), "units": "metric"},
            label="Weather API",
        )

    async def fetch_forecast(self, name: str, country: Optional[str] = None) -> dict:
        """Get the 5-day / 3-hour forecast for a city, as returned by the provider."""
        return await self._get(
            f"{self.base_url}/forecast",
            {"q": self._city_query(name, country), "units": "metric"},
            label="Forecast API",
        )

    async def fetch_alerts(self, lat: float, lon: float) -> dict:
        """Get weather alerts with condensed hourly and daily outlooks.

        Returns:
            Dict with ``alerts``, ``current``, the next 24 ``hourly`` entries
            and the next 7 ``daily`` entries.
        """
        data = await self._get(
            f"{self.onecall_base_url}/onecall",
            {"lat": lat, "lon": lon, "exclude": "minutely", "units": "metric"},
            label="Alerts API",
        )
        return {
            "alerts": data.get("alerts") or [],
            "current": data.get("current"),
            "hourly": (data.get("hourly") or [])[:ALERTS_HOURLY_LIMIT],
            "daily": (data.get("daily") or [])[:ALERTS_DAILY_LIMIT],
        }
