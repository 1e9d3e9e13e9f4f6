"""Routes for place search, weather and alerts."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from weather_monitor.routers.deps import get_weather_client, get_weather_service
from weather_monitor.services import OpenWeatherClient, WeatherQueryService
from weather_monitor.services.city_directory import parse_city_query

router = APIRouter(prefix="/api", tags=["weather"])


@router.get("/weather")
async def get_weather(
    q: Optional[str] = Query(default=None, description="City, optionally as 'Name,CC'"),
    city: Optional[str] = Query(default=None, description="Alias for q"),
    search: Optional[str] = Query(default=None, description="Free-text place search"),
    service: WeatherQueryService = Depends(get_weather_service),
    client: OpenWeatherClient = Depends(get_weather_client),
) -> JSONResponse:
    """Search places, or get current conditions and forecast for a city.

    With ``search`` this returns up to 5 candidate places. Otherwise ``q``
    (or ``city``) names the city, e.g. ``London`` or ``London,GB``.
    """
    if search is not None:
        if not search.strip():
            return JSONResponse(content={"error": "Search query is required"}, status_code=400)
        results = [place async for place in client.geocode(search.strip())]
        return JSONResponse(content={"results": results})

    name, country = parse_city_query(q or city or "")
    if not name:
        return JSONResponse(content={"error": "Missing city query ?q="}, status_code=400)

    data = await service.weather_for(name, country)
    return JSONResponse(content=data)


@router.get("/weather/alerts")
async def get_weather_alerts(
    lat: Optional[float] = Query(default=None),
    lon: Optional[float] = Query(default=None),
    client: OpenWeatherClient = Depends(get_weather_client),
) -> JSONResponse:
    """Get active alerts plus the next 24 hours and 7 days for a location."""
    if lat is None or lon is None:
        return JSONResponse(
            content={"error": "Latitude and longitude are required"}, status_code=400
        )

    data = await client.fetch_alerts(lat, lon)
    return JSONResponse(content=data)
