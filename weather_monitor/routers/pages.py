"""Dashboard page."""

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from weather_monitor.database import get_db
from weather_monitor.routers.deps import get_readonly_visitor_context, get_weather_service
from weather_monitor.services import VisitorContext, WeatherQueryService, peek_identity
from weather_monitor.services.favorites import city_to_dict, list_favorites

router = APIRouter(tags=["pages"])
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

# Shown to visitors who have not saved any city yet
DEMO_CITY = {"id": "demo", "name": "Hyderabad", "country": "IN", "lat": 17.3850, "lon": 78.4867}

FORECAST_PREVIEW_STEPS = 8


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    visitor: VisitorContext = Depends(get_readonly_visitor_context),
    db: AsyncSession = Depends(get_db),
    service: WeatherQueryService = Depends(get_weather_service),
):
    """Dashboard with a card per favorite city.

    Cities are fetched concurrently; a city whose lookup fails renders as an
    error card instead of failing the page.
    """
    favorites = [city_to_dict(c) for c in await list_favorites(db, peek_identity(visitor))]
    cities = favorites or [DEMO_CITY]

    cards = await service.weather_for_cities(cities)

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "cards": cards,
            "is_demo": not favorites,
            "forecast_steps": FORECAST_PREVIEW_STEPS,
        },
    )
