"""Shared FastAPI dependencies."""

from functools import lru_cache

from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from weather_monitor.config import get_settings
from weather_monitor.database import async_session
from weather_monitor.services import OpenWeatherClient, VisitorContext, WeatherQueryService


@lru_cache
def get_weather_client() -> OpenWeatherClient:
    """Get the provider client built from settings."""
    return OpenWeatherClient()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session


def get_weather_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    client: OpenWeatherClient = Depends(get_weather_client),
) -> WeatherQueryService:
    return WeatherQueryService(session_factory, client, get_settings())


def get_visitor_context(request: Request, response: Response) -> VisitorContext:
    """Visitor cookies of the request, writable through the route's response."""
    return VisitorContext(
        cookies=request.cookies,
        response=response,
        cookie_name=get_settings().pref_cookie_name,
    )


def get_readonly_visitor_context(request: Request) -> VisitorContext:
    """Visitor cookies of the request, for routes that never set cookies."""
    return VisitorContext(cookies=request.cookies, cookie_name=get_settings().pref_cookie_name)
