"""Shared fixtures: a throwaway SQLite database and a fake weather provider."""

import copy
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import weather_monitor.models  # noqa: F401
from weather_monitor.database import Base
from weather_monitor.exceptions import ProviderError


def make_current_payload(
    name: str,
    country: Optional[str] = "GB",
    temp: float = 15.2,
    humidity: int = 70,
    lat: float = 51.5085,
    lon: float = -0.1257,
) -> dict:
    """Current-conditions payload shaped like the provider's /weather response."""
    return {
        "coord": {"lon": lon, "lat": lat},
        "weather": [{"id": 803, "main": "Clouds", "description": "broken clouds", "icon": "04d"}],
        "main": {
            "temp": temp,
            "feels_like": temp - 0.5,
            "temp_min": temp - 1,
            "temp_max": temp + 1,
            "pressure": 1012,
            "humidity": humidity,
        },
        "visibility": 10000,
        "wind": {"speed": 4.1, "deg": 240},
        "clouds": {"all": 75},
        "dt": 1760781600,
        "sys": {"country": country, "sunrise": 1760768400, "sunset": 1760806800},
        "name": name,
    }


def make_forecast_payload(
    name: str, country: Optional[str] = "GB", lat: float = 51.5085, lon: float = -0.1257
) -> dict:
    """Forecast payload shaped like the provider's /forecast response."""
    start = 1760788800
    return {
        "cnt": 3,
        "list": [
            {
                "dt": start + i * 3 * 3600,
                "main": {
                    "temp": 14.0 + i,
                    "feels_like": 13.5 + i,
                    "temp_min": 13.0 + i,
                    "temp_max": 15.0 + i,
                    "pressure": 1013,
                    "humidity": 72,
                },
                "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
                "wind": {"speed": 3.2, "deg": 200},
                "clouds": {"all": 90},
                "visibility": 10000,
                "pop": 0.4,
                "dt_txt": f"2025-10-18 {12 + 3 * i:02d}:00:00",
            }
            for i in range(3)
        ],
        "city": {"name": name, "country": country, "coord": {"lat": lat, "lon": lon}},
    }


class FakeWeatherClient:
    """In-memory stand-in for OpenWeatherClient that records every call."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.current: dict[str, dict] = {}
        self.forecasts: dict[str, dict] = {}
        self.places: list[dict] = []
        self.failures: dict[str, Exception] = {}
        self.forecast_failures: dict[str, Exception] = {}

    def calls_for(self, kind: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == kind]

    async def geocode(self, query: str, limit: int = 5):
        self.calls.append(("geocode", query))
        for place in self.places[:limit]:
            yield dict(place)

    async def fetch_current(self, name: str, country: Optional[str] = None) -> dict:
        self.calls.append(("current", name, country))
        if name in self.failures:
            raise self.failures[name]
        payload = self.current.get(name) or make_current_payload(name, country)
        return copy.deepcopy(payload)

    async def fetch_forecast(self, name: str, country: Optional[str] = None) -> dict:
        self.calls.append(("forecast", name, country))
        if name in self.failures:
            raise self.failures[name]
        if name in self.forecast_failures:
            raise self.forecast_failures[name]
        payload = self.forecasts.get(name) or make_forecast_payload(name, country)
        return copy.deepcopy(payload)

    async def fetch_alerts(self, lat: float, lon: float) -> dict:
        self.calls.append(("alerts", lat, lon))
        return {"alerts": [], "current": {"temp": 15.2}, "hourly": [], "daily": []}


def not_found() -> ProviderError:
    return ProviderError(404, "Not Found")


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Engine over a fresh database file per test.

    A file rather than :memory: so concurrent sessions share one database.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_client() -> FakeWeatherClient:
    return FakeWeatherClient()
