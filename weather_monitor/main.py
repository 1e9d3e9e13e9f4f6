"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from weather_monitor.config import get_settings
from weather_monitor.database import init_db
from weather_monitor.exceptions import ProviderError, WeatherMonitorError
from weather_monitor.logging_config import configure_logging
from weather_monitor.routers import cities, pages, weather

settings = get_settings()

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    if not settings.openweather_api_key:
        logger.warning("OPENWEATHER_API_KEY is not set; weather requests will fail")
    await init_db()
    logger.info("Weather Monitor started")
    yield


app = FastAPI(
    title="Weather Monitor",
    description="Search cities, save favorites and track current weather and 5-day forecasts",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(pages.router)
app.include_router(weather.router)
app.include_router(cities.router)


@app.exception_handler(WeatherMonitorError)
async def weather_monitor_error_handler(request: Request, exc: WeatherMonitorError) -> JSONResponse:
    """Convert application errors into JSON error responses."""
    content = {"error": exc.message}
    if isinstance(exc, ProviderError):
        content["provider_status"] = exc.provider_status

    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s: %s", request.method, request.url.path, exc.message)

    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


@app.get("/health")
async def health():
    return {"status": "ok"}
