"""Per-visitor favorite cities."""

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from weather_monitor.database import dialect_insert
from weather_monitor.exceptions import FavoriteNotFoundError
from weather_monitor.models import City, FavoriteCity, UserPreference
from weather_monitor.services.city_directory import resolve_or_create

logger = logging.getLogger(__name__)


async def add_favorite(
    db: AsyncSession, visitor_id: str, name: str, country: Optional[str] = None
) -> City:
    """Add a city to a visitor's favorites.

    Creates the city and the visitor record on first use. Adding a city that
    is already a favorite is a no-op.

    Returns:
        The favorited city
    """
    city = await resolve_or_create(db, name, country)

    await db.execute(
        dialect_insert(db, UserPreference)
        .values(id=visitor_id)
        .on_conflict_do_nothing(index_elements=["id"])
    )
    await db.execute(
        dialect_insert(db, FavoriteCity)
        .values(preference_id=visitor_id, city_id=city.id)
        .on_conflict_do_nothing(index_elements=["preference_id", "city_id"])
    )
    await db.commit()

    logger.info("Added favorite %s (%s) for visitor", city.name, city.country or "-")
    return city


async def remove_favorite(db: AsyncSession, visitor_id: Optional[str], city_id: str) -> None:
    """Remove a city from a visitor's favorites.

    Raises:
        FavoriteNotFoundError: If the visitor has no such favorite
    """
    if not visitor_id:
        raise FavoriteNotFoundError(city_id)

    result = await db.execute(
        delete(FavoriteCity).where(
            FavoriteCity.preference_id == visitor_id,
            FavoriteCity.city_id == city_id,
        )
    )
    await db.commit()

    if result.rowcount == 0:
        raise FavoriteNotFoundError(city_id)
    logger.info("Removed favorite %s for visitor", city_id)


async def list_favorites(db: AsyncSession, visitor_id: Optional[str]) -> list[City]:
    """Get a visitor's favorite cities in the order they were added."""
    if not visitor_id:
        return []

    result = await db.execute(
        select(City)
        .join(FavoriteCity, FavoriteCity.city_id == City.id)
        .where(FavoriteCity.preference_id == visitor_id)
        .order_by(FavoriteCity.created_at, FavoriteCity.id)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


def city_to_dict(city: City) -> dict:
    """Convert City model to dict, with unknown country as None."""
    return {
        "id": city.id,
        "name": city.name,
        "country": city.country or None,
        "lat": city.lat,
        "lon": city.lon,
    }
