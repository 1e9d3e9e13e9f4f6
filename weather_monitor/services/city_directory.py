"""City directory: one durable record per normalized (name, country) pair."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from weather_monitor.database import dialect_insert
from weather_monitor.models import City


def normalize_country(country: Optional[str]) -> str:
    """Upper-case and trim a country code; missing or blank becomes ""."""
    if not country:
        return ""
    return country.strip().upper()


def parse_city_query(query: str) -> tuple[str, Optional[str]]:
    """Split a "Name,CC" query into name and optional country code."""
    name, _, country = query.partition(",")
    country = normalize_country(country)
    return name.strip(), country or None


async def find_city(db: AsyncSession, name: str, country: Optional[str] = None) -> Optional[City]:
    """Look up a city by exact name and normalized country."""
    result = await db.execute(
        select(City)
        .where(City.name == name.strip(), City.country == normalize_country(country))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def resolve_or_create(db: AsyncSession, name: str, country: Optional[str] = None) -> City:
    """Get the city for (name, country), creating it without coordinates if absent.

    A concurrent insert of the same pair is absorbed by the unique constraint,
    so both callers end up with the same record.
    """
    name = name.strip()
    country = normalize_country(country)

    city = await find_city(db, name, country)
    if city is not None:
        return city

    await db.execute(
        dialect_insert(db, City)
        .values(name=name, country=country)
        .on_conflict_do_nothing(index_elements=["name", "country"])
    )
    await db.commit()

    city = await find_city(db, name, country)
    if city is None:
        raise RuntimeError(f"City {name!r} ({country!r}) vanished after insert")
    return city


async def record_coordinates(
    db: AsyncSession,
    name: str,
    country: Optional[str],
    lat: Optional[float],
    lon: Optional[float],
) -> City:
    """Store coordinates learned from the provider, creating the city if needed.

    Last write wins.
    """
    name = name.strip()
    country = normalize_country(country)

    stmt = dialect_insert(db, City).values(name=name, country=country, lat=lat, lon=lon)
    stmt = stmt.on_conflict_do_update(
        index_elements=["name", "country"],
        set_={
            "lat": stmt.excluded.lat,
            "lon": stmt.excluded.lon,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    await db.execute(stmt)
    await db.commit()

    return await find_city(db, name, country)
