"""Database-backed cache of provider responses keyed by (city, kind)."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from weather_monitor.database import dialect_insert, utcnow
from weather_monitor.models import WeatherCache
from weather_monitor.services.cache_config import (
    CacheKind,
    expiry_from,
    is_cache_valid,
    ttl_for,
)


async def get(
    db: AsyncSession, city_id: str, kind: CacheKind, now: Optional[datetime] = None
) -> Optional[Any]:
    """Get the cached payload if present and not expired.

    Returns:
        The stored payload, or None on a miss or an expired entry.
    """
    now = now or utcnow()
    result = await db.execute(
        select(WeatherCache)
        .where(WeatherCache.city_id == city_id, WeatherCache.kind == CacheKind(kind).value)
        .execution_options(populate_existing=True)
    )
    entry = result.scalar_one_or_none()
    if entry is not None and is_cache_valid(entry.expires_at, now):
        return entry.payload
    return None


async def put(
    db: AsyncSession,
    city_id: str,
    kind: CacheKind,
    payload: Any,
    ttl_minutes: Optional[int] = None,
    now: Optional[datetime] = None,
) -> datetime:
    """Store or overwrite the payload for a city and kind.

    Args:
        db: Database session
        city_id: City identifier
        kind: Which kind of data the payload is
        payload: Provider JSON, stored verbatim
        ttl_minutes: Minutes until expiry (defaults to the current-conditions TTL)
        now: Write time, defaults to the current UTC time

    Returns:
        The expiry timestamp written
    """
    now = now or utcnow()
    if ttl_minutes is None:
        ttl_minutes = ttl_for(CacheKind.CURRENT)
    expires_at = expiry_from(now, ttl_minutes)

    stmt = dialect_insert(db, WeatherCache).values(
        city_id=city_id,
        kind=CacheKind(kind).value,
        payload=payload,
        expires_at=expires_at,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["city_id", "kind"],
        set_={
            "payload": stmt.excluded.payload,
            "expires_at": stmt.excluded.expires_at,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    await db.execute(stmt)
    await db.commit()
    return expires_at
