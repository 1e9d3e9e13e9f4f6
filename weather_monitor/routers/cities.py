"""Routes for a visitor's favorite cities.

Every route here makes sure the visitor has an identity cookie, so the
responses are plain dicts and the status code is set on the injected
response, which keeps the cookie header on error responses too.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from weather_monitor.database import get_db
from weather_monitor.exceptions import FavoriteNotFoundError
from weather_monitor.routers.deps import get_visitor_context
from weather_monitor.services import VisitorContext, ensure_identity
from weather_monitor.services.favorites import (
    add_favorite,
    city_to_dict,
    list_favorites,
    remove_favorite,
)

router = APIRouter(prefix="/api", tags=["cities"])


@router.get("/cities")
async def get_cities(
    visitor: VisitorContext = Depends(get_visitor_context),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """List the visitor's favorite cities."""
    visitor_id = ensure_identity(visitor)
    cities = await list_favorites(db, visitor_id)
    return {"cities": [city_to_dict(c) for c in cities]}


@router.post("/cities")
async def create_city(
    request: Request,
    response: Response,
    visitor: VisitorContext = Depends(get_visitor_context),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Add a city to the visitor's favorites.

    Body: ``{"name": "London", "country": "GB"}``; country is optional.
    """
    visitor_id = ensure_identity(visitor)

    try:
        body = await request.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    name = str(body.get("name") or "").strip()
    country = str(body.get("country") or "").strip().upper()

    if not name:
        response.status_code = 400
        return {"error": "City name is required"}

    city = await add_favorite(db, visitor_id, name, country or None)
    response.status_code = 201
    return {"city": city_to_dict(city)}


async def _remove(
    response: Response, visitor: VisitorContext, db: AsyncSession, city_id: Optional[str]
) -> Optional[dict]:
    """Remove a favorite, returning an error body on failure."""
    visitor_id = ensure_identity(visitor)

    if not city_id:
        response.status_code = 400
        return {"error": "City ID is required"}

    try:
        await remove_favorite(db, visitor_id, city_id)
    except FavoriteNotFoundError as e:
        response.status_code = 404
        return {"error": e.message}
    return None


@router.delete("/cities")
async def delete_city(
    response: Response,
    city_id: Optional[str] = Query(default=None, alias="cityId"),
    visitor: VisitorContext = Depends(get_visitor_context),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Remove a favorite given as ``?cityId=``."""
    error = await _remove(response, visitor, db, city_id)
    return error or {"success": True}


@router.delete("/cities/{city_id}")
async def delete_city_by_id(
    city_id: str,
    response: Response,
    visitor: VisitorContext = Depends(get_visitor_context),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Remove a favorite by path id."""
    error = await _remove(response, visitor, db, city_id.strip())
    return error or {"ok": True}
