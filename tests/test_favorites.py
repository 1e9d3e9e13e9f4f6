"""Unit tests for the favorites ledger and its models."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from weather_monitor.exceptions import FavoriteNotFoundError
from weather_monitor.models import City, FavoriteCity, UserPreference
from weather_monitor.services.favorites import (
    add_favorite,
    city_to_dict,
    list_favorites,
    remove_favorite,
)


VISITOR = "visitor-1"


@pytest.mark.asyncio
async def test_add_favorite_returns_city(db_session):
    city = await add_favorite(db_session, VISITOR, "London", "GB")

    assert city.name == "London"
    assert city.country == "GB"

    preference = await db_session.get(UserPreference, VISITOR)
    assert preference is not None


@pytest.mark.asyncio
async def test_add_twice_lists_once(db_session):
    first = await add_favorite(db_session, VISITOR, "London", "GB")
    second = await add_favorite(db_session, VISITOR, "London", "GB")

    assert first.id == second.id
    cities = await list_favorites(db_session, VISITOR)
    assert [c.id for c in cities] == [first.id]


@pytest.mark.asyncio
async def test_list_in_insertion_order(db_session):
    london = await add_favorite(db_session, VISITOR, "London", "GB")
    paris = await add_favorite(db_session, VISITOR, "Paris", "FR")
    tokyo = await add_favorite(db_session, VISITOR, "Tokyo", "JP")

    cities = await list_favorites(db_session, VISITOR)

    assert [c.id for c in cities] == [london.id, paris.id, tokyo.id]


@pytest.mark.asyncio
async def test_list_without_visitor_is_empty(db_session):
    assert await list_favorites(db_session, None) == []


@pytest.mark.asyncio
async def test_list_for_unknown_visitor_is_empty(db_session):
    assert await list_favorites(db_session, "nobody") == []


@pytest.mark.asyncio
async def test_visitors_are_isolated(db_session):
    """Different visitors can favorite the same city without seeing each other's lists."""
    shared = await add_favorite(db_session, "visitor-a", "London", "GB")
    await add_favorite(db_session, "visitor-b", "London", "GB")
    await add_favorite(db_session, "visitor-b", "Oslo", "NO")

    a_cities = await list_favorites(db_session, "visitor-a")
    b_cities = await list_favorites(db_session, "visitor-b")

    assert [c.id for c in a_cities] == [shared.id]
    assert len(b_cities) == 2
    assert shared.id in [c.id for c in b_cities]

    city_count = await db_session.scalar(select(func.count()).select_from(City))
    assert city_count == 2


@pytest.mark.asyncio
async def test_remove_never_added_is_not_found(db_session):
    city = await add_favorite(db_session, "someone-else", "London", "GB")

    with pytest.raises(FavoriteNotFoundError):
        await remove_favorite(db_session, VISITOR, city.id)


@pytest.mark.asyncio
async def test_remove_without_visitor_is_not_found(db_session):
    with pytest.raises(FavoriteNotFoundError):
        await remove_favorite(db_session, None, "some-city")


@pytest.mark.asyncio
async def test_remove_then_list_excludes_city(db_session):
    london = await add_favorite(db_session, VISITOR, "London", "GB")
    paris = await add_favorite(db_session, VISITOR, "Paris", "FR")

    await remove_favorite(db_session, VISITOR, london.id)

    cities = await list_favorites(db_session, VISITOR)
    assert [c.id for c in cities] == [paris.id]


@pytest.mark.asyncio
async def test_double_remove_is_not_found(db_session):
    city = await add_favorite(db_session, VISITOR, "London", "GB")
    await remove_favorite(db_session, VISITOR, city.id)

    with pytest.raises(FavoriteNotFoundError):
        await remove_favorite(db_session, VISITOR, city.id)


@pytest.mark.asyncio
async def test_removed_city_record_is_kept(db_session):
    """Cities are shared and never deleted."""
    city = await add_favorite(db_session, VISITOR, "London", "GB")
    await remove_favorite(db_session, VISITOR, city.id)

    assert await db_session.get(City, city.id) is not None


@pytest.mark.asyncio
async def test_paris_with_and_without_country_is_one_favorite(db_session):
    first = await add_favorite(db_session, VISITOR, "Paris")
    second = await add_favorite(db_session, VISITOR, "Paris", "")

    assert first.id == second.id
    assert len(await list_favorites(db_session, VISITOR)) == 1


def test_city_to_dict_unknown_country_is_none():
    city = City(id="c1", name="Paris", country="", lat=None, lon=None)

    assert city_to_dict(city) == {"id": "c1", "name": "Paris", "country": None, "lat": None, "lon": None}


def test_city_to_dict_keeps_country_and_coordinates():
    city = City(id="c2", name="London", country="GB", lat=51.5, lon=-0.12)

    assert city_to_dict(city)["country"] == "GB"
    assert city_to_dict(city)["lat"] == 51.5


@pytest.mark.asyncio
async def test_favorite_city_relationship(db_session):
    """The association loads its city and belongs to the visitor's preference."""
    await add_favorite(db_session, VISITOR, "London", "GB")

    result = await db_session.execute(select(FavoriteCity).where(FavoriteCity.preference_id == VISITOR))
    favorite = result.scalar_one()

    assert favorite.city.name == "London"

    preference = await db_session.get(UserPreference, VISITOR)
    await db_session.refresh(preference, ["cities"])
    assert [f.city_id for f in preference.cities] == [favorite.city_id]


@pytest.mark.asyncio
async def test_unique_constraint_prevents_duplicate(db_session):
    """The store itself rejects a second association for the same pair."""
    city = await add_favorite(db_session, VISITOR, "London", "GB")

    db_session.add(FavoriteCity(preference_id=VISITOR, city_id=city.id))

    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()
