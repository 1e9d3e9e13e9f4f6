"""Visitor preference and favorite city models."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from weather_monitor.database import Base, utcnow


class UserPreference(Base):
    """Anonymous visitor record.

    There are no user accounts, so favorites hang off the random token stored
    in the visitor's ``prefId`` cookie. The token is the primary key.
    """

    __tablename__ = "user_preferences"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    cities: Mapped[list["FavoriteCity"]] = relationship(
        back_populates="preference",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="FavoriteCity.created_at",
    )


class FavoriteCity(Base):
    """Link between a visitor and a city they track."""

    __tablename__ = "favorite_cities"

    # Ensure each visitor can only favorite a city once
    __table_args__ = (
        UniqueConstraint("preference_id", "city_id", name="uq_preference_city"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    preference_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("user_preferences.id", ondelete="CASCADE"), index=True
    )
    city_id: Mapped[str] = mapped_column(String(36), ForeignKey("cities.id"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    preference: Mapped["UserPreference"] = relationship(back_populates="cities")
    city: Mapped["City"] = relationship(lazy="selectin")


# Import at bottom to avoid circular imports
from weather_monitor.models.city import City
