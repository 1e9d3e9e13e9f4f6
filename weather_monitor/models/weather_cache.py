"""Cached provider responses."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from weather_monitor.database import Base, utcnow


class WeatherCache(Base):
    """Provider payload for one city and one kind of data.

    The payload is the provider's JSON stored verbatim. Entries are never
    deleted; an expired entry is ignored and overwritten on the next fetch.
    """

    __tablename__ = "weather_cache"

    # One entry per city and kind; writes overwrite
    __table_args__ = (
        UniqueConstraint("city_id", "kind", name="uq_weather_cache_city_kind"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    city_id: Mapped[str] = mapped_column(String(36), ForeignKey("cities.id"), index=True)
    kind: Mapped[str] = mapped_column(String(20))
    payload: Mapped[dict] = mapped_column(JSON)
    expires_at: Mapped[datetime] = mapped_column(DateTime)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
