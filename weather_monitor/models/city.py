"""City database model."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from weather_monitor.database import Base, utcnow


def new_id() -> str:
    return str(uuid.uuid4())


class City(Base):
    """A city known to the dashboard.

    Shared by every visitor. ``country`` is stored upper-cased, with the empty
    string standing in for "unknown" so the (name, country) pair stays unique.
    Coordinates are filled in lazily from provider responses.
    """

    __tablename__ = "cities"

    __table_args__ = (
        UniqueConstraint("name", "country", name="uq_city_name_country"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), index=True)
    country: Mapped[str] = mapped_column(String(8), default="")
    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lon: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
