"""Ship entity: the single resource served by the registry."""
from __future__ import annotations

from datetime import date

from sqlalchemy import String, Integer, Float, Boolean, Date, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column
from app.models.base import Base, ShipTypeEnum


class Ship(Base):
    __tablename__ = "ships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    planet: Mapped[str] = mapped_column(String(50), nullable=False)
    ship_type: Mapped[ShipTypeEnum] = mapped_column(SAEnum(ShipTypeEnum), nullable=False)
    prod_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    is_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    speed: Mapped[float] = mapped_column(Float, nullable=False)
    crew_size: Mapped[int] = mapped_column(Integer, nullable=False)
    # Derived from speed, is_used and prod_date; never taken from client input
    rating: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<Ship id={self.id} name={self.name!r} rating={self.rating}>"
