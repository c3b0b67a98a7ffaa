"""Import all models to register them with SQLAlchemy metadata."""
from app.models.base import Base, ShipTypeEnum
from app.models.ship import Ship

__all__ = [
    "Base",
    "ShipTypeEnum",
    "Ship",
]
