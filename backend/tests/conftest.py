"""Shared test fixtures for API and store tests."""
import pytest
from datetime import date
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import get_db
from app.models import Base  # noqa: F401 -- registers all models
from app.models.base import ShipTypeEnum
from app.models.ship import Ship
from app.modules.ship_rules import compute_rating


@pytest.fixture
def mock_db():
    """MagicMock database session; returns None for all queries by default."""
    session = MagicMock()
    # Default: query().filter().first() returns None (not found)
    session.query.return_value.filter.return_value.first.return_value = None
    session.query.return_value.order_by.return_value.offset.return_value.limit.return_value.all.return_value = []
    session.query.return_value.count.return_value = 0
    return session


@pytest.fixture
def api_client(mock_db):
    """TestClient with DB dependency overridden to use a MagicMock session."""
    def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    """In-memory SQLite session with all tables, shared across threads for TestClient use."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA case_sensitive_like=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def sqlite_client(db):
    """TestClient backed by the in-memory SQLite session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def make_ship(db, name="Orion", planet="Mars", ship_type=ShipTypeEnum.MERCHANT,
              year=3000, is_used=False, speed=0.5, crew_size=100):
    """Insert a ship directly, with its rating derived the same way the service does."""
    ship = Ship(
        name=name,
        planet=planet,
        ship_type=ship_type,
        prod_date=date(year, 1, 1),
        is_used=is_used,
        speed=speed,
        crew_size=crew_size,
        rating=compute_rating(speed, is_used, year),
    )
    db.add(ship)
    db.commit()
    db.refresh(ship)
    return ship


@pytest.fixture
def fleet(db):
    """Six ships spread over types, years, speeds, crews and usage."""
    return [
        make_ship(db, "Orion III", "Mars", ShipTypeEnum.MERCHANT, 2995, True, 0.82, 617),
        make_ship(db, "Daedalus", "Jupiter", ShipTypeEnum.MERCHANT, 3001, True, 0.94, 1619),
        make_ship(db, "Eagle", "Earth", ShipTypeEnum.TRANSPORT, 2989, False, 0.79, 4527),
        make_ship(db, "Nebuchadnezzar", "Neptune", ShipTypeEnum.MILITARY, 3015, False, 0.04, 1373),
        make_ship(db, "Serenity", "Saturn", ShipTypeEnum.TRANSPORT, 3018, True, 0.50, 9),
        make_ship(db, "Rocinante", "mars", ShipTypeEnum.MILITARY, 3019, False, 0.50, 4),
    ]


@pytest.fixture
def ship_factory(db):
    def _make(**kwargs):
        return make_ship(db, **kwargs)
    return _make
