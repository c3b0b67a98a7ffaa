from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.base import ShipTypeEnum
from app.modules.ship_filter import ShipFilterParams
from app.modules.ship_query import ShipOrder, count_ships, list_ships
from app.modules.ship_service import create_ship, delete_ship, get_ship, update_ship
from app.schemas.error import ERROR_RESPONSES
from app.schemas.ship import ShipCreateRequest, ShipRead, ShipUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def ship_filter_params(
    name: Optional[str] = Query(None, description="Case-sensitive substring of the ship name"),
    planet: Optional[str] = Query(None, description="Case-sensitive substring of the planet"),
    ship_type: Optional[ShipTypeEnum] = Query(None, alias="shipType"),
    after: Optional[int] = Query(None, description="Epoch ms; matches from Jan 1 of that year"),
    before: Optional[int] = Query(None, description="Epoch ms; matches up to Dec 31 of that year"),
    is_used: Optional[bool] = Query(None, alias="isUsed"),
    min_speed: Optional[float] = Query(None, alias="minSpeed"),
    max_speed: Optional[float] = Query(None, alias="maxSpeed"),
    min_crew_size: Optional[int] = Query(None, alias="minCrewSize"),
    max_crew_size: Optional[int] = Query(None, alias="maxCrewSize"),
    min_rating: Optional[float] = Query(None, alias="minRating"),
    max_rating: Optional[float] = Query(None, alias="maxRating"),
) -> ShipFilterParams:
    """Shared by list and count so both see exactly the same filters."""
    return ShipFilterParams(
        name=name,
        planet=planet,
        ship_type=ship_type,
        after=after,
        before=before,
        is_used=is_used,
        min_speed=min_speed,
        max_speed=max_speed,
        min_crew_size=min_crew_size,
        max_crew_size=max_crew_size,
        min_rating=min_rating,
        max_rating=max_rating,
    )


# ---------------------------------------------------------------------------
# Ships
# ---------------------------------------------------------------------------

@router.get("/ships", response_model=list[ShipRead], tags=["ships"])
def search_ships(
    order: ShipOrder = Query(ShipOrder.ID, description="Sort key: ID, SPEED, DATE or RATING"),
    page_number: int = Query(0, alias="pageNumber", ge=0),
    page_size: Optional[int] = Query(None, alias="pageSize", ge=1),
    params: ShipFilterParams = Depends(ship_filter_params),
    db: Session = Depends(get_db),
):
    """Filtered, sorted, paginated ship list."""
    if page_size is None:
        page_size = settings.DEFAULT_PAGE_SIZE
    return list_ships(db, params, order=order, page_number=page_number, page_size=page_size)


@router.get("/ships/count", response_model=int, tags=["ships"])
def count_matching_ships(
    params: ShipFilterParams = Depends(ship_filter_params),
    db: Session = Depends(get_db),
):
    """Number of ships matching the filters, ignoring pagination."""
    return count_ships(db, params)


@router.get("/ships/{ship_id}", response_model=ShipRead, tags=["ships"], responses=ERROR_RESPONSES)
def read_ship(ship_id: int, db: Session = Depends(get_db)):
    return get_ship(db, ship_id)


@router.post("/ships", response_model=ShipRead, tags=["ships"], responses=ERROR_RESPONSES)
def create_ship_endpoint(body: ShipCreateRequest, db: Session = Depends(get_db)):
    """Create a ship. The rating is computed server-side; any client value is ignored."""
    return create_ship(db, body.to_fields())


@router.post("/ships/{ship_id}", response_model=ShipRead, tags=["ships"], responses=ERROR_RESPONSES)
def update_ship_endpoint(ship_id: int, body: ShipUpdateRequest, db: Session = Depends(get_db)):
    """Partial update: only supplied fields change, the rating is always re-derived."""
    return update_ship(db, ship_id, body.to_fields())


@router.delete("/ships/{ship_id}", tags=["ships"], responses=ERROR_RESPONSES)
def delete_ship_endpoint(ship_id: int, db: Session = Depends(get_db)):
    delete_ship(db, ship_id)
    return {"status": "deleted", "id": ship_id}


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------

@router.get("/health", tags=["system"])
def health_check(db: Session = Depends(get_db)):
    """Health check with DB latency measurement."""
    from sqlalchemy import text

    t0 = time.time()
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception as e:
        logger.warning("Health check database probe failed: %s", e)
        db_status = f"error: {e}"
    latency_ms = round((time.time() - t0) * 1000, 1)

    return {
        "status": "ok",
        "version": settings.VERSION,
        "database": {"status": db_status, "latency_ms": latency_ms},
    }
