"""List and count orchestration over the ship filters.

Both operations go through ``build_ship_filters`` with the same parameters, so
``count_ships(params)`` always equals ``len(list_ships(params, page_size=None))``.
"""
from __future__ import annotations

import enum
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.models.ship import Ship
from app.modules.ship_filter import ShipFilterParams, build_ship_filters
from app.modules.ship_store import ShipStore

logger = logging.getLogger(__name__)


class ShipOrder(str, enum.Enum):
    ID = "ID"
    SPEED = "SPEED"
    DATE = "DATE"
    RATING = "RATING"

    @property
    def field_name(self) -> str:
        return _ORDER_FIELDS[self]


_ORDER_FIELDS = {
    ShipOrder.ID: "id",
    ShipOrder.SPEED: "speed",
    ShipOrder.DATE: "prod_date",
    ShipOrder.RATING: "rating",
}


def list_ships(
    db: Session,
    params: ShipFilterParams,
    order: ShipOrder = ShipOrder.ID,
    page_number: int = 0,
    page_size: Optional[int] = settings.DEFAULT_PAGE_SIZE,
) -> list[Ship]:
    """One page of matching ships, sorted by ``order``. ``page_size=None`` disables paging."""
    order = ShipOrder(order)
    predicates = build_ship_filters(params)
    logger.debug(
        "Listing ships: %d filter(s), order=%s, page=%s, size=%s",
        len(predicates), order.value, page_number, page_size,
    )
    return ShipStore(db).find(
        predicates,
        page_number=page_number,
        page_size=page_size,
        sort_field=order.field_name,
    )


def count_ships(db: Session, params: ShipFilterParams) -> int:
    predicates = build_ship_filters(params)
    return ShipStore(db).count(predicates)
