"""Ship use-cases: get, create, partial update and delete.

Each function takes the request-scoped session, runs every precondition
(identifier, required fields, ranges) before touching the store, and raises
the errors from ``ship_errors`` for the HTTP layer to map.
"""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.models.ship import Ship
from app.modules.ship_errors import ShipNotFoundError, ShipValidationError
from app.modules.ship_rules import (
    check_ship_id,
    merge_ship_fields,
    prepare_new_ship,
    validate_ship_update,
)
from app.modules.ship_store import ShipStore

logger = logging.getLogger(__name__)


def get_ship(db: Session, ship_id: int) -> Ship:
    ship_id = check_ship_id(ship_id)
    ship = ShipStore(db).find_by_id(ship_id)
    if ship is None:
        raise ShipNotFoundError(ship_id)
    return ship


def create_ship(db: Session, fields: dict[str, Any]) -> Ship:
    """Validate ``fields`` as a complete ship, derive its rating and persist it."""
    try:
        values = prepare_new_ship(fields)
    except ShipValidationError as exc:
        logger.info("Rejected ship create: %s", exc)
        raise
    ship = ShipStore(db).save(Ship(**values))
    logger.info("Created ship %s (%s, rating=%s)", ship.id, ship.name, ship.rating)
    return ship


def update_ship(db: Session, ship_id: int, fields: dict[str, Any]) -> Ship:
    """Merge the supplied ``fields`` into an existing ship and re-derive its rating.

    Order of checks: identifier, field ranges, existence. Nothing is written
    unless all three pass.
    """
    ship_id = check_ship_id(ship_id)
    try:
        updates = validate_ship_update(fields)
    except ShipValidationError as exc:
        logger.info("Rejected update of ship %s: %s", ship_id, exc)
        raise

    store = ShipStore(db)
    ship = store.find_by_id(ship_id)
    if ship is None:
        raise ShipNotFoundError(ship_id)

    merge_ship_fields(ship, updates)
    ship = store.save(ship)
    logger.info("Updated ship %s fields=%s rating=%s", ship_id, sorted(updates), ship.rating)
    return ship


def delete_ship(db: Session, ship_id: int) -> None:
    ship_id = check_ship_id(ship_id)
    if not ShipStore(db).delete_by_id(ship_id):
        raise ShipNotFoundError(ship_id)
    logger.info("Deleted ship %s", ship_id)
