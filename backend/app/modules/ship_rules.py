"""Ship entity rules: field validation, rating derivation and partial-update merge.

Validation is pure in-memory precondition checking. It runs before any store
call, so a rejected create or update never touches the database.

Rating formula:
    rating = round(80 * speed * k / (3019 - prod_year + 1), 2)
    k = 0.5 for used ships, 1.0 otherwise
Rounding is half-up to two decimal places.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from app.modules.ship_errors import BadShipIdError, ShipValidationError

logger = logging.getLogger(__name__)

# Upper bound of the valid production range doubles as the rating's "current year"
RATING_BASE_YEAR = 3019
MIN_PROD_YEAR = 2800
MAX_PROD_YEAR = RATING_BASE_YEAR
MIN_TEXT_LENGTH = 1
MAX_TEXT_LENGTH = 50
MIN_SPEED = 0.01
MAX_SPEED = 0.99
MIN_CREW_SIZE = 1
MAX_CREW_SIZE = 9999

_USED_FACTOR = Decimal("0.5")
_NEW_FACTOR = Decimal(1)

# Client-writable fields, in wire order
SHIP_FIELDS = ("name", "planet", "ship_type", "prod_date", "is_used", "speed", "crew_size")
REQUIRED_ON_CREATE = ("name", "planet", "ship_type", "prod_date", "speed", "crew_size")

_TEXT_FIELDS = ("name", "planet")


def compute_rating(speed: float, is_used: bool, prod_year: int) -> float:
    factor = _USED_FACTOR if is_used else _NEW_FACTOR
    # exact decimal arithmetic so half-cent results round up
    raw = Decimal(80) * Decimal(str(speed)) * factor / Decimal(RATING_BASE_YEAR - prod_year + 1)
    return float(raw.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def check_ship_id(ship_id: Any) -> int:
    """Return ``ship_id`` as an int, or raise BadShipIdError if it is not a positive integer."""
    if isinstance(ship_id, bool) or not isinstance(ship_id, int) or ship_id < 1:
        raise BadShipIdError(ship_id)
    return ship_id


def validate_ship_fields(fields: dict[str, Any]) -> list[str]:
    """Check the range rules for every field present in ``fields``.

    Fields that are absent (or None) are not checked. Returns the list of
    problems, empty when everything present is valid.
    """
    problems: list[str] = []

    for key in _TEXT_FIELDS:
        value = fields.get(key)
        if value is not None and not MIN_TEXT_LENGTH <= len(value) <= MAX_TEXT_LENGTH:
            problems.append(
                f"{key} must be {MIN_TEXT_LENGTH}-{MAX_TEXT_LENGTH} characters long"
            )

    crew_size = fields.get("crew_size")
    if crew_size is not None and not MIN_CREW_SIZE <= crew_size <= MAX_CREW_SIZE:
        problems.append(f"crew_size must be between {MIN_CREW_SIZE} and {MAX_CREW_SIZE}")

    speed = fields.get("speed")
    if speed is not None and not MIN_SPEED <= speed <= MAX_SPEED:
        problems.append(f"speed must be between {MIN_SPEED} and {MAX_SPEED}")

    prod_date = fields.get("prod_date")
    if prod_date is not None and not MIN_PROD_YEAR <= prod_date.year <= MAX_PROD_YEAR:
        problems.append(f"prod_date year must be between {MIN_PROD_YEAR} and {MAX_PROD_YEAR}")

    return problems


def prepare_new_ship(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate a create request and return the complete column values, rating included.

    Raises:
        ShipValidationError: a required field is missing or any field is out of range.
    """
    present = {k: v for k, v in fields.items() if k in SHIP_FIELDS and v is not None}

    problems = [f"{key} is required" for key in REQUIRED_ON_CREATE if key not in present]
    problems.extend(validate_ship_fields(present))
    if problems:
        raise ShipValidationError(problems)

    present.setdefault("is_used", False)
    present["rating"] = compute_rating(present["speed"], present["is_used"], present["prod_date"].year)
    return present


def validate_ship_update(fields: dict[str, Any]) -> dict[str, Any]:
    """Keep only the supplied client-writable fields and range-check them."""
    present = {k: v for k, v in fields.items() if k in SHIP_FIELDS and v is not None}
    problems = validate_ship_fields(present)
    if problems:
        raise ShipValidationError(problems)
    return present


def apply_derived_fields(ship: Any) -> Any:
    prod_date: date = ship.prod_date
    ship.rating = compute_rating(ship.speed, bool(ship.is_used), prod_date.year)
    return ship


def merge_ship_fields(ship: Any, fields: dict[str, Any]) -> Any:
    """Overwrite ``ship`` in place with the supplied fields, then re-derive the rating."""
    for key, value in fields.items():
        setattr(ship, key, value)
    apply_derived_fields(ship)
    logger.debug("Merged fields %s into ship %s", sorted(fields), getattr(ship, "id", None))
    return ship
