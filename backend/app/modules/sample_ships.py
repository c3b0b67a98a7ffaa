"""Demo fleet loader: reads config/sample_ships.yaml and inserts it through the ship service.

Every sample ship goes through ``create_ship`` so that validation and rating
derivation are exactly the same as for API-created ships.

Usage:
    from app.database import SessionLocal
    from app.modules.sample_ships import seed_sample_ships
    db = SessionLocal()
    seed_sample_ships(db)
"""
from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any, Optional

import yaml
from sqlalchemy.orm import Session

from app.config import settings
from app.models.base import ShipTypeEnum

logger = logging.getLogger(__name__)


def _resolve_sample_path(path: Optional[str] = None) -> Path:
    candidate = Path(path or settings.SAMPLE_SHIPS_FILE)
    if candidate.exists() or candidate.is_absolute():
        return candidate
    # config/ is at repo root (two levels above backend/app)
    return Path(__file__).resolve().parents[3] / candidate


def load_sample_ships(path: Optional[str] = None) -> list[dict[str, Any]]:
    """Parse the YAML fleet into ship field dicts (prod_year -> Jan 1 of that year)."""
    config_path = _resolve_sample_path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Sample ships file not found: {config_path}")
    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    ships = []
    for entry in data.get("ships", []):
        fields = {k: v for k, v in entry.items() if k != "prod_year"}
        if entry.get("prod_year") is not None:
            fields["prod_date"] = date(int(entry["prod_year"]), 1, 1)
        if fields.get("ship_type") is not None:
            fields["ship_type"] = ShipTypeEnum(fields["ship_type"])
        ships.append(fields)
    return ships


def seed_sample_ships(db: Session, path: Optional[str] = None, force: bool = False) -> dict:
    """Insert the demo fleet. Skips when ships already exist unless ``force``."""
    from app.models.ship import Ship
    from app.modules.ship_service import create_ship

    existing = db.query(Ship).count()
    if existing and not force:
        logger.info("seed_sample_ships: %d ships already present, skipping", existing)
        return {"inserted": 0, "skipped": existing}

    inserted = 0
    for fields in load_sample_ships(path):
        create_ship(db, fields)
        inserted += 1

    logger.info("seed_sample_ships: inserted=%d", inserted)
    return {"inserted": inserted, "skipped": 0}
