"""SQLAlchemy-backed record store for ships.

The store is the only place that knows about SQL: it compiles the plain
``Predicate`` values produced by ``ship_filter`` into column clauses and runs
find / count / find_by_id / save / delete_by_id against the session it wraps.
No business rules live here.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Query, Session

from app.models.ship import Ship
from app.modules.ship_filter import Predicate, PredicateOp

logger = logging.getLogger(__name__)

# Largest value a 64-bit INTEGER primary key can hold
MAX_ROW_ID = 2**63 - 1


def compile_predicate(predicate: Predicate):
    """Translate one predicate into a SQLAlchemy clause over the ships table."""
    column = getattr(Ship, predicate.field)
    if predicate.op is PredicateOp.CONTAINS:
        # autoescape: % and _ in user input are matched literally
        return column.contains(predicate.value, autoescape=True)
    if predicate.op is PredicateOp.EQ:
        return column == predicate.value
    if predicate.op is PredicateOp.GE:
        return column >= predicate.value
    if predicate.op is PredicateOp.LE:
        return column <= predicate.value
    if predicate.op is PredicateOp.BETWEEN:
        return column.between(predicate.value, predicate.upper)
    raise ValueError(f"Unsupported predicate operator: {predicate.op}")


class ShipStore:
    """Persistence for Ship rows over one request-scoped session."""

    def __init__(self, db: Session):
        self.db = db

    def _filtered(self, predicates: Iterable[Predicate]) -> Query:
        clauses = [compile_predicate(p) for p in predicates]
        q = self.db.query(Ship)
        if clauses:
            q = q.filter(*clauses)
        return q

    def find(
        self,
        predicates: Iterable[Predicate],
        page_number: int = 0,
        page_size: Optional[int] = None,
        sort_field: str = "id",
    ) -> list[Ship]:
        """Matching ships sorted ascending by ``sort_field``.

        ``page_size=None`` returns every match (unpaged).
        """
        sort_column = getattr(Ship, sort_field)
        order = [sort_column] if sort_field == "id" else [sort_column, Ship.id]
        q = self._filtered(predicates).order_by(*order)
        if page_size is not None:
            q = q.offset(page_number * page_size).limit(page_size)
        return q.all()

    def count(self, predicates: Iterable[Predicate]) -> int:
        return self._filtered(predicates).count()

    def find_by_id(self, ship_id: int) -> Optional[Ship]:
        if ship_id > MAX_ROW_ID:
            return None
        return self.db.query(Ship).filter(Ship.id == ship_id).first()

    def save(self, ship: Ship) -> Ship:
        self.db.add(ship)
        self.db.commit()
        self.db.refresh(ship)
        return ship

    def delete_by_id(self, ship_id: int) -> bool:
        ship = self.find_by_id(ship_id)
        if ship is None:
            return False
        self.db.delete(ship)
        self.db.commit()
        logger.debug("Deleted ship row %s", ship_id)
        return True
