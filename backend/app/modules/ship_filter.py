"""Ship list filters: optional query parameters to a conjunction of predicates.

Every filter builder returns ``None`` when its inputs are absent, so an omitted
query parameter adds no constraint at all rather than an always-true clause.
``build_ship_filters`` collects the non-empty predicates; callers AND them
together in SQL (see ``ShipStore``). ``Predicate.matches`` and ``matches_all``
evaluate the same predicates against plain objects; they serve as the
reference semantics that the SQL compilation is checked against in tests.

Range pairs (speed, crew size, rating, production date) follow one rule:
  - both bounds -> inclusive BETWEEN
  - lower only  -> ``>=``
  - upper only  -> ``<=``
  - neither     -> no predicate

Production-date bounds arrive as epoch milliseconds and are widened to whole
years: ``after`` snaps to Jan 1 of its year and ``before`` to Dec 31.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from app.models.base import ShipTypeEnum
from app.utils.dates import year_end, year_start


class PredicateOp(str, enum.Enum):
    CONTAINS = "contains"
    EQ = "eq"
    GE = "ge"
    LE = "le"
    BETWEEN = "between"


@dataclass(frozen=True)
class Predicate:
    """A single-field condition. ``upper`` is only used by BETWEEN."""

    field: str
    op: PredicateOp
    value: Any
    upper: Any = None

    def matches(self, record: Any) -> bool:
        actual = getattr(record, self.field, None)
        if actual is None:
            return False
        if self.op is PredicateOp.CONTAINS:
            return self.value in actual
        if self.op is PredicateOp.EQ:
            return actual == self.value
        if self.op is PredicateOp.GE:
            return actual >= self.value
        if self.op is PredicateOp.LE:
            return actual <= self.value
        if self.op is PredicateOp.BETWEEN:
            return self.value <= actual <= self.upper
        raise ValueError(f"Unsupported predicate operator: {self.op}")


@dataclass
class ShipFilterParams:
    name: Optional[str] = None
    planet: Optional[str] = None
    ship_type: Optional[ShipTypeEnum] = None
    after: Optional[int] = None
    before: Optional[int] = None
    is_used: Optional[bool] = None
    min_speed: Optional[float] = None
    max_speed: Optional[float] = None
    min_crew_size: Optional[int] = None
    max_crew_size: Optional[int] = None
    min_rating: Optional[float] = None
    max_rating: Optional[float] = None


# ---------------------------------------------------------------------------
# Per-field builders
# ---------------------------------------------------------------------------

def filter_by_substring(field: str, value: Optional[str]) -> Optional[Predicate]:
    if value is None:
        return None
    return Predicate(field, PredicateOp.CONTAINS, value)


def filter_by_name(name: Optional[str]) -> Optional[Predicate]:
    return filter_by_substring("name", name)


def filter_by_planet(planet: Optional[str]) -> Optional[Predicate]:
    return filter_by_substring("planet", planet)


def filter_by_ship_type(ship_type: Optional[ShipTypeEnum]) -> Optional[Predicate]:
    if ship_type is None:
        return None
    return Predicate("ship_type", PredicateOp.EQ, ShipTypeEnum(ship_type))


def filter_by_usage(is_used: Optional[bool]) -> Optional[Predicate]:
    if is_used is None:
        return None
    return Predicate("is_used", PredicateOp.EQ, bool(is_used))


def filter_by_range(field: str, low: Any = None, high: Any = None) -> Optional[Predicate]:
    if low is None and high is None:
        return None
    if low is None:
        return Predicate(field, PredicateOp.LE, high)
    if high is None:
        return Predicate(field, PredicateOp.GE, low)
    return Predicate(field, PredicateOp.BETWEEN, low, high)


def filter_by_prod_date(after_ms: Optional[int], before_ms: Optional[int]) -> Optional[Predicate]:
    low = year_start(after_ms).date() if after_ms is not None else None
    high = year_end(before_ms).date() if before_ms is not None else None
    return filter_by_range("prod_date", low, high)


def filter_by_speed(min_speed: Optional[float], max_speed: Optional[float]) -> Optional[Predicate]:
    return filter_by_range("speed", min_speed, max_speed)


def filter_by_crew_size(min_crew: Optional[int], max_crew: Optional[int]) -> Optional[Predicate]:
    return filter_by_range("crew_size", min_crew, max_crew)


def filter_by_rating(min_rating: Optional[float], max_rating: Optional[float]) -> Optional[Predicate]:
    return filter_by_range("rating", min_rating, max_rating)


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def build_ship_filters(params: ShipFilterParams) -> list[Predicate]:
    """Translate query parameters into the list of predicates to AND together."""
    candidates = (
        filter_by_name(params.name),
        filter_by_planet(params.planet),
        filter_by_ship_type(params.ship_type),
        filter_by_prod_date(params.after, params.before),
        filter_by_usage(params.is_used),
        filter_by_speed(params.min_speed, params.max_speed),
        filter_by_crew_size(params.min_crew_size, params.max_crew_size),
        filter_by_rating(params.min_rating, params.max_rating),
    )
    return [p for p in candidates if p is not None]


def matches_all(predicates: Iterable[Predicate], record: Any) -> bool:
    return all(p.matches(record) for p in predicates)
