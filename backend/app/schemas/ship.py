"""Pydantic schemas for the Ship resource: camelCase on the wire, epoch-ms dates.

Request bodies keep every field optional: required-field and range checks are
entity rules (app.modules.ship_rules) so that they produce the service's own
400 errors instead of framework validation errors.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from app.models.base import ShipTypeEnum
from app.utils.dates import date_to_ms, ms_to_date


class ShipFields(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: Optional[str] = None
    planet: Optional[str] = None
    ship_type: Optional[ShipTypeEnum] = None
    prod_date: Optional[int] = None
    is_used: Optional[bool] = None
    speed: Optional[float] = None
    crew_size: Optional[int] = None

    def to_fields(self) -> dict[str, Any]:
        """Supplied, non-null fields keyed by model attribute, prod_date as a date."""
        fields = self.model_dump(exclude_none=True)
        if "prod_date" in fields:
            fields["prod_date"] = ms_to_date(fields["prod_date"])
        return fields


class ShipCreateRequest(ShipFields):
    pass


class ShipUpdateRequest(ShipFields):
    pass


class ShipRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    name: str
    planet: str
    ship_type: ShipTypeEnum
    prod_date: int
    is_used: bool
    speed: float
    crew_size: int
    rating: float

    @field_validator("prod_date", mode="before")
    @classmethod
    def prod_date_to_epoch_ms(cls, v: Any) -> Any:
        if isinstance(v, date):
            return date_to_ms(v)
        return v
