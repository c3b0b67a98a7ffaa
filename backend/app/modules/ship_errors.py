"""Domain errors raised by the ship service and mapped to HTTP status codes in app.main."""
from __future__ import annotations


class ShipValidationError(ValueError):
    """Missing or out-of-range ship fields. Nothing has been persisted."""

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class BadShipIdError(ValueError):
    """Identifier is not a positive integer."""

    def __init__(self, ship_id):
        self.ship_id = ship_id
        super().__init__(f"Ship id must be a positive integer, got {ship_id!r}")


class ShipNotFoundError(LookupError):
    def __init__(self, ship_id: int):
        self.ship_id = ship_id
        super().__init__(f"Ship {ship_id} not found")
