"""Error body returned by every non-2xx response."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    detail: Any = None


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid identifier, filter, paging value or ship fields"},
    404: {"model": ErrorResponse, "description": "Ship not found"},
}
