"""Secret models."""
from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field


class Secret(BaseModel):
    """A decoded secret as seen by readers."""
    name: str = Field(..., min_length=1)
    payload: Any = None
    expires: datetime


class SecretRecord(BaseModel):
    """Name and expiration of a stored record, without its payload."""
    name: str
    expires: datetime
