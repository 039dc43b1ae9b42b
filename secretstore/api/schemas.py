from datetime import datetime
from typing import Any, List
from pydantic import BaseModel, Field


class SecretRequest(BaseModel):
    """Body of a set call: the opaque payload and its expiration."""
    secret: Any = Field(..., description="Opaque JSON value stored as-is")
    expires: datetime = Field(..., description="Absolute expiration timestamp")


class SecretResponse(BaseModel):
    secret: Any
    expires: datetime


class SecretListResponse(BaseModel):
    secrets: List[str]


class EmptyResponse(BaseModel):
    pass
