from typing import Optional
from pydantic import Field

from app.schemas.common import CamelModel, TimestampedResponse


class StackRequest(CamelModel):
    """Body for creating or updating a stack"""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class StackResponse(TimestampedResponse):
    id: str
    name: str
    description: Optional[str] = None
