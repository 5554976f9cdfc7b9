from typing import Optional
from pydantic import Field

from app.schemas.common import CamelModel, Ref, TimestampedResponse


class PositionRequest(CamelModel):
    """Body for creating or updating a position"""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    department_id: str = Field(..., min_length=1)


class PositionResponse(TimestampedResponse):
    id: str
    name: str
    description: Optional[str] = None
    department_id: str
    department: Optional[Ref] = None
