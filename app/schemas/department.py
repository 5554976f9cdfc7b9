from typing import Optional
from pydantic import Field

from app.schemas.common import CamelModel, TimestampedResponse


class DepartmentRequest(CamelModel):
    """Body for creating or updating a department"""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None


class DepartmentResponse(TimestampedResponse):
    id: str
    name: str
    description: Optional[str] = None
