"""
Shared pydantic building blocks for API schemas.

JSON field names are camelCase (`departmentId`, `totalPages`); Python attribute
names stay snake_case. Input accepts either spelling.
"""

from datetime import datetime
from typing import Annotated, Generic, List, Optional, TypeVar
from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.core.clock import as_aware_utc, to_naive_utc

T = TypeVar("T")

# Stored values are naive UTC; responses carry an explicit UTC offset
UTCDateTime = Annotated[datetime, AfterValidator(as_aware_utc)]

# Incoming timestamps are normalized to naive UTC before they reach the database
InputDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Page(CamelModel, Generic[T]):
    """One page of a list endpoint."""
    items: List[T]
    total: int
    page: int
    limit: int
    total_pages: int


class MessageResponse(BaseModel):
    message: str


class Ref(CamelModel):
    """Compact {id, name} reference to a related entity."""
    id: str
    name: str


class TimestampedResponse(CamelModel):
    created_at: UTCDateTime
    updated_at: Optional[UTCDateTime] = None


def page_of(schema, result) -> Page:
    """Serialize a crud PageResult into a Page of `schema` items."""
    return Page[schema](
        items=[schema.model_validate(item) for item in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )
