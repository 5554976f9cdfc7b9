from typing import List, Optional
from pydantic import Field, field_validator

from app.models.problem import ProblemDifficulty
from app.schemas.common import CamelModel, Ref, TimestampedResponse


class ProblemRequest(CamelModel):
    """Body for creating or updating a problem. Update replaces the stack list."""
    title: str = Field(..., min_length=1, max_length=300)
    description: str = Field(..., min_length=1)
    difficulty: ProblemDifficulty
    department_id: str = Field(..., min_length=1)
    position_id: str = Field(..., min_length=1)
    stack_ids: List[str] = Field(..., min_length=1, description="At least one stack is required")

    @field_validator("stack_ids")
    @classmethod
    def dedupe_stack_ids(cls, v: List[str]) -> List[str]:
        # Keep first occurrence order
        return list(dict.fromkeys(v))


class ProblemStackResponse(CamelModel):
    stack_id: str
    stack: Ref


class ProblemResponse(TimestampedResponse):
    id: str
    title: str
    description: str
    difficulty: ProblemDifficulty
    department_id: str
    position_id: str
    department: Optional[Ref] = None
    position: Optional[Ref] = None
    stacks: List[ProblemStackResponse] = []


class ProblemSummary(CamelModel):
    id: str
    title: str
    difficulty: ProblemDifficulty
