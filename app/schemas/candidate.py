"""
Pydantic schemas for Candidate admin CRUD and the candidate portal.
"""

from typing import List, Optional
from pydantic import EmailStr, Field

from app.models.candidate import CandidateState
from app.schemas.common import CamelModel, InputDateTime, Ref, TimestampedResponse, UTCDateTime
from app.schemas.problem import ProblemResponse, ProblemSummary
from app.schemas.submission import AnswerItem, SubmissionResponse


class CandidateCreateRequest(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    department_id: str = Field(..., min_length=1)
    position_id: str = Field(..., min_length=1)
    problem_id: str = Field(..., min_length=1)
    scheduled_time: InputDateTime
    end_time: Optional[InputDateTime] = Field(
        None, description="Defaults to scheduledTime + DEFAULT_TEST_DURATION_HOURS"
    )


class CandidateUpdateRequest(CamelModel):
    """Partial update. Only provided fields change."""
    name: Optional[str] = Field(None, min_length=1)
    department_id: Optional[str] = None
    position_id: Optional[str] = None
    problem_id: Optional[str] = None
    scheduled_time: Optional[InputDateTime] = None
    end_time: Optional[InputDateTime] = None
    regenerate_password: bool = False


class CandidateResponse(TimestampedResponse):
    """Admin view of a candidate, including the generated password."""
    id: str
    name: str
    email: str
    password: str
    department_id: str
    position_id: str
    problem_id: str
    scheduled_time: UTCDateTime
    end_time: UTCDateTime
    start_time: Optional[UTCDateTime] = None
    submission_time: Optional[UTCDateTime] = None
    state: CandidateState
    department: Optional[Ref] = None
    position: Optional[Ref] = None
    problem: Optional[ProblemSummary] = None


class CandidateWithPasswordResponse(CamelModel):
    candidate: CandidateResponse
    generated_password: Optional[str] = None


class TimerStatusResponse(CamelModel):
    mode: str
    remaining_seconds: int
    elapsed_seconds: int
    overtime_seconds: int
    display: str


class AvailabilityResponse(CamelModel):
    available: bool
    seconds_until_available: int
    label: str


class CandidatePortalResponse(CamelModel):
    """The logged-in candidate's own record (no password)."""
    id: str
    name: str
    email: str
    scheduled_time: UTCDateTime
    end_time: UTCDateTime
    start_time: Optional[UTCDateTime] = None
    submission_time: Optional[UTCDateTime] = None
    state: CandidateState
    department: Optional[Ref] = None
    position: Optional[Ref] = None
    problem: ProblemResponse
    timer: TimerStatusResponse
    availability: AvailabilityResponse


class SubmitTestRequest(CamelModel):
    answers: List[AnswerItem]


class SubmitTestResponse(CamelModel):
    message: str
    submission: SubmissionResponse
