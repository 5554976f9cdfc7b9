"""
Pydantic schemas for candidate answers, submissions and admin remarks.
"""

from typing import List, Optional
from pydantic import Field

from app.schemas.common import CamelModel, Ref, UTCDateTime
from app.schemas.problem import ProblemResponse


class AnswerItem(CamelModel):
    """Code written for one stack of the problem."""
    stack_id: str = Field(..., min_length=1)
    code: str


class Remark(CamelModel):
    id: str
    text: str
    admin_name: str
    admin_email: str
    created_at: UTCDateTime


class RemarkCreate(CamelModel):
    text: str


class SubmissionUpdateRequest(CamelModel):
    """Append a remark and/or set the next-step recommendation."""
    remark: Optional[RemarkCreate] = None
    recommended_for_next_step: Optional[bool] = None


class SubmissionCandidate(CamelModel):
    id: str
    name: str
    email: str
    scheduled_time: UTCDateTime
    start_time: Optional[UTCDateTime] = None
    end_time: UTCDateTime
    submission_time: Optional[UTCDateTime] = None
    department: Optional[Ref] = None
    position: Optional[Ref] = None


class SubmissionResponse(CamelModel):
    id: str
    candidate_id: str
    problem_id: str
    position_id: str
    submission_time: UTCDateTime
    answers: List[AnswerItem]
    remarks: List[Remark]
    recommended_for_next_step: Optional[bool] = None
    created_at: UTCDateTime


class SubmissionDetailResponse(SubmissionResponse):
    """Submission joined with candidate, problem (with stacks), position and department."""
    candidate: SubmissionCandidate
    problem: ProblemResponse
