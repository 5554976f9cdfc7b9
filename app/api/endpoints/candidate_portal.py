"""
Candidate-facing test endpoints.

- GET /candidate/me: Own record with problem, timer and availability
- POST /candidate/start-test: SCHEDULED -> STARTED
- POST /candidate/submit: STARTED -> SUBMITTED
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.database import get_db
from app.core.deps import authorize, get_current_session
from app.models.candidate import Candidate
from app.schemas.candidate import (
    AvailabilityResponse,
    CandidatePortalResponse,
    SubmitTestRequest,
    SubmitTestResponse,
    TimerStatusResponse,
)
from app.schemas.common import Ref
from app.schemas.problem import ProblemResponse
from app.schemas.submission import SubmissionResponse
from app.schemas.user import SessionUser
from app.services import lifecycle

router = APIRouter(
    prefix="/candidate",
    tags=["Candidate Portal"],
    dependencies=[Depends(authorize("candidate-portal"))],
)
logger = logging.getLogger(__name__)


def _portal_view(candidate: Candidate) -> CandidatePortalResponse:
    now = utcnow()
    timer = lifecycle.timer_status(
        now, candidate.start_time, candidate.end_time, candidate.submission_time
    )
    available = lifecycle.availability(now, candidate.scheduled_time)
    return CandidatePortalResponse(
        id=candidate.id,
        name=candidate.name,
        email=candidate.email,
        scheduled_time=candidate.scheduled_time,
        end_time=candidate.end_time,
        start_time=candidate.start_time,
        submission_time=candidate.submission_time,
        state=candidate.state,
        department=Ref.model_validate(candidate.department) if candidate.department else None,
        position=Ref.model_validate(candidate.position) if candidate.position else None,
        problem=ProblemResponse.model_validate(candidate.problem),
        timer=TimerStatusResponse(
            mode=timer.mode.value,
            remaining_seconds=timer.remaining_seconds,
            elapsed_seconds=timer.elapsed_seconds,
            overtime_seconds=timer.overtime_seconds,
            display=timer.display,
        ),
        availability=AvailabilityResponse(
            available=available.available,
            seconds_until_available=available.seconds_until_available,
            label=available.label,
        ),
    )


@router.get("/me", response_model=CandidatePortalResponse)
def read_own_record(db: Session = Depends(get_db), session: SessionUser = Depends(get_current_session)):
    """The caller's candidate record. The generated password is not included."""
    return _portal_view(lifecycle.get_own_candidate(db, session))


@router.post("/start-test", response_model=CandidatePortalResponse)
def start_test(db: Session = Depends(get_db), session: SessionUser = Depends(get_current_session)):
    """
    Start the test.

    Rejected with code ALREADY_STARTED on a second call, and NOT_YET_AVAILABLE
    before the scheduled time.
    """
    candidate = lifecycle.start_test(db, session)
    return _portal_view(candidate)


@router.post("/submit", response_model=SubmitTestResponse, status_code=status.HTTP_201_CREATED)
def submit_test(
    request: SubmitTestRequest,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(get_current_session),
):
    """
    Submit answers, one `{stackId, code}` entry per stack.

    Accepted after the end time too; overtime is reported, not enforced.
    """
    submission = lifecycle.submit_test(db, session, request.answers)
    return SubmitTestResponse(
        message="Test submitted successfully",
        submission=SubmissionResponse.model_validate(submission),
    )
