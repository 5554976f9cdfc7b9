"""
Candidate test lifecycle.

    SCHEDULED --start--> STARTED --submit--> SUBMITTED

Both transitions are single conditional UPDATE statements, so two concurrent
requests cannot both succeed: the second one matches zero rows and is rejected.
When an UPDATE matches nothing, the row is re-read to report why.

The timer helpers are pure functions of the clock and the candidate's
timestamps. Overtime is only reported, never enforced: a candidate may submit
after end_time.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.database import atomic
from app.core.errors import InvalidStateTransitionError, NotFoundError
from app.crud import candidate as candidate_crud
from app.crud import submission as submission_crud
from app.models.candidate import Candidate
from app.models.submission import Submission
from app.schemas.submission import AnswerItem
from app.schemas.user import SessionUser

logger = logging.getLogger(__name__)

ALREADY_STARTED = "ALREADY_STARTED"
NOT_YET_AVAILABLE = "NOT_YET_AVAILABLE"
NOT_STARTED = "NOT_STARTED"
ALREADY_SUBMITTED = "ALREADY_SUBMITTED"


class TimerMode(str, enum.Enum):
    NOT_STARTED = "not_started"
    COUNTDOWN = "countdown"
    OVERTIME = "overtime"
    FINISHED = "finished"


@dataclass(frozen=True)
class TimerStatus:
    mode: TimerMode
    remaining_seconds: int
    elapsed_seconds: int
    overtime_seconds: int
    display: str


@dataclass(frozen=True)
class Availability:
    available: bool
    seconds_until_available: int
    label: str


def _seconds(delta) -> int:
    return max(0, int(delta.total_seconds()))


def format_hms(seconds: int) -> str:
    """Format a non-negative duration as HH:MM:SS (hours may exceed 24)."""
    hours, rest = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def timer_status(now: datetime, start_time: Optional[datetime], end_time: datetime,
                 submission_time: Optional[datetime] = None) -> TimerStatus:
    """
    Compute what the candidate's timer shows at `now`.

    - not started: countdown of the whole window, nothing elapsed
    - running and now <= end_time: countdown to end_time
    - running and now > end_time: overtime, counting up past end_time
    - submitted: frozen at the submission instant, display is total elapsed time
    """
    if start_time is None:
        remaining = _seconds(end_time - now)
        return TimerStatus(TimerMode.NOT_STARTED, remaining, 0, 0, format_hms(remaining))

    if submission_time is not None:
        elapsed = _seconds(submission_time - start_time)
        return TimerStatus(
            TimerMode.FINISHED,
            _seconds(end_time - submission_time),
            elapsed,
            _seconds(submission_time - end_time),
            format_hms(elapsed),
        )

    elapsed = _seconds(now - start_time)
    if now > end_time:
        overtime = _seconds(now - end_time)
        return TimerStatus(TimerMode.OVERTIME, 0, elapsed, overtime, format_hms(overtime))

    remaining = _seconds(end_time - now)
    return TimerStatus(TimerMode.COUNTDOWN, remaining, elapsed, 0, format_hms(remaining))


def availability(now: datetime, scheduled_time: datetime) -> Availability:
    """How long until the candidate may start, as seconds and a '1d 2h 3m' label."""
    wait = _seconds(scheduled_time - now)
    if wait == 0:
        return Availability(True, 0, "Available now")

    days, rest = divmod(wait, 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60
    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    return Availability(False, wait, " ".join(parts) or "Less than a minute")


def get_own_candidate(db: Session, session: SessionUser) -> Candidate:
    """The Candidate row belonging to the logged-in candidate (matched by email)."""
    candidate = candidate_crud.get_by_email(db, session.email)
    if not candidate:
        raise NotFoundError("Candidate not found")
    return candidate


def _start_rejection(db: Session, candidate_id: str) -> InvalidStateTransitionError:
    start_time = db.query(Candidate.start_time).filter(Candidate.id == candidate_id).scalar()
    if start_time is not None:
        return InvalidStateTransitionError("Test already started", ALREADY_STARTED)
    return InvalidStateTransitionError("Test not yet available", NOT_YET_AVAILABLE)


def _submit_rejection(db: Session, candidate_id: str) -> InvalidStateTransitionError:
    start_time, submission_time = (
        db.query(Candidate.start_time, Candidate.submission_time)
        .filter(Candidate.id == candidate_id)
        .one()
    )
    if start_time is None:
        return InvalidStateTransitionError("Test not started", NOT_STARTED)
    return InvalidStateTransitionError("Test already submitted", ALREADY_SUBMITTED)


def start_test(db: Session, session: SessionUser, now: Optional[datetime] = None) -> Candidate:
    """
    SCHEDULED -> STARTED.

    Sets start_time only if it is still NULL and the scheduled time has come,
    as one atomic compare-and-set.

    Raises:
        NotFoundError: No candidate record for this login
        InvalidStateTransitionError: ALREADY_STARTED or NOT_YET_AVAILABLE
    """
    candidate = get_own_candidate(db, session)
    now = now or utcnow()

    with atomic(db):
        result = db.execute(
            update(Candidate)
            .where(
                Candidate.id == candidate.id,
                Candidate.start_time.is_(None),
                Candidate.scheduled_time <= now,
            )
            .values(start_time=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise _start_rejection(db, candidate.id)

    logger.info(f"Candidate {candidate.id} started test at {now}")
    return candidate_crud.get_by_id(db, candidate.id)


def submit_test(db: Session, session: SessionUser, answers: List[AnswerItem],
                now: Optional[datetime] = None) -> Submission:
    """
    STARTED -> SUBMITTED.

    Sets submission_time and inserts the Submission row in one transaction.
    Nothing is written when the transition is rejected.

    Raises:
        NotFoundError: No candidate record for this login
        InvalidStateTransitionError: NOT_STARTED or ALREADY_SUBMITTED
    """
    candidate = get_own_candidate(db, session)
    now = now or utcnow()

    with atomic(db):
        result = db.execute(
            update(Candidate)
            .where(
                Candidate.id == candidate.id,
                Candidate.start_time.is_not(None),
                Candidate.submission_time.is_(None),
            )
            .values(submission_time=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise _submit_rejection(db, candidate.id)
        submission = submission_crud.add(db, candidate, answers, now)

    overtime = now > candidate.end_time
    logger.info(
        f"Candidate {candidate.id} submitted {len(answers)} answer(s) as submission {submission.id}"
        + (" (overtime)" if overtime else "")
    )
    return submission
