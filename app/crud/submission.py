"""
CRUD operations for Submission model and its remark log.

Remarks are append-only: existing entries are never edited or reordered.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload

from app.core.clock import as_aware_utc, utcnow
from app.core.errors import ValidationError
from app.crud.pagination import PageResult, paginate, search_filter
from app.models.candidate import Candidate
from app.models.problem import Problem, ProblemStack
from app.models.submission import Submission
from app.schemas.submission import AnswerItem, SubmissionUpdateRequest
from app.schemas.user import SessionUser

logger = logging.getLogger(__name__)


def _with_relations(query):
    return query.options(
        joinedload(Submission.candidate).joinedload(Candidate.department),
        joinedload(Submission.candidate).joinedload(Candidate.position),
        joinedload(Submission.problem).selectinload(Problem.stacks).joinedload(ProblemStack.stack),
        joinedload(Submission.problem).joinedload(Problem.department),
        joinedload(Submission.problem).joinedload(Problem.position),
    )


def get_by_id(db: Session, submission_id: str) -> Optional[Submission]:
    return _with_relations(db.query(Submission)).filter(Submission.id == submission_id).first()


def get_by_candidate(db: Session, candidate_id: str) -> Optional[Submission]:
    return db.query(Submission).filter(Submission.candidate_id == candidate_id).first()


def get_multi(db: Session, page: int, limit: int, search: Optional[str] = None) -> PageResult:
    """List submissions newest first, searching candidate name/email."""
    query = _with_relations(db.query(Submission)).join(Submission.candidate)
    condition = search_filter([Candidate.name, Candidate.email], search)
    if condition is not None:
        query = query.filter(condition)
    return paginate(query.order_by(Submission.submission_time.desc()), page, limit)


def add(db: Session, candidate: Candidate, answers: List[AnswerItem], submitted_at: datetime) -> Submission:
    """Stage a new submission for `candidate`. The caller owns the transaction."""
    submission = Submission(
        candidate_id=candidate.id,
        problem_id=candidate.problem_id,
        position_id=candidate.position_id,
        submission_time=submitted_at,
        answers=[answer.model_dump(by_alias=True) for answer in answers],
        remarks=[],
    )
    db.add(submission)
    db.flush()
    return submission


def build_remark(text: str, author: SessionUser, now: Optional[datetime] = None) -> dict:
    created_at = as_aware_utc(now or utcnow())
    return {
        "id": f"remark_{uuid.uuid4().hex}",
        "text": text,
        "adminName": author.name or author.email or "Admin",
        "adminEmail": author.email or "",
        "createdAt": created_at.isoformat(),
    }


def add_remark(db: Session, submission: Submission, text: str, author: SessionUser,
               now: Optional[datetime] = None) -> Submission:
    """
    Append one remark to the submission's log.

    Raises:
        ValidationError: If the remark text is empty
    """
    if not text or not text.strip():
        raise ValidationError("Remark text is required")

    # Assign a new list so the JSON column change is detected
    submission.remarks = list(submission.remarks or []) + [build_remark(text.strip(), author, now)]
    db.commit()
    logger.info(f"Remark added to submission {submission.id} by {author.email}")
    return get_by_id(db, submission.id)


def update(db: Session, submission: Submission, data: SubmissionUpdateRequest, author: SessionUser) -> Submission:
    """Apply a remark append and/or a recommendation change from a PATCH body."""
    if data.remark is None and data.recommended_for_next_step is None:
        raise ValidationError("Provide a remark or a recommendation")

    if data.recommended_for_next_step is not None:
        submission.recommended_for_next_step = data.recommended_for_next_step
        if data.remark is None:
            db.commit()
            return get_by_id(db, submission.id)

    return add_remark(db, submission, data.remark.text, author)


def delete(db: Session, submission: Submission) -> None:
    db.delete(submission)
    db.commit()
