"""
CRUD operations for Candidate model.

Every Candidate has a paired login User (user_type CANDIDATE, same email).
Create, password regeneration and delete touch both rows and run as a single
transaction: either both rows change or neither does.
"""

import logging
from datetime import timedelta
from typing import Optional, Tuple
from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.database import atomic
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.security import generate_password, get_password_hash
from app.crud import department as department_crud
from app.crud import position as position_crud
from app.crud import problem as problem_crud
from app.crud import user as user_crud
from app.crud.pagination import PageResult, paginate, search_filter
from app.models.candidate import Candidate
from app.models.problem import Problem, ProblemStack
from app.schemas.candidate import CandidateCreateRequest, CandidateUpdateRequest

logger = logging.getLogger(__name__)


def _with_relations(query):
    return query.options(
        joinedload(Candidate.department),
        joinedload(Candidate.position),
        joinedload(Candidate.problem).selectinload(Problem.stacks).joinedload(ProblemStack.stack),
    )


def get_by_id(db: Session, candidate_id: str) -> Optional[Candidate]:
    return _with_relations(db.query(Candidate)).filter(Candidate.id == candidate_id).first()


def get_by_email(db: Session, email: str) -> Optional[Candidate]:
    return _with_relations(db.query(Candidate)).filter(Candidate.email == email).first()


def get_multi(db: Session, page: int, limit: int, search: Optional[str] = None) -> PageResult:
    query = _with_relations(db.query(Candidate))
    condition = search_filter([Candidate.name, Candidate.email], search)
    if condition is not None:
        query = query.filter(condition)
    return paginate(query.order_by(Candidate.created_at.desc()), page, limit)


def _validate_assignment(db: Session, department_id: str, position_id: str, problem_id: str) -> None:
    """
    Raises:
        NotFoundError: A referenced department, position or problem does not exist
        ValidationError: The position belongs to another department
    """
    if not department_crud.get_by_id(db, department_id):
        raise NotFoundError("Department not found")
    position = position_crud.get_by_id(db, position_id)
    if not position:
        raise NotFoundError("Position not found")
    if position.department_id != department_id:
        raise ValidationError("Position does not belong to the selected department")
    if not problem_crud.get_by_id(db, problem_id):
        raise NotFoundError("Problem not found")


def _validate_window(scheduled_time, end_time) -> None:
    if end_time <= scheduled_time:
        raise ValidationError("End time must be after the scheduled time")


def new_credentials() -> Tuple[str, str]:
    """Generate a password and return (plaintext, bcrypt hash)."""
    plain_password = generate_password()
    return plain_password, get_password_hash(plain_password)


def create(db: Session, data: CandidateCreateRequest) -> Tuple[Candidate, str]:
    """
    Schedule a candidate and create their login.

    Returns:
        (candidate, generated plaintext password)

    Raises:
        ConflictError: Email already used by a candidate or any user
        NotFoundError / ValidationError: Bad department/position/problem assignment
    """
    if get_by_email(db, data.email):
        raise ConflictError("Email already exists")
    if user_crud.get_by_email(db, data.email):
        raise ConflictError("User with this email already exists")

    _validate_assignment(db, data.department_id, data.position_id, data.problem_id)

    end_time = data.end_time or data.scheduled_time + timedelta(hours=settings.DEFAULT_TEST_DURATION_HOURS)
    _validate_window(data.scheduled_time, end_time)

    plain_password, hashed_password = new_credentials()

    with atomic(db):
        user_crud.add_candidate_login(db, data.name, data.email, hashed_password)
        candidate = Candidate(
            name=data.name,
            email=data.email,
            password=plain_password,
            department_id=data.department_id,
            position_id=data.position_id,
            problem_id=data.problem_id,
            scheduled_time=data.scheduled_time,
            end_time=end_time,
        )
        db.add(candidate)

    logger.info(f"Scheduled candidate {candidate.id} ({candidate.email}) at {candidate.scheduled_time}")
    return get_by_id(db, candidate.id), plain_password


def update(db: Session, candidate: Candidate, data: CandidateUpdateRequest) -> Tuple[Candidate, Optional[str]]:
    """
    Partially update a candidate; optionally regenerate their password.

    Returns:
        (candidate, new plaintext password or None)
    """
    fields = data.model_dump(exclude_unset=True, exclude={"regenerate_password"})
    fields = {key: value for key, value in fields.items() if value is not None}

    department_id = fields.get("department_id", candidate.department_id)
    position_id = fields.get("position_id", candidate.position_id)
    problem_id = fields.get("problem_id", candidate.problem_id)
    if {"department_id", "position_id", "problem_id"} & fields.keys():
        _validate_assignment(db, department_id, position_id, problem_id)

    scheduled_time = fields.get("scheduled_time", candidate.scheduled_time)
    end_time = fields.get("end_time", candidate.end_time)
    if "scheduled_time" in fields and "end_time" not in fields:
        # Keep the test duration when only the start of the window moves
        end_time = scheduled_time + (candidate.end_time - candidate.scheduled_time)
        fields["end_time"] = end_time
    _validate_window(scheduled_time, end_time)
    if candidate.start_time is not None and scheduled_time > candidate.start_time:
        raise ValidationError("Scheduled time cannot be later than the test start")

    generated_password = None
    with atomic(db):
        for key, value in fields.items():
            setattr(candidate, key, value)
        if "name" in fields:
            user_crud.set_candidate_login_name(db, candidate.email, fields["name"])
        if data.regenerate_password:
            generated_password, hashed_password = new_credentials()
            candidate.password = generated_password
            user_crud.set_candidate_login_password(db, candidate.email, hashed_password)

    if generated_password:
        logger.info(f"Regenerated password for candidate {candidate.id}")
    return get_by_id(db, candidate.id), generated_password


def delete(db: Session, candidate: Candidate) -> None:
    """Delete the candidate, their submission and their login in one transaction."""
    candidate_id, email = candidate.id, candidate.email
    with atomic(db):
        db.delete(candidate)
        db.flush()
        user_crud.delete_candidate_login(db, email)
    logger.info(f"Deleted candidate {candidate_id} ({email}) and paired login")
