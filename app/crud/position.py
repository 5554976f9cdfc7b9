"""
CRUD operations for Position model.

Position names are unique per department, enforced both here (clean error) and
by the uq_positions_name_department constraint (race backstop).
"""

from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.errors import ConflictError, NotFoundError
from app.crud import department as department_crud
from app.crud.pagination import PageResult, paginate, search_filter
from app.models.candidate import Candidate
from app.models.position import Position
from app.models.problem import Problem
from app.models.submission import Submission
from app.schemas.position import PositionRequest

DUPLICATE_NAME = "Position with this name already exists in this department"


def get_by_id(db: Session, position_id: str) -> Optional[Position]:
    return (
        db.query(Position)
        .options(joinedload(Position.department))
        .filter(Position.id == position_id)
        .first()
    )


def get_by_name_in_department(db: Session, name: str, department_id: str) -> Optional[Position]:
    return (
        db.query(Position)
        .filter(Position.name == name, Position.department_id == department_id)
        .first()
    )


def get_multi(db: Session, page: int, limit: int, search: Optional[str] = None) -> PageResult:
    query = db.query(Position).options(joinedload(Position.department))
    condition = search_filter([Position.name, Position.description], search)
    if condition is not None:
        query = query.filter(condition)
    return paginate(query.order_by(Position.created_at.desc()), page, limit)


def _require_department(db: Session, department_id: str) -> None:
    if not department_crud.get_by_id(db, department_id):
        raise NotFoundError("Department not found")


def create(db: Session, data: PositionRequest) -> Position:
    """
    Create a position under an existing department.

    Raises:
        NotFoundError: If the department does not exist
        ConflictError: If the department already has a position with this name
    """
    _require_department(db, data.department_id)
    if get_by_name_in_department(db, data.name, data.department_id):
        raise ConflictError(DUPLICATE_NAME)

    position = Position(name=data.name, description=data.description, department_id=data.department_id)
    db.add(position)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_NAME)
    db.refresh(position)
    return position


def update(db: Session, position: Position, data: PositionRequest) -> Position:
    _require_department(db, data.department_id)
    if data.name != position.name or data.department_id != position.department_id:
        duplicate = get_by_name_in_department(db, data.name, data.department_id)
        if duplicate and duplicate.id != position.id:
            raise ConflictError(DUPLICATE_NAME)

    position.name = data.name
    position.description = data.description
    position.department_id = data.department_id
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_NAME)
    db.refresh(position)
    return position


def delete(db: Session, position: Position) -> None:
    in_use = (
        db.query(Problem.id).filter(Problem.position_id == position.id).first()
        or db.query(Candidate.id).filter(Candidate.position_id == position.id).first()
        or db.query(Submission.id).filter(Submission.position_id == position.id).first()
    )
    if in_use:
        raise ConflictError("Position is still referenced by problems, candidates or submissions")

    db.delete(position)
    db.commit()
