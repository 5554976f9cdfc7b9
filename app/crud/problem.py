"""
CRUD operations for Problem model and its stack links.
"""

from typing import Optional
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.database import atomic
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.crud import department as department_crud
from app.crud import position as position_crud
from app.crud import stack as stack_crud
from app.crud.pagination import PageResult, paginate, search_filter
from app.models.candidate import Candidate
from app.models.problem import Problem, ProblemStack
from app.models.submission import Submission
from app.schemas.problem import ProblemRequest


def _with_relations(query):
    return query.options(
        joinedload(Problem.department),
        joinedload(Problem.position),
        selectinload(Problem.stacks).joinedload(ProblemStack.stack),
    )


def get_by_id(db: Session, problem_id: str) -> Optional[Problem]:
    return _with_relations(db.query(Problem)).filter(Problem.id == problem_id).first()


def get_multi(db: Session, page: int, limit: int, search: Optional[str] = None) -> PageResult:
    query = _with_relations(db.query(Problem))
    condition = search_filter([Problem.title, Problem.description], search)
    if condition is not None:
        query = query.filter(condition)
    return paginate(query.order_by(Problem.created_at.desc()), page, limit)


def _validate_references(db: Session, data: ProblemRequest) -> None:
    """
    Raises:
        NotFoundError: Department, position or any stack does not exist
        ValidationError: Position belongs to a different department
    """
    if not department_crud.get_by_id(db, data.department_id):
        raise NotFoundError("Department not found")

    position = position_crud.get_by_id(db, data.position_id)
    if not position:
        raise NotFoundError("Position not found")
    if position.department_id != data.department_id:
        raise ValidationError("Position does not belong to the selected department")

    stacks = stack_crud.get_many_by_ids(db, data.stack_ids)
    if len(stacks) != len(data.stack_ids):
        raise NotFoundError("One or more stacks not found")


def create(db: Session, data: ProblemRequest) -> Problem:
    _validate_references(db, data)

    with atomic(db):
        problem = Problem(
            title=data.title,
            description=data.description,
            difficulty=data.difficulty,
            department_id=data.department_id,
            position_id=data.position_id,
        )
        problem.stacks = [ProblemStack(stack_id=stack_id) for stack_id in data.stack_ids]
        db.add(problem)

    return get_by_id(db, problem.id)


def update(db: Session, problem: Problem, data: ProblemRequest) -> Problem:
    """Update fields and replace the stack links in one transaction."""
    _validate_references(db, data)

    with atomic(db):
        problem.title = data.title
        problem.description = data.description
        problem.difficulty = data.difficulty
        problem.department_id = data.department_id
        problem.position_id = data.position_id

        # Clear old links first so re-adding the same stack does not collide on the PK
        problem.stacks = []
        db.flush()
        problem.stacks = [ProblemStack(stack_id=stack_id) for stack_id in data.stack_ids]

    return get_by_id(db, problem.id)


def delete(db: Session, problem: Problem) -> None:
    in_use = (
        db.query(Candidate.id).filter(Candidate.problem_id == problem.id).first()
        or db.query(Submission.id).filter(Submission.problem_id == problem.id).first()
    )
    if in_use:
        raise ConflictError("Problem is still assigned to candidates or submissions")

    db.delete(problem)
    db.commit()
