"""
Coding problem management.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import ListParams, authorize, list_params
from app.core.errors import NotFoundError
from app.crud import problem as problem_crud
from app.schemas.common import MessageResponse, Page, page_of
from app.schemas.problem import ProblemRequest, ProblemResponse

router = APIRouter(
    prefix="/admin/problems",
    tags=["Problems"],
    dependencies=[Depends(authorize("problems"))],
)
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, problem_id: str):
    problem = problem_crud.get_by_id(db, problem_id)
    if not problem:
        raise NotFoundError("Problem not found")
    return problem


@router.get("", response_model=Page[ProblemResponse])
def list_problems(params: ListParams = Depends(list_params), db: Session = Depends(get_db)):
    result = problem_crud.get_multi(db, params.page, params.limit, params.search)
    return page_of(ProblemResponse, result)


@router.get("/{problem_id}", response_model=ProblemResponse)
def get_problem(problem_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, problem_id)


@router.post("", response_model=ProblemResponse, status_code=status.HTTP_201_CREATED)
def create_problem(request: ProblemRequest, db: Session = Depends(get_db)):
    """
    Create a problem tagged with one or more stacks.

    The position must belong to the chosen department and every stack id must exist.
    """
    problem = problem_crud.create(db, request)
    logger.info(f"Created problem {problem.id} ({problem.title}) with {len(request.stack_ids)} stack(s)")
    return problem


@router.patch("/{problem_id}", response_model=ProblemResponse)
def update_problem(problem_id: str, request: ProblemRequest, db: Session = Depends(get_db)):
    """Replace a problem's fields and its stack links."""
    problem = problem_crud.update(db, _get_or_404(db, problem_id), request)
    logger.info(f"Updated problem {problem.id}")
    return problem


@router.delete("/{problem_id}", response_model=MessageResponse)
def delete_problem(problem_id: str, db: Session = Depends(get_db)):
    problem_crud.delete(db, _get_or_404(db, problem_id))
    logger.info(f"Deleted problem {problem_id}")
    return {"message": "Problem deleted successfully"}
