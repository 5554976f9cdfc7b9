"""
Technology stack management (super-admin writes, admin reads).
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import ListParams, authorize, list_params
from app.core.errors import NotFoundError
from app.crud import stack as stack_crud
from app.schemas.common import MessageResponse, Page, page_of
from app.schemas.stack import StackRequest, StackResponse

router = APIRouter(
    prefix="/admin/stacks",
    tags=["Stacks"],
    dependencies=[Depends(authorize("stacks"))],
)
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, stack_id: str):
    stack = stack_crud.get_by_id(db, stack_id)
    if not stack:
        raise NotFoundError("Stack not found")
    return stack


@router.get("", response_model=Page[StackResponse])
def list_stacks(params: ListParams = Depends(list_params), db: Session = Depends(get_db)):
    result = stack_crud.get_multi(db, params.page, params.limit, params.search)
    return page_of(StackResponse, result)


@router.post("", response_model=StackResponse, status_code=status.HTTP_201_CREATED)
def create_stack(request: StackRequest, db: Session = Depends(get_db)):
    stack = stack_crud.create(db, request)
    logger.info(f"Created stack {stack.id} ({stack.name})")
    return stack


@router.patch("/{stack_id}", response_model=StackResponse)
def update_stack(stack_id: str, request: StackRequest, db: Session = Depends(get_db)):
    stack = stack_crud.update(db, _get_or_404(db, stack_id), request)
    logger.info(f"Updated stack {stack.id}")
    return stack


@router.delete("/{stack_id}", response_model=MessageResponse)
def delete_stack(stack_id: str, db: Session = Depends(get_db)):
    stack_crud.delete(db, _get_or_404(db, stack_id))
    logger.info(f"Deleted stack {stack_id}")
    return {"message": "Stack deleted successfully"}
