"""
CRUD operations for Stack model.
"""

from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError
from app.crud.pagination import PageResult, paginate, search_filter
from app.models.problem import ProblemStack
from app.models.stack import Stack
from app.schemas.stack import StackRequest

DUPLICATE_NAME = "Stack with this name already exists"


def get_by_id(db: Session, stack_id: str) -> Optional[Stack]:
    return db.query(Stack).filter(Stack.id == stack_id).first()


def get_by_name(db: Session, name: str) -> Optional[Stack]:
    return db.query(Stack).filter(Stack.name == name).first()


def get_many_by_ids(db: Session, stack_ids: List[str]) -> List[Stack]:
    if not stack_ids:
        return []
    return db.query(Stack).filter(Stack.id.in_(stack_ids)).all()


def get_multi(db: Session, page: int, limit: int, search: Optional[str] = None) -> PageResult:
    query = db.query(Stack)
    condition = search_filter([Stack.name, Stack.description], search)
    if condition is not None:
        query = query.filter(condition)
    return paginate(query.order_by(Stack.created_at.desc()), page, limit)


def create(db: Session, data: StackRequest) -> Stack:
    if get_by_name(db, data.name):
        raise ConflictError(DUPLICATE_NAME)

    stack = Stack(name=data.name, description=data.description)
    db.add(stack)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_NAME)
    db.refresh(stack)
    return stack


def update(db: Session, stack: Stack, data: StackRequest) -> Stack:
    if data.name != stack.name and get_by_name(db, data.name):
        raise ConflictError(DUPLICATE_NAME)

    stack.name = data.name
    stack.description = data.description
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_NAME)
    db.refresh(stack)
    return stack


def delete(db: Session, stack: Stack) -> None:
    """Hard-delete a stack that no problem is tagged with."""
    if db.query(ProblemStack.problem_id).filter(ProblemStack.stack_id == stack.id).first():
        raise ConflictError("Stack is still used by one or more problems")

    db.delete(stack)
    db.commit()
