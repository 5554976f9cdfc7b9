"""
CRUD operations for Department model.
"""

import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError
from app.crud.pagination import PageResult, paginate, search_filter
from app.models.candidate import Candidate
from app.models.department import Department
from app.models.position import Position
from app.models.problem import Problem
from app.schemas.department import DepartmentRequest

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "Department with this name already exists"


def get_by_id(db: Session, department_id: str) -> Optional[Department]:
    return db.query(Department).filter(Department.id == department_id).first()


def get_by_name(db: Session, name: str) -> Optional[Department]:
    return db.query(Department).filter(Department.name == name).first()


def get_multi(db: Session, page: int, limit: int, search: Optional[str] = None) -> PageResult:
    """List departments newest first, optionally filtered by name/description."""
    query = db.query(Department)
    condition = search_filter([Department.name, Department.description], search)
    if condition is not None:
        query = query.filter(condition)
    return paginate(query.order_by(Department.created_at.desc()), page, limit)


def create(db: Session, data: DepartmentRequest) -> Department:
    """
    Create a department.

    Raises:
        ConflictError: If the name is already taken
    """
    if get_by_name(db, data.name):
        raise ConflictError(DUPLICATE_NAME)

    department = Department(name=data.name, description=data.description)
    db.add(department)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_NAME)
    db.refresh(department)
    return department


def update(db: Session, department: Department, data: DepartmentRequest) -> Department:
    if data.name != department.name and get_by_name(db, data.name):
        raise ConflictError(DUPLICATE_NAME)

    department.name = data.name
    department.description = data.description
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_NAME)
    db.refresh(department)
    return department


def delete(db: Session, department: Department) -> None:
    """
    Hard-delete a department.

    Raises:
        ConflictError: While positions, problems or candidates still reference it
    """
    in_use = (
        db.query(Position.id).filter(Position.department_id == department.id).first()
        or db.query(Problem.id).filter(Problem.department_id == department.id).first()
        or db.query(Candidate.id).filter(Candidate.department_id == department.id).first()
    )
    if in_use:
        raise ConflictError("Department is still referenced by positions, problems or candidates")

    db.delete(department)
    db.commit()
