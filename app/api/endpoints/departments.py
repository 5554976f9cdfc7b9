"""
Department management.

Any admin may list departments; creating, renaming and deleting them is
reserved for super-admins.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import ListParams, authorize, list_params
from app.core.errors import NotFoundError
from app.crud import department as department_crud
from app.schemas.common import MessageResponse, Page, page_of
from app.schemas.department import DepartmentRequest, DepartmentResponse

router = APIRouter(
    prefix="/admin/departments",
    tags=["Departments"],
    dependencies=[Depends(authorize("departments"))],
)
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, department_id: str):
    department = department_crud.get_by_id(db, department_id)
    if not department:
        raise NotFoundError("Department not found")
    return department


@router.get("", response_model=Page[DepartmentResponse])
def list_departments(params: ListParams = Depends(list_params), db: Session = Depends(get_db)):
    result = department_crud.get_multi(db, params.page, params.limit, params.search)
    return page_of(DepartmentResponse, result)


@router.post("", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
def create_department(request: DepartmentRequest, db: Session = Depends(get_db)):
    department = department_crud.create(db, request)
    logger.info(f"Created department {department.id} ({department.name})")
    return department


@router.patch("/{department_id}", response_model=DepartmentResponse)
def update_department(department_id: str, request: DepartmentRequest, db: Session = Depends(get_db)):
    department = _get_or_404(db, department_id)
    department = department_crud.update(db, department, request)
    logger.info(f"Updated department {department.id}")
    return department


@router.delete("/{department_id}", response_model=MessageResponse)
def delete_department(department_id: str, db: Session = Depends(get_db)):
    """
    Delete a department.

    Fails with a conflict while positions, problems or candidates still
    reference it.
    """
    department = _get_or_404(db, department_id)
    department_crud.delete(db, department)
    logger.info(f"Deleted department {department_id}")
    return {"message": "Department deleted successfully"}
