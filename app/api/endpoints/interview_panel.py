"""
Interview panel: the admin accounts.

Every admin can see the panel; only super-admins add members, change their
role or remove them. Nobody can change the role of, or delete, their own account.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import ListParams, authorize, forbid_self_modification, get_current_session, list_params
from app.core.errors import NotFoundError
from app.crud import user as user_crud
from app.schemas.common import MessageResponse, Page, page_of
from app.schemas.user import (
    AdminUserCreateRequest,
    AdminUserResponse,
    AdminUserUpdateRequest,
    SessionUser,
)

router = APIRouter(
    prefix="/admin/interview-panel",
    tags=["Interview Panel"],
    # Self-modification is checked first so it is reported the same way for every admin tier
    dependencies=[
        Depends(forbid_self_modification("user_id")),
        Depends(authorize("interview-panel")),
    ],
)
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, user_id: str):
    user = user_crud.get_admin_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


@router.get("", response_model=Page[AdminUserResponse])
def list_panel(params: ListParams = Depends(list_params), db: Session = Depends(get_db)):
    result = user_crud.get_admins(db, params.page, params.limit, params.search)
    return page_of(AdminUserResponse, result)


@router.post("", response_model=AdminUserResponse, status_code=status.HTTP_201_CREATED)
def add_panel_member(request: AdminUserCreateRequest, db: Session = Depends(get_db)):
    """Add an admin account. New members start with adminRole USER."""
    user = user_crud.create_admin(db, request)
    logger.info(f"Added interview panel member {user.id} ({user.email})")
    return user


@router.patch("/{user_id}", response_model=AdminUserResponse)
def change_panel_member_role(
    user_id: str,
    request: AdminUserUpdateRequest,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(get_current_session),
):
    user = user_crud.update_admin_role(db, _get_or_404(db, user_id), request.admin_role)
    logger.info(f"Admin {session.email} set role of {user.email} to {user.admin_role.value}")
    return user


@router.delete("/{user_id}", response_model=MessageResponse)
def remove_panel_member(
    user_id: str,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(get_current_session),
):
    user = _get_or_404(db, user_id)
    email = user.email
    user_crud.delete_admin(db, user)
    logger.info(f"Admin {session.email} removed interview panel member {email}")
    return {"message": "User deleted successfully"}
