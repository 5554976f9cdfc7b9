"""
Profile settings for the logged-in admin.
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import authorize, get_current_session
from app.core.errors import NotFoundError
from app.crud import user as user_crud
from app.schemas.user import ProfileResponse, ProfileUpdateRequest, ProfileUpdateResponse, SessionUser

router = APIRouter(
    prefix="/admin/settings",
    tags=["Settings"],
    dependencies=[Depends(authorize("settings"))],
)
logger = logging.getLogger(__name__)


def _own_user(db: Session, session: SessionUser):
    user = user_crud.get_by_id(db, session.id)
    if not user:
        raise NotFoundError("User not found")
    return user


@router.get("", response_model=ProfileResponse)
def get_profile(db: Session = Depends(get_db), session: SessionUser = Depends(get_current_session)):
    return _own_user(db, session)


@router.patch("", response_model=ProfileUpdateResponse)
def update_profile(
    request: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(get_current_session),
):
    """
    Update name, image and/or password.

    Setting `newPassword` requires the correct `currentPassword`.
    """
    user = user_crud.update_profile(db, _own_user(db, session), request)
    message = "Password updated successfully" if request.new_password else "Profile updated successfully"
    logger.info(f"Admin {user.email} updated their profile")
    return ProfileUpdateResponse(user=ProfileResponse.model_validate(user), message=message)
