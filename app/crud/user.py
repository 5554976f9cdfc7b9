"""
CRUD operations for User model: authentication, admin accounts (interview
panel), profile settings and the login rows paired with candidates.
"""

import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.security import get_password_hash, verify_password
from app.crud.pagination import PageResult, paginate, search_filter
from app.models.user import AdminRole, User, UserType
from app.schemas.user import AdminUserCreateRequest, ProfileUpdateRequest

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "User with this email already exists"


def get_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """
    Check credentials.

    Returns the user on success; None when the email is unknown, the account
    has no password, or the password does not match.
    """
    user = get_by_email(db, email)
    if not user or not user.password:
        return None
    if not verify_password(password, user.password):
        return None
    return user


# --- Admin accounts -------------------------------------------------------

def get_admin_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id, User.user_type == UserType.ADMIN).first()


def get_admins(db: Session, page: int, limit: int, search: Optional[str] = None) -> PageResult:
    query = db.query(User).filter(User.user_type == UserType.ADMIN)
    condition = search_filter([User.name, User.email], search)
    if condition is not None:
        query = query.filter(condition)
    return paginate(query.order_by(User.created_at.desc()), page, limit)


def create_admin(db: Session, data: AdminUserCreateRequest, admin_role: AdminRole = AdminRole.USER) -> User:
    """New panel members start as plain admins (adminRole USER)."""
    if get_by_email(db, data.email):
        raise ConflictError(DUPLICATE_EMAIL)

    user = User(
        name=data.name,
        email=data.email,
        password=get_password_hash(data.password),
        user_type=UserType.ADMIN,
        admin_role=admin_role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_EMAIL)
    db.refresh(user)
    return user


def update_admin_role(db: Session, user: User, admin_role: AdminRole) -> User:
    user.admin_role = admin_role
    db.commit()
    db.refresh(user)
    return user


def delete_admin(db: Session, user: User) -> None:
    db.delete(user)
    db.commit()


def update_profile(db: Session, user: User, data: ProfileUpdateRequest) -> User:
    """
    Update the caller's own profile.

    A new password is only accepted together with the correct current password.

    Raises:
        ValidationError: Missing or wrong current password
    """
    if data.new_password:
        if not data.current_password:
            raise ValidationError("Current password is required to set a new password")
        if not user.password:
            raise ValidationError("No password set for this account")
        if not verify_password(data.current_password, user.password):
            raise ValidationError("Current password is incorrect")

    if data.name is not None:
        user.name = data.name
    if data.image is not None:
        user.image = data.image or None
    if data.new_password:
        user.password = get_password_hash(data.new_password)

    db.commit()
    db.refresh(user)
    return user


# --- Candidate logins -----------------------------------------------------
# These only stage changes; callers commit them inside app.core.database.atomic

def add_candidate_login(db: Session, name: str, email: str, hashed_password: str) -> User:
    user = User(
        name=name,
        email=email,
        password=hashed_password,
        user_type=UserType.CANDIDATE,
        admin_role=None,
    )
    db.add(user)
    db.flush()
    return user


def set_candidate_login_password(db: Session, email: str, hashed_password: str) -> int:
    updated = (
        db.query(User)
        .filter(User.email == email, User.user_type == UserType.CANDIDATE)
        .update({User.password: hashed_password}, synchronize_session=False)
    )
    if updated == 0:
        raise NotFoundError("Candidate login not found")
    return updated


def set_candidate_login_name(db: Session, email: str, name: str) -> None:
    (
        db.query(User)
        .filter(User.email == email, User.user_type == UserType.CANDIDATE)
        .update({User.name: name}, synchronize_session=False)
    )


def delete_candidate_login(db: Session, email: str) -> int:
    return (
        db.query(User)
        .filter(User.email == email, User.user_type == UserType.CANDIDATE)
        .delete(synchronize_session=False)
    )
