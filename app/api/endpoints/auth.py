"""
Session endpoints shared by admins and candidates.

- POST /auth/session: Check credentials, issue a session token (also set as cookie)
- GET /auth/session: Current session identity
- DELETE /auth/session: Log out (clear the cookie)
"""

import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import get_current_session
from app.core.errors import UnauthorizedError
from app.core.security import create_access_token
from app.crud import user as user_crud
from app.schemas.common import MessageResponse
from app.schemas.user import LoginRequest, SessionUser, TokenResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@router.post("/session", response_model=TokenResponse)
def login(
    request: LoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Authenticate with email and password.

    The token is returned in the body (for API clients using the Bearer header)
    and set as an HttpOnly cookie (for browsers).
    """
    user = user_crud.authenticate(db, request.email, request.password)
    if not user:
        logger.warning(f"Failed login attempt for {request.email}")
        raise UnauthorizedError(INVALID_CREDENTIALS)

    session_user = SessionUser(
        id=user.id,
        email=user.email,
        name=user.name,
        user_type=user.user_type,
        admin_role=user.admin_role,
    )
    access_token = create_access_token(session_user.to_claims())

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )

    logger.info(f"User logged in: {user.email} ({user.user_type.value})")
    return TokenResponse(access_token=access_token, user=session_user)


@router.get("/session", response_model=SessionUser)
def read_session(session: SessionUser = Depends(get_current_session)):
    """Return the identity carried by the caller's session."""
    return session


@router.delete("/session", response_model=MessageResponse, status_code=status.HTTP_200_OK)
def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Logged out"}
