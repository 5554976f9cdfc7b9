"""
Page route guard.

Runs before every non-API request and redirects browsers to the right login
page or dashboard. API routes are left to the authorization dependencies,
which answer with 401/403 JSON instead of redirects.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from app.core.config import settings
from app.core.deps import session_from_token
from app.models.user import UserType
from app.schemas.user import SessionUser

logger = logging.getLogger(__name__)

PUBLIC_PATHS = frozenset({"/login", "/admin/login"})
ADMIN_LOGIN_PATH = "/admin/login"
CANDIDATE_LOGIN_PATH = "/login"
ADMIN_HOME_PATH = "/admin"


def _login_redirect(login_path: str, callback: str) -> str:
    return f"{login_path}?{urlencode({'callbackUrl': callback})}"


def resolve_redirect(path: str, session: Optional[SessionUser]) -> Optional[str]:
    """
    Decide where (if anywhere) a page request must be redirected.

    Returns the redirect target, or None to let the request through.
    """
    if path in PUBLIC_PATHS or path.startswith(f"{settings.API_V1_STR}/"):
        return None

    if path == ADMIN_HOME_PATH or path.startswith(f"{ADMIN_HOME_PATH}/"):
        if session is None or session.user_type != UserType.ADMIN:
            return _login_redirect(ADMIN_LOGIN_PATH, path)
        return None

    if path == "/" or path.startswith("/submit"):
        if session is None:
            return _login_redirect(CANDIDATE_LOGIN_PATH, path)
        if session.user_type == UserType.ADMIN:
            return ADMIN_HOME_PATH

    return None


class RouteGuardMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        session = session_from_token(request.cookies.get(settings.SESSION_COOKIE_NAME))
        target = resolve_redirect(request.url.path, session)
        if target is not None:
            logger.debug(f"Route guard redirecting {request.url.path} -> {target}")
            return RedirectResponse(target, status_code=307)
        return await call_next(request)
