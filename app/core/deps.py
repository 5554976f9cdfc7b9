"""
FastAPI dependencies for authentication and authorization.

The session is decoded from the signed token (Authorization: Bearer header or
the session cookie) without a database lookup. Authorization decisions are
delegated to app.core.authorization.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import ValidationError as PydanticValidationError

from app.core.authorization import Action, Capability, action_for_method, decide, required_capability
from app.core.config import settings
from app.core.errors import ForbiddenError, SelfModificationError, UnauthorizedError
from app.core.security import decode_token
from app.models.user import UserType
from app.schemas.user import SessionUser

logger = logging.getLogger(__name__)

# Bearer header is optional because the browser flow uses the session cookie
bearer_scheme = HTTPBearer(auto_error=False)


def session_from_token(token: Optional[str]) -> Optional[SessionUser]:
    """Decode a session token. Returns None for missing, expired or malformed tokens."""
    if not token:
        return None
    try:
        payload = decode_token(token)
        return SessionUser.from_claims(payload)
    except (JWTError, KeyError, PydanticValidationError) as e:
        logger.debug(f"Rejected session token: {e}")
        return None


def token_from_request(request: Request, credentials: Optional[HTTPAuthorizationCredentials] = None) -> Optional[str]:
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_optional_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[SessionUser]:
    return session_from_token(token_from_request(request, credentials))


def _enforce(session: Optional[SessionUser], capability: Capability) -> SessionUser:
    decision = decide(session, capability)
    if decision.allowed:
        return session
    if decision.status_code == 401:
        raise UnauthorizedError(decision.reason)
    raise ForbiddenError(decision.reason)


def require(capability: Capability) -> Callable:
    """Dependency factory: the caller must hold `capability`."""

    async def dependency(session: Optional[SessionUser] = Depends(get_optional_session)) -> SessionUser:
        return _enforce(session, capability)

    return dependency


def authorize(resource: str) -> Callable:
    """
    Router-level dependency driven by RESOURCE_POLICY.

    Usage:
        router = APIRouter(prefix="/admin/stacks", dependencies=[Depends(authorize("stacks"))])
    """
    # Fail at import time if the resource is missing from the policy table
    required_capability(resource, action_for_method("GET"))

    async def dependency(
        request: Request,
        session: Optional[SessionUser] = Depends(get_optional_session),
    ) -> SessionUser:
        capability = required_capability(resource, action_for_method(request.method))
        return _enforce(session, capability)

    dependency.resource = resource
    return dependency


get_current_session = require(Capability.IS_AUTHENTICATED)
get_admin_session = require(Capability.IS_ADMIN_USER)
get_candidate_session = require(Capability.IS_CANDIDATE_USER)


SELF_MODIFICATION_MESSAGES = {
    "PATCH": "You cannot change your own role",
    "DELETE": "You cannot delete your own account",
}


def forbid_self_modification(path_param: str) -> Callable:
    """
    Router-level dependency: admins may never change the role of, or delete,
    their own account.

    Must be listed before `authorize(...)` so the rejection is the same for
    every admin tier: a plain admin targeting their own row gets
    SelfModificationError (400), not Forbidden.
    """

    async def dependency(
        request: Request,
        session: Optional[SessionUser] = Depends(get_optional_session),
    ) -> None:
        target_id = request.path_params.get(path_param)
        if session is None or target_id is None or session.user_type != UserType.ADMIN:
            return
        if action_for_method(request.method) == Action.WRITE and target_id == session.id:
            logger.warning(f"Admin {session.email} attempted to modify their own account")
            raise SelfModificationError(
                SELF_MODIFICATION_MESSAGES.get(request.method.upper(), "You cannot modify your own account")
            )

    return dependency


@dataclass
class ListParams:
    page: int
    limit: int
    search: Optional[str]


def list_params(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    search: Optional[str] = Query(None, description="Case-insensitive substring filter"),
) -> ListParams:
    return ListParams(page=page, limit=limit, search=search)
