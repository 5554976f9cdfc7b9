"""
Authorization policy.

`decide()` is a pure function of (session, capability). The resource table
`RESOURCE_POLICY` says which capability each resource needs for reading and for
writing; routers attach `authorize("<resource>")` (see app.core.deps) once at
router level so every endpoint they contain is covered.
"""

import enum
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from fastapi import status

from app.models.user import AdminRole, UserType
from app.schemas.user import SessionUser


class Capability(str, enum.Enum):
    IS_AUTHENTICATED = "isAuthenticated"
    IS_ADMIN_USER = "isAdminUser"
    IS_CANDIDATE_USER = "isCandidateUser"
    IS_SUPER_ADMIN = "isSuperAdmin"


class Action(str, enum.Enum):
    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None
    status_code: int = status.HTTP_200_OK

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def unauthorized(cls, reason: str = "Unauthorized") -> "Decision":
        return cls(False, reason, status.HTTP_401_UNAUTHORIZED)

    @classmethod
    def forbidden(cls, reason: str) -> "Decision":
        return cls(False, reason, status.HTTP_403_FORBIDDEN)


# resource -> (capability for reads, capability for writes)
RESOURCE_POLICY: Dict[str, Tuple[Capability, Capability]] = {
    "departments": (Capability.IS_ADMIN_USER, Capability.IS_SUPER_ADMIN),
    "positions": (Capability.IS_ADMIN_USER, Capability.IS_ADMIN_USER),
    "stacks": (Capability.IS_ADMIN_USER, Capability.IS_SUPER_ADMIN),
    "problems": (Capability.IS_ADMIN_USER, Capability.IS_ADMIN_USER),
    "candidates": (Capability.IS_ADMIN_USER, Capability.IS_ADMIN_USER),
    "interview-panel": (Capability.IS_ADMIN_USER, Capability.IS_SUPER_ADMIN),
    "settings": (Capability.IS_ADMIN_USER, Capability.IS_ADMIN_USER),
    "submissions": (Capability.IS_ADMIN_USER, Capability.IS_ADMIN_USER),
    "dashboard": (Capability.IS_ADMIN_USER, Capability.IS_ADMIN_USER),
    "candidate-portal": (Capability.IS_CANDIDATE_USER, Capability.IS_CANDIDATE_USER),
}

READ_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def action_for_method(method: str) -> Action:
    return Action.READ if method.upper() in READ_METHODS else Action.WRITE


def required_capability(resource: str, action: Action) -> Capability:
    """Look up the capability for a resource/action pair. Unknown resources raise KeyError."""
    read_capability, write_capability = RESOURCE_POLICY[resource]
    return read_capability if action == Action.READ else write_capability


def decide(session: Optional[SessionUser], capability: Capability) -> Decision:
    """
    Decide whether a session holds a capability.

    Returns a 401 decision when there is no session and a 403 decision when the
    session exists but its role is insufficient.
    """
    if session is None:
        return Decision.unauthorized()

    if capability == Capability.IS_AUTHENTICATED:
        return Decision.allow()

    if capability == Capability.IS_CANDIDATE_USER:
        if session.user_type != UserType.CANDIDATE:
            return Decision.forbidden("Forbidden: Candidate access only")
        return Decision.allow()

    if session.user_type != UserType.ADMIN:
        return Decision.forbidden("Forbidden: Admin access only")

    if capability == Capability.IS_SUPER_ADMIN and session.admin_role != AdminRole.ADMIN:
        return Decision.forbidden("Forbidden: Only admins can perform this action")

    return Decision.allow()
