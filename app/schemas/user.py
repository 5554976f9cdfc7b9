"""
Pydantic schemas for sessions, admin accounts and profile settings.
"""

from typing import Optional
from pydantic import EmailStr, Field, field_validator

from app.models.user import AdminRole, UserType
from app.schemas.common import CamelModel, UTCDateTime


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SessionUser(CamelModel):
    """
    Identity carried by the session token.

    Built from token claims on every request, never loaded from the database.
    """
    id: str
    email: str
    name: Optional[str] = None
    user_type: UserType
    admin_role: Optional[AdminRole] = None

    def to_claims(self) -> dict:
        return {
            "sub": self.id,
            "email": self.email,
            "name": self.name,
            "userType": self.user_type.value,
            "adminRole": self.admin_role.value if self.admin_role else None,
        }

    @classmethod
    def from_claims(cls, claims: dict) -> "SessionUser":
        return cls(
            id=claims["sub"],
            email=claims["email"],
            name=claims.get("name"),
            user_type=claims["userType"],
            admin_role=claims.get("adminRole"),
        )


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: SessionUser


class AdminUserCreateRequest(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)


class AdminUserUpdateRequest(CamelModel):
    admin_role: AdminRole


class AdminUserResponse(CamelModel):
    id: str
    name: Optional[str]
    email: str
    admin_role: Optional[AdminRole]
    created_at: UTCDateTime


class ProfileResponse(CamelModel):
    id: str
    name: Optional[str]
    email: str
    image: Optional[str] = None
    user_type: UserType
    admin_role: Optional[AdminRole]
    created_at: UTCDateTime


class ProfileUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(None, min_length=6, max_length=72)

    @field_validator("image")
    @classmethod
    def validate_image_url(cls, v: Optional[str]) -> Optional[str]:
        """Allow an http(s) URL, or empty string to clear the image."""
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("Invalid image URL")
        return v


class ProfileUpdateResponse(CamelModel):
    user: ProfileResponse
    message: str
