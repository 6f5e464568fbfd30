"""Pydantic request/response schemas for ft_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

import re
from typing import Annotated

from pydantic import AfterValidator, BaseModel, EmailStr, Field

from src.ft_common.enums import UserRole
from src.ft_gateway.user.db_models import UserModel


def check_password_complexity(v: str) -> str:
    """Enforce: at least one uppercase, one lowercase, one digit."""
    if not re.search(r"[A-Z]", v):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", v):
        raise ValueError("Password must contain at least one lowercase letter")
    if not re.search(r"\d", v):
        raise ValueError("Password must contain at least one digit")
    return v


Password = Annotated[
    str, Field(min_length=8, max_length=128), AfterValidator(check_password_complexity)
]
Username = Annotated[str, Field(min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_]+$")]


class RegisterRequest(BaseModel):
    username: Username
    email: EmailStr
    password: Password
    first_name: str | None = Field(None, max_length=50)
    last_name: str | None = Field(None, max_length=50)


class LoginRequest(BaseModel):
    username: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class UserInfo(BaseModel):
    """User profile embedded in responses (never includes the password hash)."""

    user_id: str
    username: str
    email: str
    role: UserRole
    first_name: str | None = None
    last_name: str | None = None
    created_at: str | None = None

    @classmethod
    def from_model(cls, user: UserModel) -> "UserInfo":
        return cls(
            user_id=str(user.id),
            username=user.username,
            email=user.email,
            role=UserRole(user.role),
            first_name=user.first_name,
            last_name=user.last_name,
            created_at=user.created_at.isoformat() if user.created_at else None,
        )


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = 1800  # 30 minutes in seconds
    user: UserInfo


class RefreshResponse(BaseModel):
    access_token: str
    expires_in: int = 1800
