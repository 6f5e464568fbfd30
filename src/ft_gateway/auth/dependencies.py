"""FastAPI auth dependencies.

Usage in any protected router:
    from src.ft_gateway.auth.dependencies import get_current_user, require_roles

    @router.get("/protected")
    async def protected(user: UserModel = Depends(get_current_user)):
        ...

    @router.delete("/admin-only", dependencies=[Depends(require_roles(UserRole.ADMIN))])
    async def admin_only(...):
        ...

get_current_user also records the caller's id on ``request.state.principal_id``;
the response cache keys entries on it.
"""

import uuid
from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.database import get_db_session
from src.ft_common.enums import UserRole
from src.ft_common.errors import (
    AccountDisabledError,
    InvalidCredentialsError,
    PermissionDeniedError,
    ReadOnlyUserError,
)
from src.ft_gateway.auth.jwt_handler import ACCESS, decode_token
from src.ft_gateway.user.db_models import UserModel

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user(
    request: Request,
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Validate the Bearer token and load the (active) user it belongs to.

    Raises HTTP 401 if the token is missing, invalid, expired, or the user is gone.
    Raises AccountDisabledError (403) if the account is disabled.
    """
    try:
        claims = decode_token(token, expected_type=ACCESS)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    try:
        user_id = uuid.UUID(claims.get("sub", ""))
    except ValueError:
        raise _CREDENTIALS_EXCEPTION from None

    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise _CREDENTIALS_EXCEPTION

    if not user.is_active:
        raise AccountDisabledError()

    request.state.principal_id = str(user.id)
    return user


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[UserModel]]:
    """Dependency factory: allow only users whose role is in ``roles``."""
    allowed = {r.value for r in roles}

    async def _check(current_user: UserModel = Depends(get_current_user)) -> UserModel:
        if current_user.role not in allowed:
            raise PermissionDeniedError(
                f"Access denied. Required roles: {', '.join(sorted(allowed))}"
            )
        return current_user

    return _check


require_admin = require_roles(UserRole.ADMIN)


async def require_write_access(
    current_user: UserModel = Depends(get_current_user),
) -> UserModel:
    """Reject read-only users on mutating endpoints."""
    if current_user.role == UserRole.READ_ONLY.value:
        raise ReadOnlyUserError()
    return current_user


def resolve_target_user_id(
    current_user: UserModel, requested_user_id: uuid.UUID | None
) -> str:
    """Admins may act on ``user_id``; everyone else always gets their own id."""
    if current_user.is_admin and requested_user_id:
        return str(requested_user_id)
    return str(current_user.id)
