"""User domain service: register, create (admin), login, refresh.

All DB operations use the injected AsyncSession. Transactions are managed
by the caller (router layer) via `async with db.begin()`.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.enums import UserRole
from src.ft_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    UsernameExistsError,
)
from src.ft_gateway.auth.jwt_handler import (
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.ft_gateway.auth.password import hash_password, verify_password
from src.ft_gateway.user.db_models import UserModel


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    async def create_user(
        self,
        db: AsyncSession,
        username: str,
        email: str,
        password: str,
        role: UserRole = UserRole.USER,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserModel:
        """Insert a user row after checking username and email uniqueness.

        The caller must wrap this in `async with db.begin()`.
        """
        # DB UNIQUE constraints are the final guard
        result = await db.execute(select(UserModel).where(UserModel.username == username))
        if result.scalar_one_or_none() is not None:
            raise UsernameExistsError()

        result = await db.execute(select(UserModel).where(UserModel.email == email))
        if result.scalar_one_or_none() is not None:
            raise EmailExistsError()

        user = UserModel(
            username=username,
            email=email,
            password_hash=hash_password(password),
            role=role.value,
            first_name=first_name,
            last_name=last_name,
            is_active=True,
        )
        db.add(user)
        await db.flush()  # populate id / server defaults without committing
        await db.refresh(user)
        return user

    async def register(
        self,
        db: AsyncSession,
        username: str,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserModel:
        """Self-service sign-up always yields a regular ``user`` role."""
        return await self.create_user(
            db, username, email, password, UserRole.USER, first_name, last_name
        )

    async def login(
        self,
        db: AsyncSession,
        username: str,
        password: str,
    ) -> tuple[UserModel, str, str]:
        """Authenticate and return (user, access_token, refresh_token).

        Note: "User not found" and "Wrong password" both raise InvalidCredentialsError
        intentionally — prevents username enumeration attacks.
        """
        result = await db.execute(select(UserModel).where(UserModel.username == username))
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDisabledError()

        return (
            user,
            create_access_token(str(user.id)),
            create_refresh_token(str(user.id)),
        )

    async def refresh(self, db: AsyncSession, refresh_token: str) -> str:
        """Exchange a valid refresh token for a new access token.

        The user must still exist and be active.
        """
        claims = decode_token(refresh_token, expected_type=REFRESH)
        try:
            user_id = uuid.UUID(claims["sub"])
        except (KeyError, ValueError):
            raise InvalidRefreshTokenError() from None

        result = await db.execute(select(UserModel).where(UserModel.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise InvalidRefreshTokenError()
        if not user.is_active:
            raise AccountDisabledError()
        return create_access_token(str(user.id))
