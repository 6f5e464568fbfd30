"""Unit tests for user service (mocked DB)."""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.ft_common.enums import UserRole
from src.ft_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    UsernameExistsError,
)
from src.ft_gateway.auth.jwt_handler import create_access_token, create_refresh_token
from src.ft_gateway.user.db_models import UserModel
from src.ft_gateway.user.service import UserService


def _make_user(is_active: bool = True) -> UserModel:
    user = UserModel()
    user.id = uuid.uuid4()
    user.username = "alice"
    user.email = "alice@example.com"
    user.password_hash = "$2b$12$fakehash"
    user.role = UserRole.USER.value
    user.is_active = is_active
    return user


def _result(value: object) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def mock_db() -> AsyncMock:
    db = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def service() -> UserService:
    return UserService()


class TestCreateUser:
    async def test_duplicate_username_raises_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(_make_user()))

        with pytest.raises(UsernameExistsError):
            await service.register(mock_db, "alice", "new@email.com", "Pass1word")
        mock_db.add.assert_not_called()

    async def test_duplicate_email_raises_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(side_effect=[_result(None), _result(_make_user())])

        with pytest.raises(EmailExistsError):
            await service.register(mock_db, "newuser", "alice@example.com", "Pass1word")

    async def test_register_always_creates_regular_user(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(side_effect=[_result(None), _result(None)])

        user = await service.register(mock_db, "bob", "bob@example.com", "Pass1word", "Bob")

        assert user.role == "user"
        assert user.first_name == "Bob"
        assert user.password_hash != "Pass1word"
        mock_db.add.assert_called_once_with(user)
        mock_db.flush.assert_awaited_once()

    async def test_create_user_with_role(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(side_effect=[_result(None), _result(None)])

        user = await service.create_user(
            mock_db, "root", "root@example.com", "Pass1word", UserRole.ADMIN
        )

        assert user.role == "admin"
        assert user.is_admin is True


class TestLogin:
    async def test_wrong_username_raises_credentials_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(None))

        with pytest.raises(InvalidCredentialsError):
            await service.login(mock_db, "nobody", "Pass1word")

    async def test_wrong_password_raises_credentials_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(_make_user()))

        with (
            patch("src.ft_gateway.user.service.verify_password", return_value=False),
            pytest.raises(InvalidCredentialsError),
        ):
            await service.login(mock_db, "alice", "WrongPass1")

    async def test_disabled_account_raises_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(_make_user(is_active=False)))

        with (
            patch("src.ft_gateway.user.service.verify_password", return_value=True),
            pytest.raises(AccountDisabledError),
        ):
            await service.login(mock_db, "alice", "Pass1word")

    async def test_success_returns_token_pair(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(_make_user()))

        with patch("src.ft_gateway.user.service.verify_password", return_value=True):
            returned_user, access, refresh = await service.login(mock_db, "alice", "Pass1word")

        assert returned_user.username == "alice"
        assert len(access) > 20
        assert access != refresh


class TestRefresh:
    async def test_invalid_refresh_token_raises_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh(mock_db, "not.a.real.token")

    async def test_access_token_used_as_refresh_raises_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        access = create_access_token(str(uuid.uuid4()))
        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh(mock_db, access)

    async def test_deleted_user_raises_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(None))
        token = create_refresh_token(str(uuid.uuid4()))

        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh(mock_db, token)

    async def test_disabled_user_raises_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        user = _make_user(is_active=False)
        mock_db.execute = AsyncMock(return_value=_result(user))

        with pytest.raises(AccountDisabledError):
            await service.refresh(mock_db, create_refresh_token(str(user.id)))

    async def test_success_issues_access_token(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        user = _make_user()
        mock_db.execute = AsyncMock(return_value=_result(user))

        access = await service.refresh(mock_db, create_refresh_token(str(user.id)))

        assert isinstance(access, str)
        assert len(access) > 20
