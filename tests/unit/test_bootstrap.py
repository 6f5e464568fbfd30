"""Unit tests for the admin bootstrap command (session and service mocked)."""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import ValidationError

from src.ft_admin import bootstrap
from src.ft_common.enums import UserRole


def _session_factory() -> MagicMock:
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    tx = MagicMock()
    tx.__aenter__ = AsyncMock(return_value=tx)
    tx.__aexit__ = AsyncMock(return_value=False)
    session.begin = MagicMock(return_value=tx)
    return MagicMock(return_value=session)


class TestCreateAdmin:
    async def test_creates_with_admin_role(self) -> None:
        user = MagicMock(id=uuid.uuid4())
        service = MagicMock()
        service.create_user = AsyncMock(return_value=user)

        with (
            patch.object(bootstrap, "async_session_factory", _session_factory()),
            patch.object(bootstrap, "UserService", return_value=service),
        ):
            user_id = await bootstrap.create_admin("root", "root@example.com", "RootPass1")

        assert user_id == str(user.id)
        args = service.create_user.await_args.args
        assert args[1:5] == ("root", "root@example.com", "RootPass1", UserRole.ADMIN)

    async def test_weak_password_rejected_before_db(self) -> None:
        factory = _session_factory()
        with patch.object(bootstrap, "async_session_factory", factory):
            with pytest.raises(ValidationError):
                await bootstrap.create_admin("root", "root@example.com", "weak")
        factory.assert_not_called()


def test_main_disposes_engine() -> None:
    engine = MagicMock()
    engine.dispose = AsyncMock()

    with (
        patch.object(bootstrap, "create_admin", AsyncMock(return_value="id-1")) as create,
        patch.object(bootstrap, "engine", engine),
    ):
        bootstrap.main(["--username", "root", "--email", "r@example.com", "--password", "RootPass1"])

    create.assert_awaited_once_with("root", "r@example.com", "RootPass1", None, None)
    engine.dispose.assert_awaited_once()
