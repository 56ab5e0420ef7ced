"""Unit tests for UserService (mocked DB)."""

import uuid
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.shop_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    UserNotFoundError,
)
from src.shop_gateway.auth.jwt_handler import create_access_token, create_refresh_token
from src.shop_gateway.user.db_models import UserModel
from src.shop_gateway.user.service import UserService


def _make_user(is_active: bool = True) -> UserModel:
    user = UserModel()
    user.id = uuid.uuid4()
    user.name = "Siti"
    user.email = "siti@example.com"
    user.phone = None
    user.password_hash = "$2b$12$fakehash"
    user.is_active = is_active
    user.created_at = datetime.now(UTC)
    return user


def _scalar_result(value: object) -> MagicMock:
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


class TestRegister:
    async def test_duplicate_email_raises_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_scalar_result(_make_user()))

        with pytest.raises(EmailExistsError):
            await service.register("Siti", "SITI@example.com", "Rahasia123", None, mock_db)
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()

    async def test_creates_user_and_wallet_in_one_commit(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(side_effect=[_scalar_result(None), MagicMock()])

        async def _flush() -> None:
            added = mock_db.add.call_args.args[0]
            added.id = uuid.uuid4()

        mock_db.flush = AsyncMock(side_effect=_flush)

        with patch("src.shop_gateway.user.service.hash_password", return_value="hashed"):
            user = await service.register("Siti", "Siti@Example.com", "Rahasia123", None, mock_db)

        assert user.email == "siti@example.com"
        assert user.password_hash == "hashed"
        wallet_params = mock_db.execute.await_args_list[1].args[1]
        assert wallet_params == {"user_id": str(user.id)}
        mock_db.commit.assert_awaited_once()


class TestLogin:
    async def test_unknown_email_raises_credentials_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_scalar_result(None))

        with pytest.raises(InvalidCredentialsError):
            await service.login("nobody@example.com", "Rahasia123", mock_db)

    async def test_wrong_password_raises_credentials_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_scalar_result(_make_user()))

        with (
            patch("src.shop_gateway.user.service.verify_password", return_value=False),
            pytest.raises(InvalidCredentialsError),
        ):
            await service.login("siti@example.com", "WrongPass1", mock_db)

    async def test_disabled_account_raises_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_scalar_result(_make_user(is_active=False)))

        with (
            patch("src.shop_gateway.user.service.verify_password", return_value=True),
            pytest.raises(AccountDisabledError),
        ):
            await service.login("siti@example.com", "Rahasia123", mock_db)

    async def test_success_returns_token_pair(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_scalar_result(_make_user()))

        with patch("src.shop_gateway.user.service.verify_password", return_value=True):
            user, access, refresh = await service.login("siti@example.com", "Rahasia123", mock_db)

        assert user.name == "Siti"
        assert access != refresh


class TestRefresh:
    async def test_invalid_refresh_token_raises_error(self, service: UserService) -> None:
        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh("not.a.real.token")

    async def test_access_token_used_as_refresh_raises_error(self, service: UserService) -> None:
        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh(create_access_token("user-123"))

    async def test_valid_refresh_issues_access_token(self, service: UserService) -> None:
        token = await service.refresh(create_refresh_token("user-123"))
        assert token != ""


class TestProfile:
    async def test_unknown_user(self, service: UserService, mock_db: AsyncMock) -> None:
        mock_db.execute = AsyncMock(return_value=_scalar_result(None))
        with pytest.raises(UserNotFoundError):
            await service.get_profile(str(uuid.uuid4()), mock_db)

    async def test_returns_balance(self, service: UserService, mock_db: AsyncMock) -> None:
        balance_result = MagicMock()
        balance_result.fetchone.return_value = MagicMock(balance=50000)
        mock_db.execute = AsyncMock(side_effect=[_scalar_result(_make_user()), balance_result])

        _, balance = await service.get_profile(str(uuid.uuid4()), mock_db)
        assert balance == 50000
