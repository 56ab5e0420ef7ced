"""User domain service: register, login, refresh, profile.

All DB operations use the injected AsyncSession. Register commits its own
transaction (user row + wallet row land together or not at all).
"""

import logging

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from src.shop_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.shop_gateway.auth.password import hash_password, verify_password
from src.shop_gateway.user.db_models import UserModel

logger = logging.getLogger(__name__)

_CREATE_WALLET_SQL = text(
    "INSERT INTO wallets (user_id, balance, version) VALUES (:user_id, 0, 0)"
)
_GET_BALANCE_SQL = text("SELECT balance FROM wallets WHERE user_id = :user_id")


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        phone: str | None,
        db: AsyncSession,
    ) -> UserModel:
        """Create the user and their zero-balance wallet in one transaction."""
        email = email.lower()
        try:
            result = await db.execute(select(UserModel).where(UserModel.email == email))
            if result.scalar_one_or_none() is not None:
                raise EmailExistsError()

            user = UserModel(
                name=name,
                email=email,
                phone=phone,
                password_hash=hash_password(password),
                is_active=True,
            )
            db.add(user)
            await db.flush()  # Get user.id without committing

            await db.execute(_CREATE_WALLET_SQL, {"user_id": str(user.id)})
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Registered user %s", user.id)
        return user

    async def login(
        self,
        email: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str, str]:
        """Authenticate and return (user, access_token, refresh_token).

        Unknown email and wrong password both raise InvalidCredentialsError so
        the endpoint cannot be used to enumerate accounts.
        """
        result = await db.execute(select(UserModel).where(UserModel.email == email.lower()))
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        if not user.is_active:
            raise AccountDisabledError()

        return user, create_access_token(str(user.id)), create_refresh_token(str(user.id))

    async def refresh(self, refresh_token: str) -> str:
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(str(payload["sub"]))

    async def get_profile(self, user_id: str, db: AsyncSession) -> tuple[UserModel, int]:
        """Return the user and their current wallet balance (0 if no wallet yet)."""
        result = await db.execute(select(UserModel).where(UserModel.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError(user_id)
        balance_row = (await db.execute(_GET_BALANCE_SQL, {"user_id": user_id})).fetchone()
        return user, balance_row.balance if balance_row else 0
