"""Authentication service: password hashing, session tokens, credential store."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from jwt.exceptions import PyJWTError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.core import settings
from blog_api.models import User
from blog_api.services.validation import (
    TAKEN,
    ValidationError,
    normalize_email,
    validate_registration,
)

logger = logging.getLogger(__name__)

ph = PasswordHasher(
    time_cost=settings.password_hash_time_cost,
    memory_cost=settings.password_hash_memory_cost,
    parallelism=settings.password_hash_parallelism,
    hash_len=32,
    salt_len=16,
)

class AuthError(Exception):
    """Base authentication error."""

    pass


class InvalidCredentialsError(AuthError):
    """Unknown email or wrong password. Never says which."""

    pass


class TokenError(AuthError):
    """Session token error."""

    pass


class TokenExpiredError(TokenError):
    """Session token has expired."""

    pass


class InvalidTokenError(TokenError):
    """Session token is malformed, tampered with, or names no user."""

    pass


def hash_password(password: str) -> str:
    """Hash a password using Argon2id."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash using constant-time comparison."""
    try:
        ph.verify(password_hash, password)
        return True
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


# Verified against when the email is unknown so both login failures cost the same
_DUMMY_HASH = hash_password("dummy-password-for-timing")


def _burn_password_check(password: str) -> None:
    verify_password(password, _DUMMY_HASH)


def create_access_token(
    user_id: UUID,
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed session token for a user.

    The token carries the user id as ``sub``, the email when given, and an
    ``exp`` claim set to now plus the configured TTL (24 hours by default).
    """
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.jwt_token_expire_hours)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "exp": datetime.now(UTC) + expires_delta,
    }
    if email is not None:
        payload["email"] = email
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return str(token)


def decode_token(token: str) -> dict[str, Any]:
    """Decode a session token, checking signature and expiry."""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError("Token has expired") from e
    except PyJWTError as e:
        raise InvalidTokenError(f"Invalid token: {e}") from e


class AuthService:
    """Credential store operations and token verification."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user_by_email(self, email: Any) -> User | None:
        """Get user by email, case-insensitively."""
        normalized = normalize_email(email)
        if not normalized:
            return None
        result = await self.session.execute(select(User).where(User.email == normalized))
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def register(self, email: Any, password: Any) -> User:
        """Create a user from raw credentials.

        Raises ValidationError listing every failing field.
        """
        errors = validate_registration(email, password)
        normalized = normalize_email(email)

        if "email" not in errors and await self.get_user_by_email(normalized) is not None:
            errors["email"] = [TAKEN]

        if errors:
            raise ValidationError(errors)

        user = User(email=normalized, password_hash=hash_password(password))
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same email
            await self.session.rollback()
            raise ValidationError({"email": [TAKEN]}) from e
        await self.session.refresh(user)

        logger.info(f"Registered user {user.id}")
        return user

    async def authenticate(self, email: Any, password: Any) -> User:
        """Authenticate a user and return the user object.

        Raises InvalidCredentialsError for a missing or non-string field, an
        unknown email and a wrong password alike.
        """
        are_strings = isinstance(email, str) and isinstance(password, str)
        if not are_strings or not email or not password:
            raise InvalidCredentialsError("Invalid email or password")

        user = await self.get_user_by_email(email)

        if user is None:
            _burn_password_check(password)
            raise InvalidCredentialsError("Invalid email or password")

        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid email or password")

        return user

    async def validate_token_user(self, payload: dict[str, Any]) -> User:
        """Resolve the user a decoded token refers to."""
        subject = payload.get("sub")
        if not subject:
            raise InvalidTokenError("Token missing user ID")

        try:
            user_id = UUID(str(subject))
        except ValueError as e:
            raise InvalidTokenError("Token subject is not a user ID") from e

        user = await self.get_user_by_id(user_id)
        if user is None:
            raise InvalidTokenError("User not found")

        return user

    async def verify_token(self, token: str) -> User:
        """Verify a bearer token and return the user it identifies."""
        payload = decode_token(token)
        return await self.validate_token_user(payload)

    async def delete_user(self, user: User) -> None:
        """Delete a user. Owned posts are removed by the FK cascade."""
        await self.session.delete(user)
        await self.session.flush()
        logger.info(f"Deleted user {user.id}")

    def create_token(self, user: User) -> str:
        """Issue a session token for an authenticated user."""
        return create_access_token(user.id, user.email)
