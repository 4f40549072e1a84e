"""
AuthService — registration, login, logout and token resolution.

Holds no state of its own: users and their token lists live in the
``UserStore``; the codec and hasher are pure.  Every failure is mapped
onto ``auth.errors`` before it leaves this module.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import SQLAlchemyError

from auth.errors import (
    AuthBackendError,
    EmailTaken,
    InvalidCredentials,
    TokenError,
    Unauthenticated,
    ValidationError,
)
from auth.password import MAX_PASSWORD_BYTES, PasswordHasher
from auth.tokens import AUTH_PURPOSE, TokenCodec
from database.users import DuplicateEmail, TokenRecord, UserRecord, UserStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class AuthResult:
    user: UserRecord
    token: str


def _normalise_email(email: str) -> str:
    if not isinstance(email, str):
        raise ValidationError("email must be a string")
    email = email.strip()
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError("invalid email") from exc
    return email


def _check_password(password: str) -> None:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("password too short")
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise ValidationError("password too long")


class AuthService:
    def __init__(
        self,
        users: UserStore,
        codec: TokenCodec,
        hasher: PasswordHasher,
        timing_hash: str,
    ) -> None:
        """
        ``timing_hash`` is any valid hash from ``hasher``; login verifies
        against it when the email is unknown, so both failures cost one
        bcrypt check.
        """
        self.users = users
        self.codec = codec
        self.hasher = hasher
        self.timing_hash = timing_hash

    async def register(self, email: str, password: str) -> AuthResult:
        email = _normalise_email(email)
        _check_password(password)

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        user_id = uuid.uuid4()
        token = self.codec.encode(str(user_id), AUTH_PURPOSE)
        try:
            # user row and first token commit together or not at all
            user = await self.users.insert(
                email,
                password_hash,
                user_id=user_id,
                tokens=[TokenRecord(value=token, purpose=AUTH_PURPOSE)],
            )
        except DuplicateEmail as exc:
            raise EmailTaken() from exc
        except SQLAlchemyError as exc:
            logger.exception("Register: user insert failed")
            raise AuthBackendError() from exc

        logger.info("Registered user %s", user.id)
        return AuthResult(user=user, token=token)

    async def login(self, email: str, password: str) -> AuthResult:
        if not isinstance(email, str) or not isinstance(password, str):
            raise InvalidCredentials()
        try:
            user = await self.users.find_by_email(email.strip())
        except SQLAlchemyError as exc:
            logger.exception("Login: user lookup failed")
            raise AuthBackendError() from exc

        if user is None:
            await asyncio.to_thread(self.hasher.verify, password, self.timing_hash)
            raise InvalidCredentials()
        if not await asyncio.to_thread(self.hasher.verify, password, user.password_hash):
            logger.info("Login: bad password for %s", user.id)
            raise InvalidCredentials()

        token = self.codec.encode(str(user.id), AUTH_PURPOSE)
        try:
            await self.users.append_token(user.id, token, AUTH_PURPOSE)
        except SQLAlchemyError as exc:
            logger.exception("Login: token issue failed for %s", user.id)
            raise AuthBackendError() from exc

        logger.info("Login: %s", user.id)
        return AuthResult(user=user, token=token)

    async def resolve(self, token: str) -> UserRecord:
        """Return the user owning ``token`` or raise ``Unauthenticated``."""
        try:
            claims = self.codec.decode(token)
        except TokenError as exc:
            raise Unauthenticated() from exc
        if claims.purpose != AUTH_PURPOSE:
            raise Unauthenticated()

        try:
            user = await self.users.find_by_id_and_token(claims.user_id, token)
        except SQLAlchemyError as exc:
            logger.exception("Resolve: token lookup failed")
            raise Unauthenticated() from exc

        if user is None:
            raise Unauthenticated()
        return user

    async def logout(self, user_id: uuid.UUID, token: str) -> None:
        try:
            await self.users.remove_token(user_id, token)
        except SQLAlchemyError as exc:
            logger.exception("Logout failed for %s", user_id)
            raise AuthBackendError() from exc
        logger.info("Logout: %s", user_id)
