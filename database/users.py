"""
User store — user records and their embedded session-token list.

Each method runs in its own session and transaction, so every mutation of
a user's token list is atomic on its own.  Email uniqueness is enforced by
the ``users.email`` unique constraint, which is what makes two concurrent
registrations of one address end with exactly one row.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from database.helpers import parse_uuid, to_uuid
from database.models import Todo, User, UserToken

logger = logging.getLogger(__name__)


class DuplicateEmail(Exception):
    pass


@dataclass(frozen=True)
class TokenRecord:
    value: str
    purpose: str


@dataclass(frozen=True)
class UserRecord:
    id: uuid.UUID
    email: str
    password_hash: str
    tokens: Tuple[TokenRecord, ...] = ()

    def public(self) -> dict:
        """Projection safe to send to clients (no password hash, no tokens)."""
        return {"id": str(self.id), "email": self.email}


def _record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        email=user.email,
        password_hash=user.password_hash,
        tokens=tuple(TokenRecord(value=t.value, purpose=t.purpose) for t in user.tokens),
    )


class UserStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert(
        self,
        email: str,
        password_hash: str,
        *,
        user_id: Optional[uuid.UUID] = None,
        tokens: Sequence[TokenRecord] = (),
    ) -> UserRecord:
        """
        Create a user together with its initial ``tokens`` in one transaction,
        so either both rows exist afterwards or neither does.

        Raises ``DuplicateEmail`` if the address is taken.
        """
        user = User(id=user_id or uuid.uuid4(), email=email, password_hash=password_hash)
        user.tokens = [UserToken(value=t.value, purpose=t.purpose) for t in tokens]
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(user)
        except IntegrityError as exc:
            # the only other unique column is user_tokens.value
            if await self.find_by_email(email) is not None:
                raise DuplicateEmail(email) from exc
            raise
        return _record(user)

    async def _find_one(self, stmt) -> Optional[UserRecord]:
        async with self._session_factory() as session:
            result = await session.execute(stmt.options(selectinload(User.tokens)))
            user = result.scalar_one_or_none()
            return _record(user) if user is not None else None

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        return await self._find_one(select(User).where(User.email == email))

    async def find_by_id(self, user_id: str | uuid.UUID) -> Optional[UserRecord]:
        uid = parse_uuid(user_id)
        if uid is None:
            return None
        return await self._find_one(select(User).where(User.id == uid))

    async def find_by_id_and_token(
        self, user_id: str | uuid.UUID, token_value: str
    ) -> Optional[UserRecord]:
        """Return the user only while ``token_value`` is in its token list."""
        uid = parse_uuid(user_id)
        if uid is None:
            return None
        stmt = (
            select(User)
            .join(UserToken, UserToken.user_id == User.id)
            .where(User.id == uid, UserToken.value == token_value)
        )
        return await self._find_one(stmt)

    async def append_token(
        self, user_id: str | uuid.UUID, token_value: str, purpose: str = "auth"
    ) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                session.add(
                    UserToken(user_id=to_uuid(user_id), value=token_value, purpose=purpose)
                )

    async def remove_token(self, user_id: str | uuid.UUID, token_value: str) -> None:
        """Drop one token from the user's list; absent tokens are ignored."""
        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(
                    delete(UserToken).where(
                        UserToken.user_id == to_uuid(user_id),
                        UserToken.value == token_value,
                    )
                )

    async def delete_by_id(self, user_id: str | uuid.UUID) -> Optional[UserRecord]:
        """Delete a user together with its tokens and todos."""
        uid = parse_uuid(user_id)
        if uid is None:
            return None
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    select(User).where(User.id == uid).options(selectinload(User.tokens))
                )
                user = result.scalar_one_or_none()
                if user is None:
                    return None
                record = _record(user)
                await session.execute(delete(UserToken).where(UserToken.user_id == uid))
                await session.execute(delete(Todo).where(Todo.creator_id == uid))
                await session.execute(delete(User).where(User.id == uid))
        logger.info("Deleted user %s", uid)
        return record
