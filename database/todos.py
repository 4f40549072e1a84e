"""
Todo store.  Every query is filtered on ``creator_id`` so a user can only
ever see or touch the records it created.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database.models import Todo


@dataclass(frozen=True)
class TodoRecord:
    id: uuid.UUID
    text: str
    completed: bool
    completed_at: Optional[int]
    creator_id: uuid.UUID

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "text": self.text,
            "completed": self.completed,
            "completed_at": self.completed_at,
            "creator_id": str(self.creator_id),
        }


def _record(todo: Todo) -> TodoRecord:
    return TodoRecord(
        id=todo.id,
        text=todo.text,
        completed=bool(todo.completed),
        completed_at=todo.completed_at,
        creator_id=todo.creator_id,
    )


class TodoStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert(self, creator_id: uuid.UUID, text: str) -> TodoRecord:
        todo = Todo(id=uuid.uuid4(), text=text, completed=False, completed_at=None, creator_id=creator_id)
        async with self._session_factory() as session:
            async with session.begin():
                session.add(todo)
        return _record(todo)

    async def find(self, creator_id: uuid.UUID) -> List[TodoRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Todo).where(Todo.creator_id == creator_id)
            )
            return [_record(t) for t in result.scalars().all()]

    async def find_one(self, todo_id: uuid.UUID, creator_id: uuid.UUID) -> Optional[TodoRecord]:
        async with self._session_factory() as session:
            todo = await self._get_owned(session, todo_id, creator_id)
            return _record(todo) if todo is not None else None

    async def update(
        self, todo_id: uuid.UUID, creator_id: uuid.UUID, changes: Dict[str, Any]
    ) -> Optional[TodoRecord]:
        async with self._session_factory() as session:
            async with session.begin():
                todo = await self._get_owned(session, todo_id, creator_id)
                if todo is None:
                    return None
                for field, value in changes.items():
                    setattr(todo, field, value)
            return _record(todo)

    async def delete(self, todo_id: uuid.UUID, creator_id: uuid.UUID) -> Optional[TodoRecord]:
        async with self._session_factory() as session:
            async with session.begin():
                todo = await self._get_owned(session, todo_id, creator_id)
                if todo is None:
                    return None
                record = _record(todo)
                await session.delete(todo)
            return record

    @staticmethod
    async def _get_owned(
        session: AsyncSession, todo_id: uuid.UUID, creator_id: uuid.UUID
    ) -> Optional[Todo]:
        result = await session.execute(
            select(Todo).where(Todo.id == todo_id, Todo.creator_id == creator_id)
        )
        return result.scalar_one_or_none()
