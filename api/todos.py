"""
Todo API routes.  All routes are protected; every lookup is scoped to the
authenticated user, so another user's todo is indistinguishable from a
missing one (404).
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator

from auth.dependencies import AuthenticatedUser, get_context, require_auth
from auth.errors import NotFound
from core.context import AppContext
from database.helpers import parse_uuid

router = APIRouter(prefix="/todos", tags=["todos"])


class TodoCreate(BaseModel):
    text: str = Field(..., min_length=1)

    @field_validator("text", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class TodoUpdate(BaseModel):
    text: Optional[str] = Field(None, min_length=1)
    completed: Optional[bool] = None

    @field_validator("text", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class TodoOut(BaseModel):
    id: str
    text: str
    completed: bool
    completed_at: Optional[int] = None
    creator_id: str


class TodoEnvelope(BaseModel):
    todo: TodoOut


class TodoList(BaseModel):
    todos: List[TodoOut]


def _todo_id(raw: str) -> uuid.UUID:
    todo_id = parse_uuid(raw)
    if todo_id is None:
        raise NotFound()
    return todo_id


@router.post("", response_model=TodoOut)
async def create_todo(
    req: TodoCreate,
    auth: AuthenticatedUser = Depends(require_auth),
    context: AppContext = Depends(get_context),
) -> Dict[str, Any]:
    todo = await context.todos.insert(auth.user.id, req.text)
    return todo.to_dict()


@router.get("", response_model=TodoList)
async def list_todos(
    auth: AuthenticatedUser = Depends(require_auth),
    context: AppContext = Depends(get_context),
) -> Dict[str, Any]:
    todos = await context.todos.find(auth.user.id)
    return {"todos": [t.to_dict() for t in todos]}


@router.get("/{todo_id}", response_model=TodoEnvelope)
async def get_todo(
    todo_id: str,
    auth: AuthenticatedUser = Depends(require_auth),
    context: AppContext = Depends(get_context),
) -> Dict[str, Any]:
    todo = await context.todos.find_one(_todo_id(todo_id), auth.user.id)
    if todo is None:
        raise NotFound()
    return {"todo": todo.to_dict()}


@router.delete("/{todo_id}", response_model=TodoEnvelope)
async def delete_todo(
    todo_id: str,
    auth: AuthenticatedUser = Depends(require_auth),
    context: AppContext = Depends(get_context),
) -> Dict[str, Any]:
    todo = await context.todos.delete(_todo_id(todo_id), auth.user.id)
    if todo is None:
        raise NotFound()
    return {"todo": todo.to_dict()}


@router.patch("/{todo_id}", response_model=TodoEnvelope)
async def update_todo(
    todo_id: str,
    req: TodoUpdate,
    auth: AuthenticatedUser = Depends(require_auth),
    context: AppContext = Depends(get_context),
) -> Dict[str, Any]:
    changes: Dict[str, Any] = {}
    if req.text is not None:
        changes["text"] = req.text
    # anything but an explicit completed=true resets completion
    if req.completed:
        changes["completed"] = True
        changes["completed_at"] = int(time.time() * 1000)
    else:
        changes["completed"] = False
        changes["completed_at"] = None

    todo = await context.todos.update(_todo_id(todo_id), auth.user.id, changes)
    if todo is None:
        raise NotFound()
    return {"todo": todo.to_dict()}
