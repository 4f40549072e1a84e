"""
FastAPI dependencies for authentication.

``require_auth`` is the request authentication middleware used by every
protected route: it reads the raw session token from the configured
header, resolves it through ``AuthService`` and attaches the result to
``request.state.auth``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from auth.errors import Unauthenticated
from core.context import AppContext
from database.users import UserRecord


@dataclass(frozen=True)
class AuthenticatedUser:
    user: UserRecord
    token: str


def get_context(request: Request) -> AppContext:
    return request.app.state.context


class AuthMiddleware:
    def __init__(self, header_name: Optional[str] = None) -> None:
        # None means "use the header named in settings"
        self.header_name = header_name

    async def __call__(self, request: Request) -> AuthenticatedUser:
        context = get_context(request)
        header = self.header_name or context.settings.auth_header
        token = request.headers.get(header)
        if not token:
            raise Unauthenticated()

        user = await context.auth.resolve(token)
        auth = AuthenticatedUser(user=user, token=token)
        request.state.auth = auth
        return auth


require_auth = AuthMiddleware()
