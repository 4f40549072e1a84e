"""
User API routes — register, login, current user, logout.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from auth.dependencies import AuthenticatedUser, get_context, require_auth
from core.context import AppContext

router = APIRouter(tags=["users"])


# ── Request / response schemas ─────────────────────────────────────────


class CredentialsRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: str
    email: str


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/users", response_model=UserResponse)
async def register(
    req: CredentialsRequest,
    response: Response,
    context: AppContext = Depends(get_context),
):
    """Register a new user and issue its first session token."""
    result = await context.auth.register(req.email, req.password)
    response.headers[context.settings.auth_header] = result.token
    return result.user.public()


@router.post("/users/login", response_model=UserResponse)
async def login(
    req: CredentialsRequest,
    response: Response,
    context: AppContext = Depends(get_context),
):
    """Login with email + password; every login issues a fresh token."""
    result = await context.auth.login(req.email, req.password)
    response.headers[context.settings.auth_header] = result.token
    return result.user.public()


@router.get("/me", response_model=UserResponse)
async def me(auth: AuthenticatedUser = Depends(require_auth)):
    return auth.user.public()


@router.delete("/me/token")
async def logout(
    auth: AuthenticatedUser = Depends(require_auth),
    context: AppContext = Depends(get_context),
) -> Response:
    """Revoke only the token this request was authenticated with."""
    await context.auth.logout(auth.user.id, auth.token)
    return Response(status_code=200)
