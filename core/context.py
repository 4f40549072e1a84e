"""
Application context — the one place the database handle, stores, token
secret and auth service are constructed.

Built by ``main.create_app`` and driven by the FastAPI lifespan:
``startup()`` prepares the schema, ``shutdown()`` disposes the engine.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

from auth.password import PasswordHasher
from auth.service import AuthService
from auth.tokens import TokenCodec
from config.settings import Settings
from database.session import Database
from database.todos import TodoStore
from database.users import UserStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    database: Database
    users: UserStore
    todos: TodoStore
    auth: AuthService

    @classmethod
    def build(cls, settings: Settings) -> "AppContext":
        database = Database(settings.database_url, echo=settings.debug)
        users = UserStore(database.session_factory)
        hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        auth = AuthService(
            users=users,
            codec=TokenCodec(settings.jwt_secret),
            hasher=hasher,
            timing_hash=hasher.hash(secrets.token_urlsafe(16)),
        )
        return cls(
            settings=settings,
            database=database,
            users=users,
            todos=TodoStore(database.session_factory),
            auth=auth,
        )

    async def startup(self) -> None:
        if self.settings.jwt_secret == Settings.model_fields["jwt_secret"].default:
            logger.warning("JWT_SECRET not set — session tokens are signed with the default secret")
        if self.settings.create_tables:
            await self.database.create_tables()
        logger.info("Application context ready")

    async def shutdown(self) -> None:
        await self.database.dispose()
        logger.info("Application context closed")
