"""
Todo API — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from api.errors import register_error_handlers
from api.middleware import register_middleware
from api.todos import router as todos_router
from api.users import router as users_router
from config.settings import Settings, config
from core.context import AppContext

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncio"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or config
    context = AppContext.build(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await context.startup()
        logger.info("Application ready to accept requests.")
        try:
            yield
        finally:
            await context.shutdown()

    app = FastAPI(
        title="Todo API",
        version="1.0.0",
        description="Per-user todo records behind session-token authentication.",
        lifespan=lifespan,
    )
    app.state.context = context

    register_middleware(app, settings)
    register_error_handlers(app)

    app.include_router(users_router)
    app.include_router(todos_router)

    return app


if __name__ == "__main__":
    configure_logging(config)
    uvicorn.run(
        "main:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
