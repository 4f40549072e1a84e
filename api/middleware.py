"""
Global middleware: request timing and access logging.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from config.settings import Settings

logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI, settings: Settings) -> None:
    """Attach CORS and the access-log timer.

    The auth header is exposed through CORS so browser clients can read
    the token returned by register/login.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.auth_header],
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"

        auth = getattr(request.state, "auth", None)
        logger.info(
            "%s %s %d user=%s %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            auth.user.id if auth is not None else "-",
            elapsed,
        )
        return response
