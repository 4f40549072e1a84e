"""
Exception handlers mapping the auth error taxonomy onto HTTP responses.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from auth.errors import AuthError

logger = logging.getLogger(__name__)

# statuses answered with an empty body
_EMPTY_BODY = {status.HTTP_401_UNAUTHORIZED, status.HTTP_404_NOT_FOUND}


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError):
        logger.debug("%s %s -> %s", request.method, request.url.path, exc.code)
        if exc.status_code in _EMPTY_BODY:
            return Response(status_code=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.code})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "validation_error"},
        )
