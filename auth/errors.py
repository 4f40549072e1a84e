"""
Error taxonomy for the auth subsystem.

Every failure that leaves ``AuthService`` is one of the ``AuthError``
subclasses below; ``api/errors.py`` turns them into HTTP responses.
Messages are deliberately terse and never carry passwords, hashes or
token values.
"""

from __future__ import annotations


class AuthError(Exception):
    code = "auth_error"
    status_code = 400

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)


class ValidationError(AuthError):
    """Malformed email or password at registration."""

    code = "validation_error"
    status_code = 400


class EmailTaken(AuthError):
    code = "email_taken"
    status_code = 400


class InvalidCredentials(AuthError):
    """Unknown email or wrong password; the two are never told apart."""

    code = "invalid_credentials"
    status_code = 400


class Unauthenticated(AuthError):
    """Missing, malformed, forged or revoked session token."""

    code = "unauthenticated"
    status_code = 401


class NotFound(AuthError):
    code = "not_found"
    status_code = 404


class AuthBackendError(AuthError):
    """The user store failed in a way the caller cannot fix."""

    code = "backend_unavailable"
    status_code = 503


# ── Token codec errors ─────────────────────────────────────────────────


class TokenError(Exception):
    pass


class InvalidSignature(TokenError):
    pass


class MalformedToken(TokenError):
    pass
