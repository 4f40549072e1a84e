"""
Password hashing and verification.

bcrypt with a per-call random salt embedded in the output; the work
factor comes from ``BCRYPT_ROUNDS``.  Hashing is CPU bound, so async
callers run it in a worker thread.
"""

from __future__ import annotations

import bcrypt

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password with bcrypt (auto-salted, per-call random salt)."""
        return bcrypt.hashpw(
            password.encode(), bcrypt.gensalt(rounds=self.rounds)
        ).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash."""
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except (ValueError, TypeError):
            return False
