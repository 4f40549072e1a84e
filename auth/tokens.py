"""
Signed session-token creation and verification.

Tokens are a urlsafe-base64 JSON payload followed by an HMAC-SHA256
signature over that encoded segment::

    <payload-b64>.<hex signature>

The payload carries ``user_id``, a ``purpose`` tag, the issue time and a
random nonce, so two logins by the same user never produce the same value.
There is no expiry claim: a token stays valid until it is removed from the
owner's token list.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import secrets
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from dataclasses import dataclass

from auth.errors import InvalidSignature, MalformedToken

AUTH_PURPOSE = "auth"


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    purpose: str


class TokenCodec:
    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret.encode()

    def _sign(self, segment: str) -> str:
        return hmac.new(self._secret, segment.encode(), hashlib.sha256).hexdigest()

    def encode(self, user_id: str, purpose: str = AUTH_PURPOSE) -> str:
        """Create a signed token binding ``user_id`` to ``purpose``."""
        payload = {
            "user_id": user_id,
            "purpose": purpose,
            "iat": int(time.time()),
            "nonce": secrets.token_urlsafe(12),
        }
        segment = urlsafe_b64encode(json.dumps(payload).encode()).decode()
        return segment + "." + self._sign(segment)

    def decode(self, token: str) -> TokenClaims:
        """
        Verify ``token`` and return its claims.

        The signature is checked before any payload field is trusted.
        Raises ``InvalidSignature`` or ``MalformedToken``.
        """
        if not isinstance(token, str):
            raise MalformedToken("token must be a string")
        parts = token.split(".")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise MalformedToken("bad format")
        segment, signature = parts

        expected_sig = self._sign(segment)
        if not hmac.compare_digest(signature.encode(), expected_sig.encode()):
            raise InvalidSignature("bad signature")

        try:
            payload = json.loads(urlsafe_b64decode(segment.encode()))
        except (binascii.Error, ValueError) as exc:
            raise MalformedToken("undecodable payload") from exc
        if not isinstance(payload, dict):
            raise MalformedToken("payload is not an object")

        user_id = payload.get("user_id")
        purpose = payload.get("purpose")
        if not isinstance(user_id, str) or not isinstance(purpose, str):
            raise MalformedToken("missing claims")
        return TokenClaims(user_id=user_id, purpose=purpose)
