"""
Tests for the signed session-token codec.
"""

import json
from base64 import urlsafe_b64encode

import pytest

from auth.errors import InvalidSignature, MalformedToken
from auth.tokens import AUTH_PURPOSE, TokenCodec


def _flip(char: str) -> str:
    return "0" if char != "0" else "1"


def _signed(codec: TokenCodec, payload) -> str:
    segment = urlsafe_b64encode(json.dumps(payload).encode()).decode()
    return segment + "." + codec._sign(segment)


class TestTokenCodec:
    def setup_method(self):
        self.codec = TokenCodec("test-secret")

    def test_encode_decode(self):
        token = self.codec.encode("user-1", AUTH_PURPOSE)
        claims = self.codec.decode(token)
        assert claims.user_id == "user-1"
        assert claims.purpose == "auth"

    def test_each_issuance_is_unique(self):
        assert self.codec.encode("user-1") != self.codec.encode("user-1")

    def test_tampered_signature_rejected(self):
        token = self.codec.encode("user-1")
        tampered = token[:-1] + _flip(token[-1])
        with pytest.raises(InvalidSignature):
            self.codec.decode(tampered)

    def test_tampered_payload_rejected(self):
        token = self.codec.encode("user-1")
        tampered = _flip(token[0]) + token[1:]
        with pytest.raises(InvalidSignature):
            self.codec.decode(tampered)

    def test_other_secret_rejected(self):
        token = TokenCodec("another-secret").encode("user-1")
        with pytest.raises(InvalidSignature):
            self.codec.decode(token)

    @pytest.mark.parametrize("token", ["", "abc", "a.b.c", ".sig", "payload."])
    def test_malformed_structure(self, token):
        with pytest.raises(MalformedToken):
            self.codec.decode(token)

    def test_missing_purpose_rejected(self):
        token = _signed(self.codec, {"user_id": "user-1"})
        with pytest.raises(MalformedToken):
            self.codec.decode(token)

    def test_non_object_payload_rejected(self):
        token = _signed(self.codec, ["user-1", "auth"])
        with pytest.raises(MalformedToken):
            self.codec.decode(token)

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenCodec("")
