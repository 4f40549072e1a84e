"""
Tests for bcrypt password hashing.
"""

from auth.password import PasswordHasher


class TestPasswordHasher:
    def setup_method(self):
        self.hasher = PasswordHasher(rounds=4)

    def test_hash_is_not_plaintext(self):
        hashed = self.hasher.hash("password1")
        assert hashed != "password1"
        assert hashed.startswith("$2")

    def test_verify_roundtrip(self):
        hashed = self.hasher.hash("password1")
        assert self.hasher.verify("password1", hashed) is True
        assert self.hasher.verify("password2", hashed) is False

    def test_salt_differs_per_call(self):
        assert self.hasher.hash("password1") != self.hasher.hash("password1")

    def test_malformed_hash_fails_closed(self):
        assert self.hasher.verify("password1", "not-a-bcrypt-hash") is False
        assert self.hasher.verify("password1", "") is False
