"""Password hashing backed by werkzeug's salted adaptive hashes."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_METHOD = "scrypt:32768:8:1"


class PasswordHasher:
    """Hash and verify passwords with a configurable work factor.

    ``method`` is a werkzeug method string such as ``scrypt:32768:8:1`` or
    ``pbkdf2:sha256:600000``; the trailing parameters are the cost.
    """

    def __init__(self, method: str = DEFAULT_METHOD, salt_length: int = 16):
        self.method = method
        self.salt_length = salt_length
        self._dummy_hash = self.hash("unused-dummy-password")

    def hash(self, password: str) -> str:
        return generate_password_hash(
            password, method=self.method, salt_length=self.salt_length
        )

    def verify(self, password: str, password_hash: str) -> bool:
        # check_password_hash compares digests with hmac.compare_digest.
        if not password or not password_hash:
            return False
        return check_password_hash(password_hash, password)

    def verify_dummy(self, password: str) -> bool:
        """Spend the cost of one verification against a throwaway hash."""

        self.verify(password or "x", self._dummy_hash)
        return False
