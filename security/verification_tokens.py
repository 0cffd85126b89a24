"""Single-use email verification tokens."""

from __future__ import annotations

import secrets

TOKEN_BYTES = 32


class VerificationTokenGenerator:
    """Produce hex tokens with ``nbytes`` bytes of randomness."""

    def __init__(self, nbytes: int = TOKEN_BYTES):
        if nbytes < 16:
            raise ValueError("Verification tokens need at least 128 bits of randomness.")
        self.nbytes = nbytes

    def generate(self) -> str:
        return secrets.token_hex(self.nbytes)
