"""Credential primitives: password hashes, verification and session tokens."""

from .passwords import PasswordHasher
from .session_tokens import SessionClaims, SessionTokenSigner
from .verification_tokens import VerificationTokenGenerator

__all__ = [
    "PasswordHasher",
    "SessionClaims",
    "SessionTokenSigner",
    "VerificationTokenGenerator",
]
