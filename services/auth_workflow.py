"""Signup, email verification and login."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from directory.abstract_directory import AbstractUserDirectory
from models.user import Role, User
from notifications.abstract_notifier import AbstractNotifier
from security.passwords import PasswordHasher
from security.session_tokens import SessionClaims, SessionTokenSigner
from security.verification_tokens import VerificationTokenGenerator

from .errors import (
    AuthError,
    ErrorKind,
    ValidationError,
    duplicate_email,
    duplicate_username,
    invalid_credentials,
)

logger = logging.getLogger(__name__)

LOGIN_REDIRECT = "/login"


class VerificationOutcome(str, Enum):
    VERIFIED = "verified"
    ALREADY_VERIFIED = "already_verified"


@dataclass(frozen=True)
class PublicUser:
    id: int
    username: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(id=user.id, username=user.username, role=user.role)

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "role": self.role}


@dataclass(frozen=True)
class SignupResult:
    user: PublicUser
    redirect: str = LOGIN_REDIRECT


@dataclass(frozen=True)
class VerifyResult:
    outcome: VerificationOutcome
    username: str


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: PublicUser
    max_age: int


class AuthWorkflow:
    """Coordinate the directory, hasher, token generator, signer and notifier.

    Every collaborator and setting is passed in; nothing is read from global
    state, so tests can pin keys, work factors and the mail transport.
    """

    def __init__(
        self,
        directory: AbstractUserDirectory,
        hasher: PasswordHasher,
        signer: SessionTokenSigner,
        token_generator: VerificationTokenGenerator,
        notifier: AbstractNotifier,
        base_url: str,
        min_password_length: int = 6,
    ):
        self.directory = directory
        self.hasher = hasher
        self.signer = signer
        self.token_generator = token_generator
        self.notifier = notifier
        self.base_url = base_url
        self.min_password_length = min_password_length

    # Signup

    def _validate_signup(
        self, username: str, email: str, password: str, confirm_password: str
    ) -> None:
        fields = {
            "username": username,
            "email": email,
            "password": password,
            "confirmPassword": confirm_password,
        }
        for field, value in fields.items():
            if not value:
                raise ValidationError(field, "required")
        if password != confirm_password:
            raise ValidationError("confirmPassword", "mismatch")
        if len(password) < self.min_password_length:
            raise ValidationError("password", "too_short")
        if "@" not in email:
            raise ValidationError("email", "invalid")

    def signup(
        self, username: str, email: str, password: str, confirm_password: str
    ) -> SignupResult:
        self._validate_signup(username, email, password, confirm_password)

        if self.directory.find_by_username(username) is not None:
            raise duplicate_username()
        if self.directory.find_by_email(email) is not None:
            raise duplicate_email()

        password_hash = self.hasher.hash(password)
        token = self.token_generator.generate()

        user = self.directory.create(
            username=username,
            email=email,
            password_hash=password_hash,
            role=Role.USER.value,
            verification_token=token,
        )
        logger.info("Created user %s (id=%s)", user.username, user.id)

        self._notify(user.email, user.username, token)
        return SignupResult(user=PublicUser.from_user(user))

    def _notify(self, email: str, username: str, token: str) -> None:
        try:
            accepted = self.notifier.send_verification(
                email, username, token, self.base_url
            )
        except Exception:
            # The account already exists; mail trouble never undoes it.
            logger.exception(
                "%s: verification email to %s raised",
                ErrorKind.NOTIFIER_FAILURE.value,
                email,
            )
            return
        if not accepted:
            logger.warning(
                "%s: verification email to %s was not sent",
                ErrorKind.NOTIFIER_FAILURE.value,
                email,
            )

    def resend_verification(self, email: str) -> None:
        """Re-send the outstanding token of an unverified account.

        Unknown and already verified addresses are ignored silently.
        """

        if not email:
            raise ValidationError("email", "required")
        user = self.directory.find_by_email(email)
        if user is None or user.is_verified or not user.verification_token:
            logger.info("Verification resend ignored for %s", email)
            return
        self._notify(user.email, user.username, user.verification_token)

    # Verification

    def verify(self, token: str) -> VerifyResult:
        if not token:
            raise AuthError(ErrorKind.INVALID_TOKEN)

        user = self.directory.find_by_verification_token(token)
        if user is None:
            raise AuthError(ErrorKind.INVALID_OR_EXPIRED_TOKEN)

        if user.is_verified:
            return VerifyResult(VerificationOutcome.ALREADY_VERIFIED, user.username)

        username = user.username
        self.directory.mark_verified(user.id)
        logger.info("Verified email for user %s", username)
        return VerifyResult(VerificationOutcome.VERIFIED, username)

    # Login & sessions

    def login(self, username: str, password: str) -> LoginResult:
        if not username or not password:
            raise ValidationError("credentials", "required")

        user = self.directory.find_by_username(username)
        if user is None:
            self.hasher.verify_dummy(password)
            raise invalid_credentials()
        if not self.hasher.verify(password, user.password_hash):
            raise invalid_credentials()

        token = self.signer.issue(user.id, user.role)
        return LoginResult(
            token=token,
            user=PublicUser.from_user(user),
            max_age=self.signer.max_age,
        )

    def session_user(self, token: str | None) -> PublicUser | None:
        """Resolve a session token to the user it names, or ``None``."""

        return self.user_for_claims(self.signer.verify(token))

    def user_for_claims(self, claims: SessionClaims | None) -> PublicUser | None:
        if claims is None:
            return None
        user = self.directory.get(claims.subject_id)
        if user is None:
            return None
        # Role comes from the signed claims, not from the current row.
        return PublicUser(id=user.id, username=user.username, role=claims.role)
