"""
Verification Service - 6-digit e-mail verification codes for citizen signup.

Codes are stored on the user document and expire after
EMAIL_VERIFICATION_MINUTES. Delivery is simulated through the log.
"""

from firebase_admin import firestore
from datetime import datetime, timedelta, timezone
from typing import Dict
import logging
import secrets

from participium.core.errors import BadRequestError, GoneError, NotFoundError
from participium.core.settings import settings
from participium.repositories.user_repository import get_user_repository

logger = logging.getLogger(__name__)


class VerificationService:
    """
    Service for verification code generation and checking.
    """

    CODE_LENGTH = 6
    MAX_ATTEMPTS = 5  # Wrong guesses before a new code is required

    def __init__(self, users=None):
        self.users = users or get_user_repository()

    def generate_code(self) -> str:
        return f"{secrets.randbelow(10 ** self.CODE_LENGTH):0{self.CODE_LENGTH}d}"

    def issue_code(self, user: Dict) -> None:
        """
        Generate and store a fresh code for the user, replacing any previous one.

        In production this would be sent by e-mail; for now it is logged.
        """
        code = self.generate_code()
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.EMAIL_VERIFICATION_MINUTES)
        self.users.update(user["id"], {
            "verification_code": code,
            "verification_expires_at": expires_at,
            "verification_attempts": 0,
        })
        logger.info(f"Verification code for {user['email']}: {code} (expires at {expires_at.isoformat()})")

    def resend_code(self, email: str) -> None:
        user = self.users.find_by_email(email)
        if not user:
            raise NotFoundError("User not found")
        if user.get("is_verified"):
            raise BadRequestError("Email already verified")
        self.issue_code(user)

    def verify(self, email: str, code: str) -> Dict:
        """
        Check a code and mark the user as verified.

        Raises:
            NotFoundError: unknown e-mail
            BadRequestError: already verified, wrong code, too many attempts
            GoneError: code expired
        """
        user = self.users.find_by_email(email)
        if not user:
            raise NotFoundError("User not found")
        if user.get("is_verified"):
            raise BadRequestError("Email already verified")

        stored_code = user.get("verification_code")
        if not stored_code:
            raise BadRequestError("No verification code issued. Please request a new one.")

        attempts = user.get("verification_attempts", 0)
        if attempts >= self.MAX_ATTEMPTS:
            raise BadRequestError("Maximum verification attempts exceeded. Please request a new code.")

        expires_at = user.get("verification_expires_at")
        if isinstance(expires_at, datetime):
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            if expires_at < datetime.now(timezone.utc):
                raise GoneError("Verification code has expired")

        if not secrets.compare_digest(stored_code, code or ""):
            self.users.update(user["id"], {"verification_attempts": attempts + 1})
            raise BadRequestError("Invalid verification code")

        verified = self.users.update(user["id"], {
            "is_verified": True,
            "verified_at": firestore.SERVER_TIMESTAMP,
            "verification_code": None,
            "verification_expires_at": None,
            "verification_attempts": 0,
        })
        logger.info(f"Email verified for user {user['id']}")
        return verified


# Global service instance (singleton pattern)
_verification_service = None


def get_verification_service() -> VerificationService:
    global _verification_service
    if _verification_service is None:
        _verification_service = VerificationService()
    return _verification_service
