"""
User Service - citizen accounts and session authentication.
"""

from typing import Dict, Optional
import logging

from participium.core.errors import ConflictError, ForbiddenError, NotFoundError, UnauthorizedError
from participium.models.user import Role
from participium.repositories.user_repository import get_user_repository
from participium.services.verification_service import get_verification_service
from participium.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """
    Service for user management in Firestore.
    """

    def __init__(self, users=None, verification=None):
        self.users = users or get_user_repository()
        self.verification = verification or get_verification_service()

    def signup_citizen(self, first_name: str, last_name: str, email: str, password: str) -> Dict:
        """
        Register a citizen and send a verification code.

        Args:
            first_name: Given name
            last_name: Family name
            email: Unique e-mail (case-insensitive)
            password: Plain password, stored hashed

        Returns:
            Created user dict (unverified)

        Raises:
            ConflictError: e-mail already registered
        """
        email = normalize_email(email)
        if self.users.find_by_email(email):
            raise ConflictError("Email already in use")

        user = self.users.create({
            "first_name": first_name.strip(),
            "last_name": last_name.strip(),
            "email": email,
            "password_hash": hash_password(password),
            "role": [Role.CITIZEN.value],
            "is_verified": False,
            "external_company_id": None,
            "telegram_id": None,
            "telegram_username": None,
            "email_notifications_enabled": True,
        })
        self.verification.issue_code(user)

        logger.info(f"Citizen registered: {user['id']}")
        return self.users.find_by_id(user["id"])

    def authenticate(self, email: str, password: str) -> Dict:
        """
        Check credentials for login.

        Raises:
            UnauthorizedError: unknown e-mail or wrong password
            ForbiddenError: citizen has not verified the e-mail yet
        """
        user = self.users.find_by_email(normalize_email(email))
        if not user or not verify_password(password, user.get("password_hash")):
            raise UnauthorizedError("Invalid username or password")
        if Role.CITIZEN.value in (user.get("role") or []) and not user.get("is_verified"):
            raise ForbiddenError("Email not verified. Please verify your email before logging in.")
        logger.info(f"User logged in: {user['id']}")
        return user

    def get_user(self, user_id: Optional[str]) -> Optional[Dict]:
        return self.users.find_by_id(user_id)

    def update_citizen_profile(self, user_id: str, update_data: Dict) -> Dict:
        """
        Update the editable part of a citizen profile.

        Args:
            user_id: Citizen id
            update_data: first_name / last_name / telegram_username /
                email_notifications_enabled (None values are ignored)
        """
        user = self.users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        allowed = {"first_name", "last_name", "telegram_username", "email_notifications_enabled"}
        changes = {k: v for k, v in update_data.items() if k in allowed and v is not None}
        if not changes:
            return user
        return self.users.update(user_id, changes)


# Global service instance (singleton pattern)
_user_service = None


def get_user_service() -> UserService:
    """
    Get or create UserService singleton instance.

    Returns:
        UserService: The global user service instance
    """
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
