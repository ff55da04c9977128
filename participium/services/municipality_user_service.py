"""
Municipality User Service - administrator management of staff accounts
(public relations, technical offices, administrators).
"""

from typing import Dict, List, Optional
import logging

from participium.core.errors import BadRequestError, ConflictError, NotFoundError
from participium.models.user import Role
from participium.repositories.user_repository import get_user_repository
from participium.services.role_matrix import MUNICIPALITY_ROLES, is_municipality_role, validate_role_combination
from participium.services.user_service import normalize_email
from participium.utils.security import hash_password

logger = logging.getLogger(__name__)


def validate_roles(roles: Optional[List[str]]) -> List[str]:
    """
    Raises:
        BadRequestError: empty list, unknown role, or an invalid combination
    """
    if not roles or not isinstance(roles, list):
        raise BadRequestError("Role must be a non-empty array of municipality roles")
    roles = list(dict.fromkeys(roles))
    invalid = [r for r in roles if not is_municipality_role(r)]
    if invalid:
        allowed = ", ".join(r.value for r in MUNICIPALITY_ROLES)
        raise BadRequestError(f"Invalid role(s): {', '.join(invalid)}. Allowed: {allowed}")
    if not validate_role_combination(roles):
        raise BadRequestError("Multiple roles are only allowed for technical office staff")
    return roles


class MunicipalityUserService:

    def __init__(self, users=None):
        self.users = users or get_user_repository()

    def list_users(self) -> List[Dict]:
        return self.users.find_by_any_role([r.value for r in MUNICIPALITY_ROLES])

    def get_user(self, user_id: str) -> Dict:
        user = self.users.find_by_id(user_id)
        if not user or not any(is_municipality_role(r) for r in (user.get("role") or [])):
            raise NotFoundError("Municipality user not found")
        return user

    def create_user(self, first_name: str, last_name: str, email: str, password: str, roles: List[str]) -> Dict:
        """
        Create a staff account. Staff accounts are verified on creation.

        Raises:
            BadRequestError: invalid roles
            ConflictError: e-mail already in use
        """
        roles = validate_roles(roles)
        email = normalize_email(email)
        if self.users.find_by_email(email):
            raise ConflictError("Email already in use")

        user = self.users.create({
            "first_name": first_name.strip(),
            "last_name": last_name.strip(),
            "email": email,
            "password_hash": hash_password(password),
            "role": roles,
            "is_verified": True,
            "external_company_id": None,
            "telegram_id": None,
            "telegram_username": None,
            "email_notifications_enabled": True,
        })
        logger.info(f"Municipality user created: {user['id']} roles={roles}")
        return user

    def update_user(self, user_id: str, update_data: Dict) -> Dict:
        """
        Partial update; roles, when present, are validated like on creation.
        """
        existing = self.get_user(user_id)
        changes: Dict = {}

        if update_data.get("first_name"):
            changes["first_name"] = update_data["first_name"].strip()
        if update_data.get("last_name"):
            changes["last_name"] = update_data["last_name"].strip()
        if update_data.get("email"):
            email = normalize_email(update_data["email"])
            other = self.users.find_by_email(email)
            if other and other["id"] != user_id:
                raise ConflictError("Email already in use")
            changes["email"] = email
        if update_data.get("password"):
            changes["password_hash"] = hash_password(update_data["password"])
        if update_data.get("roles") is not None:
            roles = validate_roles(update_data["roles"])
            if Role.ADMINISTRATOR.value in existing.get("role", []) and Role.ADMINISTRATOR.value not in roles:
                self._ensure_not_last_admin()
            changes["role"] = roles

        if not changes:
            return existing
        logger.info(f"Municipality user updated: {user_id} fields={sorted(changes)}")
        return self.users.update(user_id, changes)

    def delete_user(self, user_id: str) -> None:
        existing = self.get_user(user_id)
        if Role.ADMINISTRATOR.value in existing.get("role", []):
            self._ensure_not_last_admin()
        self.users.delete(user_id)
        logger.info(f"Municipality user deleted: {user_id}")

    def _ensure_not_last_admin(self) -> None:
        if self.users.count_by_role(Role.ADMINISTRATOR.value) <= 1:
            raise BadRequestError("Cannot delete the last administrator account")


_municipality_user_service = None


def get_municipality_user_service() -> MunicipalityUserService:
    global _municipality_user_service
    if _municipality_user_service is None:
        _municipality_user_service = MunicipalityUserService()
    return _municipality_user_service
