"""
Users collection: citizens, municipality staff and external maintainers.
"""

from typing import Dict, List, Optional

from participium.models.user import Role
from participium.repositories.base import FirestoreRepository
from participium.utils.firestore_helpers import chunked


class UserRepository(FirestoreRepository):
    collection_name = "users"

    def find_by_email(self, email: Optional[str]) -> Optional[Dict]:
        if not email:
            return None
        return self.find_one_where(("email", "==", email.strip().lower()))

    def find_by_telegram_id(self, telegram_id: Optional[str]) -> Optional[Dict]:
        if not telegram_id:
            return None
        return self.find_one_where(("telegram_id", "==", str(telegram_id)))

    def find_by_any_role(self, roles: List[str]) -> List[Dict]:
        """Users holding at least one of the given roles."""
        users: Dict[str, Dict] = {}
        for chunk in chunked(list(roles)):
            for user in self.find_where(("role", "array_contains_any", chunk)):
                users[user["id"]] = user
        return sorted(users.values(), key=lambda u: (u.get("last_name", ""), u.get("first_name", "")))

    def find_by_role(self, role: str) -> List[Dict]:
        return self.find_where(("role", "array_contains", role))

    def count_by_role(self, role: str) -> int:
        return len(self.find_by_role(role))

    def find_maintainers_of_company(self, company_id: str) -> List[Dict]:
        rows = self.find_where(("external_company_id", "==", company_id))
        return [u for u in rows if Role.EXTERNAL_MAINTAINER.value in (u.get("role") or [])]


_user_repository = None


def get_user_repository() -> UserRepository:
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository()
    return _user_repository
