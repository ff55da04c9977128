"""
Notifications collection (one inbox row per affected user).
"""

from typing import Dict, List, Optional

from participium.repositories.base import FirestoreRepository
from participium.utils.firestore_helpers import sort_by_created_at


class NotificationRepository(FirestoreRepository):
    collection_name = "notifications"

    def find_by_user(self, user_id: str, unread_only: bool = False, limit: Optional[int] = None) -> List[Dict]:
        filters = [("user_id", "==", user_id)]
        if unread_only:
            filters.append(("is_read", "==", False))
        rows = sort_by_created_at(self.find_where(*filters))
        return rows[:limit] if limit else rows


_notification_repository = None


def get_notification_repository() -> NotificationRepository:
    global _notification_repository
    if _notification_repository is None:
        _notification_repository = NotificationRepository()
    return _notification_repository
