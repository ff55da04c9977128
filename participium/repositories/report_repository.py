"""
Reports collection.

Queries filter in Firestore and sort in memory (newest first by default)
so no composite index is needed.
"""

from typing import Dict, List, Optional

from participium.repositories.base import FirestoreRepository
from participium.utils.firestore_helpers import sort_by_created_at


class ReportRepository(FirestoreRepository):
    collection_name = "reports"

    def find_by_statuses(self, statuses: List[str], category: Optional[str] = None) -> List[Dict]:
        filters = [("status", "in", list(statuses))]
        if category:
            filters.append(("category", "==", category))
        return sort_by_created_at(self.find_where(*filters))

    def find_by_user(self, user_id: str) -> List[Dict]:
        return sort_by_created_at(self.find_where(("user_id", "==", user_id)))

    def find_handled_by(self, user_id: str, status: Optional[str] = None, descending: bool = True) -> List[Dict]:
        """Reports where the user is the assigned officer or the external maintainer."""
        rows: Dict[str, Dict] = {}
        for field_path in ("assigned_officer_id", "external_maintainer_id"):
            filters = [(field_path, "==", user_id)]
            if status:
                filters.append(("status", "==", status))
            for report in self.find_where(*filters):
                rows[report["id"]] = report
        return sort_by_created_at(list(rows.values()), descending=descending)


_report_repository = None


def get_report_repository() -> ReportRepository:
    global _report_repository
    if _report_repository is None:
        _report_repository = ReportRepository()
    return _report_repository
