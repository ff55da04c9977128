"""
Per-report conversations: citizen-visible messages and staff-only notes.
"""

from typing import Dict, List

from participium.repositories.base import FirestoreRepository
from participium.utils.firestore_helpers import sort_by_created_at


class ReportMessageRepository(FirestoreRepository):
    collection_name = "report_messages"

    def find_by_report(self, report_id: str) -> List[Dict]:
        return sort_by_created_at(self.find_where(("report_id", "==", report_id)), descending=False)


class InternalNoteRepository(FirestoreRepository):
    collection_name = "internal_notes"

    def find_by_report(self, report_id: str) -> List[Dict]:
        return sort_by_created_at(self.find_where(("report_id", "==", report_id)), descending=False)


_message_repository = None
_note_repository = None


def get_report_message_repository() -> ReportMessageRepository:
    global _message_repository
    if _message_repository is None:
        _message_repository = ReportMessageRepository()
    return _message_repository


def get_internal_note_repository() -> InternalNoteRepository:
    global _note_repository
    if _note_repository is None:
        _note_repository = InternalNoteRepository()
    return _note_repository
