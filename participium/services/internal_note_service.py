"""
Internal Note Service - staff-only annotations shared between the assigned
technical officer and the external maintainer.
"""

from typing import Dict, List, Optional
import logging

from participium.core.errors import ForbiddenError, NotFoundError
from participium.models.user import Role
from participium.repositories.conversation_repository import get_internal_note_repository
from participium.repositories.report_repository import get_report_repository
from participium.repositories.user_repository import get_user_repository
from participium.services.message_service import validate_content
from participium.services.notification_service import get_notification_service
from participium.services.presenters import display_name, note_dict
from participium.services.role_matrix import is_technical

logger = logging.getLogger(__name__)


class InternalNoteService:

    def __init__(self, reports=None, users=None, notes=None, notifications=None):
        self.reports = reports or get_report_repository()
        self.users = users or get_user_repository()
        self.notes = notes or get_internal_note_repository()
        self.notifications = notifications or get_notification_service()

    def create_note(self, report_id: str, author_id: str, content: Optional[str]) -> Dict:
        """
        Add an internal note and notify the other staff member on the report.

        Raises:
            NotFoundError: report does not exist
            ForbiddenError: author is not assigned staff
            BadRequestError / UnprocessableEntityError: invalid content
        """
        report, author = self._load_for(report_id, author_id)
        content = validate_content(content)

        note = self.notes.create({
            "report_id": report_id,
            "author_id": author_id,
            "author_role": list(author.get("role") or []),
            "content": content,
        })

        if author_id == report.get("assigned_officer_id"):
            recipient_id = report.get("external_maintainer_id")
        else:
            recipient_id = report.get("assigned_officer_id")
        if recipient_id and recipient_id != author_id:
            self.notifications.notify_internal_note(report, recipient_id, display_name(author))

        logger.info(f"Internal note {note['id']} added on report {report_id} by {author_id}")
        return note_dict(note, author)

    def get_notes(self, report_id: str, user_id: str) -> List[Dict]:
        self._load_for(report_id, user_id)
        authors: Dict[str, Optional[Dict]] = {}
        result = []
        for note in self.notes.find_by_report(report_id):
            author_id = note.get("author_id")
            if author_id not in authors:
                authors[author_id] = self.users.find_by_id(author_id)
            result.append(note_dict(note, authors[author_id]))
        return result

    def _load_for(self, report_id: str, user_id: str):
        report = self.reports.find_by_id(report_id)
        if not report:
            raise NotFoundError("Report not found")
        if user_id not in (report.get("assigned_officer_id"), report.get("external_maintainer_id")):
            raise ForbiddenError("You are not assigned to this report")
        user = self.users.find_by_id(user_id)
        roles = (user or {}).get("role") or []
        if not (is_technical(roles) or Role.EXTERNAL_MAINTAINER.value in roles):
            raise ForbiddenError("Only technical staff and external maintainers can access internal notes")
        return report, user


_internal_note_service = None


def get_internal_note_service() -> InternalNoteService:
    global _internal_note_service
    if _internal_note_service is None:
        _internal_note_service = InternalNoteService()
    return _internal_note_service
