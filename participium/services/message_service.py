"""
Message Service - the conversation between a citizen and the staff
working on their report.
"""

from typing import Dict, List, Optional
import logging

from participium.core.errors import BadRequestError, ForbiddenError, NotFoundError, UnprocessableEntityError
from participium.models.user import Role
from participium.repositories.conversation_repository import get_report_message_repository
from participium.repositories.report_repository import get_report_repository
from participium.repositories.user_repository import get_user_repository
from participium.services.notification_service import get_notification_service
from participium.services.presenters import display_name, message_dict

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 2000


def validate_content(content: Optional[str]) -> str:
    """Trimmed message / note text; empty is a 400, too long a 422."""
    content = (content or "").strip()
    if not content:
        raise BadRequestError("Message content is required")
    if len(content) > MAX_CONTENT_LENGTH:
        raise UnprocessableEntityError(f"Message content must be at most {MAX_CONTENT_LENGTH} characters")
    return content


class MessageService:

    def __init__(self, reports=None, users=None, messages=None, notifications=None):
        self.reports = reports or get_report_repository()
        self.users = users or get_user_repository()
        self.messages = messages or get_report_message_repository()
        self.notifications = notifications or get_notification_service()

    def send_message(self, report_id: str, sender_id: str, content: Optional[str]) -> Dict:
        """
        Post a message on a report.

        Citizen messages notify the external maintainer when one is assigned,
        otherwise the assigned officer. Staff messages notify the citizen.

        Raises:
            NotFoundError: report does not exist
            ForbiddenError: sender is not a party of the report
            BadRequestError / UnprocessableEntityError: invalid content
        """
        report = self._load_for(report_id, sender_id)
        content = validate_content(content)

        message = self.messages.create({
            "report_id": report_id,
            "sender_id": sender_id,
            "content": content,
        })
        sender = self.users.find_by_id(sender_id)

        if sender_id == report.get("user_id"):
            recipient_id = report.get("external_maintainer_id") or report.get("assigned_officer_id")
        else:
            recipient_id = report.get("user_id")
        if recipient_id and recipient_id != sender_id:
            self.notifications.notify_new_message(report, recipient_id, display_name(sender))

        logger.info(f"Message {message['id']} posted on report {report_id} by {sender_id}")
        return message_dict(message, sender)

    def get_messages(self, report_id: str, user_id: str) -> List[Dict]:
        self._load_for(report_id, user_id)
        senders: Dict[str, Optional[Dict]] = {}
        result = []
        for message in self.messages.find_by_report(report_id):
            sender_id = message.get("sender_id")
            if sender_id not in senders:
                senders[sender_id] = self.users.find_by_id(sender_id)
            result.append(message_dict(message, senders[sender_id]))
        return result

    def _load_for(self, report_id: str, user_id: str) -> Dict:
        report = self.reports.find_by_id(report_id)
        if not report:
            raise NotFoundError("Report not found")
        if user_id == report.get("user_id"):
            return report
        if user_id in (report.get("assigned_officer_id"), report.get("external_maintainer_id")):
            return report
        user = self.users.find_by_id(user_id)
        if user and Role.CITIZEN.value in (user.get("role") or []):
            raise ForbiddenError("You can only send messages on your own reports")
        raise ForbiddenError("You are not assigned to this report")


_message_service = None


def get_message_service() -> MessageService:
    global _message_service
    if _message_service is None:
        _message_service = MessageService()
    return _message_service
