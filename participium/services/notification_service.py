"""
Notification Service - writes inbox rows for every party a report event
concerns, and serves each user's inbox.

Delivery is synchronous: one Firestore write per recipient, no retries.
"""

from typing import Dict, List, Optional
import logging

from participium.core.errors import ForbiddenError, NotFoundError
from participium.models.notification import NotificationType
from participium.repositories.notification_repository import get_notification_repository

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Service for notification fan-out and the notification inbox.
    """

    def __init__(self, notifications=None):
        self.notifications = notifications or get_notification_repository()

    def notify(
        self,
        user_id: Optional[str],
        report_id: Optional[str],
        notification_type: NotificationType,
        title: str,
        message: str,
    ) -> Optional[Dict]:
        """
        Create one notification for a user.

        Args:
            user_id: Recipient (no-op when None)
            report_id: Report the event refers to
            notification_type: Typed reason
            title: Short heading
            message: Human-readable text

        Returns:
            The stored notification, or None when there is no recipient
        """
        if not user_id:
            return None
        notification = self.notifications.create({
            "user_id": user_id,
            "report_id": report_id,
            "type": notification_type.value,
            "title": title,
            "message": message,
            "is_read": False,
        })
        logger.info(f"Notification {notification_type.value} → user {user_id} (report {report_id})")
        return notification

    def notify_status_change(self, report: Dict, old_status: str, new_status: str, recipient_id: Optional[str] = None):
        return self.notify(
            recipient_id or report.get("user_id"),
            report["id"],
            NotificationType.REPORT_STATUS_CHANGED,
            "Report Status Updated",
            f"Your report status has been changed from {old_status} to {new_status}",
        )

    def notify_officer_of_external_update(self, report: Dict, old_status: str, new_status: str, maintainer_name: str):
        """Tell the assigned officer that the external maintainer moved the report."""
        return self.notify(
            report.get("assigned_officer_id"),
            report["id"],
            NotificationType.REPORT_STATUS_CHANGED,
            "External Maintainer Update",
            f'{maintainer_name} changed the status of "{report["title"]}" from {old_status} to {new_status}',
        )

    def notify_approved(self, report: Dict):
        return self.notify(
            report.get("user_id"),
            report["id"],
            NotificationType.REPORT_APPROVED,
            "Report Approved",
            f'Your report "{report["title"]}" has been approved and assigned to a technical officer',
        )

    def notify_rejected(self, report: Dict, reason: str):
        return self.notify(
            report.get("user_id"),
            report["id"],
            NotificationType.REPORT_REJECTED,
            "Report Rejected",
            f'Your report "{report["title"]}" has been rejected. Reason: {reason}',
        )

    def notify_assigned(self, report: Dict, assignee_id: str):
        return self.notify(
            assignee_id,
            report["id"],
            NotificationType.REPORT_ASSIGNED,
            "New Report Assigned",
            f"You have been assigned to work on: {report['title']}",
        )

    def notify_new_message(self, report: Dict, recipient_id: Optional[str], sender_name: str):
        return self.notify(
            recipient_id,
            report["id"],
            NotificationType.MESSAGE_RECEIVED,
            "New Message Received",
            f"{sender_name} has sent you a message regarding your report",
        )

    def notify_internal_note(self, report: Dict, recipient_id: Optional[str], author_name: str):
        return self.notify(
            recipient_id,
            report["id"],
            NotificationType.INTERNAL_NOTE_ADDED,
            "New Internal Note",
            f"{author_name} added an internal note on: {report['title']}",
        )

    def list_for_user(self, user_id: str, unread_only: bool = False, limit: Optional[int] = None) -> List[Dict]:
        return self.notifications.find_by_user(user_id, unread_only=unread_only, limit=limit)

    def mark_as_read(self, notification_id: str, user_id: str) -> Dict:
        notification = self.notifications.find_by_id(notification_id)
        if not notification:
            raise NotFoundError("Notification not found")
        if notification.get("user_id") != user_id:
            raise ForbiddenError("You can only update your own notifications")
        if notification.get("is_read"):
            return notification
        return self.notifications.update(notification_id, {"is_read": True})


# Global service instance (singleton pattern)
_notification_service = None


def get_notification_service() -> NotificationService:
    global _notification_service
    if _notification_service is None:
        _notification_service = NotificationService()
    return _notification_service
