"""
Notification inbox models.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from participium.models.base import CamelModel


class NotificationType(str, Enum):
    REPORT_STATUS_CHANGED = "REPORT_STATUS_CHANGED"
    MESSAGE_RECEIVED = "MESSAGE_RECEIVED"
    REPORT_ASSIGNED = "REPORT_ASSIGNED"
    REPORT_APPROVED = "REPORT_APPROVED"
    REPORT_REJECTED = "REPORT_REJECTED"
    INTERNAL_NOTE_ADDED = "INTERNAL_NOTE_ADDED"


class NotificationResponse(CamelModel):
    id: str
    user_id: str
    report_id: Optional[str] = None
    type: str
    title: str
    message: str
    is_read: bool = False
    created_at: Optional[datetime] = None
