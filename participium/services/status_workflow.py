"""
Status Workflow Engine - strict state machine for report statuses.

DESIGN PRINCIPLES:
- Terminal states (REJECTED, RESOLVED) never change again
- A report leaves PENDING_APPROVAL only through approve / reject
- All transitions logged in status_history
- Invalid transitions rejected programmatically
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

from participium.models.report import ReportStatus

logger = logging.getLogger(__name__)


class StatusWorkflowEngine:
    """
    State machine for report status transitions.

    Rules:
    - PENDING_APPROVAL moves to ASSIGNED or REJECTED
    - Work states (ASSIGNED, IN_PROGRESS, SUSPENDED, EXTERNAL_ASSIGNED)
      may move between each other and to RESOLVED
    - IN_PROGRESS and SUSPENDED may be re-applied (the update is recorded)
    """

    # Allowed transitions map: {from_status: [to_status, ...]}
    ALLOWED_TRANSITIONS: Dict[ReportStatus, List[ReportStatus]] = {
        ReportStatus.PENDING_APPROVAL: [ReportStatus.ASSIGNED, ReportStatus.REJECTED],
        ReportStatus.ASSIGNED: [
            ReportStatus.IN_PROGRESS,
            ReportStatus.SUSPENDED,
            ReportStatus.EXTERNAL_ASSIGNED,
            ReportStatus.RESOLVED,
        ],
        ReportStatus.EXTERNAL_ASSIGNED: [
            ReportStatus.IN_PROGRESS,
            ReportStatus.SUSPENDED,
            ReportStatus.RESOLVED,
        ],
        ReportStatus.IN_PROGRESS: [
            ReportStatus.IN_PROGRESS,
            ReportStatus.SUSPENDED,
            ReportStatus.EXTERNAL_ASSIGNED,
            ReportStatus.RESOLVED,
        ],
        ReportStatus.SUSPENDED: [
            ReportStatus.IN_PROGRESS,
            ReportStatus.SUSPENDED,
            ReportStatus.EXTERNAL_ASSIGNED,
            ReportStatus.RESOLVED,
        ],
        ReportStatus.REJECTED: [],  # Terminal
        ReportStatus.RESOLVED: [],  # Terminal
    }

    # Targets a staff member may request through a status update
    OPERATOR_STATUSES = [ReportStatus.IN_PROGRESS, ReportStatus.SUSPENDED, ReportStatus.RESOLVED]

    @classmethod
    def is_valid_transition(cls, from_status: str, to_status: str) -> bool:
        """
        Check if a status transition is valid.

        Args:
            from_status: Current status
            to_status: Desired new status

        Returns:
            True if transition is allowed, False otherwise
        """
        try:
            from_enum = ReportStatus(from_status)
            to_enum = ReportStatus(to_status)
        except ValueError:
            return False

        return to_enum in cls.ALLOWED_TRANSITIONS.get(from_enum, [])

    @classmethod
    def get_allowed_transitions(cls, current_status: str) -> List[str]:
        try:
            current_enum = ReportStatus(current_status)
        except ValueError:
            return []
        return [status.value for status in cls.ALLOWED_TRANSITIONS.get(current_enum, [])]

    @classmethod
    def is_operator_status(cls, status: Optional[str]) -> bool:
        return status in {s.value for s in cls.OPERATOR_STATUSES}

    @classmethod
    def create_status_history_entry(
        cls,
        from_status: Optional[str],
        to_status: str,
        changed_by: str,
        note: Optional[str] = None
    ) -> Dict:
        """
        Create a status history entry for the audit trail.

        Server timestamps are not allowed inside arrays, so the entry is
        stamped with the application clock.
        """
        return {
            "from_status": from_status,
            "to_status": to_status,
            "changed_by": changed_by,
            "timestamp": datetime.now(timezone.utc),
            "note": note or "",
        }

    @classmethod
    def validate_and_transition(
        cls,
        current_status: str,
        new_status: str,
        changed_by: str,
        note: Optional[str] = None
    ) -> Dict:
        """
        Validate transition and create history entry.

        Args:
            current_status: Current status
            new_status: Desired new status
            changed_by: User identifier
            note: Optional note

        Returns:
            Dict with validation result and history entry

        Raises:
            ValueError: If transition is invalid
        """
        if not cls.is_valid_transition(current_status, new_status):
            allowed = cls.get_allowed_transitions(current_status)
            raise ValueError(
                f"Invalid status transition: {current_status} → {new_status}. "
                f"Allowed transitions from {current_status}: {allowed}"
            )

        logger.debug(f"Status transition {current_status} → {new_status} by {changed_by}")

        return {
            "valid": True,
            "from_status": current_status,
            "to_status": new_status,
            "history_entry": cls.create_status_history_entry(
                from_status=current_status,
                to_status=new_status,
                changed_by=changed_by,
                note=note,
            ),
        }
