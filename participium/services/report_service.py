"""
Report service - business logic for the report lifecycle.

DESIGN NOTE:
- Reports are created by citizens as PENDING_APPROVAL
- Public relations officers approve (assign a technical officer) or reject
- The assigned officer, or the external maintainer they delegate to,
  moves the report through IN_PROGRESS / SUSPENDED to RESOLVED
- Every transition goes through StatusWorkflowEngine and is recorded in
  status_history; every affected party gets a notification
"""

from typing import Dict, List, Optional
import logging

from participium.core.errors import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    UnprocessableEntityError,
)
from participium.core.settings import settings
from participium.models.report import ReportCategory, ReportStatus
from participium.models.user import Role
from participium.repositories.conversation_repository import get_report_message_repository
from participium.repositories.external_company_repository import get_external_company_repository
from participium.repositories.report_repository import get_report_repository
from participium.repositories.user_repository import get_user_repository
from participium.services.geocoding.service import parse_bounding_box, resolve_address
from participium.services.notification_service import get_notification_service
from participium.services.presenters import display_name, report_dict
from participium.services.role_matrix import get_roles_for_category, roles_intersect
from participium.services.status_workflow import StatusWorkflowEngine
from participium.utils.boundaries import is_valid_coordinate, is_within_city

logger = logging.getLogger(__name__)

MAX_PHOTOS = 3
MAX_REJECTION_REASON = 500

# Statuses visible on the public map
PUBLIC_STATUSES = [
    ReportStatus.ASSIGNED.value,
    ReportStatus.EXTERNAL_ASSIGNED.value,
    ReportStatus.IN_PROGRESS.value,
    ReportStatus.SUSPENDED.value,
    ReportStatus.RESOLVED.value,
]


def _allowed_categories() -> str:
    return ", ".join(c.value for c in ReportCategory)


def validate_category(category: Optional[str]) -> str:
    try:
        return ReportCategory(category).value
    except ValueError:
        raise BadRequestError(f"Invalid category. Allowed: {_allowed_categories()}")


class ReportService:
    """
    Service for report creation, queries and lifecycle operations.
    """

    def __init__(self, reports=None, users=None, messages=None, companies=None, notifications=None):
        self.reports = reports or get_report_repository()
        self.users = users or get_user_repository()
        self.messages = messages or get_report_message_repository()
        self.companies = companies or get_external_company_repository()
        self.notifications = notifications or get_notification_service()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_report(
        self,
        user_id: str,
        title: Optional[str],
        description: Optional[str],
        category: Optional[str],
        latitude,
        longitude,
        photos: List[str],
        is_anonymous: bool = False,
        address: Optional[str] = None,
    ) -> Dict:
        """
        Create a new citizen report.

        Flow:
        1. Validate required fields, category, photos and coordinates
        2. Resolve a street address when the client did not send one
        3. Store the report as PENDING_APPROVAL with its first history entry

        Args:
            user_id: Reporting citizen
            title: Short title
            description: Free text description
            category: ReportCategory value
            latitude: Report latitude
            longitude: Report longitude
            photos: 1 to 3 photo references
            is_anonymous: Hide the reporter on public listings
            address: Optional street address

        Returns:
            Report payload
        """
        missing = [
            name for name, value in (
                ("title", title),
                ("description", description),
                ("category", category),
                ("latitude", latitude),
                ("longitude", longitude),
            )
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise BadRequestError(f"Missing required fields: {', '.join(missing)}")

        category = validate_category(category)

        photos = [p for p in (photos or []) if p]
        if not photos:
            raise BadRequestError("At least one photo is required")
        if len(photos) > MAX_PHOTOS:
            raise BadRequestError(f"Maximum {MAX_PHOTOS} photos allowed")

        if not is_valid_coordinate(latitude, longitude):
            raise BadRequestError("Invalid coordinates")
        latitude, longitude = float(latitude), float(longitude)
        if settings.ENFORCE_CITY_BOUNDARIES and not is_within_city(latitude, longitude):
            raise UnprocessableEntityError("Coordinates are outside Turin municipality boundaries")

        if not address:
            address = resolve_address(latitude, longitude)

        history_entry = StatusWorkflowEngine.create_status_history_entry(
            from_status=None,
            to_status=ReportStatus.PENDING_APPROVAL.value,
            changed_by="system",
            note="Report submitted",
        )

        report = self.reports.create({
            "title": title.strip(),
            "description": description.strip(),
            "category": category,
            "latitude": latitude,
            "longitude": longitude,
            "address": address,
            "is_anonymous": bool(is_anonymous),
            "status": ReportStatus.PENDING_APPROVAL.value,
            "user_id": user_id,
            "assigned_officer_id": None,
            "external_maintainer_id": None,
            "external_company_id": None,
            "rejected_reason": None,
            "photos": photos,
            "status_history": [history_entry],
        })

        logger.info(f"Report created: {report['id']} ({category}) by user {user_id}")
        return self._present(report)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_public_reports(self, category: Optional[str] = None, bbox: Optional[str] = None) -> List[Dict]:
        """
        Reports visible on the public map. Anonymous reporters are masked.

        Args:
            category: Optional ReportCategory filter
            bbox: Optional "minLon,minLat,maxLon,maxLat" filter
        """
        if category:
            category = validate_category(category)
        box = parse_bounding_box(bbox) if bbox else None

        reports = self.reports.find_by_statuses(PUBLIC_STATUSES, category=category)
        if box:
            min_lon, min_lat, max_lon, max_lat = box
            reports = [
                r for r in reports
                if min_lon <= r.get("longitude", 0) <= max_lon and min_lat <= r.get("latitude", 0) <= max_lat
            ]
        return self._present_many(reports, anonymize=True)

    def get_my_reports(self, user_id: str) -> List[Dict]:
        return self._present_many(self.reports.find_by_user(user_id))

    def get_pending_reports(self) -> List[Dict]:
        reports = self.reports.find_by_statuses([ReportStatus.PENDING_APPROVAL.value])
        return self._present_many(reports)

    def get_assigned_reports(self, user_id: str, status: Optional[str] = None, order: str = "desc") -> List[Dict]:
        """
        Reports handled by a technical officer or external maintainer.

        Args:
            user_id: Staff member
            status: Optional status filter (internal-path statuses only)
            order: "asc" or "desc" by creation date
        """
        if status and status not in PUBLIC_STATUSES:
            raise BadRequestError(f"Invalid status filter. Allowed: {', '.join(PUBLIC_STATUSES)}")
        if order not in ("asc", "desc"):
            raise BadRequestError("Invalid sort order. Allowed: asc, desc")

        reports = self.reports.find_handled_by(user_id, status=status, descending=order == "desc")
        return self._present_many(reports)

    def get_report(self, report_id: str, user_id: str) -> Dict:
        """
        Report detail for its owner or the staff working on it.

        Raises:
            NotFoundError: report does not exist
            ForbiddenError: caller is neither owner nor assigned staff
        """
        report = self._load(report_id)
        if user_id not in self._parties(report):
            raise ForbiddenError("You are not authorized to view this report")
        return self._present(report)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def approve(self, report_id: str, actor_id: str, assigned_technical_id: Optional[str]) -> Dict:
        """
        Approve a pending report and assign it to a technical officer.

        Raises:
            NotFoundError: report does not exist
            BadRequestError: report not pending, or no technical given
            UnprocessableEntityError: technical missing or wrong office
        """
        report = self._load(report_id)
        if report.get("status") != ReportStatus.PENDING_APPROVAL.value:
            raise BadRequestError("Report is not in PENDING_APPROVAL status")
        if not assigned_technical_id:
            raise BadRequestError("assignedTechnicalId is required")

        technical = self.users.find_by_id(assigned_technical_id)
        if not technical:
            raise UnprocessableEntityError("Assigned technical not found")
        if not roles_intersect(technical.get("role"), get_roles_for_category(report["category"])):
            raise UnprocessableEntityError(
                f"Assigned technical has an invalid role for category {report['category']}"
            )

        report = self._transition(
            report,
            ReportStatus.ASSIGNED.value,
            actor_id,
            {"assigned_officer_id": technical["id"]},
            note=f"Assigned to technical officer {technical['id']}",
        )
        self._system_message(report, actor_id, "Report approved by public relations officer")

        self.notifications.notify_approved(report)
        self.notifications.notify_assigned(report, technical["id"])

        logger.info(f"Report approved: {report_id} → technical {technical['id']}")
        return self._present(report)

    def reject(self, report_id: str, actor_id: str, reason: Optional[str]) -> Dict:
        """
        Reject a pending report with a reason shown to the citizen.

        Raises:
            BadRequestError: blank reason or report not pending
            UnprocessableEntityError: reason longer than 500 characters
            NotFoundError: report does not exist
        """
        if not reason or not reason.strip():
            raise BadRequestError("Rejection reason is required")
        reason = reason.strip()
        if len(reason) > MAX_REJECTION_REASON:
            raise UnprocessableEntityError(
                f"Rejection reason must be less than {MAX_REJECTION_REASON} characters"
            )

        report = self._load(report_id)
        if report.get("status") != ReportStatus.PENDING_APPROVAL.value:
            raise BadRequestError("Report is not in PENDING_APPROVAL status")

        report = self._transition(
            report,
            ReportStatus.REJECTED.value,
            actor_id,
            {"rejected_reason": reason},
            note=reason,
        )
        self._system_message(report, actor_id, "Report rejected by public relations officer")
        self.notifications.notify_rejected(report, reason)

        logger.info(f"Report rejected: {report_id}")
        return self._present(report)

    def update_status(self, report_id: str, actor_id: str, new_status: Optional[str]) -> Dict:
        """
        Move an assigned report to IN_PROGRESS, SUSPENDED or RESOLVED.

        Raises:
            BadRequestError: target status not allowed, or invalid transition
            NotFoundError: report does not exist
            ForbiddenError: actor is not assigned to the report
        """
        if not StatusWorkflowEngine.is_operator_status(new_status):
            allowed = ", ".join(s.value for s in StatusWorkflowEngine.OPERATOR_STATUSES)
            raise BadRequestError(f"Invalid status. Allowed: {allowed}")

        report = self._load(report_id)
        if actor_id not in self._staff(report):
            raise ForbiddenError("You are not assigned to this report")

        old_status = report["status"]
        report = self._transition(report, new_status, actor_id)

        self.notifications.notify_status_change(report, old_status, new_status)
        if actor_id == report.get("external_maintainer_id"):
            self.notifications.notify_officer_of_external_update(
                report, old_status, new_status, display_name(self.users.find_by_id(actor_id))
            )

        logger.info(f"Report {report_id} status {old_status} → {new_status} by {actor_id}")
        return self._present(report)

    def assign_external(
        self,
        report_id: str,
        actor_id: str,
        external_company_id: Optional[str],
        external_maintainer_id: Optional[str],
    ) -> Dict:
        """
        Delegate an assigned report to an external maintainer.

        Raises:
            NotFoundError: report or company does not exist
            ForbiddenError: actor is not the assigned officer
            BadRequestError: missing ids or invalid transition
            UnprocessableEntityError: company or maintainer not eligible
        """
        report = self._load(report_id)
        if report.get("assigned_officer_id") != actor_id:
            raise ForbiddenError("You are not assigned to this report")
        if not external_company_id or not external_maintainer_id:
            raise BadRequestError("externalCompanyId and externalMaintainerId are required")
        if not StatusWorkflowEngine.is_valid_transition(report["status"], ReportStatus.EXTERNAL_ASSIGNED.value):
            raise BadRequestError(f"Report cannot be assigned externally from status {report['status']}")
        if report.get("external_maintainer_id"):
            raise BadRequestError("Report is already assigned to an external maintainer")

        company = self.companies.find_by_id(external_company_id)
        if not company:
            raise NotFoundError("External company not found")
        if not company.get("platform_access"):
            raise UnprocessableEntityError("External company does not have platform access")
        if report["category"] not in (company.get("categories") or []):
            raise UnprocessableEntityError("External company does not handle this report category")

        maintainer = self.users.find_by_id(external_maintainer_id)
        if (
            not maintainer
            or Role.EXTERNAL_MAINTAINER.value not in (maintainer.get("role") or [])
            or maintainer.get("external_company_id") != company["id"]
        ):
            raise UnprocessableEntityError("External maintainer does not belong to this company")

        old_status = report["status"]
        report = self._transition(
            report,
            ReportStatus.EXTERNAL_ASSIGNED.value,
            actor_id,
            {
                "external_company_id": company["id"],
                "external_maintainer_id": maintainer["id"],
            },
            note=f"Assigned to external company {company['name']}",
        )

        self.notifications.notify_status_change(report, old_status, ReportStatus.EXTERNAL_ASSIGNED.value)
        self.notifications.notify_assigned(report, maintainer["id"])

        logger.info(f"Report {report_id} assigned to external maintainer {maintainer['id']}")
        return self._present(report)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load(self, report_id: str) -> Dict:
        report = self.reports.find_by_id(report_id)
        if not report:
            raise NotFoundError("Report not found")
        return report

    def _staff(self, report: Dict) -> set:
        return {
            uid for uid in (report.get("assigned_officer_id"), report.get("external_maintainer_id")) if uid
        }

    def _parties(self, report: Dict) -> set:
        return self._staff(report) | {report.get("user_id")}

    def _transition(
        self,
        report: Dict,
        new_status: str,
        actor_id: str,
        extra: Optional[Dict] = None,
        note: Optional[str] = None,
    ) -> Dict:
        try:
            result = StatusWorkflowEngine.validate_and_transition(
                current_status=report["status"],
                new_status=new_status,
                changed_by=actor_id,
                note=note,
            )
        except ValueError as e:
            raise BadRequestError(str(e))

        history = list(report.get("status_history") or [])
        history.append(result["history_entry"])
        update_data = {"status": new_status, "status_history": history}
        update_data.update(extra or {})
        return self.reports.update(report["id"], update_data)

    def _system_message(self, report: Dict, sender_id: str, content: str) -> None:
        self.messages.create({"report_id": report["id"], "sender_id": sender_id, "content": content})

    def _present(self, report: Dict, anonymize: bool = False, cache: Optional[Dict] = None) -> Dict:
        cache = {} if cache is None else cache

        def load_user(user_id):
            if not user_id:
                return None
            if user_id not in cache:
                cache[user_id] = self.users.find_by_id(user_id)
            return cache[user_id]

        return report_dict(report, load_user, anonymize=anonymize)

    def _present_many(self, reports: List[Dict], anonymize: bool = False) -> List[Dict]:
        cache: Dict = {}
        return [self._present(r, anonymize=anonymize, cache=cache) for r in reports]


# Global service instance (singleton pattern)
_report_service = None


def get_report_service() -> ReportService:
    """
    Get or create ReportService singleton instance.

    Returns:
        ReportService: The global report service instance
    """
    global _report_service
    if _report_service is None:
        _report_service = ReportService()
    return _report_service
