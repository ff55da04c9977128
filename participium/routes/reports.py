"""
Report endpoints - creation, public map, staff queues and the lifecycle
actions (approve, reject, status updates, external assignment) plus the
per-report conversations.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import Dict, List, Optional
import logging

from participium.models.report import (
    ApproveRequest,
    AssignExternalRequest,
    ContentRequest,
    InternalNoteResponse,
    MessageSentResponse,
    RejectRequest,
    ReportActionResponse,
    ReportCreate,
    ReportMessageResponse,
    ReportResponse,
    StatusUpdateRequest,
)
from participium.models.external import AssignableExternalResponse
from participium.models.user import Role, UserSummary
from participium.routes.deps import get_current_user, require_roles, staff_roles
from participium.services.assignment_service import get_assignment_service
from participium.services.internal_note_service import get_internal_note_service
from participium.services.message_service import get_message_service
from participium.services.report_service import get_report_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])

require_citizen = require_roles(Role.CITIZEN)
require_pr = require_roles(Role.PUBLIC_RELATIONS)
require_technical = require_roles(*staff_roles(include_maintainer=False))
require_staff = require_roles(*staff_roles())


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(report: ReportCreate, user: Dict = Depends(require_citizen)):
    """
    Submit a new report.

    The report starts as PENDING_APPROVAL and waits for a public relations
    officer. Coordinates must fall inside the municipality.
    """
    return get_report_service().create_report(
        user_id=user["id"],
        title=report.title,
        description=report.description,
        category=report.category,
        latitude=report.latitude,
        longitude=report.longitude,
        photos=report.photos,
        is_anonymous=report.is_anonymous,
        address=report.address,
    )


@router.get("", response_model=List[ReportResponse])
async def list_public_reports(
    category: Optional[str] = Query(None, description="Filter by ReportCategory"),
    bbox: Optional[str] = Query(None, description="minLon,minLat,maxLon,maxLat"),
):
    """
    Approved reports for the public map. Anonymous reporters are hidden.
    """
    return get_report_service().get_public_reports(category=category, bbox=bbox)


@router.get("/mine", response_model=List[ReportResponse])
async def list_my_reports(user: Dict = Depends(require_citizen)):
    return get_report_service().get_my_reports(user["id"])


@router.get("/pending", response_model=List[ReportResponse])
async def list_pending_reports(user: Dict = Depends(require_pr)):
    return get_report_service().get_pending_reports()


@router.get("/assigned", response_model=List[ReportResponse])
async def list_assigned_reports(
    status_filter: Optional[str] = Query(None, alias="status"),
    order: str = Query("desc", description="asc or desc by creation date"),
    user: Dict = Depends(require_staff),
):
    """
    Reports assigned to the current technical officer or external maintainer.
    """
    return get_report_service().get_assigned_reports(user["id"], status=status_filter, order=order)


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(report_id: str, user: Dict = Depends(get_current_user)):
    return get_report_service().get_report(report_id, user["id"])


@router.get("/{report_id}/assignable-technicals", response_model=List[UserSummary])
async def assignable_technicals(report_id: str, user: Dict = Depends(require_pr)):
    return get_assignment_service().get_assignable_technicals(report_id)


@router.get("/{report_id}/assignable-externals", response_model=List[AssignableExternalResponse])
async def assignable_externals(report_id: str, user: Dict = Depends(require_technical)):
    return get_assignment_service().get_assignable_externals(report_id, user["id"])


@router.post("/{report_id}/approve", response_model=ReportActionResponse)
async def approve_report(report_id: str, request: ApproveRequest, user: Dict = Depends(require_pr)):
    report = get_report_service().approve(report_id, user["id"], request.assigned_technical_id)
    return {"message": "Report approved and assigned successfully", "report": report}


@router.post("/{report_id}/reject", response_model=ReportActionResponse)
async def reject_report(report_id: str, request: RejectRequest, user: Dict = Depends(require_pr)):
    report = get_report_service().reject(report_id, user["id"], request.reason)
    return {"message": "Report rejected successfully", "report": report}


@router.patch("/{report_id}/status", response_model=ReportActionResponse)
async def update_report_status(report_id: str, request: StatusUpdateRequest, user: Dict = Depends(get_current_user)):
    """
    Move a report to IN_PROGRESS, SUSPENDED or RESOLVED.
    Only the assigned officer or external maintainer may do it.
    """
    report = get_report_service().update_status(report_id, user["id"], request.status)
    return {"message": "Report status updated successfully", "report": report}


@router.post("/{report_id}/assign-external", response_model=ReportActionResponse)
async def assign_external(report_id: str, request: AssignExternalRequest, user: Dict = Depends(get_current_user)):
    report = get_report_service().assign_external(
        report_id,
        user["id"],
        request.external_company_id,
        request.external_maintainer_id,
    )
    return {"message": "Report assigned to external maintainer successfully", "report": report}


@router.post("/{report_id}/messages", response_model=MessageSentResponse, status_code=status.HTTP_201_CREATED)
async def send_message(report_id: str, request: ContentRequest, user: Dict = Depends(get_current_user)):
    message = get_message_service().send_message(report_id, user["id"], request.content)
    return {"message": "Message sent successfully", "data": message}


@router.get("/{report_id}/messages", response_model=List[ReportMessageResponse])
async def list_messages(report_id: str, user: Dict = Depends(get_current_user)):
    return get_message_service().get_messages(report_id, user["id"])


@router.post("/{report_id}/internal-notes", response_model=InternalNoteResponse, status_code=status.HTTP_201_CREATED)
async def create_internal_note(report_id: str, request: ContentRequest, user: Dict = Depends(get_current_user)):
    return get_internal_note_service().create_note(report_id, user["id"], request.content)


@router.get("/{report_id}/internal-notes", response_model=List[InternalNoteResponse])
async def list_internal_notes(report_id: str, user: Dict = Depends(get_current_user)):
    return get_internal_note_service().get_notes(report_id, user["id"])
