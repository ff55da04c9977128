"""
Pydantic models for citizen reports and their conversations.
Request models stay permissive on purpose-specific fields (status, reason,
content...) so the services can answer with the domain error the API
contract defines instead of a generic validation failure.
"""

from pydantic import Field
from datetime import datetime
from typing import List, Optional
from enum import Enum

from participium.models.base import CamelModel
from participium.models.user import UserSummary


class ReportCategory(str, Enum):
    WATER_SUPPLY_DRINKING_WATER = "WATER_SUPPLY_DRINKING_WATER"
    ARCHITECTURAL_BARRIERS = "ARCHITECTURAL_BARRIERS"
    SEWER_SYSTEM = "SEWER_SYSTEM"
    PUBLIC_LIGHTING = "PUBLIC_LIGHTING"
    WASTE = "WASTE"
    ROAD_SIGNS_TRAFFIC_LIGHTS = "ROAD_SIGNS_TRAFFIC_LIGHTS"
    ROADS_URBAN_FURNISHINGS = "ROADS_URBAN_FURNISHINGS"
    PUBLIC_GREEN_AREAS_PLAYGROUNDS = "PUBLIC_GREEN_AREAS_PLAYGROUNDS"
    OTHER = "OTHER"


class ReportStatus(str, Enum):
    """
    Report lifecycle:
    PENDING_APPROVAL → ASSIGNED | REJECTED
    ASSIGNED → IN_PROGRESS | SUSPENDED | EXTERNAL_ASSIGNED | RESOLVED
    """
    PENDING_APPROVAL = "PENDING_APPROVAL"
    ASSIGNED = "ASSIGNED"
    REJECTED = "REJECTED"
    IN_PROGRESS = "IN_PROGRESS"
    SUSPENDED = "SUSPENDED"
    EXTERNAL_ASSIGNED = "EXTERNAL_ASSIGNED"
    RESOLVED = "RESOLVED"


class ReportCreate(CamelModel):
    """
    Model for creating a new report (incoming POST request).
    Photos are references (URLs) produced by the upload step.
    """
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=1000)
    category: str = Field(..., description="One of ReportCategory")
    latitude: float
    longitude: float
    address: Optional[str] = Field(None, max_length=500)
    is_anonymous: bool = False
    photos: List[str] = Field(default_factory=list, description="1 to 3 photo URLs")

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Broken street lamp",
                "description": "The lamp at the corner has been off for a week.",
                "category": "PUBLIC_LIGHTING",
                "latitude": 45.0703,
                "longitude": 7.6869,
                "isAnonymous": False,
                "photos": ["https://example.com/lamp.jpg"],
            }
        }


class ApproveRequest(CamelModel):
    assigned_technical_id: Optional[str] = None


class RejectRequest(CamelModel):
    reason: Optional[str] = None


class StatusUpdateRequest(CamelModel):
    status: Optional[str] = None


class AssignExternalRequest(CamelModel):
    external_company_id: Optional[str] = None
    external_maintainer_id: Optional[str] = None


class ContentRequest(CamelModel):
    """Body of a report message or internal note."""
    content: Optional[str] = None


class PhotoResponse(CamelModel):
    id: str
    url: str


class StatusHistoryEntry(CamelModel):
    from_status: Optional[str] = None
    to_status: str
    changed_by: str
    timestamp: Optional[datetime] = None
    note: Optional[str] = None


class ReportResponse(CamelModel):
    """
    Model for report responses (what API returns).
    `user` is replaced by an anonymous placeholder in public listings
    of anonymous reports.
    """
    id: str = Field(..., description="Firestore document ID")
    title: str
    description: str
    category: str
    latitude: float
    longitude: float
    address: Optional[str] = None
    is_anonymous: bool = False
    status: str
    user: Optional[UserSummary] = None
    assigned_officer_id: Optional[str] = None
    assigned_officer: Optional[UserSummary] = None
    external_maintainer_id: Optional[str] = None
    external_company_id: Optional[str] = None
    rejected_reason: Optional[str] = None
    photos: List[PhotoResponse] = Field(default_factory=list)
    status_history: List[StatusHistoryEntry] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReportActionResponse(CamelModel):
    message: str
    report: ReportResponse


class ReportMessageResponse(CamelModel):
    id: str
    report_id: str
    content: str
    sender_id: str
    sender_name: Optional[str] = None
    sender_roles: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class MessageSentResponse(CamelModel):
    message: str
    data: ReportMessageResponse


class InternalNoteResponse(CamelModel):
    id: str
    report_id: str
    content: str
    author_id: str
    author_name: Optional[str] = None
    author_role: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
