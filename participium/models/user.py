"""
User models for authentication, citizen accounts and municipality staff.
"""

from pydantic import EmailStr, Field
from datetime import datetime
from typing import List, Optional
from enum import Enum

from participium.models.base import CamelModel


class Role(str, Enum):
    """
    Platform roles. A user holds a list of roles; municipality technical
    staff may hold several technical roles at once.
    """
    CITIZEN = "CITIZEN"
    ADMINISTRATOR = "ADMINISTRATOR"
    PUBLIC_RELATIONS = "PUBLIC_RELATIONS"
    EXTERNAL_MAINTAINER = "EXTERNAL_MAINTAINER"
    # Technical offices
    CULTURE_EVENTS_TOURISM_SPORTS = "CULTURE_EVENTS_TOURISM_SPORTS"
    LOCAL_PUBLIC_SERVICES = "LOCAL_PUBLIC_SERVICES"
    EDUCATION_SERVICES = "EDUCATION_SERVICES"
    PUBLIC_RESIDENTIAL_HOUSING = "PUBLIC_RESIDENTIAL_HOUSING"
    INFORMATION_SYSTEMS = "INFORMATION_SYSTEMS"
    MUNICIPAL_BUILDING_MAINTENANCE = "MUNICIPAL_BUILDING_MAINTENANCE"
    PRIVATE_BUILDINGS = "PRIVATE_BUILDINGS"
    INFRASTRUCTURES = "INFRASTRUCTURES"
    GREENSPACES_AND_ANIMAL_PROTECTION = "GREENSPACES_AND_ANIMAL_PROTECTION"
    WASTE_MANAGEMENT = "WASTE_MANAGEMENT"
    ROAD_MAINTENANCE = "ROAD_MAINTENANCE"
    CIVIL_PROTECTION = "CIVIL_PROTECTION"


class SignupRequest(CamelModel):
    """Citizen self-registration."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class VerifyEmailRequest(CamelModel):
    email: EmailStr
    code: str = Field(..., min_length=6, max_length=6, description="6-digit verification code")


class ResendCodeRequest(CamelModel):
    email: EmailStr


class CitizenProfileUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    telegram_username: Optional[str] = Field(None, max_length=64)
    email_notifications_enabled: Optional[bool] = None


class MunicipalityUserCreate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: List[str] = Field(..., description="Non-empty list of municipality roles")


class MunicipalityUserUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    roles: Optional[List[str]] = None


class UserSummary(CamelModel):
    """Reporter / staff data embedded in reports and messages."""
    id: Optional[str] = None
    first_name: str
    last_name: str
    email: Optional[str] = None
    role: List[str] = Field(default_factory=list)


class UserResponse(CamelModel):
    """Model for user responses."""
    id: str = Field(..., description="Firestore document ID")
    first_name: str
    last_name: str
    email: str
    role: List[str]
    is_verified: bool = False
    telegram_username: Optional[str] = None
    email_notifications_enabled: bool = True
    external_company_id: Optional[str] = None
    created_at: Optional[datetime] = None


class SessionResponse(CamelModel):
    """Login / session lookup response."""
    authenticated: bool
    message: Optional[str] = None
    user: Optional[UserResponse] = None
    token: Optional[str] = None


class SignupResponse(CamelModel):
    message: str
    user: UserResponse
