"""
Models for external maintenance companies and their maintainer accounts.
"""

from pydantic import EmailStr, Field
from typing import List, Optional

from participium.models.base import CamelModel
from participium.models.user import UserResponse, UserSummary


class ExternalCompanyCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    categories: List[str] = Field(default_factory=list, description="1 or 2 report categories")
    platform_access: bool = False


class ExternalCompanyResponse(CamelModel):
    id: str
    name: str
    categories: List[str]
    platform_access: bool


class ExternalMaintainerCreate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    external_company_id: Optional[str] = None


class ExternalMaintainerResponse(UserResponse):
    company: ExternalCompanyResponse


class AssignableExternalResponse(ExternalCompanyResponse):
    """A company eligible for a report, with the maintainers who can take it."""
    maintainers: List[UserSummary] = Field(default_factory=list)
