"""
Models exchanged with the Telegram bot and the account-linking flow.
"""

from pydantic import Field
from datetime import datetime
from typing import List, Optional, Union

from participium.models.base import CamelModel
from participium.models.user import UserSummary


class TelegramTokenResponse(CamelModel):
    token: str
    expires_at: datetime
    deep_link: str
    message: str


class TelegramLinkRequest(CamelModel):
    token: Optional[str] = None
    telegram_id: Optional[Union[str, int]] = None
    telegram_username: Optional[str] = None


class TelegramLinkResponse(CamelModel):
    success: bool
    message: str
    user: UserSummary


class TelegramStatusResponse(CamelModel):
    linked: bool
    telegram_username: Optional[str] = None
    telegram_id: Optional[Union[str, int]] = None


class TelegramCheckLinkedRequest(CamelModel):
    telegram_id: Optional[Union[str, int]] = None


class TelegramReportCreate(CamelModel):
    telegram_id: Union[str, int]
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_anonymous: bool = False
    photo_file_ids: List[str] = Field(default_factory=list)


class TelegramReportCreated(CamelModel):
    success: bool
    message: str
    report_id: str


class TelegramReportSummary(CamelModel):
    report_id: str
    title: str
    category: str
    status: str
    address: Optional[str] = None
    rejected_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
