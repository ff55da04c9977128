"""
Telegram endpoints.

Account-linking endpoints are called by logged-in users from the web app;
the remaining ones are called by the bot, which identifies the citizen by
the Telegram id bound during linking.
"""

from fastapi import APIRouter, Depends, status
from typing import Dict, List

from participium.models.base import MessageResponse
from participium.models.telegram import (
    TelegramCheckLinkedRequest,
    TelegramLinkRequest,
    TelegramLinkResponse,
    TelegramReportCreate,
    TelegramReportCreated,
    TelegramReportSummary,
    TelegramStatusResponse,
    TelegramTokenResponse,
)
from participium.routes.deps import get_current_user
from participium.services.telegram_service import get_telegram_service

router = APIRouter(prefix="/telegram", tags=["Telegram"])


@router.post("/generate-token", response_model=TelegramTokenResponse)
async def generate_token(user: Dict = Depends(get_current_user)):
    return get_telegram_service().generate_token(user["id"])


@router.get("/status", response_model=TelegramStatusResponse)
async def telegram_status(user: Dict = Depends(get_current_user)):
    return get_telegram_service().get_status(user["id"])


@router.delete("/unlink", response_model=MessageResponse)
async def unlink(user: Dict = Depends(get_current_user)):
    return get_telegram_service().unlink(user["id"])


@router.post("/link", response_model=TelegramLinkResponse)
async def link(request: TelegramLinkRequest):
    return get_telegram_service().link(request.token, request.telegram_id, request.telegram_username)


@router.post("/check-linked", response_model=TelegramStatusResponse)
async def check_linked(request: TelegramCheckLinkedRequest):
    return get_telegram_service().check_linked(request.telegram_id)


@router.post("/reports", response_model=TelegramReportCreated, status_code=status.HTTP_201_CREATED)
async def create_report(request: TelegramReportCreate):
    return get_telegram_service().create_report(request.model_dump())


@router.get("/{telegram_id}/reports", response_model=List[TelegramReportSummary])
async def list_reports(telegram_id: str):
    return get_telegram_service().list_reports(telegram_id)


@router.get("/{telegram_id}/reports/{report_id}", response_model=TelegramReportSummary)
async def get_report(telegram_id: str, report_id: str):
    return get_telegram_service().get_report(telegram_id, report_id)
