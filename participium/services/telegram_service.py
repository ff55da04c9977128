"""
Telegram Service - account linking for the Telegram bot and the bot's
report endpoints.

Linking flow:
1. A logged-in user asks for a one-time token (valid TELEGRAM_TOKEN_MINUTES)
2. The deep link opens the bot, which calls link() with the token and the
   chat's Telegram id
3. The bot then acts on behalf of the user identified by that Telegram id
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
import logging
import secrets

from participium.core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from participium.core.settings import settings
from participium.repositories.report_repository import get_report_repository
from participium.repositories.telegram_token_repository import get_telegram_token_repository
from participium.repositories.user_repository import get_user_repository
from participium.services.presenters import user_summary
from participium.services.report_service import get_report_service

logger = logging.getLogger(__name__)

TOKEN_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
TOKEN_LENGTH = 6
MIN_DESCRIPTION = 10
MAX_DESCRIPTION = 1000


def generate_link_token() -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class TelegramService:

    def __init__(self, users=None, tokens=None, reports=None, report_service=None):
        self.users = users or get_user_repository()
        self.tokens = tokens or get_telegram_token_repository()
        self.reports = reports or get_report_repository()
        self.report_service = report_service or get_report_service()

    def generate_token(self, user_id: str) -> Dict:
        """
        Issue a one-time link token; previous unused tokens are discarded.

        Raises:
            NotFoundError: user does not exist
            ConflictError: user already has a linked Telegram account
        """
        user = self.users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.get("telegram_id"):
            raise ConflictError("Telegram account already linked to this user")

        self.tokens.delete_unused_for_user(user_id)

        token = generate_link_token()
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.TELEGRAM_TOKEN_MINUTES)
        self.tokens.create({"token": token, "user_id": user_id, "expires_at": expires_at, "used": False})

        logger.info(f"Telegram link token issued for user {user_id}")
        return {
            "token": token,
            "expires_at": expires_at,
            "deep_link": f"https://t.me/{settings.TELEGRAM_BOT_USERNAME}?start=link_{token}",
            "message": "Click the link to connect your Telegram account",
        }

    def link(self, token: Optional[str], telegram_id: Optional[str], telegram_username: Optional[str] = None) -> Dict:
        """
        Bind a Telegram id to the user that owns the token.

        Raises:
            BadRequestError: missing token / id, or expired token
            NotFoundError: unknown token
            ConflictError: token used, or Telegram id linked to another user
        """
        if not token:
            raise BadRequestError("Token is required")
        if not telegram_id:
            raise BadRequestError("Telegram ID is required")
        telegram_id = str(telegram_id)

        link_token = self.tokens.find_by_token(token.strip().upper())
        if not link_token:
            raise NotFoundError("Invalid token")
        if link_token.get("used"):
            raise ConflictError("Token has already been used")
        if _as_utc(link_token["expires_at"]) < datetime.now(timezone.utc):
            raise BadRequestError("Token has expired")

        other = self.users.find_by_telegram_id(telegram_id)
        if other and other["id"] != link_token["user_id"]:
            raise ConflictError("This Telegram account is already linked to another user")

        user = self.users.find_by_id(link_token["user_id"])
        if not user:
            raise NotFoundError("User not found")

        user = self.users.update(user["id"], {
            "telegram_id": telegram_id,
            "telegram_username": telegram_username or None,
        })
        self.tokens.update(link_token["id"], {"used": True})

        logger.info(f"Telegram account {telegram_id} linked to user {user['id']}")
        return {
            "success": True,
            "message": "Telegram account linked successfully",
            "user": user_summary(user),
        }

    def get_status(self, user_id: str) -> Dict:
        user = self.users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return {
            "linked": bool(user.get("telegram_id")),
            "telegram_username": user.get("telegram_username"),
            "telegram_id": user.get("telegram_id"),
        }

    def unlink(self, user_id: str) -> Dict:
        user = self.users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if not user.get("telegram_id"):
            raise NotFoundError("No Telegram account linked to this user")

        self.users.update(user_id, {"telegram_id": None, "telegram_username": None})
        self.tokens.delete_unused_for_user(user_id)

        logger.info(f"Telegram account unlinked from user {user_id}")
        return {"success": True, "message": "Telegram account unlinked successfully"}

    def check_linked(self, telegram_id: Optional[str]) -> Dict:
        if not telegram_id:
            raise BadRequestError("Telegram ID is required")
        user = self.users.find_by_telegram_id(str(telegram_id))
        return {
            "linked": user is not None,
            "telegram_username": user.get("telegram_username") if user else None,
            "telegram_id": str(telegram_id) if user else None,
        }

    def create_report(self, data: Dict) -> Dict:
        """
        Create a report on behalf of the citizen linked to a Telegram id.
        Photos are Telegram file ids, stored as "telegram:<file_id>" references.

        Raises:
            NotFoundError: no linked account
            BadRequestError: invalid fields (see ReportService.create_report)
        """
        user = self._linked_user(data.get("telegram_id"))

        description = (data.get("description") or "").strip()
        if description and len(description) < MIN_DESCRIPTION:
            raise BadRequestError(
                f"Description is too short. Please provide at least {MIN_DESCRIPTION} characters"
            )
        if len(description) > MAX_DESCRIPTION:
            raise BadRequestError(
                f"Description is too long. Please keep it under {MAX_DESCRIPTION} characters"
            )

        report = self.report_service.create_report(
            user_id=user["id"],
            title=data.get("title"),
            description=description,
            category=data.get("category"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            photos=[f"telegram:{file_id}" for file_id in data.get("photo_file_ids") or []],
            is_anonymous=bool(data.get("is_anonymous")),
        )
        return {"success": True, "message": "Report created successfully", "report_id": report["id"]}

    def list_reports(self, telegram_id: str) -> List[Dict]:
        user = self._linked_user(telegram_id)
        return [self._summary(r) for r in self.reports.find_by_user(user["id"])]

    def get_report(self, telegram_id: str, report_id: str) -> Dict:
        user = self._linked_user(telegram_id)
        report = self.reports.find_by_id(report_id)
        if not report:
            raise NotFoundError("Report not found")
        if report.get("user_id") != user["id"]:
            raise ForbiddenError("You can only view your own reports")
        return self._summary(report)

    def _linked_user(self, telegram_id: Optional[str]) -> Dict:
        user = self.users.find_by_telegram_id(str(telegram_id)) if telegram_id else None
        if not user:
            raise NotFoundError("No account linked to this Telegram ID. Please link your account first.")
        return user

    def _summary(self, report: Dict) -> Dict:
        return {
            "report_id": report["id"],
            "title": report.get("title", ""),
            "category": report.get("category"),
            "status": report.get("status"),
            "address": report.get("address"),
            "rejected_reason": report.get("rejected_reason"),
            "created_at": report.get("created_at"),
            "updated_at": report.get("updated_at"),
        }


_telegram_service = None


def get_telegram_service() -> TelegramService:
    global _telegram_service
    if _telegram_service is None:
        _telegram_service = TelegramService()
    return _telegram_service
