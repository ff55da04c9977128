"""
Shape stored documents into API payloads.

Internal fields (password hashes, verification codes, telegram ids) never
leave this module; anonymous reporters are masked for public listings.
"""

from typing import Callable, Dict, Optional

from participium.models.user import Role
from participium.services.role_matrix import is_technical

ANONYMOUS = "anonymous"


def user_summary(user: Optional[Dict]) -> Optional[Dict]:
    if not user:
        return None
    return {
        "id": user["id"],
        "first_name": user.get("first_name", ""),
        "last_name": user.get("last_name", ""),
        "email": user.get("email"),
        "role": list(user.get("role") or []),
    }


def anonymous_summary() -> Dict:
    return {"id": None, "first_name": ANONYMOUS, "last_name": ANONYMOUS, "email": None, "role": []}


def user_profile(user: Dict) -> Dict:
    return {
        "id": user["id"],
        "first_name": user.get("first_name", ""),
        "last_name": user.get("last_name", ""),
        "email": user.get("email", ""),
        "role": list(user.get("role") or []),
        "is_verified": bool(user.get("is_verified")),
        "telegram_username": user.get("telegram_username"),
        "email_notifications_enabled": user.get("email_notifications_enabled", True),
        "external_company_id": user.get("external_company_id"),
        "created_at": user.get("created_at"),
    }


def display_name(user: Optional[Dict]) -> str:
    """
    Name shown to the other party of a conversation, e.g.
    "Mario Rossi (Technical)" or "Anna Bianchi (External Maintainer)".
    """
    if not user:
        return "Unknown user"
    name = f"{user.get('first_name', '')} {user.get('last_name', '')}".strip()
    roles = user.get("role") or []
    if Role.EXTERNAL_MAINTAINER.value in roles:
        return f"{name} (External Maintainer)"
    if is_technical(roles):
        return f"{name} (Technical)"
    if Role.PUBLIC_RELATIONS.value in roles:
        return f"{name} (Public Relations)"
    return name


def company_dict(company: Dict) -> Dict:
    return {
        "id": company["id"],
        "name": company.get("name", ""),
        "categories": list(company.get("categories") or []),
        "platform_access": bool(company.get("platform_access")),
    }


def report_dict(report: Dict, load_user: Callable[[str], Optional[Dict]], anonymize: bool = False) -> Dict:
    """
    Build the report payload.

    Args:
        report: Stored report document
        load_user: Lookup for reporter / officer documents by id
        anonymize: Hide the reporter of anonymous reports
    """
    if anonymize and report.get("is_anonymous"):
        reporter = anonymous_summary()
    else:
        reporter = user_summary(load_user(report.get("user_id")))

    officer_id = report.get("assigned_officer_id")
    return {
        "id": report["id"],
        "title": report.get("title", ""),
        "description": report.get("description", ""),
        "category": report.get("category"),
        "latitude": report.get("latitude"),
        "longitude": report.get("longitude"),
        "address": report.get("address"),
        "is_anonymous": bool(report.get("is_anonymous")),
        "status": report.get("status"),
        "user": reporter,
        "assigned_officer_id": officer_id,
        "assigned_officer": user_summary(load_user(officer_id)) if officer_id else None,
        "external_maintainer_id": report.get("external_maintainer_id"),
        "external_company_id": report.get("external_company_id"),
        "rejected_reason": report.get("rejected_reason"),
        "photos": [
            {"id": f"{report['id']}-{index}", "url": url}
            for index, url in enumerate(report.get("photos") or [], start=1)
        ],
        "status_history": list(report.get("status_history") or []),
        "created_at": report.get("created_at"),
        "updated_at": report.get("updated_at"),
    }


def message_dict(message: Dict, sender: Optional[Dict]) -> Dict:
    return {
        "id": message["id"],
        "report_id": message["report_id"],
        "content": message.get("content", ""),
        "sender_id": message.get("sender_id"),
        "sender_name": display_name(sender),
        "sender_roles": list((sender or {}).get("role") or []),
        "created_at": message.get("created_at"),
    }


def note_dict(note: Dict, author: Optional[Dict]) -> Dict:
    return {
        "id": note["id"],
        "report_id": note["report_id"],
        "content": note.get("content", ""),
        "author_id": note.get("author_id"),
        "author_name": display_name(author),
        "author_role": list(note.get("author_role") or []),
        "created_at": note.get("created_at"),
    }
