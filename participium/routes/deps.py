"""
Authentication dependencies shared by the routers.

The session token is read from the `Authorization: Bearer` header first,
then from the session cookie.
"""

from fastapi import Depends, Header, Request
from typing import Dict, Iterable, Optional
import logging

from participium.core.errors import ForbiddenError, UnauthorizedError
from participium.core.settings import settings
from participium.models.user import Role
from participium.services.role_matrix import TECHNICAL_ROLES
from participium.services.user_service import get_user_service
from participium.utils.security import decode_session_token

logger = logging.getLogger(__name__)


def _extract_token(request: Request, authorization: Optional[str]) -> Optional[str]:
    if authorization:
        scheme, _, value = authorization.partition(" ")
        if scheme.lower() == "bearer" and value.strip():
            return value.strip()
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_optional_user(request: Request, authorization: Optional[str] = Header(None)) -> Optional[Dict]:
    token = _extract_token(request, authorization)
    if not token:
        return None
    claims = decode_session_token(token)
    if not claims:
        return None
    return get_user_service().get_user(claims.get("sub"))


def get_current_user(user: Optional[Dict] = Depends(get_optional_user)) -> Dict:
    if not user:
        raise UnauthorizedError("Not authenticated")
    return user


def require_roles(*roles):
    """
    Dependency factory: the current user must hold at least one of `roles`.

    Usage:
        @router.get("/pending")
        async def pending(user: Dict = Depends(require_roles(Role.PUBLIC_RELATIONS))):
    """
    allowed = {r.value if isinstance(r, Role) else r for r in roles}

    def dependency(user: Dict = Depends(get_current_user)) -> Dict:
        if not allowed & set(user.get("role") or []):
            raise ForbiddenError("Insufficient permissions")
        return user

    return dependency


def staff_roles(include_maintainer: bool = True) -> Iterable[Role]:
    roles = list(TECHNICAL_ROLES)
    if include_maintainer:
        roles.append(Role.EXTERNAL_MAINTAINER)
    return roles
