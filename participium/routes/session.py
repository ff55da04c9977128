"""
Session endpoints - login, current session, logout.
"""

from fastapi import APIRouter, Depends, Response
from typing import Dict, Optional
import logging

from participium.core.settings import settings
from participium.models.user import LoginRequest, SessionResponse
from participium.routes.deps import get_optional_user
from participium.services.presenters import user_profile
from participium.services.user_service import get_user_service
from participium.utils.security import create_session_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/session", tags=["Session"])


@router.post("", response_model=SessionResponse)
async def login(request: LoginRequest, response: Response):
    """
    Log in with e-mail and password.

    The session token is returned in the body (for the bot and API clients)
    and set as an http-only cookie (for the browser).
    """
    user = get_user_service().authenticate(request.email, request.password)
    token = create_session_token(user["id"], user.get("role"))
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
    )
    return {"authenticated": True, "message": "Login successful", "user": user_profile(user), "token": token}


@router.get("", response_model=SessionResponse)
async def current_session(user: Optional[Dict] = Depends(get_optional_user)):
    if not user:
        return {"authenticated": False}
    return {"authenticated": True, "user": user_profile(user)}


@router.delete("", response_model=SessionResponse)
async def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"authenticated": False, "message": "Logged out"}
