"""
Citizen account endpoints - signup, e-mail verification and profile.
"""

from fastapi import APIRouter, Depends, status
from typing import Dict
import logging

from participium.models.base import MessageResponse
from participium.models.user import (
    CitizenProfileUpdate,
    ResendCodeRequest,
    Role,
    SignupRequest,
    SignupResponse,
    UserResponse,
    VerifyEmailRequest,
)
from participium.routes.deps import require_roles
from participium.services.presenters import user_profile
from participium.services.user_service import get_user_service
from participium.services.verification_service import get_verification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/citizen", tags=["Citizen"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest):
    """
    Register a citizen account.

    A 6-digit verification code is issued; the account cannot log in until
    the code is confirmed through /citizen/verify-email.
    """
    user = get_user_service().signup_citizen(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        password=request.password,
    )
    return {
        "message": "Registration successful. Check your email for the verification code.",
        "user": user_profile(user),
    }


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(request: VerifyEmailRequest):
    get_verification_service().verify(request.email, request.code)
    return {"success": True, "message": "Email verified successfully"}


@router.post("/resend-code", response_model=MessageResponse)
async def resend_code(request: ResendCodeRequest):
    get_verification_service().resend_code(request.email)
    return {"success": True, "message": "A new verification code has been sent"}


@router.get("/me", response_model=UserResponse)
async def get_profile(user: Dict = Depends(require_roles(Role.CITIZEN))):
    return user_profile(user)


@router.patch("/me", response_model=UserResponse)
async def update_profile(request: CitizenProfileUpdate, user: Dict = Depends(require_roles(Role.CITIZEN))):
    updated = get_user_service().update_citizen_profile(user["id"], request.model_dump(exclude_unset=True))
    return user_profile(updated)
