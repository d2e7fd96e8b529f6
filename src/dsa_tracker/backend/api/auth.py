"""Authentication API endpoints"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings
from ..dep import get_db_session, get_current_account, get_settings, get_email_service
from ..model import Account
from ..schema.response import SuccessResponse
from ..schema.auth import (
    RegisterRequest,
    VerifyCodeRequest,
    ResendCodeRequest,
    LoginRequest,
    AccountOut,
    AuthResponse,
    CodeSentResponse,
    VerificationPendingResponse,
)
from ..service import AuthService
from ..utils.email import EmailService

logger = logging.getLogger(__name__)

# Router configuration
router = APIRouter(prefix="/auth", tags=["Authentication"])


# ==================== Type Aliases ====================

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
EmailServiceDep = Annotated[EmailService, Depends(get_email_service)]
CurrentAccountDep = Annotated[Account, Depends(get_current_account)]


@router.post(
    "/register",
    response_model=SuccessResponse[VerificationPendingResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register account",
    description="""
    Register a new account and send a 6-digit verification code to its email.

    **Flow:**
    1. Validate name (1-50 chars), email format and password (at least 6 chars)
    2. Reject the email if a verified account already uses it
    3. Create an unverified account, or overwrite name and password of an
       existing unverified one
    4. Store a fresh code valid for 10 minutes and email it

    **Returns:**
    - 201 for a new account, 200 when registration of an unverified account restarts
    - data: {requires_verification: true, email}

    **Errors:**
    - 400 VALIDATION_ERROR: Invalid input
    - 400 CONFLICT: Email already registered
    - 500 NOTIFICATION_ERROR: Email could not be sent (registration undone)
    """
)
async def register(
    request: RegisterRequest,
    response: Response,
    session: SessionDep,
    settings: SettingsDep,
    email_service: EmailServiceDep,
):
    """Register an account pending email verification"""
    data, created = await AuthService.register(session, settings, email_service, request)
    if not created:
        response.status_code = status.HTTP_200_OK

    return SuccessResponse(
        data=data,
        message="Verification code sent to your email. Please verify to complete registration.",
    )


@router.post(
    "/verify-otp",
    response_model=SuccessResponse[AuthResponse],
    summary="Verify email",
    description="""
    Confirm the emailed verification code and log in.

    Checks run in this order: account exists, not yet verified, code matches,
    code not expired. On success the account becomes verified, a welcome
    email is dispatched in the background and a session token is returned.

    **Errors:**
    - 404 NOT_FOUND: No account with this email
    - 400 CONFLICT: Email already verified
    - 400 INVALID_CODE: Code does not match
    - 400 EXPIRED_CODE: Code expired, request a new one
    """
)
async def verify_otp(
    request: VerifyCodeRequest,
    session: SessionDep,
    settings: SettingsDep,
    email_service: EmailServiceDep,
):
    """Verify email with the one-time code"""
    data = await AuthService.verify_code(session, settings, email_service, request)
    return SuccessResponse(data=data, message="Email verified successfully")


@router.post(
    "/resend-otp",
    response_model=SuccessResponse[CodeSentResponse],
    summary="Resend verification code",
    description="""
    Replace the pending verification code with a fresh one and email it.

    **Errors:**
    - 404 NOT_FOUND: No account with this email
    - 400 CONFLICT: Email already verified
    - 500 NOTIFICATION_ERROR: Email could not be sent (the new code stays valid)
    """
)
async def resend_otp(
    request: ResendCodeRequest,
    session: SessionDep,
    settings: SettingsDep,
    email_service: EmailServiceDep,
):
    """Reissue the verification code"""
    data = await AuthService.resend_code(session, settings, email_service, request)
    return SuccessResponse(data=data, message="New verification code sent to your email")


@router.post(
    "/login",
    response_model=SuccessResponse[AuthResponse],
    summary="Login",
    description="""
    Authenticate with email and password.

    **Errors:**
    - 400 INVALID_CREDENTIALS: Unknown email or wrong password
    - 403 VERIFICATION_REQUIRED: Email not verified yet; a fresh code was sent
      and `error.details` carries `{requires_verification: true, email}`
    """
)
async def login(
    request: LoginRequest,
    session: SessionDep,
    settings: SettingsDep,
    email_service: EmailServiceDep,
):
    """Log in and receive a session token"""
    data = await AuthService.login(session, settings, email_service, request)
    return SuccessResponse(data=data, message="Login successful")


@router.get(
    "/me",
    response_model=SuccessResponse[AccountOut],
    summary="Current account",
)
async def get_me(current_account: CurrentAccountDep):
    """Return the account the bearer token belongs to"""
    return SuccessResponse(data=AccountOut.model_validate(current_account))
