"""Account management API endpoints"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..dep import get_db_session, get_current_account, get_platform_client
from ..integrations.platforms import PlatformClient
from ..model import Account
from ..schema.response import SuccessResponse
from ..schema.auth import AccountOut
from ..schema.platform import PlatformStatsOut
from ..schema.user import (
    ChangePasswordRequest,
    DeleteAccountRequest,
    PlatformUsernamesOut,
    PlatformUsernamesRequest,
    ProfileOut,
    UpdateProfileRequest,
)
from ..service import AccountService, PlatformService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["User"])


# ==================== Type Aliases ====================

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
CurrentAccountDep = Annotated[Account, Depends(get_current_account)]
PlatformClientDep = Annotated[PlatformClient, Depends(get_platform_client)]


@router.get(
    "/profile",
    response_model=SuccessResponse[ProfileOut],
    summary="Get profile",
)
async def get_profile(current_account: CurrentAccountDep):
    return SuccessResponse(data=AccountService.get_profile(current_account))


@router.put(
    "/profile",
    response_model=SuccessResponse[AccountOut],
    summary="Update profile",
    description="Change the display name and/or merge preference flags.",
)
async def update_profile(
    request: UpdateProfileRequest,
    session: SessionDep,
    current_account: CurrentAccountDep,
):
    data = await AccountService.update_profile(session, current_account, request)
    return SuccessResponse(data=data, message="Profile updated successfully")


@router.put(
    "/password",
    response_model=SuccessResponse[None],
    summary="Change password",
    description="""
    **Errors:**
    - 400 INVALID_CREDENTIALS: Current password is incorrect
    - 400 VALIDATION_ERROR: New password shorter than 6 characters
    """
)
async def change_password(
    request: ChangePasswordRequest,
    session: SessionDep,
    current_account: CurrentAccountDep,
):
    await AccountService.change_password(session, current_account, request)
    return SuccessResponse(data=None, message="Password updated successfully")


@router.delete(
    "/account",
    response_model=SuccessResponse[None],
    summary="Delete account",
    description="Delete the account and all of its questions. Requires the password.",
)
async def delete_account(
    request: DeleteAccountRequest,
    session: SessionDep,
    current_account: CurrentAccountDep,
):
    await AccountService.delete_account(session, current_account, request)
    return SuccessResponse(data=None, message="Account deleted successfully")


@router.post(
    "/platform-usernames",
    response_model=SuccessResponse[PlatformUsernamesOut],
    summary="Submit platform usernames",
    description="""
    One-time submission of GitHub/LeetCode/Codeforces usernames. Every
    username is checked against its platform; if any is invalid nothing is
    stored and `error.details` holds the per-platform results.

    **Errors:**
    - 400 CONFLICT: Usernames already submitted, use PUT instead
    - 400 VALIDATION_ERROR: No username given, or some username is invalid
    """
)
async def submit_platform_usernames(
    request: PlatformUsernamesRequest,
    session: SessionDep,
    client: PlatformClientDep,
    current_account: CurrentAccountDep,
):
    data = await AccountService.submit_platform_usernames(session, client, current_account, request)
    return SuccessResponse(data=data, message="Platform usernames saved successfully")


@router.put(
    "/platform-usernames",
    response_model=SuccessResponse[PlatformUsernamesOut],
    summary="Update platform usernames",
    description="""
    Merge the given usernames into the stored ones. An empty string or null
    clears a platform; omitted platforms are unchanged. New usernames are
    checked against their platform, all-or-nothing.
    """
)
async def update_platform_usernames(
    request: PlatformUsernamesRequest,
    session: SessionDep,
    client: PlatformClientDep,
    current_account: CurrentAccountDep,
):
    data = await AccountService.update_platform_usernames(session, client, current_account, request)
    return SuccessResponse(data=data, message="Platform usernames updated successfully")


@router.get(
    "/platform-stats",
    response_model=SuccessResponse[PlatformStatsOut],
    summary="Platform stats",
    description="""
    Snapshot of every configured platform, fetched concurrently. A platform
    that fails is reported as `{"error": message}` next to the others.
    """
)
async def get_platform_stats(
    client: PlatformClientDep,
    current_account: CurrentAccountDep,
):
    data = await PlatformService.get_platform_stats(client, current_account)
    return SuccessResponse(data=data)
