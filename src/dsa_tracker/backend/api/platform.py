"""Unauthenticated pass-through endpoints for public platform data"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path

from ..dep import get_platform_client
from ..integrations.platforms import PlatformClient
from ..schema.response import SuccessResponse
from ..schema.platform import CodeforcesProfile, LeetCodeSolved
from ..service import PlatformService

logger = logging.getLogger(__name__)

leetcode_router = APIRouter(prefix="/leetcode", tags=["Platforms"])
codeforces_router = APIRouter(prefix="/codeforce", tags=["Platforms"])


# ==================== Type Aliases ====================

PlatformClientDep = Annotated[PlatformClient, Depends(get_platform_client)]
Username = Annotated[str, Path(min_length=1, max_length=100)]


@leetcode_router.get(
    "/{username}",
    response_model=SuccessResponse[LeetCodeSolved],
    summary="LeetCode solved counts",
    description="""
    Solved problems per difficulty for a LeetCode user.

    **Errors:**
    - 404 NOT_FOUND: User not found on LeetCode
    - 502 UPSTREAM_UNAVAILABLE: LeetCode could not be queried
    """
)
async def get_leetcode_solved(username: Username, client: PlatformClientDep):
    data = await PlatformService.get_leetcode_solved(client, username)
    return SuccessResponse(data=data)


@codeforces_router.get(
    "/{username}",
    response_model=SuccessResponse[CodeforcesProfile],
    summary="Codeforces profile",
    description="""
    Profile card of a Codeforces user. Registration and last online times
    are epoch milliseconds.

    **Errors:**
    - 404 NOT_FOUND: User not found on Codeforces
    - 502 UPSTREAM_UNAVAILABLE: Codeforces could not be queried
    """
)
async def get_codeforces_profile(username: Username, client: PlatformClientDep):
    data = await PlatformService.get_codeforces_profile(client, username)
    return SuccessResponse(data=data)
