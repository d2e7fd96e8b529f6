"""Platform service: third-party stats snapshots and username checks"""
import asyncio
import logging
from typing import Any, Awaitable, Callable

from ..enum import ExternalPlatform
from ..exception import NotFoundError, UpstreamUnavailableError
from ..integrations.platforms import (
    PlatformClient,
    PlatformUnavailableError,
    PlatformUserNotFoundError,
)
from ..model import Account
from ..schema.platform import (
    CodeforcesProfile,
    LeetCodeSolved,
    PlatformStatsOut,
    UsernameCheck,
)

logger = logging.getLogger(__name__)

DISPLAY_NAMES = {
    ExternalPlatform.GITHUB: "GitHub",
    ExternalPlatform.LEETCODE: "LeetCode",
    ExternalPlatform.CODEFORCES: "Codeforces",
}


def _fetcher(client: PlatformClient, platform: ExternalPlatform) -> Callable[[str], Awaitable[Any]]:
    return {
        ExternalPlatform.GITHUB: client.fetch_github_stats,
        ExternalPlatform.LEETCODE: client.fetch_leetcode_stats,
        ExternalPlatform.CODEFORCES: client.fetch_codeforces_profile,
    }[platform]


class PlatformService:
    """Platform service

    Upstream errors are mapped to application exceptions for the
    single-platform routes, and to per-platform error entries for the
    aggregated views.
    """

    @staticmethod
    async def get_leetcode_solved(client: PlatformClient, username: str) -> LeetCodeSolved:
        """Solved counts per difficulty of a LeetCode user

        Raises:
            NotFoundError: User unknown to LeetCode
            UpstreamUnavailableError: LeetCode could not be queried
        """
        try:
            stats = await client.fetch_leetcode_stats(username)
        except PlatformUserNotFoundError as e:
            raise NotFoundError(str(e))
        except PlatformUnavailableError as e:
            logger.error(f"LeetCode lookup for {username} failed: {e}")
            raise UpstreamUnavailableError("Error fetching LeetCode data")
        return stats.solved

    @staticmethod
    async def get_codeforces_profile(client: PlatformClient, handle: str) -> CodeforcesProfile:
        """Profile card of a Codeforces user

        Raises:
            NotFoundError: Handle unknown to Codeforces
            UpstreamUnavailableError: Codeforces could not be queried
        """
        try:
            return await client.fetch_codeforces_profile(handle)
        except PlatformUserNotFoundError as e:
            raise NotFoundError(str(e))
        except PlatformUnavailableError as e:
            logger.error(f"Codeforces lookup for {handle} failed: {e}")
            raise UpstreamUnavailableError("Error fetching Codeforces data")

    @staticmethod
    async def _stats_entry(
        client: PlatformClient,
        platform: ExternalPlatform,
        username: str,
    ) -> dict[str, Any]:
        name = DISPLAY_NAMES[platform]
        try:
            stats = await _fetcher(client, platform)(username)
        except PlatformUserNotFoundError:
            return {"error": f"{name} user not found"}
        except PlatformUnavailableError as e:
            logger.warning(f"{name} stats for {username} unavailable: {e}")
            return {"error": f"Failed to fetch {name} stats"}
        return stats.model_dump()

    @staticmethod
    async def get_platform_stats(client: PlatformClient, account: Account) -> PlatformStatsOut:
        """Fetch every configured platform of ``account`` concurrently

        A failing platform is reported as ``{"error": message}`` next to the
        successful ones.
        """
        usernames = account.platform_usernames or {}
        configured = [
            (platform, usernames[platform.value])
            for platform in ExternalPlatform
            if usernames.get(platform.value)
        ]

        entries = await asyncio.gather(*(
            PlatformService._stats_entry(client, platform, username)
            for platform, username in configured
        ))

        return PlatformStatsOut(
            has_platform_data=account.has_platform_data,
            platform_usernames=account.platform_usernames,
            stats={
                platform.value: entry
                for (platform, _), entry in zip(configured, entries)
            },
        )

    @staticmethod
    async def _check_username(
        client: PlatformClient,
        platform: ExternalPlatform,
        username: str,
    ) -> UsernameCheck:
        name = DISPLAY_NAMES[platform]
        try:
            await _fetcher(client, platform)(username)
        except PlatformUserNotFoundError:
            return UsernameCheck(valid=False, error=f"{name} username not found")
        except PlatformUnavailableError as e:
            logger.warning(f"Could not check {name} username {username}: {e}")
            return UsernameCheck(valid=False, error=f"Could not reach {name} to verify the username")
        return UsernameCheck(valid=True)

    @staticmethod
    async def validate_usernames(
        client: PlatformClient,
        usernames: dict[ExternalPlatform, str],
    ) -> dict[ExternalPlatform, UsernameCheck]:
        """Check each username against its platform, concurrently"""
        platforms = list(usernames)
        checks = await asyncio.gather(*(
            PlatformService._check_username(client, platform, usernames[platform])
            for platform in platforms
        ))
        return dict(zip(platforms, checks))
