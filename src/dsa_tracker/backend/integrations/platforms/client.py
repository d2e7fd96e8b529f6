"""
Platform Client
===============

Async read-only client for the public LeetCode, Codeforces and GitHub APIs.

Architecture:
    PlatformService → PlatformClient → httpx.AsyncClient → platform API

Every request is a GET, so transport errors and 5xx answers are retried a
bounded number of times with exponential backoff. A 4xx answer is never
retried. Raw payloads are normalised into the models of
``schema.platform`` by the ``normalize_*`` functions below.

Usage Example:
    client = PlatformClient(settings)
    stats = await client.fetch_leetcode_stats("alice")
    profile = await client.fetch_codeforces_profile("tourist")
    await client.close()
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ...config import Settings
from ...schema.platform import LeetCodeStats, CodeforcesProfile, GitHubStats
from .exceptions import PlatformUnavailableError, PlatformUserNotFoundError


logger = logging.getLogger(__name__)


class PlatformClient:
    """
    Shared HTTP client for third-party platforms.

    One instance lives on ``app.state`` for the lifetime of the application
    and is closed at shutdown.

    Args:
        settings: Application settings (base URLs, timeout, retry policy)
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.max_retries = max(0, settings.platform_max_retries)
        self.backoff_seconds = settings.platform_retry_backoff_seconds
        self.client = httpx.AsyncClient(
            timeout=settings.platform_timeout_seconds,
            transport=transport,
            headers={"User-Agent": f"dsa-tracker/{settings.app_version}"},
        )

    async def close(self) -> None:
        await self.client.aclose()

    # ============================================================================
    # Core Methods (Public API)
    # ============================================================================

    async def fetch_leetcode_stats(self, username: str) -> LeetCodeStats:
        """
        Fetch solved/total counts of a LeetCode user.

        Raises:
            PlatformUserNotFoundError: Upstream reports the user as unknown
            PlatformUnavailableError: Upstream unreachable or failing
        """
        url = f"{self.settings.leetcode_api_url.rstrip('/')}/{quote(username, safe='')}"
        response = await self._get("LeetCode", url)
        if response.status_code == 404:
            raise PlatformUserNotFoundError("LeetCode user not found")
        data = self._json("LeetCode", response)

        if not isinstance(data, dict) or data.get("status") != "success":
            raise PlatformUserNotFoundError("LeetCode user not found")
        return normalize_leetcode(username, data)

    async def fetch_codeforces_profile(self, handle: str) -> CodeforcesProfile:
        """
        Fetch the profile card of a Codeforces user.

        Codeforces answers unknown handles with HTTP 400 and ``status: FAILED``.

        Raises:
            PlatformUserNotFoundError: Handle does not exist
            PlatformUnavailableError: Upstream unreachable or failing
        """
        url = f"{self.settings.codeforces_api_url.rstrip('/')}/user.info"
        response = await self._get("Codeforces", url, params={"handles": handle})
        if response.status_code not in (200, 400):
            raise PlatformUnavailableError(
                f"Codeforces responded with HTTP {response.status_code}"
            )
        data = self._json("Codeforces", response)

        if not isinstance(data, dict) or data.get("status") != "OK" or not data.get("result"):
            raise PlatformUserNotFoundError("Codeforces user not found")
        return normalize_codeforces(data["result"][0])

    async def fetch_github_stats(self, username: str) -> GitHubStats:
        """
        Fetch a GitHub profile and star/fork totals over its repositories.

        The profile and the repository list are requested concurrently; only
        the first 100 repositories are counted.

        Raises:
            PlatformUserNotFoundError: User does not exist
            PlatformUnavailableError: Upstream unreachable, failing or rate limited
        """
        user, repos = await asyncio.gather(
            self._github_json(f"/users/{quote(username, safe='')}"),
            self._github_json(f"/users/{quote(username, safe='')}/repos", params={"per_page": 100}),
        )
        if not isinstance(user, dict) or not isinstance(repos, list):
            raise PlatformUnavailableError("GitHub returned an unexpected payload")
        return normalize_github(username, user, repos)

    # ============================================================================
    # HTTP helpers
    # ============================================================================

    async def _github_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        headers = {"Accept": "application/vnd.github+json"}
        if self.settings.github_token:
            headers["Authorization"] = f"Bearer {self.settings.github_token}"

        url = f"{self.settings.github_api_url.rstrip('/')}{path}"
        response = await self._get("GitHub", url, params=params, headers=headers)
        if response.status_code == 404:
            raise PlatformUserNotFoundError("GitHub user not found")
        if response.status_code != 200:
            raise PlatformUnavailableError(f"GitHub responded with HTTP {response.status_code}")
        return self._json("GitHub", response)

    async def _get(
        self,
        platform: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """GET with bounded retry on transport errors and 5xx answers"""
        attempt = 0
        while True:
            try:
                response = await self.client.get(url, params=params, headers=headers)
            except httpx.TransportError as e:
                error = PlatformUnavailableError(f"{platform} request failed: {e}")
            else:
                if response.status_code < 500:
                    return response
                error = PlatformUnavailableError(
                    f"{platform} responded with HTTP {response.status_code}"
                )

            if attempt >= self.max_retries:
                logger.error(f"{platform} request to {url} gave up after {attempt + 1} attempts: {error}")
                raise error

            delay = self.backoff_seconds * (2 ** attempt)
            attempt += 1
            logger.warning(f"{error}; retrying in {delay:.2f}s ({attempt}/{self.max_retries})")
            await asyncio.sleep(delay)

    @staticmethod
    def _json(platform: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise PlatformUnavailableError(f"{platform} returned invalid JSON") from e


# ============================================================================
# Normalisation
# ============================================================================

def _int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def normalize_leetcode(username: str, data: Dict[str, Any]) -> LeetCodeStats:
    """Map a leetcode-stats-api payload to ``LeetCodeStats``"""
    acceptance_rate = data.get("acceptanceRate")
    ranking = data.get("ranking")
    return LeetCodeStats(
        username=username,
        total_solved=_int(data.get("totalSolved")),
        total_questions=_int(data.get("totalQuestions")),
        easy_solved=_int(data.get("easySolved")),
        easy_total=_int(data.get("totalEasy")),
        medium_solved=_int(data.get("mediumSolved")),
        medium_total=_int(data.get("totalMedium")),
        hard_solved=_int(data.get("hardSolved")),
        hard_total=_int(data.get("totalHard")),
        acceptance_rate=acceptance_rate if isinstance(acceptance_rate, (int, float)) else None,
        ranking=_int(ranking) if ranking is not None else None,
    )


def normalize_codeforces(user: Dict[str, Any]) -> CodeforcesProfile:
    """Map one Codeforces ``user.info`` result to ``CodeforcesProfile``

    Timestamps arrive in epoch seconds and are returned in milliseconds.
    """
    return CodeforcesProfile(
        handle=_str(user.get("handle")),
        first_name=_str(user.get("firstName")),
        last_name=_str(user.get("lastName")),
        country=_str(user.get("country")),
        city=_str(user.get("city")),
        organization=_str(user.get("organization")),
        friend_of_count=_int(user.get("friendOfCount")),
        avatar=_str(user.get("avatar")),
        title_photo=_str(user.get("titlePhoto")),
        registration_time=_int(user.get("registrationTimeSeconds")) * 1000,
        last_online_time=_int(user.get("lastOnlineTimeSeconds")) * 1000,
        rating=_int(user.get("rating")),
        max_rating=_int(user.get("maxRating")),
        rank=_str(user.get("rank")) or "unrated",
        max_rank=_str(user.get("maxRank")) or "unrated",
        contribution=_int(user.get("contribution")),
    )


def normalize_github(
    username: str,
    user: Dict[str, Any],
    repos: List[Dict[str, Any]],
) -> GitHubStats:
    """Combine a GitHub user payload and its repository list"""
    return GitHubStats(
        username=username,
        name=user.get("name"),
        avatar=user.get("avatar_url"),
        bio=user.get("bio"),
        public_repos=_int(user.get("public_repos")),
        followers=_int(user.get("followers")),
        following=_int(user.get("following")),
        total_stars=sum(_int(repo.get("stargazers_count")) for repo in repos),
        total_forks=sum(_int(repo.get("forks_count")) for repo in repos),
        profile_url=user.get("html_url"),
        created_at=user.get("created_at"),
    )
