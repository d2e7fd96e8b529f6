"""Schemas for data fetched from third-party coding platforms

Field names follow the project's snake_case convention; upstream payloads are
normalised into these models by ``integrations.platforms``.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class LeetCodeSolved(BaseModel):
    """Solved counts per difficulty, served by the LeetCode pass-through"""

    easy: int = 0
    medium: int = 0
    hard: int = 0


class LeetCodeStats(BaseModel):
    """LeetCode profile summary"""

    username: str
    total_solved: int = 0
    total_questions: int = 0
    easy_solved: int = 0
    easy_total: int = 0
    medium_solved: int = 0
    medium_total: int = 0
    hard_solved: int = 0
    hard_total: int = 0
    acceptance_rate: Optional[float] = None
    ranking: Optional[int] = None

    @property
    def solved(self) -> LeetCodeSolved:
        return LeetCodeSolved(
            easy=self.easy_solved,
            medium=self.medium_solved,
            hard=self.hard_solved,
        )


class CodeforcesProfile(BaseModel):
    """Codeforces profile card"""

    handle: str
    first_name: str = ""
    last_name: str = ""
    country: str = ""
    city: str = ""
    organization: str = ""
    friend_of_count: int = 0
    avatar: str = ""
    title_photo: str = ""
    registration_time: int = Field(0, description="Epoch milliseconds")
    last_online_time: int = Field(0, description="Epoch milliseconds")
    rating: int = 0
    max_rating: int = 0
    rank: str = "unrated"
    max_rank: str = "unrated"
    contribution: int = 0


class GitHubStats(BaseModel):
    """GitHub profile summary with star/fork totals over public repositories"""

    username: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    bio: Optional[str] = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    total_stars: int = 0
    total_forks: int = 0
    profile_url: Optional[str] = None
    created_at: Optional[str] = None


class UsernameCheck(BaseModel):
    """Outcome of checking one username against its platform"""

    valid: bool
    error: Optional[str] = None


class PlatformStatsOut(BaseModel):
    """Cross-platform snapshot of the current account

    ``stats`` maps a platform key to either its stats object or
    ``{"error": message}`` when that platform could not be fetched.
    """

    has_platform_data: bool
    platform_usernames: Optional[dict[str, Optional[str]]] = None
    stats: dict[str, Any]
