"""Question-related schemas for API input/output

Field constraints are declared once as annotated types and shared by the
create schema, the partial-update schema and the output schema.
"""

from datetime import datetime, timezone
from typing import Annotated, Optional
from urllib.parse import urlparse

from pydantic import (
    AfterValidator,
    BaseModel,
    Field,
    StringConstraints,
    field_validator,
)

from ..enum import (
    Platform,
    Difficulty,
    Topic,
    SolutionLanguage,
    QuestionSortField,
    SortOrder,
)

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 20


def _validate_link(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Please enter a valid URL")
    return value


def _distinct_topics(value: list[Topic]) -> list[Topic]:
    return list(dict.fromkeys(value))


def _to_utc(value: datetime) -> datetime:
    """Timestamps are kept in UTC; a value without offset is taken as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Link = Annotated[str, StringConstraints(strip_whitespace=True, max_length=2048), AfterValidator(_validate_link)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=1000)]
Notes = Annotated[str, StringConstraints(strip_whitespace=True, max_length=2000)]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, max_length=20)]
Topics = Annotated[list[Topic], Field(min_length=1), AfterValidator(_distinct_topics)]
TimeSpent = Annotated[int, Field(ge=0, description="Minutes spent")]
Rating = Annotated[int, Field(ge=1, le=5)]
Timestamp = Annotated[datetime, AfterValidator(_to_utc)]


class RevisionSchedule(BaseModel):
    """Spaced-repetition bookkeeping; nothing acts on it server side"""

    enabled: bool = False
    interval_days: int = Field(3, ge=1, le=365)
    next_revision_date: Optional[Timestamp] = None
    last_revised_date: Optional[Timestamp] = None
    times_revised: int = Field(0, ge=0)


class SavedSolutionIn(BaseModel):
    """Solution snippet written by the user"""

    code: str = Field("", max_length=50000)
    language: SolutionLanguage = SolutionLanguage.CPP


class SavedSolutionOut(SavedSolutionIn):
    last_updated: Optional[datetime] = None


# ==================== Input Schemas ====================

class QuestionCreate(BaseModel):
    """Create question request"""

    title: Title
    link: Link = Field(..., examples=["https://leetcode.com/problems/two-sum/"])
    description: Optional[Description] = None
    notes: Optional[Notes] = None
    platform: Platform = Platform.LEETCODE
    topic: Topics = Field(default_factory=lambda: [Topic.ARRAY])
    difficulty: Difficulty = Difficulty.MEDIUM
    tags: list[Tag] = Field(default_factory=list)
    needs_revision: bool = False
    revision_schedule: Optional[RevisionSchedule] = None
    solved_date: Optional[Timestamp] = Field(None, description="Defaults to creation time")
    time_spent: Optional[TimeSpent] = None
    rating: Optional[Rating] = None
    saved_solution: Optional[SavedSolutionIn] = None


class QuestionUpdate(BaseModel):
    """Partial update: only the fields present in the request change"""

    title: Optional[Title] = None
    link: Optional[Link] = None
    description: Optional[Description] = None
    notes: Optional[Notes] = None
    platform: Optional[Platform] = None
    topic: Optional[Topics] = None
    difficulty: Optional[Difficulty] = None
    tags: Optional[list[Tag]] = None
    needs_revision: Optional[bool] = None
    revision_schedule: Optional[RevisionSchedule] = None
    solved_date: Optional[Timestamp] = None
    time_spent: Optional[TimeSpent] = None
    rating: Optional[Rating] = None
    saved_solution: Optional[SavedSolutionIn] = None

    @field_validator(
        "title", "link", "platform", "topic", "difficulty",
        "tags", "needs_revision", "solved_date",
    )
    @classmethod
    def reject_null(cls, v):
        """Required fields may be omitted but not cleared"""
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class ToggleRevisionRequest(BaseModel):
    """Set the manual revision flag"""

    needs_revision: bool


class QuestionQuery(BaseModel):
    """Filter, sort and pagination parameters of the question list"""

    topic: Optional[Topic] = None
    platform: Optional[Platform] = None
    difficulty: Optional[Difficulty] = None
    needs_revision: Optional[bool] = None
    search: Optional[str] = Field(None, max_length=200)
    sort_by: QuestionSortField = QuestionSortField.SOLVED_DATE
    sort_order: SortOrder = SortOrder.DESC
    page: int = Field(1, ge=1)
    limit: int = DEFAULT_PAGE_SIZE

    @field_validator("limit")
    @classmethod
    def clamp_limit(cls, v: int) -> int:
        return max(1, min(v, MAX_PAGE_SIZE))

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


# ==================== Output Schemas ====================

class QuestionOut(BaseModel):
    """Question output schema"""

    id: int
    owner_id: int
    title: str
    link: str
    description: Optional[str] = None
    notes: Optional[str] = None
    platform: Platform
    topic: list[Topic]
    difficulty: Difficulty
    tags: list[str]
    needs_revision: bool
    revision_schedule: Optional[RevisionSchedule] = None
    solved_date: datetime
    time_spent: Optional[int] = None
    rating: Optional[int] = None
    saved_solution: Optional[SavedSolutionOut] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class GroupCount(BaseModel):
    """Number of questions sharing one value of a field"""

    key: str
    count: int


class TopicGroupCount(BaseModel):
    """Number of questions sharing one exact topic combination"""

    topics: list[str]
    count: int


class QuestionStats(BaseModel):
    """Aggregate statistics over all questions of an account"""

    total_questions: int
    revision_count: int
    recent_questions: int = Field(..., description="Solved within the last 30 days")
    topic_stats: list[TopicGroupCount]
    difficulty_stats: list[GroupCount]
    platform_stats: list[GroupCount]
