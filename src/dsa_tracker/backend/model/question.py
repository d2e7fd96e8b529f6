"""Question model: one practice problem solved by an account"""
from datetime import datetime
from typing import Optional

from sqlmodel import Field, Column, JSON

from .base import BaseModel, UTCDateTime, utc_now
from ..enum import Platform, Difficulty, Topic


def default_topics() -> list[str]:
    return [Topic.ARRAY.value]


class Question(BaseModel, table=True):
    """
    Question model - a practice problem record owned by exactly one account.

    Multi-valued and nested fields (topic, tags, revision_schedule,
    saved_solution) are stored as JSON columns; their shape is enforced by the
    request schemas in ``schema.question``.
    """

    __tablename__ = "questions"

    owner_id: int = Field(
        foreign_key="accounts.id",
        index=True,
        description="Reference to accounts.id - owner of this question"
    )

    title: str = Field(max_length=200)
    link: str = Field(max_length=2048)
    description: Optional[str] = Field(default=None, max_length=1000)
    notes: Optional[str] = Field(default=None, max_length=2000)

    platform: Platform = Field(default=Platform.LEETCODE, index=True)
    topic: list[str] = Field(
        default_factory=default_topics,
        sa_column=Column(JSON, nullable=False)
    )
    difficulty: Difficulty = Field(default=Difficulty.MEDIUM, index=True)
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False)
    )

    # Revision tracking (stored data only, nothing schedules reminders)
    needs_revision: bool = Field(default=False, index=True)
    revision_schedule: Optional[dict] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True)
    )

    solved_date: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    time_spent: Optional[int] = Field(default=None, description="Minutes spent")
    rating: Optional[int] = Field(default=None)

    saved_solution: Optional[dict] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True)
    )
