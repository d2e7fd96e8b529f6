"""Question service: owner-scoped CRUD, filtered listing and statistics"""
import logging
from collections import Counter
from datetime import timedelta
from typing import Any, Optional

from sqlalchemy import String, cast, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..enum import QuestionSortField, SortOrder
from ..exception import NotFoundError
from ..model import Account, Question, utc_now
from ..schema.question import (
    GroupCount,
    QuestionCreate,
    QuestionOut,
    QuestionQuery,
    QuestionStats,
    QuestionUpdate,
    SavedSolutionIn,
    TopicGroupCount,
)
from ..schema.response import PaginatedData
from ..utils.query import LIKE_ESCAPE_CHAR, contains_pattern, escape_like, paginate

logger = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(days=30)

_SORT_COLUMNS = {
    QuestionSortField.SOLVED_DATE: Question.solved_date,
    QuestionSortField.TITLE: Question.title,
    QuestionSortField.DIFFICULTY: Question.difficulty,
    QuestionSortField.TOPIC: Question.topic,
}


def _stamp_solution(solution: Optional[SavedSolutionIn]) -> Optional[dict]:
    if solution is None:
        return None
    data = solution.model_dump(mode="json")
    data["last_updated"] = utc_now().isoformat()
    return data


def _sorted_groups(counter: Counter) -> list[tuple[Any, int]]:
    """Count descending, then key ascending"""
    return sorted(counter.items(), key=lambda item: (-item[1], item[0]))


class QuestionService:
    """Question service

    Every operation takes the authenticated owner explicitly; a question of
    another account is indistinguishable from a missing one.
    """

    @staticmethod
    async def _get_owned(session: AsyncSession, owner: Account, question_id: int) -> Question:
        result = await session.execute(
            select(Question).where(
                Question.id == question_id,
                Question.owner_id == owner.id,
            )
        )
        question = result.scalar_one_or_none()
        if not question:
            raise NotFoundError("Question not found")
        return question

    @staticmethod
    async def create(
        session: AsyncSession,
        owner: Account,
        request: QuestionCreate,
    ) -> QuestionOut:
        """Create a question owned by ``owner``"""
        question = Question(
            owner_id=owner.id,
            title=request.title,
            link=request.link,
            description=request.description,
            notes=request.notes,
            platform=request.platform,
            topic=[topic.value for topic in request.topic],
            difficulty=request.difficulty,
            tags=list(request.tags),
            needs_revision=request.needs_revision,
            revision_schedule=(
                request.revision_schedule.model_dump(mode="json")
                if request.revision_schedule else None
            ),
            solved_date=request.solved_date or utc_now(),
            time_spent=request.time_spent,
            rating=request.rating,
            saved_solution=_stamp_solution(request.saved_solution),
        )
        session.add(question)
        await session.commit()
        await session.refresh(question)

        logger.info(f"Question created: id={question.id}, owner_id={owner.id}")
        return QuestionOut.model_validate(question)

    @staticmethod
    async def list_questions(
        session: AsyncSession,
        owner: Account,
        query: QuestionQuery,
    ) -> PaginatedData[QuestionOut]:
        """Filtered, sorted and paginated questions of ``owner``

        ``id`` breaks ties in the sort direction, so consecutive pages form a
        partition of the filtered set.
        """
        stmt = select(Question).where(Question.owner_id == owner.id)

        if query.topic is not None:
            stmt = stmt.where(
                cast(Question.topic, String).like(
                    f'%"{escape_like(query.topic.value)}"%',
                    escape=LIKE_ESCAPE_CHAR,
                )
            )
        if query.platform is not None:
            stmt = stmt.where(Question.platform == query.platform)
        if query.difficulty is not None:
            stmt = stmt.where(Question.difficulty == query.difficulty)
        if query.needs_revision is not None:
            stmt = stmt.where(Question.needs_revision == query.needs_revision)
        if query.search:
            pattern = contains_pattern(query.search)
            stmt = stmt.where(
                or_(
                    Question.title.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                    Question.description.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                    Question.notes.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                )
            )

        column = _SORT_COLUMNS[query.sort_by]
        if query.sort_order == SortOrder.ASC:
            stmt = stmt.order_by(column.asc(), Question.id.asc())
        else:
            stmt = stmt.order_by(column.desc(), Question.id.desc())

        questions, total = await paginate(session, stmt, query.page, query.limit)
        logger.debug(
            f"Listed questions: owner_id={owner.id}, page={query.page}, "
            f"limit={query.limit}, total={total}"
        )
        return PaginatedData[QuestionOut].build(
            items=[QuestionOut.model_validate(q) for q in questions],
            total=total,
            page=query.page,
            page_size=query.limit,
        )

    @staticmethod
    async def get(session: AsyncSession, owner: Account, question_id: int) -> QuestionOut:
        question = await QuestionService._get_owned(session, owner, question_id)
        return QuestionOut.model_validate(question)

    @staticmethod
    async def update(
        session: AsyncSession,
        owner: Account,
        question_id: int,
        request: QuestionUpdate,
    ) -> QuestionOut:
        """Apply a partial update; fields absent from the request are kept"""
        question = await QuestionService._get_owned(session, owner, question_id)

        for field in request.model_fields_set:
            value = getattr(request, field)
            if field == "topic":
                value = [topic.value for topic in value]
            elif field == "tags":
                value = list(value)
            elif field == "revision_schedule":
                value = value.model_dump(mode="json") if value else None
            elif field == "saved_solution":
                value = _stamp_solution(value)
            setattr(question, field, value)

        question.touch()
        session.add(question)
        await session.commit()
        await session.refresh(question)

        logger.info(
            f"Question updated: id={question.id}, "
            f"fields={sorted(request.model_fields_set)}"
        )
        return QuestionOut.model_validate(question)

    @staticmethod
    async def delete(session: AsyncSession, owner: Account, question_id: int) -> None:
        question = await QuestionService._get_owned(session, owner, question_id)
        await session.delete(question)
        await session.commit()
        logger.info(f"Question deleted: id={question_id}, owner_id={owner.id}")

    @staticmethod
    async def set_revision(
        session: AsyncSession,
        owner: Account,
        question_id: int,
        needs_revision: bool,
    ) -> QuestionOut:
        """Set the revision flag to ``needs_revision`` (idempotent)"""
        question = await QuestionService._get_owned(session, owner, question_id)
        question.needs_revision = needs_revision
        question.touch()
        session.add(question)
        await session.commit()
        await session.refresh(question)
        return QuestionOut.model_validate(question)

    @staticmethod
    async def stats(session: AsyncSession, owner: Account) -> QuestionStats:
        """Aggregate counts over every question of ``owner``

        Topic groups are keyed by the exact stored topic combination.
        """
        owned = Question.owner_id == owner.id

        async def count(*conditions) -> int:
            result = await session.execute(
                select(func.count(Question.id)).where(owned, *conditions)
            )
            return result.scalar() or 0

        total = await count()
        revision_count = await count(Question.needs_revision == True)  # noqa: E712
        recent = await count(Question.solved_date >= utc_now() - RECENT_WINDOW)

        difficulty_result = await session.execute(
            select(Question.difficulty, func.count(Question.id))
            .where(owned)
            .group_by(Question.difficulty)
        )
        difficulty_counts = Counter({d.value: n for d, n in difficulty_result.all()})

        platform_result = await session.execute(
            select(Question.platform, func.count(Question.id))
            .where(owned)
            .group_by(Question.platform)
        )
        platform_counts = Counter({p.value: n for p, n in platform_result.all()})

        topic_result = await session.execute(select(Question.topic).where(owned))
        topic_counts = Counter(tuple(topics) for topics in topic_result.scalars().all())

        return QuestionStats(
            total_questions=total,
            revision_count=revision_count,
            recent_questions=recent,
            topic_stats=[
                TopicGroupCount(topics=list(topics), count=n)
                for topics, n in _sorted_groups(topic_counts)
            ],
            difficulty_stats=[
                GroupCount(key=key, count=n)
                for key, n in _sorted_groups(difficulty_counts)
            ],
            platform_stats=[
                GroupCount(key=key, count=n)
                for key, n in _sorted_groups(platform_counts)
            ],
        )
