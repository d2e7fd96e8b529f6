"""Question API endpoints"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dep import get_db_session, get_current_account
from ..enum import Platform, Difficulty, Topic, QuestionSortField, SortOrder
from ..model import Account
from ..schema.response import SuccessResponse, PaginatedData
from ..schema.question import (
    DEFAULT_PAGE_SIZE,
    QuestionCreate,
    QuestionUpdate,
    QuestionQuery,
    QuestionOut,
    QuestionStats,
    ToggleRevisionRequest,
)
from ..service import QuestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/questions", tags=["Questions"])


# ==================== Type Aliases ====================

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
CurrentAccountDep = Annotated[Account, Depends(get_current_account)]


@router.post(
    "",
    response_model=SuccessResponse[QuestionOut],
    status_code=status.HTTP_201_CREATED,
    summary="Create question",
)
async def create_question(
    request: QuestionCreate,
    session: SessionDep,
    current_account: CurrentAccountDep,
):
    """Record a solved question for the current account"""
    data = await QuestionService.create(session, current_account, request)
    return SuccessResponse(data=data, message="Question created successfully")


@router.get(
    "",
    response_model=SuccessResponse[PaginatedData[QuestionOut]],
    summary="List questions",
    description="""
    Filtered, sorted and paginated questions of the current account.

    **Filters:** `topic` (question carries this topic), `platform`,
    `difficulty`, `needs_revision`, `search` (case-insensitive substring of
    title, description or notes).

    **Sorting:** `sort_by` one of solved_date/title/difficulty/topic
    (default solved_date), `sort_order` asc/desc (default desc).

    **Pagination:** `page` starts at 1, `limit` is clamped to 1..100
    (default 20).
    """
)
async def list_questions(
    session: SessionDep,
    current_account: CurrentAccountDep,
    topic: Optional[Topic] = Query(None),
    platform: Optional[Platform] = Query(None),
    difficulty: Optional[Difficulty] = Query(None),
    needs_revision: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, max_length=200),
    sort_by: QuestionSortField = Query(QuestionSortField.SOLVED_DATE),
    sort_order: SortOrder = Query(SortOrder.DESC),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    limit: int = Query(DEFAULT_PAGE_SIZE, description="Items per page, clamped to 1..100"),
):
    """List questions of the current account"""
    query = QuestionQuery(
        topic=topic,
        platform=platform,
        difficulty=difficulty,
        needs_revision=needs_revision,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    data = await QuestionService.list_questions(session, current_account, query)
    return SuccessResponse(data=data)


@router.get(
    "/stats",
    response_model=SuccessResponse[QuestionStats],
    summary="Question statistics",
)
async def get_question_stats(
    session: SessionDep,
    current_account: CurrentAccountDep,
):
    """Totals, revision count, last-30-days count and grouped counts"""
    data = await QuestionService.stats(session, current_account)
    return SuccessResponse(data=data)


@router.get(
    "/{question_id}",
    response_model=SuccessResponse[QuestionOut],
    summary="Get question",
)
async def get_question(
    question_id: int,
    session: SessionDep,
    current_account: CurrentAccountDep,
):
    data = await QuestionService.get(session, current_account, question_id)
    return SuccessResponse(data=data)


@router.put(
    "/{question_id}",
    response_model=SuccessResponse[QuestionOut],
    summary="Update question",
    description="""
    Partial update: only fields present in the body change. Required fields
    (title, link, platform, topic, difficulty, tags, needs_revision,
    solved_date) cannot be set to null.
    """
)
async def update_question(
    question_id: int,
    request: QuestionUpdate,
    session: SessionDep,
    current_account: CurrentAccountDep,
):
    data = await QuestionService.update(session, current_account, question_id, request)
    return SuccessResponse(data=data, message="Question updated successfully")


@router.delete(
    "/{question_id}",
    response_model=SuccessResponse[None],
    summary="Delete question",
)
async def delete_question(
    question_id: int,
    session: SessionDep,
    current_account: CurrentAccountDep,
):
    await QuestionService.delete(session, current_account, question_id)
    return SuccessResponse(data=None, message="Question deleted successfully")


@router.patch(
    "/{question_id}/toggle-revision",
    response_model=SuccessResponse[QuestionOut],
    summary="Set revision flag",
)
async def toggle_revision(
    question_id: int,
    request: ToggleRevisionRequest,
    session: SessionDep,
    current_account: CurrentAccountDep,
):
    """Set ``needs_revision`` to the given value"""
    data = await QuestionService.set_revision(
        session, current_account, question_id, request.needs_revision
    )
    message = "Question marked for revision" if data.needs_revision else "Question removed from revision"
    return SuccessResponse(data=data, message=message)
