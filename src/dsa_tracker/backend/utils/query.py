"""Database query helpers"""
from typing import Any

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

LIKE_ESCAPE_CHAR = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so ``term`` matches literally

    Use together with ``escape=LIKE_ESCAPE_CHAR``.

    Example:
        >>> escape_like("100%_done")
        '100\\\\%\\\\_done'
    """
    return (
        term.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )


def contains_pattern(term: str) -> str:
    """LIKE pattern matching ``term`` anywhere in the column"""
    return f"%{escape_like(term)}%"


async def paginate(
    session: AsyncSession,
    stmt: Any,
    page: int,
    page_size: int,
) -> tuple[list[Any], int]:
    """Execute one page of an ordered select statement

    Args:
        session: Database session
        stmt: Filtered and ordered ``select(Model)`` statement
        page: 1-based page number
        page_size: Items per page

    Returns:
        (items on the requested page, total number of matching rows)
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    count_result = await session.execute(count_stmt)
    total = count_result.scalar() or 0

    offset = (page - 1) * page_size
    result = await session.execute(stmt.offset(offset).limit(page_size))
    return list(result.scalars().all()), total
