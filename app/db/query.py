"""Reusable query fragments: JSON list filters, sorting, pagination."""

import json
from typing import Dict, List, Tuple

from sqlalchemy import String, and_, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.utils.helpers import escape_like


def json_list_contains_all(column, values: List[str]):
    """
    Match rows whose JSON string list holds every value.

    The list is matched through its text form (``["react", "css"]``), which
    is how both SQLite JSON (written by ``json_serializer``) and PostgreSQL
    JSONB render it, non-ASCII characters unescaped.
    """
    text = cast(column, String)
    return and_(*[
        text.like(f"%{escape_like(json.dumps(value, ensure_ascii=False))}%", escape="\\")
        for value in values
    ])


def keyword_filter(columns: list, keyword: str):
    """OR of case-insensitive substring matches of each whitespace term on each column."""
    terms = [term for term in keyword.split() if term]
    clauses = []
    for term in terms:
        pattern = f"%{escape_like(term)}%"
        for column in columns:
            clauses.append(column.ilike(pattern, escape="\\"))
    return or_(*clauses) if clauses else None


def build_order_by(model, sort: str, fields: Dict[str, str], default: str) -> list:
    """
    Translate a ``-field`` sort string into ORDER BY clauses.

    Unknown fields fall back to ``default``. ``id`` is appended as a
    tiebreaker so pages are stable.
    """
    sort = (sort or default).strip()
    descending = sort.startswith("-")
    column_name = fields.get(sort.lstrip("-"))
    if column_name is None:
        descending = default.startswith("-")
        column_name = fields[default.lstrip("-")]

    column = getattr(model, column_name)
    order = column.desc() if descending else column.asc()
    return [order, model.id.desc() if descending else model.id.asc()]


async def paginate(db: AsyncSession, stmt, offset: int, limit: int) -> Tuple[list, int]:
    """Run ``stmt`` for one page and count the full result set."""
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    count = (await db.execute(count_stmt)).scalar_one()

    result = await db.execute(stmt.offset(offset).limit(limit))
    return list(result.scalars().unique().all()), count
