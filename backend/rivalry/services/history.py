"""The match log: one row per submitted head-to-head match."""

from __future__ import annotations

import uuid
from typing import Any, Mapping

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Match
from .roster import Role
from .validation import GOAL_KINDS, coerce_goal_count, coerce_result, goal_field

GOAL_FIELDS = tuple(goal_field(role.value, kind) for role in Role for kind in GOAL_KINDS)


def match_fields(match: Match) -> dict[str, Any]:
    """Return the stored fields of ``match`` in the shape ``build_increments`` takes."""

    fields: dict[str, Any] = {"match_date": match.match_date, "result": match.result}
    for field in GOAL_FIELDS:
        fields[field] = getattr(match, field)
    return fields


def _column_values(fields: Mapping[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {
        "match_date": fields.get("match_date"),
        "result": coerce_result(fields.get("result")).value,
    }
    for field in GOAL_FIELDS:
        values[field] = coerce_goal_count(fields.get(field), field)
    return values


async def append_match(session: AsyncSession, fields: Mapping[str, Any]) -> Match:
    match = Match(id=uuid.uuid4().hex, **_column_values(fields))
    session.add(match)
    await session.flush()
    return match


async def get_match(session: AsyncSession, match_id: str) -> Match | None:
    return await session.get(Match, match_id)


async def list_matches(session: AsyncSession) -> list[Match]:
    rows = (
        await session.execute(
            select(Match).order_by(Match.created_at.desc(), Match.id.desc())
        )
    ).scalars().all()
    return list(rows)


async def delete_match(session: AsyncSession, match_id: str) -> bool:
    result = await session.execute(delete(Match).where(Match.id == match_id))
    return result.rowcount > 0


async def update_match(
    session: AsyncSession, match_id: str, fields: Mapping[str, Any]
) -> Match | None:
    match = await get_match(session, match_id)
    if match is None:
        return None
    for column, value in _column_values(fields).items():
        setattr(match, column, value)
    await session.flush()
    return match
