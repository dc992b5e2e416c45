"""Match-level operations that touch both players and the match log.

Each operation runs in one database transaction: either both players'
counters and the log change together, or nothing changes.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping, NamedTuple, TypeVar

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import MatchNotFound
from ..models import Match, Player
from .deltas import StatDeltas, build_increments, merge_deltas
from .history import (
    append_match,
    delete_match,
    get_match,
    match_fields,
    update_match,
)
from .players import apply_increment, get_player_by_role, list_players
from .roster import Role, Roster
from .seeding import ensure_roster

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LedgerResult(NamedTuple):
    me: Player
    friend: Player
    match: Match | None = None


async def _in_transaction(
    session: AsyncSession, work: Callable[[], Awaitable[T]]
) -> T:
    try:
        outcome = await work()
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    return outcome


async def _apply_deltas(session: AsyncSession, deltas: StatDeltas) -> tuple[Player, Player]:
    updated = {}
    for role in Role:
        player = await get_player_by_role(session, role)
        updated[role] = await apply_increment(session, player.name, deltas.for_role(role))
    return updated[Role.ME], updated[Role.FRIEND]


async def record_match(session: AsyncSession, fields: Mapping[str, Any]) -> LedgerResult:
    """Apply a new match to both players and append it to the log."""

    async def work() -> LedgerResult:
        deltas = build_increments(fields, 1)
        me, friend = await _apply_deltas(session, deltas)
        match = await append_match(session, fields)
        return LedgerResult(me, friend, match)

    result = await _in_transaction(session, work)
    logger.info(
        "Recorded match %s (%s) on %s", result.match.id, result.match.result, result.match.match_date
    )
    return result


async def reverse_match(
    session: AsyncSession,
    fields: Mapping[str, Any],
    match_id: str | None = None,
) -> LedgerResult:
    """Undo a previously applied match from its fields.

    When ``match_id`` is given the log entry is removed as well; an unknown
    id raises ``MatchNotFound`` and leaves the stats untouched.
    """

    async def work() -> LedgerResult:
        deltas = build_increments(fields, -1)
        me, friend = await _apply_deltas(session, deltas)
        if match_id is not None and not await delete_match(session, match_id):
            raise MatchNotFound(match_id)
        return LedgerResult(me, friend)

    result = await _in_transaction(session, work)
    logger.info("Reversed match%s", f" {match_id}" if match_id else "")
    return result


async def reverse_logged_match(session: AsyncSession, match_id: str) -> LedgerResult:
    """Undo a stored match using its own logged fields, then delete it."""

    async def work() -> LedgerResult:
        match = await get_match(session, match_id)
        if match is None:
            raise MatchNotFound(match_id)
        deltas = build_increments(match_fields(match), -1)
        me, friend = await _apply_deltas(session, deltas)
        await session.delete(match)
        await session.flush()
        return LedgerResult(me, friend, match)

    result = await _in_transaction(session, work)
    logger.info("Reversed and removed match %s", match_id)
    return result


async def amend_match(
    session: AsyncSession, match_id: str, fields: Mapping[str, Any]
) -> LedgerResult:
    """Replace a logged match and move both players' stats along with it."""

    async def work() -> LedgerResult:
        match = await get_match(session, match_id)
        if match is None:
            raise MatchNotFound(match_id)
        deltas = merge_deltas(
            build_increments(match_fields(match), -1),
            build_increments(fields, 1),
        )
        me, friend = await _apply_deltas(session, deltas)
        updated = await update_match(session, match_id, fields)
        return LedgerResult(me, friend, updated)

    result = await _in_transaction(session, work)
    logger.info("Amended match %s", match_id)
    return result


async def reset_rivalry(session: AsyncSession, roster: Roster) -> list[Player]:
    """Delete every player and match, then seed a zeroed roster."""

    async def work() -> list[Player]:
        await session.execute(delete(Match))
        await session.execute(delete(Player))
        session.expunge_all()
        await ensure_roster(session, roster)
        return await list_players(session)

    players = await _in_transaction(session, work)
    logger.warning("Reset complete; all players and matches cleared")
    return players
