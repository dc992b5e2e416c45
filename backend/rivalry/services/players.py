from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import PlayerNotFound
from ..models import Player
from ..time_utils import utcnow_naive
from .roster import Role
from .validation import ValidationError, normalize_stat_values

# Path segments under /players that are routes rather than player names.
RESERVED_PLAYER_NAMES = frozenset({"roster"})


async def find_player_by_name(session: AsyncSession, name: str) -> Player | None:
    return (
        await session.execute(
            select(Player)
            .where(Player.name == name)
            .execution_options(populate_existing=True)
        )
    ).scalar_one_or_none()


async def get_player(session: AsyncSession, name: str) -> Player:
    player = await find_player_by_name(session, name)
    if player is None:
        raise PlayerNotFound(name)
    return player


async def get_player_by_role(session: AsyncSession, role: Role) -> Player:
    player = (
        await session.execute(select(Player).where(Player.role == role.value))
    ).scalar_one_or_none()
    if player is None:
        raise PlayerNotFound(role.value)
    return player


async def list_players(session: AsyncSession) -> list[Player]:
    role_order = case(
        (Player.role == Role.ME.value, 0),
        (Player.role == Role.FRIEND.value, 1),
        else_=2,
    )
    rows = (
        await session.execute(select(Player).order_by(role_order, Player.name))
    ).scalars().all()
    return list(rows)


async def apply_increment(
    session: AsyncSession, name: str, increments: Mapping[str, Any]
) -> Player:
    """Add ``increments`` to a player's counters in a single UPDATE.

    The arithmetic happens inside the database (``col = col + :delta``) so
    concurrent increments on the same row never overwrite each other.
    Nothing is committed here.
    """

    deltas = normalize_stat_values(increments)
    if deltas:
        values = {
            field: getattr(Player, field) + delta for field, delta in deltas.items()
        }
        values["updated_at"] = utcnow_naive()
        result = await session.execute(
            update(Player)
            .where(Player.name == name)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise PlayerNotFound(name)
    return await get_player(session, name)


async def replace_fields(
    session: AsyncSession, name: str, fields: Mapping[str, Any]
) -> Player:
    """Overwrite counters (and optionally the name) with absolute values.

    ``fields`` may carry a ``name`` key to rename the player; every other
    key is a counter in any spelling ``normalize_stat_key`` accepts.
    """

    player = await get_player(session, name)
    counters = dict(fields)
    new_name = counters.pop("name", None)
    values = normalize_stat_values(counters)

    if new_name is not None:
        if not isinstance(new_name, str) or not new_name.strip():
            raise ValidationError("name must not be empty.")
        new_name = new_name.strip()
        if new_name.lower() in RESERVED_PLAYER_NAMES:
            raise ValidationError(f"player name '{new_name}' is reserved.")
        if new_name != player.name:
            taken = await find_player_by_name(session, new_name)
            if taken is not None:
                raise ValidationError(f"player name '{new_name}' already exists.")
            player.name = new_name

    for field, value in values.items():
        setattr(player, field, value)
    await session.flush()
    return player
