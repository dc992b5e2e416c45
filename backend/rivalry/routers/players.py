from typing import Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..exceptions import ProblemDetail, http_problem
from ..models import Player
from ..schemas import CounterValue, PlayerOut, PlayerStatsOut, PlayerUpdate, RosterOut
from ..services.players import (
    apply_increment,
    get_player,
    get_player_by_role,
    list_players,
    replace_fields,
)
from ..services.roster import Role
from ..services.validation import ValidationError
from ..time_utils import coerce_utc

router = APIRouter(
    prefix="/players",
    tags=["players"],
    responses={404: {"model": ProblemDetail}, 422: {"model": ProblemDetail}},
)


def to_player_out(p: Player) -> PlayerOut:
    return PlayerOut(
        id=p.id,
        name=p.name,
        role=p.role,
        stats=PlayerStatsOut(
            totalMatches=p.total_matches,
            totalGoals=p.total_goals,
            wins=p.wins,
            draws=p.draws,
            losses=p.losses,
            penaltyGoals=p.penalty_goals,
            freekickGoals=p.freekick_goals,
            cornerGoals=p.corner_goals,
            ownGoals=p.own_goals,
        ),
        concededMatches=p.conceded_matches,
        createdAt=coerce_utc(p.created_at),
        updatedAt=coerce_utc(p.updated_at),
    )


@router.get("", response_model=list[PlayerOut])
async def list_players_route(session: AsyncSession = Depends(get_session)):
    return [to_player_out(p) for p in await list_players(session)]


@router.get("/roster", response_model=RosterOut)
async def get_roster(session: AsyncSession = Depends(get_session)) -> RosterOut:
    me = await get_player_by_role(session, Role.ME)
    friend = await get_player_by_role(session, Role.FRIEND)
    return RosterOut(me=to_player_out(me), friend=to_player_out(friend))


@router.get("/{name}", response_model=PlayerOut)
async def get_player_route(name: str, session: AsyncSession = Depends(get_session)):
    return to_player_out(await get_player(session, name))


# PUT /api/players/{name}
@router.put("/{name}", response_model=PlayerOut)
async def replace_player_fields(
    name: str,
    body: PlayerUpdate,
    session: AsyncSession = Depends(get_session),
) -> PlayerOut:
    try:
        player = await replace_fields(session, name, body.to_fields())
    except ValidationError as exc:
        await session.rollback()
        raise http_problem(status_code=422, detail=str(exc), code="invalid_stats")
    await session.commit()
    return to_player_out(player)


# PATCH /api/players/{name}/increment
@router.patch("/{name}/increment", response_model=PlayerOut)
async def increment_player(
    name: str,
    body: Dict[str, CounterValue] = Body(...),
    session: AsyncSession = Depends(get_session),
) -> PlayerOut:
    try:
        player = await apply_increment(session, name, body)
    except ValidationError as exc:
        await session.rollback()
        raise http_problem(status_code=422, detail=str(exc), code="invalid_stats")
    await session.commit()
    return to_player_out(player)
