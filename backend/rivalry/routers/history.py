from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..models import Match
from ..schemas import GOAL_FIELD_ALIASES, MatchOut
from ..services.history import list_matches
from ..time_utils import coerce_utc

router = APIRouter(prefix="/history", tags=["history"])


def to_match_out(m: Match) -> MatchOut:
    goals = {alias: getattr(m, field) for field, alias in GOAL_FIELD_ALIASES.items()}
    return MatchOut(
        id=m.id,
        matchDate=m.match_date,
        result=m.result,
        createdAt=coerce_utc(m.created_at),
        updatedAt=coerce_utc(m.updated_at),
        **goals,
    )


# GET /api/history (newest first)
@router.get("", response_model=list[MatchOut])
async def get_history(session: AsyncSession = Depends(get_session)) -> list[MatchOut]:
    return [to_match_out(m) for m in await list_matches(session)]
