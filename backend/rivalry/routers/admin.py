from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import reset_enabled
from ..db import get_session
from ..exceptions import ProblemDetail, ResetDisabled
from ..schemas import ResetOut
from ..services.ledger import reset_rivalry
from ..services.roster import Roster
from .players import to_player_out

router = APIRouter(
    tags=["admin"],
    responses={403: {"model": ProblemDetail}},
)


async def require_reset_enabled() -> None:
    if not reset_enabled():
        raise ResetDisabled()


# POST /api/reset
@router.post("/reset", response_model=ResetOut, dependencies=[Depends(require_reset_enabled)])
async def reset_route(session: AsyncSession = Depends(get_session)) -> ResetOut:
    players = await reset_rivalry(session, Roster.from_config())
    return ResetOut(
        message="Reset complete; all data cleared.",
        players=[to_player_out(p) for p in players],
    )
