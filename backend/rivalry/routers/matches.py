from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import MATCH_SUBMIT_RATE_LIMIT
from ..db import get_session
from ..exceptions import ProblemDetail, http_problem
from ..limits import limiter
from ..schemas import (
    MatchAmendedOut,
    MatchIn,
    MatchRecordedOut,
    MatchReverseIn,
    MatchReversedOut,
)
from ..services import ledger
from ..services.validation import ValidationError
from .history import to_match_out
from .players import to_player_out

# Resource-only prefix; API_PREFIX is added in main.py
router = APIRouter(
    prefix="/matches",
    tags=["matches"],
    responses={404: {"model": ProblemDetail}, 422: {"model": ProblemDetail}},
)


def _invalid_match(exc: ValidationError):
    return http_problem(status_code=422, detail=str(exc), code="invalid_match")


def _reversed_out(result: ledger.LedgerResult) -> MatchReversedOut:
    return MatchReversedOut(
        me=to_player_out(result.me),
        friend=to_player_out(result.friend),
        match=to_match_out(result.match) if result.match is not None else None,
    )


# POST /api/matches
@router.post("", response_model=MatchRecordedOut)
@limiter.limit(MATCH_SUBMIT_RATE_LIMIT)
async def create_match_route(
    request: Request,
    body: MatchIn,
    session: AsyncSession = Depends(get_session),
) -> MatchRecordedOut:
    try:
        result = await ledger.record_match(session, body.to_fields())
    except ValidationError as exc:
        raise _invalid_match(exc)
    return MatchRecordedOut(
        me=to_player_out(result.me),
        friend=to_player_out(result.friend),
        match=to_match_out(result.match),
    )


# POST /api/matches/reverse
@router.post("/reverse", response_model=MatchReversedOut)
async def reverse_match_route(
    body: MatchReverseIn,
    session: AsyncSession = Depends(get_session),
) -> MatchReversedOut:
    try:
        result = await ledger.reverse_match(session, body.to_fields(), match_id=body.id)
    except ValidationError as exc:
        raise _invalid_match(exc)
    return _reversed_out(result)


# PUT /api/matches/{mid}
@router.put("/{mid}", response_model=MatchAmendedOut)
async def amend_match_route(
    mid: str,
    body: MatchIn,
    session: AsyncSession = Depends(get_session),
) -> MatchAmendedOut:
    try:
        result = await ledger.amend_match(session, mid, body.to_fields())
    except ValidationError as exc:
        raise _invalid_match(exc)
    return MatchAmendedOut(
        me=to_player_out(result.me),
        friend=to_player_out(result.friend),
        match=to_match_out(result.match),
    )


# DELETE /api/matches/{mid}
@router.delete("/{mid}", response_model=MatchReversedOut)
async def delete_match_route(
    mid: str,
    session: AsyncSession = Depends(get_session),
) -> MatchReversedOut:
    return _reversed_out(await ledger.reverse_logged_match(session, mid))
