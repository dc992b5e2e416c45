from typing import Annotated, Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, StrictInt, model_validator, field_validator, ConfigDict

from .services.validation import MAX_COUNTER, MatchResult

GoalCount = Annotated[StrictInt, Field(ge=0, le=MAX_COUNTER)]
CounterValue = Annotated[StrictInt, Field(ge=-MAX_COUNTER, le=MAX_COUNTER)]

GOAL_FIELD_ALIASES = {
    "me_normal_goals": "me_normalGoals",
    "me_penalty_goals": "me_penaltyGoals",
    "me_freekick_goals": "me_freekickGoals",
    "me_corner_goals": "me_cornerGoals",
    "me_own_goals": "me_ownGoals",
    "friend_normal_goals": "friend_normalGoals",
    "friend_penalty_goals": "friend_penaltyGoals",
    "friend_freekick_goals": "friend_freekickGoals",
    "friend_corner_goals": "friend_cornerGoals",
    "friend_own_goals": "friend_ownGoals",
}


class MatchIn(BaseModel):
    """A submitted match. Goal counts default to zero and must be >= 0."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    match_date: str = Field(..., alias="matchDate", min_length=1, max_length=100)
    result: MatchResult
    me_normal_goals: GoalCount = Field(0, alias="me_normalGoals")
    me_penalty_goals: GoalCount = Field(0, alias="me_penaltyGoals")
    me_freekick_goals: GoalCount = Field(0, alias="me_freekickGoals")
    me_corner_goals: GoalCount = Field(0, alias="me_cornerGoals")
    me_own_goals: GoalCount = Field(0, alias="me_ownGoals")
    friend_normal_goals: GoalCount = Field(0, alias="friend_normalGoals")
    friend_penalty_goals: GoalCount = Field(0, alias="friend_penaltyGoals")
    friend_freekick_goals: GoalCount = Field(0, alias="friend_freekickGoals")
    friend_corner_goals: GoalCount = Field(0, alias="friend_cornerGoals")
    friend_own_goals: GoalCount = Field(0, alias="friend_ownGoals")

    @field_validator(*GOAL_FIELD_ALIASES, mode="before")
    @classmethod
    def _missing_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("match_date", mode="before")
    @classmethod
    def _strip_date(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(include={"match_date", "result", *GOAL_FIELD_ALIASES})


class MatchReverseIn(MatchIn):
    """Fields of a match to undo, plus the log entry to drop (``_id``)."""

    match_date: Optional[str] = Field(None, alias="matchDate", max_length=100)
    id: Optional[str] = Field(None, alias="_id", min_length=1)


class MatchOut(BaseModel):
    id: str
    matchDate: str
    result: MatchResult
    me_normalGoals: int
    me_penaltyGoals: int
    me_freekickGoals: int
    me_cornerGoals: int
    me_ownGoals: int
    friend_normalGoals: int
    friend_penaltyGoals: int
    friend_freekickGoals: int
    friend_cornerGoals: int
    friend_ownGoals: int
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class PlayerStatsOut(BaseModel):
    totalMatches: int = 0
    totalGoals: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    penaltyGoals: int = 0
    freekickGoals: int = 0
    cornerGoals: int = 0
    ownGoals: int = 0


class PlayerOut(BaseModel):
    id: str
    name: str
    role: str
    stats: PlayerStatsOut
    concededMatches: int = 0
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class RosterOut(BaseModel):
    me: PlayerOut
    friend: PlayerOut


class PlayerStatsPatch(BaseModel):
    totalMatches: Optional[CounterValue] = None
    totalGoals: Optional[CounterValue] = None
    wins: Optional[CounterValue] = None
    draws: Optional[CounterValue] = None
    losses: Optional[CounterValue] = None
    penaltyGoals: Optional[CounterValue] = None
    freekickGoals: Optional[CounterValue] = None
    cornerGoals: Optional[CounterValue] = None
    ownGoals: Optional[CounterValue] = None

    model_config = ConfigDict(extra="forbid")


class PlayerUpdate(BaseModel):
    """Direct overwrite of a player's name and/or counters."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    stats: Optional[PlayerStatsPatch] = None
    concededMatches: Optional[CounterValue] = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _ensure_fields(self) -> "PlayerUpdate":
        if not self.to_fields():
            raise ValueError("at least one field must be provided")
        return self

    def to_fields(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        if self.name is not None:
            fields["name"] = self.name
        if self.stats is not None:
            for key, value in self.stats.model_dump(exclude_none=True).items():
                fields[f"stats.{key}"] = value
        if self.concededMatches is not None:
            fields["concededMatches"] = self.concededMatches
        return fields


class MatchRecordedOut(BaseModel):
    me: PlayerOut
    friend: PlayerOut
    match: MatchOut


class MatchReversedOut(BaseModel):
    me: PlayerOut
    friend: PlayerOut
    match: Optional[MatchOut] = None


class MatchAmendedOut(MatchRecordedOut):
    pass


class ResetOut(BaseModel):
    ok: bool = True
    message: str
    players: List[PlayerOut]
