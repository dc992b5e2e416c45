from enum import Enum
from typing import Any, Dict, Mapping


class ValidationError(Exception):
    """Raised when a match or a stat edit is malformed."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class MatchResult(str, Enum):
    """Outcome of a match from the point of view of the ``me`` player."""

    WIN = "win"
    DRAW = "draw"
    LOSS = "loss"


GOAL_KINDS = ("normal", "penalty", "freekick", "corner", "own")

# Counter columns on ``Player``; order matches the nested ``stats`` record.
STAT_FIELDS = (
    "total_matches",
    "total_goals",
    "wins",
    "draws",
    "losses",
    "penalty_goals",
    "freekick_goals",
    "corner_goals",
    "own_goals",
)
CONCEDED_FIELD = "conceded_matches"
PLAYER_COUNTERS = STAT_FIELDS + (CONCEDED_FIELD,)

# Largest value the 32-bit counter columns hold.
MAX_COUNTER = 2_147_483_647

STAT_WIRE_NAMES: Dict[str, str] = {
    "totalMatches": "total_matches",
    "totalGoals": "total_goals",
    "wins": "wins",
    "draws": "draws",
    "losses": "losses",
    "penaltyGoals": "penalty_goals",
    "freekickGoals": "freekick_goals",
    "cornerGoals": "corner_goals",
    "ownGoals": "own_goals",
}


def goal_field(side: str, kind: str) -> str:
    """Column name for a goal counter, e.g. ``me_penalty_goals``."""

    return f"{side}_{kind}_goals"


def coerce_result(value: Any) -> MatchResult:
    if isinstance(value, MatchResult):
        return value
    try:
        return MatchResult(value)
    except ValueError:
        allowed = ", ".join(r.value for r in MatchResult)
        raise ValidationError(f"result must be one of: {allowed} (got {value!r}).")


def coerce_goal_count(value: Any, field: str) -> int:
    """Missing counts are zero. Negative counts pass through untouched."""

    if value is None:
        return 0
    # Reject booleans explicitly (bool is a subclass of int in Python)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer.")
    return value


def normalize_stat_key(key: str) -> str:
    """Map any accepted spelling of a counter to its column name.

    Accepts the dotted document paths (``stats.totalGoals``), the bare
    camelCase names (``totalGoals``, ``concededMatches``) and the column
    names themselves.
    """

    if not isinstance(key, str):
        raise ValidationError("stat field names must be strings.")
    name = key.strip()
    if name.startswith("stats."):
        inner = name[len("stats."):]
        if inner in STAT_WIRE_NAMES:
            return STAT_WIRE_NAMES[inner]
        if inner in STAT_FIELDS:
            return inner
        raise ValidationError(f"unknown stat field '{key}'.")
    if name in STAT_WIRE_NAMES:
        return STAT_WIRE_NAMES[name]
    if name == "concededMatches":
        return CONCEDED_FIELD
    if name in PLAYER_COUNTERS:
        return name
    raise ValidationError(f"unknown stat field '{key}'.")


def normalize_stat_values(values: Mapping[str, Any]) -> Dict[str, int]:
    """Validate a ``{field: int}`` map and key it by column name."""

    if not isinstance(values, Mapping):
        raise ValidationError("stat values must be an object.")

    normalized: Dict[str, int] = {}
    for key, raw in values.items():
        field = normalize_stat_key(key)
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise ValidationError(f"'{key}' must be an integer.")
        if abs(raw) > MAX_COUNTER:
            raise ValidationError(f"'{key}' must be between -{MAX_COUNTER} and {MAX_COUNTER}.")
        if field in normalized:
            raise ValidationError(f"'{key}' is given more than once.")
        normalized[field] = raw
    return normalized
