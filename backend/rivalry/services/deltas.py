"""Translate one head-to-head match into per-player stat increments.

``build_increments`` is pure: it never touches the database. Applying the
result with ``multiplier=1`` and later with ``multiplier=-1`` for the same
match cancels out exactly on every counter of both players, which is what
makes reversing a match safe.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Mapping, NamedTuple

from .roster import Role, opponent_of
from .validation import (
    CONCEDED_FIELD,
    GOAL_KINDS,
    MatchResult,
    coerce_goal_count,
    coerce_result,
    goal_field,
)

SCORING_KINDS = ("normal", "penalty", "freekick", "corner")
TRACKED_KINDS = ("penalty", "freekick", "corner", "own")

# result -> (counter for "me", counter for "friend")
OUTCOME_COUNTERS: dict[MatchResult, tuple[str, str]] = {
    MatchResult.WIN: ("wins", "losses"),
    MatchResult.DRAW: ("draws", "draws"),
    MatchResult.LOSS: ("losses", "wins"),
}


class StatDeltas(NamedTuple):
    me: dict[str, int]
    friend: dict[str, int]

    def for_role(self, role: Role) -> dict[str, int]:
        return self.me if role is Role.ME else self.friend


def side_goals(match: Mapping[str, Any], role: Role) -> dict[str, int]:
    goals = {}
    for kind in GOAL_KINDS:
        field = goal_field(role.value, kind)
        goals[kind] = coerce_goal_count(match.get(field), field)
    return goals


def effective_goals(own: Mapping[str, int], opponent: Mapping[str, int]) -> int:
    """Goals a side scored plus own-goals the opponent put past themselves."""

    return sum(own[kind] for kind in SCORING_KINDS) + opponent["own"]


def build_increments(match: Mapping[str, Any], multiplier: int = 1) -> StatDeltas:
    """Return the increments for both players for a single match.

    Args:
        match: Match fields keyed by column name (``result``,
            ``me_normal_goals`` ... ``friend_own_goals``). Missing goal
            counts are treated as zero.
        multiplier: ``1`` to apply the match, ``-1`` to reverse it.

    Raises:
        ValueError: if ``multiplier`` is not ``1`` or ``-1``.
        ValidationError: if ``result`` is not a known outcome or a goal
            count is not an integer.
    """

    if isinstance(multiplier, bool) or multiplier not in (1, -1):
        raise ValueError(f"multiplier must be 1 or -1 (got {multiplier!r})")

    result = coerce_result(match.get("result"))
    goals = {role: side_goals(match, role) for role in Role}
    effective = {
        role: effective_goals(goals[role], goals[opponent_of(role)]) for role in Role
    }
    me_outcome, friend_outcome = OUTCOME_COUNTERS[result]
    outcome = {Role.ME: me_outcome, Role.FRIEND: friend_outcome}

    increments: dict[Role, dict[str, int]] = {}
    for role in Role:
        inc = {
            "total_matches": multiplier,
            "total_goals": effective[role] * multiplier,
        }
        for kind in TRACKED_KINDS:
            inc[f"{kind}_goals"] = goals[role][kind] * multiplier
        inc[outcome[role]] = multiplier
        if effective[opponent_of(role)] > 0:
            inc[CONCEDED_FIELD] = multiplier
        increments[role] = inc

    return StatDeltas(me=increments[Role.ME], friend=increments[Role.FRIEND])


def merge_deltas(*deltas: StatDeltas) -> StatDeltas:
    """Sum several delta sets per side, dropping counters that net to zero."""

    totals = {role: Counter() for role in Role}
    for delta in deltas:
        for role in Role:
            totals[role].update(delta.for_role(role))
    merged = {
        role: {field: value for field, value in totals[role].items() if value}
        for role in Role
    }
    return StatDeltas(me=merged[Role.ME], friend=merged[Role.FRIEND])
