"""Internal application services."""

from .validation import MatchResult, ValidationError
from .roster import Role, Roster, opponent_of
from .deltas import StatDeltas, build_increments, merge_deltas
from .ledger import (
    LedgerResult,
    amend_match,
    record_match,
    reset_rivalry,
    reverse_logged_match,
    reverse_match,
)

__all__ = [
    "MatchResult",
    "ValidationError",
    "Role",
    "Roster",
    "opponent_of",
    "StatDeltas",
    "build_increments",
    "merge_deltas",
    "LedgerResult",
    "record_match",
    "reverse_match",
    "reverse_logged_match",
    "amend_match",
    "reset_rivalry",
]
