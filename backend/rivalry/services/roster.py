"""The fixed two-player roster, addressed by role rather than by name."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..config import roster_names


class Role(str, Enum):
    ME = "me"
    FRIEND = "friend"


def opponent_of(role: Role) -> Role:
    return Role.FRIEND if role is Role.ME else Role.ME


@dataclass(frozen=True)
class Roster:
    me: str
    friend: str

    @classmethod
    def from_config(cls) -> "Roster":
        me, friend = roster_names()
        return cls(me=me, friend=friend)

    def name_for(self, role: Role) -> str:
        return self.me if role is Role.ME else self.friend

    def items(self) -> list[tuple[Role, str]]:
        return [(role, self.name_for(role)) for role in Role]
