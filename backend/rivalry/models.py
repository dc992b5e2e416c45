from sqlalchemy import (
    Column,
    String,
    DateTime,
    Integer,
    Index,
)
from sqlalchemy.sql import func

from .db import Base
from .time_utils import utcnow_naive


def _counter() -> Column:
    return Column(Integer, nullable=False, default=0, server_default="0")


class Player(Base):
    __tablename__ = "player"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    role = Column(String, nullable=False, unique=True)  # "me" | "friend"

    total_matches = _counter()
    total_goals = _counter()
    wins = _counter()
    draws = _counter()
    losses = _counter()
    penalty_goals = _counter()
    freekick_goals = _counter()
    corner_goals = _counter()
    own_goals = _counter()
    conceded_matches = _counter()

    created_at = Column(
        DateTime, nullable=False, default=utcnow_naive, server_default=func.now()
    )
    updated_at = Column(
        DateTime,
        nullable=False,
        default=utcnow_naive,
        onupdate=utcnow_naive,
        server_default=func.now(),
    )


class Match(Base):
    __tablename__ = "match"
    id = Column(String, primary_key=True)
    match_date = Column(String, nullable=False)
    result = Column(String, nullable=False)  # "win" | "draw" | "loss"

    me_normal_goals = _counter()
    me_penalty_goals = _counter()
    me_freekick_goals = _counter()
    me_corner_goals = _counter()
    me_own_goals = _counter()
    friend_normal_goals = _counter()
    friend_penalty_goals = _counter()
    friend_freekick_goals = _counter()
    friend_corner_goals = _counter()
    friend_own_goals = _counter()

    created_at = Column(
        DateTime, nullable=False, default=utcnow_naive, server_default=func.now()
    )
    updated_at = Column(
        DateTime,
        nullable=False,
        default=utcnow_naive,
        onupdate=utcnow_naive,
        server_default=func.now(),
    )

    __table_args__ = (Index("ix_match_created_at", "created_at"),)
