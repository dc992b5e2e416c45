import asyncio

import pytest
from sqlalchemy import select

from rivalry.exceptions import MatchNotFound, PlayerNotFound
from rivalry.models import Match, Player
from rivalry.services import ledger
from rivalry.services.history import list_matches
from rivalry.services.players import apply_increment, get_player, list_players
from rivalry.services.roster import Roster
from rivalry.services.seeding import ensure_roster
from rivalry.services.validation import PLAYER_COUNTERS

WIN = {"match_date": "2024-05-01", "result": "win", "me_normal_goals": 2, "friend_own_goals": 1}
LOSS = {
    "match_date": "2024-05-02",
    "result": "loss",
    "me_penalty_goals": 1,
    "friend_normal_goals": 2,
    "friend_corner_goals": 1,
}


def _counters(player: Player) -> dict[str, int]:
    return {field: getattr(player, field) for field in PLAYER_COUNTERS}


async def _snapshot(session) -> dict[str, dict[str, int]]:
    return {p.role: _counters(p) for p in await list_players(session)}


def test_record_then_reverse_restores_both_players(seeded):
    async def run():
        async with seeded() as session:
            await ledger.record_match(session, LOSS)
            before = await _snapshot(session)

            recorded = await ledger.record_match(session, WIN)
            assert recorded.me.total_goals == 4
            assert recorded.me.wins == 1
            assert recorded.friend.losses == 1
            assert recorded.friend.conceded_matches == 2

            await ledger.reverse_match(session, WIN, match_id=recorded.match.id)
            after = await _snapshot(session)
            remaining = await list_matches(session)
        return before, after, remaining

    before, after, remaining = asyncio.run(run())
    assert after == before
    assert [m.result for m in remaining] == ["loss"]


def test_reverse_without_id_keeps_log(seeded):
    async def run():
        async with seeded() as session:
            await ledger.record_match(session, WIN)
            result = await ledger.reverse_match(session, WIN)
            return result, await list_matches(session)

    result, matches = asyncio.run(run())
    assert result.match is None
    assert result.me.total_matches == 0
    assert result.friend.conceded_matches == 0
    assert len(matches) == 1


def test_reverse_with_unknown_id_changes_nothing(seeded):
    async def run():
        async with seeded() as session:
            await ledger.record_match(session, WIN)
            before = await _snapshot(session)
            with pytest.raises(MatchNotFound):
                await ledger.reverse_match(session, WIN, match_id="missing")
            return before, await _snapshot(session)

    before, after = asyncio.run(run())
    assert after == before


def test_failed_log_append_rolls_back_player_updates(seeded, monkeypatch):
    async def broken_append(session, fields):
        raise RuntimeError("log unavailable")

    monkeypatch.setattr(ledger, "append_match", broken_append)

    async def run():
        async with seeded() as session:
            with pytest.raises(RuntimeError, match="log unavailable"):
                await ledger.record_match(session, WIN)
        async with seeded() as session:
            return await _snapshot(session), await list_matches(session)

    snapshot, matches = asyncio.run(run())
    assert matches == []
    for counters in snapshot.values():
        assert all(value == 0 for value in counters.values())


def test_missing_opponent_rolls_back_first_player(session_maker):
    async def run():
        async with session_maker() as session:
            session.add(Player(id="p-me", name="Shakthi", role="me"))
            await session.commit()
            with pytest.raises(PlayerNotFound):
                await ledger.record_match(session, WIN)
        async with session_maker() as session:
            return await get_player(session, "Shakthi")

    me = asyncio.run(run())
    assert me.total_matches == 0
    assert me.wins == 0


def test_reverse_logged_match_uses_stored_fields(seeded):
    async def run():
        async with seeded() as session:
            recorded = await ledger.record_match(session, LOSS)
            result = await ledger.reverse_logged_match(session, recorded.match.id)
            return result, await _snapshot(session), await list_matches(session)

    result, snapshot, matches = asyncio.run(run())
    assert result.match.result == "loss"
    assert matches == []
    for counters in snapshot.values():
        assert all(value == 0 for value in counters.values())


def test_reverse_logged_match_unknown_id(seeded):
    async def run():
        async with seeded() as session:
            await ledger.reverse_logged_match(session, "nope")

    with pytest.raises(MatchNotFound):
        asyncio.run(run())


def test_amend_match_equals_recording_new_fields(seeded):
    async def amended():
        async with seeded() as session:
            recorded = await ledger.record_match(session, WIN)
            result = await ledger.amend_match(session, recorded.match.id, LOSS)
            return result, await _snapshot(session), await list_matches(session)

    result, amended_snapshot, matches = asyncio.run(amended())
    assert result.match.id == matches[0].id
    assert matches[0].result == "loss"
    assert matches[0].match_date == "2024-05-02"
    assert matches[0].me_normal_goals == 0

    async def direct():
        async with seeded() as session:
            await session.execute(Match.__table__.delete())
            for p in await list_players(session):
                for field in PLAYER_COUNTERS:
                    setattr(p, field, 0)
            await session.commit()
            await ledger.record_match(session, LOSS)
            return await _snapshot(session)

    assert asyncio.run(direct()) == amended_snapshot


def test_apply_increment_rejects_unknown_player(seeded):
    async def run():
        async with seeded() as session:
            await apply_increment(session, "Nobody", {"wins": 1})

    with pytest.raises(PlayerNotFound):
        asyncio.run(run())


def test_increment_is_applied_in_the_database_not_from_a_stale_read(seeded):
    async def run():
        async with seeded() as stale, seeded() as other:
            loaded = await get_player(stale, "Shakthi")
            assert loaded.total_goals == 0

            await apply_increment(other, "Shakthi", {"stats.totalGoals": 1})
            await other.commit()

            updated = await apply_increment(stale, "Shakthi", {"totalGoals": 1})
            await stale.commit()
            return updated.total_goals

    assert asyncio.run(run()) == 2


def test_reset_rivalry_clears_everything(seeded):
    roster = Roster(me="Ana", friend="Bea")

    async def run():
        async with seeded() as session:
            await ledger.record_match(session, WIN)
            players = await ledger.reset_rivalry(session, roster)
            return players, await list_matches(session)

    players, matches = asyncio.run(run())
    assert [(p.role, p.name) for p in players] == [("me", "Ana"), ("friend", "Bea")]
    assert all(p.total_matches == 0 for p in players)
    assert matches == []


def test_ensure_roster_is_idempotent(session_maker):
    roster = Roster(me="Shakthi", friend="Shynu")

    async def run():
        async with session_maker() as session:
            first = await ensure_roster(session, roster)
            await session.commit()
            second = await ensure_roster(session, roster)
            await session.commit()
            rows = (await session.execute(select(Player))).scalars().all()
            return first, second, rows

    first, second, rows = asyncio.run(run())
    assert len(first) == 2
    assert second == []
    assert sorted(p.name for p in rows) == ["Shakthi", "Shynu"]
