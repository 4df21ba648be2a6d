"""Unit tests for game/team persistence against in-memory SQLite."""

from datetime import datetime, timezone

import pytest

from models import Game, Team
from services.store import GameStore


def _game_record(game_id="2023020001", **overrides):
    record = {
        "game_id": game_id,
        "start_time": datetime(2024, 1, 10, 0, 0, tzinfo=timezone.utc),
        "status": "Scheduled",
        "venue": "Scotiabank Arena",
        "broadcasts": "SN",
        "winning_goal_scorer": None,
        "period_descriptor": "",
        "game_clock": "",
        "home_team_id": 10,
        "home_team_name": "Toronto",
        "home_team_abbrev": "TOR",
        "home_score": 0,
        "home_logo": "tor.png",
        "home_record": "12-5-2",
        "away_team_id": 8,
        "away_team_name": "Montréal",
        "away_team_abbrev": "MTL",
        "away_score": 0,
        "away_logo": "mtl.png",
        "away_record": "7-10-3",
        "api_raw": {"id": 2023020001},
    }
    record.update(overrides)
    return record


def _rows(session_factory, model):
    with session_factory() as db:
        rows = db.query(model).all()
        db.expunge_all()
        return rows


def test_upsert_games_inserts_rows(game_store, session_factory):
    written = game_store.upsert_games([_game_record("1"), _game_record("2")])

    assert written == 2
    assert sorted(g.game_id for g in _rows(session_factory, Game)) == ["1", "2"]


def test_upserting_same_game_twice_keeps_one_row(game_store, session_factory):
    game_store.upsert_games([_game_record("1")])
    game_store.upsert_games([_game_record("1", status="Live", home_score=1)])

    rows = _rows(session_factory, Game)
    assert len(rows) == 1
    assert rows[0].status == "Live"
    assert rows[0].home_score == 1


def test_duplicate_ids_within_one_batch_merge(game_store, session_factory):
    game_store.upsert_games([_game_record("1"), _game_record("1", status="Final")])

    rows = _rows(session_factory, Game)
    assert len(rows) == 1
    assert rows[0].status == "Final"


def test_missing_fields_do_not_clobber_stored_values(game_store, session_factory):
    game_store.upsert_games([_game_record("1", winning_goal_scorer="Matthews")])
    game_store.upsert_games([{"game_id": "1", "status": "Final", "winning_goal_scorer": None}])

    row = _rows(session_factory, Game)[0]
    assert row.status == "Final"
    assert row.winning_goal_scorer == "Matthews"
    assert row.venue == "Scotiabank Arena"


def test_upsert_teams_replaces_history(game_store, session_factory):
    game_store.upsert_teams([{"team_id": "TOR", "name": "Maple Leafs", "record": "1-0-0",
                              "logo": "tor.png", "last_5_games": [{"game_id": "1"}]}])
    game_store.upsert_teams([{"team_id": "TOR", "record": "2-0-0", "last_5_games": []}])

    row = _rows(session_factory, Team)[0]
    assert row.name == "Maple Leafs"
    assert row.record == "2-0-0"
    assert row.last_5_games == []


def test_records_are_written_in_chunks(session_factory):
    transactions = []

    def counting_factory():
        transactions.append(1)
        return session_factory()

    store = GameStore(session_factory=counting_factory, batch_size=2)
    written = store.upsert_games([_game_record(str(i)) for i in range(5)])

    assert written == 5
    assert len(transactions) == 3
    assert len(_rows(session_factory, Game)) == 5


def test_failing_chunk_rolls_back_and_raises(game_store, session_factory):
    bad = _game_record("2")
    del bad["home_team_abbrev"]  # NOT NULL column

    with pytest.raises(Exception):
        game_store.upsert_games([_game_record("1"), bad])

    assert _rows(session_factory, Game) == []
