"""Unit tests for the standings record index."""

import pytest

from conftest import FakeCollector, make_standing
from schemas import TeamRecord
from services.records import build_record_index, format_record, team_display_name


def test_format_record_joins_counts_with_hyphens():
    assert format_record(12, 5, 2) == "12-5-2"


def test_build_record_index_keys_by_abbreviation():
    collector = FakeCollector(standings=[
        make_standing("TOR", 12, 5, 2),
        make_standing("MTL", 7, 10, 3),
    ])

    records = build_record_index(collector)

    assert set(records) == {"TOR", "MTL"}
    assert records["TOR"].record_string == "12-5-2"
    assert records["MTL"].record_string == "7-10-3"


def test_missing_counts_default_to_zero():
    collector = FakeCollector(standings=[{"teamAbbrev": {"default": "SEA"}, "wins": 3}])

    records = build_record_index(collector)

    assert records["SEA"].record_string == "3-0-0"


def test_entries_without_abbreviation_are_skipped():
    collector = FakeCollector(standings=[{"wins": 1, "losses": 1, "otLosses": 1}, make_standing("BOS")])

    assert list(build_record_index(collector)) == ["BOS"]


def test_each_build_is_a_full_replace():
    collector = FakeCollector(standings=[make_standing("TOR"), make_standing("MTL")])
    first = build_record_index(collector)

    collector.standings = [make_standing("TOR", 1, 0, 0)]
    second = build_record_index(collector)

    assert "MTL" in first
    assert list(second) == ["TOR"]


def test_standings_failure_propagates():
    collector = FakeCollector(standings=ConnectionError("standings down"))

    with pytest.raises(ConnectionError):
        build_record_index(collector)


def test_team_display_name_falls_back_to_abbreviation():
    named = TeamRecord("1-0-0", raw=make_standing("TOR", name="Maple Leafs"))
    unnamed = TeamRecord("1-0-0", raw={})

    assert team_display_name("TOR", named) == "Maple Leafs"
    assert team_display_name("UTA", unnamed) == "UTA"
