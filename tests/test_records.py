"""Standings parsing: upstream keys, missing fields default to zero, derived per-game values."""

import math

from fanstatsengine.data.records import (
    TeamRecord,
    build_standings_frame,
    owned_teams,
    parse_standings,
    participants,
    teams_by_participant,
)

ENTRY = {
    "teamAbbrev": {"default": "TOR"},
    "teamName": {"default": "Toronto Maple Leafs"},
    "wins": 10,
    "losses": 4,
    "otLosses": 2,
    "gamesPlayed": 16,
    "points": 22,
    "goalFor": 52,
    "goalAgainst": 40,
    "divisionSequence": 1,
    "conferenceSequence": 2,
    "leagueSequence": 3,
    "pointPctg": 0.6875,
    "streakCode": "W",
    "streakCount": 3,
    "regulationWins": 7,
}


def test_from_api_maps_upstream_keys():
    rec = TeamRecord.from_api(ENTRY)
    assert rec.abbrev == "TOR"
    assert rec.name == "Toronto Maple Leafs"
    assert (rec.wins, rec.losses, rec.ot_losses, rec.points) == (10, 4, 2, 22)
    assert (rec.goals_for, rec.goals_against) == (52, 40)
    assert (rec.division_rank, rec.conference_rank, rec.league_rank) == (1, 2, 3)
    assert rec.streak_type == "W" and rec.streak_length == 3
    assert rec.ot_wins == 3
    assert rec.goal_differential_per_game == 0.75


def test_missing_fields_default_to_zero():
    rec = TeamRecord.from_api({"teamAbbrev": "MTL", "wins": None, "goalFor": "x"})
    assert rec.wins == 0 and rec.goals_for == 0 and rec.league_rank == 0
    assert rec.games_played == 0
    assert rec.goals_for_per_game is None and rec.win_pct is None
    assert rec.goal_differential_per_game is None
    assert rec.ot_wins == 0


def test_games_played_derived_when_absent():
    rec = TeamRecord(abbrev="BOS", wins=3, losses=2, ot_losses=1)
    assert rec.games_played == 6


def test_streak_length_from_code_digits_and_default():
    assert TeamRecord(abbrev="A", streak_code="L4").streak_length == 4
    assert TeamRecord(abbrev="A", streak_code="W").streak_length == 1
    assert TeamRecord(abbrev="A").streak_type == ""


def test_parse_standings_skips_entries_without_abbrev():
    recs = parse_standings({"standings": [ENTRY, {"wins": 3}, "junk"]})
    assert [r.abbrev for r in recs] == ["TOR"]


def test_parse_standings_null_or_non_list_is_empty():
    assert parse_standings({"standings": None}) == []
    assert parse_standings({"standings": {"TOR": ENTRY}}) == []
    assert parse_standings(None) == []


def test_assignment_helpers_ignore_unassigned():
    assignment = {"TOR": "Dan R.", "MTL": "N/A", "BOS": "Dan R.", "OTT": "Zak S.", "BUF": ""}
    assert owned_teams(assignment) == ["BOS", "OTT", "TOR"]
    assert participants(assignment) == ["Dan R.", "Zak S."]
    assert teams_by_participant(assignment)["Dan R."] == ["BOS", "TOR"]


def test_standings_frame_only_owned_rows_with_nan_per_game_for_zero_gp():
    recs = [TeamRecord.from_api(ENTRY), TeamRecord(abbrev="MTL"), TeamRecord(abbrev="BOS")]
    df = build_standings_frame(recs, {"TOR": "Dan R.", "BOS": "Zak S.", "MTL": "N/A"})
    assert list(df["abbrev"]) == ["BOS", "TOR"]
    bos = df.iloc[0]
    assert math.isnan(bos["gf_per_game"]) and math.isnan(bos["win_pct"])
    tor = df.iloc[1]
    assert tor["gf_per_game"] == 52 / 16
    assert tor["diff_per_game"] == 52 / 16 - 40 / 16
    assert tor["win_pct"] == 62.5


def test_standings_frame_empty_when_nobody_owns_a_team():
    df = build_standings_frame([TeamRecord(abbrev="TOR")], {"TOR": "N/A"})
    assert df.empty
    assert "participant" in df.columns
