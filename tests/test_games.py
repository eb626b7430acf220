"""Schedule entries: completion from numeric or text states, regular-season detection, OT outcome."""

import pytest

from fanstatsengine.data.games import ScheduledGame, parse_schedule


def _game(**kw):
    base = {
        "id": 2024020101,
        "gameState": "OFF",
        "startTimeUTC": "2024-11-01T23:00:00Z",
        "homeTeam": {"abbrev": "TOR", "score": 3},
        "awayTeam": {"abbrev": "MTL", "score": 2},
        "periodDescriptor": {"periodType": "REG"},
    }
    base.update(kw)
    return ScheduledGame.from_api(base)


@pytest.mark.parametrize("state", [3, 4, 5, "3", "FINAL", "OFF", "final", "OFFICIAL"])
def test_final_states_are_completed(state):
    assert _game(gameState=state).is_completed()


@pytest.mark.parametrize("state", ["LIVE", "FUT", "PRE", "CRIT", 1, 2, None, ""])
def test_other_states_are_not_completed(state):
    assert not _game(gameState=state).is_completed()


def test_regular_season_from_game_id_segment():
    assert _game(id=2024020101).is_regular_season()
    assert not _game(id=2024010101).is_regular_season()
    assert not _game(id=2024030111).is_regular_season()


def test_explicit_game_type_takes_precedence():
    assert not _game(id=2024020101, gameType=3).is_regular_season()
    assert _game(id="X", gameType=2).is_regular_season()


def test_missing_id_and_type_is_not_regular_season():
    g = _game(id=None)
    assert g.game_id is None
    assert not g.is_regular_season()


def test_outcome_period_type_marks_overtime():
    g = _game(gameOutcome={"lastPeriodType": "OT"})
    assert g.decided_outside_regulation
    assert not _game().decided_outside_regulation


def test_winner_and_perspective_scores():
    g = _game()
    assert g.winner == "TOR"
    assert g.opponent_of("MTL") == "TOR"
    assert (g.score_for("MTL"), g.score_against("MTL")) == (2, 3)
    assert _game(homeTeam={"abbrev": "TOR", "score": 2}).winner is None


def test_parse_schedule_accepts_payload_or_list():
    raw = {"id": 1, "homeTeam": {"abbrev": "A"}, "awayTeam": {"abbrev": "B"}}
    assert len(parse_schedule({"games": [raw, "junk"]})) == 1
    assert len(parse_schedule([raw])) == 1
    assert parse_schedule(None) == []


def test_parse_schedule_null_or_non_list_games_is_empty():
    assert parse_schedule({"games": None}) == []
    assert parse_schedule({"games": "nope"}) == []
    assert parse_schedule({}) == []


def test_non_object_team_fields_read_as_empty():
    g = _game(homeTeam="TOR", awayTeam=["MTL"], periodDescriptor="REG", gameOutcome=3)
    assert (g.home_abbrev, g.away_abbrev) == ("", "")
    assert (g.home_score, g.away_score) == (0, 0)
    assert g.period_type == ""
    assert g.game_id == "2024020101"
