"""
Leaderboard categories over a small pool: directions, thresholds, zero-GP exclusion,
None when nothing qualifies.
"""

import pytest

from fanstatsengine.data.games import ScheduledGame
from fanstatsengine.data.records import TeamRecord, build_standings_frame
from fanstatsengine.models.head_to_head import HeadToHeadMatrix
from fanstatsengine.models.history import HistoricalTracker
from fanstatsengine.stats import categories as cat

ASSIGNMENT = {
    "TOR": "Dan R.",
    "MTL": "Zak S.",
    "BOS": "Jeff C.",
    "OTT": "Keith R.",
    "SEA": "Ryan B.",
    "BUF": "N/A",
}


def _records():
    return [
        TeamRecord(abbrev="TOR", wins=10, losses=4, ot_losses=2, points=22, goals_for=52, goals_against=40,
                   streak_code="W3", regulation_wins=7),
        TeamRecord(abbrev="MTL", wins=6, losses=8, ot_losses=2, points=14, goals_for=45, goals_against=50,
                   streak_code="L2", regulation_wins=5),
        TeamRecord(abbrev="BOS", wins=8, losses=6, ot_losses=2, points=18, goals_for=48, goals_against=38,
                   streak_code="O1", regulation_wins=8),
        TeamRecord(abbrev="OTT", wins=10, losses=5, ot_losses=1, points=21, goals_for=40, goals_against=42,
                   streak_code="W3", regulation_wins=10),
        TeamRecord(abbrev="SEA"),
        TeamRecord(abbrev="BUF", wins=2, losses=12, ot_losses=2, goals_for=30, goals_against=60),
    ]


@pytest.fixture
def frame():
    return build_standings_frame(_records(), ASSIGNMENT)


def _who(entries):
    return [e.participant for e in entries]


def _vals(entries):
    return [e.value for e in entries]


def _g(gid, home, away, hs, as_, start, period="REG", state="OFF"):
    return ScheduledGame(
        game_id=gid, state=state, start_time=start, home_abbrev=home, away_abbrev=away,
        home_score=hs, away_score=as_, period_type=period,
    )


# --- counts and streaks ---
def test_top_winners_keeps_tie_for_first(frame):
    top = cat.top_winners(frame)
    assert _vals(top) == [10, 10, 8]
    assert set(_who(top[:2])) == {"Dan R.", "Keith R."}
    assert top[0].display == "10 wins"


def test_fewest_wins_includes_team_without_games(frame):
    assert _who(cat.fewest_wins(frame)) == ["Ryan B.", "Zak S.", "Jeff C."]


def test_unowned_teams_never_appear(frame):
    for fn in (cat.top_losers, cat.fewest_losses, cat.top_winners):
        assert "N/A" not in _who(fn(frame))


def test_win_and_lose_streaks(frame):
    assert _vals(cat.longest_win_streak(frame)) == [3, 3]
    lose = cat.longest_lose_streak(frame)
    assert _who(lose) == ["Zak S."]
    assert lose[0].display == "2 game losing streak (L2)"


def test_point_streak_from_schedule_with_code_fallback(frame):
    schedules = {"TOR": [
        _g("2024020001", "TOR", "BUF", 1, 3, "2024-10-10"),
        _g("2024020002", "TOR", "BUF", 3, 1, "2024-10-12"),
        _g("2024020003", "BUF", "TOR", 4, 3, "2024-10-14", period="OT"),
        _g("2024020004", "TOR", "BUF", 5, 2, "2024-10-16"),
        _g("2024020005", "TOR", "BUF", 0, 0, "2024-10-18", state="FUT"),
    ]}
    top = cat.longest_point_streak(frame, schedules)
    by_fan = {e.participant: e.value for e in top}
    assert by_fan == {"Dan R.": 3, "Keith R.": 3, "Jeff C.": 1}


# --- per-game and percentages ---
def test_zero_games_played_omitted_from_per_game_categories(frame):
    for fn in (cat.best_point_differential, cat.most_dominant, cat.brick_wall, cat.glass_cannon):
        result = fn(frame) or []
        assert "Ryan B." not in _who(result)


def test_best_point_differential_order(frame):
    top = cat.best_point_differential(frame)
    assert _who(top) == ["Dan R.", "Jeff C.", "Keith R."]
    assert top[0].value == 0.75
    assert top[0].display == "+0.75 goals/game"


def test_most_dominant_win_rate(frame):
    top = cat.most_dominant(frame)
    assert _vals(top) == [62.5, 62.5, 50.0]
    assert top[2].display == "50.0% win rate"


def test_brick_wall_is_ascending(frame):
    assert _who(cat.brick_wall(frame)) == ["Jeff C.", "Dan R.", "Keith R."]


def test_exceptional_defense_threshold_is_strict(frame):
    assert _who(cat.exceptional_defense(frame)) == ["Jeff C."]


def test_glass_cannon_needs_goals_and_negative_differential(frame):
    top = cat.glass_cannon(frame)
    assert _who(top) == ["Zak S.", "Keith R."]
    assert top[1].value == 2.5


# --- overtime ---
def test_comeback_kid_counts_non_regulation_wins(frame):
    top = cat.comeback_kid(frame)
    assert [(e.participant, e.value) for e in top] == [("Dan R.", 3), ("Zak S.", 1)]
    assert top[1].display == "1 OT/SO win"


def test_overtimer_and_point_scrounger_three_way_tie(frame):
    assert _vals(cat.overtimer(frame)) == [2, 2, 2]
    scroungers = cat.point_scrounger(frame)
    assert _who(scroungers) == ["Jeff C.", "Zak S.", "Dan R."]
    assert scroungers[0].display == "2 pity points from OT losses"


# --- head-to-head ---
@pytest.fixture
def matrix():
    m = HeadToHeadMatrix()
    m.record("TOR", "MTL").wins = 2
    m.record("MTL", "TOR").losses = 2
    m.record("MTL", "TOR").wins = 1
    m.record("TOR", "MTL").ot_losses = 1
    m.record("OTT", "TOR").wins = 1
    m.record("TOR", "OTT").losses = 1
    return m


def test_fan_crusher_and_fodder(frame, matrix):
    crusher = cat.fan_crusher(frame, matrix)
    assert _who(crusher) == ["Keith R.", "Dan R.", "Zak S."]
    assert crusher[1].display == "2-2 (50.0% vs other fans)"
    assert crusher[1].detail == {"wins": 2, "losses": 1, "ot_losses": 1}
    assert _who(cat.fan_fodder(frame, matrix)) == ["Zak S.", "Dan R.", "Keith R."]


def test_fan_categories_none_without_games(frame):
    assert cat.fan_crusher(frame, HeadToHeadMatrix()) is None


def test_victims_lists_every_team_that_lost_to_named_team(frame, matrix):
    victims = cat.victims(frame, matrix, "TOR")
    assert _who(victims) == ["Zak S."]
    assert victims[0].value == 2
    assert cat.victims(frame, matrix, "BOS") is None
    assert list(cat.victim_categories(frame, matrix, ["TOR"])) == ["victims_tor"]


def test_upcoming_matchups_dedupe_shared_game(frame):
    game = _g("2024020050", "TOR", "MTL", 0, 0, "2024-12-01T00:00:00Z", state="FUT")
    schedules = {"TOR": [game], "MTL": [game], "OTT": [_g("2024020051", "OTT", "BUF", 0, 0, "2024-12-01", state="FUT")]}
    top = cat.upcoming_fan_matchups(frame, schedules)
    assert len(top) == 1
    assert top[0].participant == "Zak S. @ Dan R."
    assert top[0].value == 100 - (22 - 14)
    assert cat.upcoming_fan_matchups(frame, {}) is None


# --- cup odds ---
def test_best_and_worst_cup_odds(frame):
    odds = {"TOR": 40.0, "MTL": 5.0, "BOS": 30.0, "OTT": 25.0, "BUF": 0.0}
    assert _who(cat.best_cup_odds(frame, odds)) == ["Dan R.", "Jeff C.", "Keith R."]
    assert _who(cat.worst_cup_odds(frame, odds)) == ["Zak S.", "Keith R.", "Jeff C."]
    assert cat.best_cup_odds(frame, {}) is None


# --- history ---
@pytest.fixture
def tracker(tmp_path):
    t = HistoricalTracker(str(tmp_path / "h.json"))
    t.record_season_stats("2021-2022", "Dan R.", "TOR", {"playoff_wins": 16})
    t.record_season_stats("2023-2024", "Dan R.", "TOR", {"wins": 40, "points": 85, "league_rank": 18, "playoff_wins": 6})
    t.record_season_stats("2024-2025", "Dan R.", "TOR", {"wins": 50, "points": 105, "league_rank": 5})
    t.record_season_stats("2023-2024", "Zak S.", "MTL", {"wins": 30, "points": 70, "league_rank": 10})
    t.record_season_stats("2024-2025", "Zak S.", "MTL", {"wins": 25, "points": 60, "league_rank": 15})
    t.record_season_stats("2024-2025", "Keith R.", "OTT", {"playoff_wins": 4})
    return t


def test_most_improved_positive_scores_only(frame, tracker):
    top = cat.most_improved(frame, tracker, "2024-2025")
    assert _who(top) == ["Dan R."]
    assert top[0].value == 76
    assert top[0].display == "+76 (+10 W, +20 PTS, +13 rank)"


def test_history_categories_none_on_bad_season(frame, tracker):
    assert cat.most_improved(frame, tracker, "2024") is None
    assert cat.hall_of_fame(frame, tracker, "not-a-season") is None


def test_playoff_legends_and_hall_of_fame(frame, tracker):
    legends = cat.playoff_legends(frame, tracker)
    assert [(e.participant, e.value) for e in legends] == [("Dan R.", 22), ("Keith R.", 4)]
    hof = cat.hall_of_fame(frame, tracker, "2024-2025")
    assert _who(hof) == ["Dan R."]
    assert hof[0].detail == {"seasons": ["2021-2022"]}
    assert cat.hall_of_fame(frame, tracker, "2024-2025", lookback=2) is None


def test_history_categories_none_without_tracker(frame):
    assert cat.playoff_legends(frame, None) is None
    assert cat.most_improved(frame, None, "2024-2025") is None
    assert cat.hall_of_fame(frame, None, "2024-2025") is None
