"""Models: cup odds, head-to-head, season and standings history, predictions, schedule form."""

from fanstatsengine.models.cup_odds import (
    PlayoffSeries,
    parse_playoff_bracket,
    participant_cup_odds,
    playoff_cup_odds,
    regular_season_cup_odds,
)
from fanstatsengine.models.head_to_head import (
    HeadToHeadMatrix,
    HeadToHeadReconciler,
    HeadToHeadRecord,
)
from fanstatsengine.models.history import (
    HistoricalTracker,
    Improvement,
    SeasonStatSnapshot,
    improvement_score,
    parse_season,
    previous_season,
)
from fanstatsengine.models.predictions import (
    PredictionAccuracy,
    PredictionProcessor,
    PredictionStreak,
    PredictionTracker,
)
from fanstatsengine.models.standings_history import StandingsHistoryTracker, participant_points
from fanstatsengine.models.streaks import next_game, point_streak

__all__ = [
    "HeadToHeadMatrix",
    "HeadToHeadReconciler",
    "HeadToHeadRecord",
    "HistoricalTracker",
    "Improvement",
    "PlayoffSeries",
    "PredictionAccuracy",
    "PredictionProcessor",
    "PredictionStreak",
    "PredictionTracker",
    "SeasonStatSnapshot",
    "StandingsHistoryTracker",
    "improvement_score",
    "next_game",
    "parse_playoff_bracket",
    "parse_season",
    "participant_points",
    "participant_cup_odds",
    "playoff_cup_odds",
    "point_streak",
    "previous_season",
    "regular_season_cup_odds",
]
