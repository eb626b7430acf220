"""
One statistics run: standings + fan assignment in, every leaderboard category out.

Head-to-head is reconciled once and cup odds computed once; each category is then
derived independently from those shared inputs. A run writes nothing, so the same
inputs always give the same report. Recording history is a separate call.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from fanstatsengine.config import (
    Config,
    DEFAULT_CONFIG,
    DEFAULT_LEAGUE,
    LeagueConfig,
    current_season,
)
from fanstatsengine.core.ranking import RankedEntry
from fanstatsengine.data.games import ScheduledGame
from fanstatsengine.data.records import (
    FanAssignment,
    TeamRecord,
    build_standings_frame,
    is_owned,
    participants,
)
from fanstatsengine.models.cup_odds import (
    PlayoffSeries,
    parse_playoff_bracket,
    participant_cup_odds,
    playoff_cup_odds,
    regular_season_cup_odds,
)
from fanstatsengine.models.head_to_head import HeadToHeadMatrix, HeadToHeadReconciler, ScheduleFetcher
from fanstatsengine.models.history import HistoricalTracker, SeasonStatSnapshot
from fanstatsengine.models.predictions import PredictionProcessor
from fanstatsengine.stats import categories as cat

logger = logging.getLogger(__name__)

CATEGORY_KEYS = [
    "top_winners",
    "fewest_wins",
    "top_losers",
    "fewest_losses",
    "longest_win_streak",
    "longest_lose_streak",
    "longest_point_streak",
    "best_point_differential",
    "most_dominant",
    "brick_wall",
    "exceptional_defense",
    "glass_cannon",
    "comeback_kid",
    "overtimer",
    "point_scrounger",
    "fan_crusher",
    "fan_fodder",
    "best_cup_odds",
    "worst_cup_odds",
    "playoff_legends",
    "most_improved",
    "hall_of_fame",
    "upcoming_fan_matchups",
    "prediction_accuracy",
]


@dataclass
class StatsReport:
    """
    Everything one run produced. categories keeps every key, None for empty ones.
    head_to_head may hold tracked non-owned teams for the victim categories; the
    serialized matrix only shows pairs of owned teams.
    """

    season: str
    categories: Dict[str, Optional[List[RankedEntry]]]
    cup_odds: Dict[str, float]
    playoff_odds: Dict[str, float]
    participant_odds: Dict[str, float]
    head_to_head: HeadToHeadMatrix
    failed_schedules: List[str] = field(default_factory=list)
    owned_teams: List[str] = field(default_factory=list)

    def category(self, key: str) -> Optional[List[RankedEntry]]:
        return self.categories.get(key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "season": self.season,
            "categories": {
                key: None if entries is None else [e.to_dict() for e in entries]
                for key, entries in self.categories.items()
            },
            "cup_odds": dict(sorted(self.cup_odds.items())),
            "playoff_odds": dict(sorted(self.playoff_odds.items())),
            "participant_odds": dict(self.participant_odds),
            "head_to_head": self.head_to_head.to_dict(teams=self.owned_teams),
            "failed_schedules": sorted(self.failed_schedules),
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


class StatsOrchestrator:
    """
    Wires the data layer, models and categories together for one pool.

    fetch_schedule(team, season) -> List[ScheduledGame] is only needed for head-to-head,
    point streaks and upcoming matchups; without it those fall back or report None.
    tracker enables the history categories; predictions enables prediction_accuracy.
    """

    def __init__(
        self,
        config: Config = DEFAULT_CONFIG,
        league: LeagueConfig = DEFAULT_LEAGUE,
        fetch_schedule: Optional[ScheduleFetcher] = None,
        tracker: Optional[HistoricalTracker] = None,
        predictions: Optional[PredictionProcessor] = None,
    ) -> None:
        self.config = config
        self.league = league
        self.fetch_schedule = fetch_schedule
        self.tracker = tracker
        self.predictions = predictions

    def _check_roster(self, assignment: FanAssignment) -> None:
        for fan in participants(assignment, self.config.unassigned):
            if not self.league.is_participant(fan):
                logger.warning("Participant %r is not on the league roster", fan)

    def _head_to_head(
        self,
        owned: List[str],
        season: str,
        head_to_head: Union[HeadToHeadMatrix, Mapping[str, Any], None],
        victim_teams: Iterable[str],
    ) -> tuple[HeadToHeadMatrix, Dict[str, List[ScheduledGame]], List[str]]:
        if head_to_head is not None:
            matrix = head_to_head if isinstance(head_to_head, HeadToHeadMatrix) else HeadToHeadMatrix.from_dict(head_to_head)
            return matrix, {}, []
        reconciler = HeadToHeadReconciler(self.fetch_schedule, season, self.config)
        matrix = reconciler.reconcile(owned, tracked=victim_teams)
        return matrix, reconciler.schedules, list(reconciler.failed)

    def run(
        self,
        records: Iterable[TeamRecord],
        assignment: FanAssignment,
        *,
        season: Optional[str] = None,
        head_to_head: Union[HeadToHeadMatrix, Mapping[str, Any], None] = None,
        playoff_bracket: Union[List[PlayoffSeries], Mapping[str, Any], None] = None,
        victim_teams: Iterable[str] = (),
    ) -> StatsReport:
        """
        Compute the full report. head_to_head skips schedule fetching when given;
        playoff_bracket (parsed or raw payload) switches participant odds to the
        in-playoff model. victim_teams adds a victims_<abbrev> category per team.
        """
        records = list(records)
        season = season or current_season()
        victim_teams = sorted({t.upper() for t in victim_teams if t})
        self._check_roster(assignment)

        frame = build_standings_frame(records, assignment, unassigned=self.config.unassigned)
        owned = list(frame["abbrev"])
        logger.info("Stats run %s: %d teams in standings, %d owned", season, len(records), len(owned))

        matrix, schedules, failed = self._head_to_head(owned, season, head_to_head, victim_teams)

        cup_odds = regular_season_cup_odds(records, self.config)
        playoff_odds: Dict[str, float] = {}
        if playoff_bracket is not None:
            series = playoff_bracket if isinstance(playoff_bracket, list) else parse_playoff_bracket(playoff_bracket)
            playoff_odds = playoff_cup_odds(series, self.config)
        participant_odds = participant_cup_odds(
            playoff_odds or cup_odds, assignment, self.config.unassigned
        )

        cfg = self.config
        categories: Dict[str, Optional[List[RankedEntry]]] = {
            "top_winners": cat.top_winners(frame, cfg),
            "fewest_wins": cat.fewest_wins(frame, cfg),
            "top_losers": cat.top_losers(frame, cfg),
            "fewest_losses": cat.fewest_losses(frame, cfg),
            "longest_win_streak": cat.longest_win_streak(frame, cfg),
            "longest_lose_streak": cat.longest_lose_streak(frame, cfg),
            "longest_point_streak": cat.longest_point_streak(frame, schedules, cfg),
            "best_point_differential": cat.best_point_differential(frame, cfg),
            "most_dominant": cat.most_dominant(frame, cfg),
            "brick_wall": cat.brick_wall(frame, cfg),
            "exceptional_defense": cat.exceptional_defense(frame, cfg),
            "glass_cannon": cat.glass_cannon(frame, cfg),
            "comeback_kid": cat.comeback_kid(frame, cfg),
            "overtimer": cat.overtimer(frame, cfg),
            "point_scrounger": cat.point_scrounger(frame, cfg),
            "fan_crusher": cat.fan_crusher(frame, matrix, cfg),
            "fan_fodder": cat.fan_fodder(frame, matrix, cfg),
            "best_cup_odds": cat.best_cup_odds(frame, cup_odds, cfg),
            "worst_cup_odds": cat.worst_cup_odds(frame, cup_odds, cfg),
            "playoff_legends": cat.playoff_legends(frame, self.tracker, cfg),
            "most_improved": cat.most_improved(frame, self.tracker, season, cfg),
            "hall_of_fame": cat.hall_of_fame(frame, self.tracker, season, cfg),
            "upcoming_fan_matchups": cat.upcoming_fan_matchups(frame, schedules, cfg),
            "prediction_accuracy": cat.prediction_accuracy(frame, self.predictions, cfg),
        }
        categories.update(cat.victim_categories(frame, matrix, victim_teams))

        empty = sorted(k for k, v in categories.items() if v is None)
        if empty:
            logger.debug("Categories with no qualifying entries: %s", ", ".join(empty))

        return StatsReport(
            season=season,
            categories=categories,
            cup_odds=cup_odds,
            playoff_odds=playoff_odds,
            participant_odds=participant_odds,
            head_to_head=matrix,
            failed_schedules=failed,
            owned_teams=owned,
        )

    def record_current_season(
        self,
        records: Iterable[TeamRecord],
        assignment: FanAssignment,
        season: str,
        playoff_wins: Optional[Mapping[str, int]] = None,
    ) -> Dict[str, SeasonStatSnapshot]:
        """
        Write one snapshot per participant for season. A participant owning several
        teams is recorded with the last of them in abbreviation order.
        """
        if self.tracker is None:
            raise ValueError("record_current_season needs a HistoricalTracker")
        playoff_wins = playoff_wins or {}
        written: Dict[str, SeasonStatSnapshot] = {}
        owned = [rec for rec in records if is_owned(assignment, rec.abbrev, self.config.unassigned)]
        for rec in sorted(owned, key=lambda r: r.abbrev):
            fan = assignment[rec.abbrev]
            snapshot = SeasonStatSnapshot.from_record(rec, playoff_wins=int(playoff_wins.get(rec.abbrev, 0)))
            written[fan] = self.tracker.record_season_stats(season, fan, rec.abbrev, snapshot)
        logger.info("Recorded %s history for %d participants", season, len(written))
        return written
