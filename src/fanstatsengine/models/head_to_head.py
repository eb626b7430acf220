"""
Head-to-head reconciliation between participant-owned teams.

Every game shows up in both teams' schedules, so completed regular-season games are
counted once by game id and recorded in both directions: the winner gets a win, the
loser a loss (or an OT loss when decided outside regulation). Processing order of
the schedules does not change the matrix.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Set

import pandas as pd

from fanstatsengine.config import Config, DEFAULT_CONFIG
from fanstatsengine.data.errors import ScheduleFetchError
from fanstatsengine.data.games import ScheduledGame

logger = logging.getLogger(__name__)

ScheduleFetcher = Callable[[str, str], List[ScheduledGame]]


@dataclass
class HeadToHeadRecord:
    """Record of one team against one opponent, from the owner's perspective."""

    wins: int = 0
    losses: int = 0
    ot_losses: int = 0
    goals_for: int = 0
    goals_against: int = 0

    @property
    def total_losses(self) -> int:
        return self.losses + self.ot_losses

    @property
    def games(self) -> int:
        return self.wins + self.total_losses

    @property
    def goal_differential(self) -> int:
        return self.goals_for - self.goals_against

    def add(self, other: "HeadToHeadRecord") -> None:
        self.wins += other.wins
        self.losses += other.losses
        self.ot_losses += other.ot_losses
        self.goals_for += other.goals_for
        self.goals_against += other.goals_against

    def to_dict(self) -> Dict[str, int]:
        return {
            "wins": self.wins,
            "losses": self.losses,
            "ot_losses": self.ot_losses,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
        }


class HeadToHeadMatrix:
    """team -> opponent -> HeadToHeadRecord. Absent pairs read as an empty record."""

    def __init__(self) -> None:
        self._rows: Dict[str, Dict[str, HeadToHeadRecord]] = {}

    def record(self, team: str, opponent: str) -> HeadToHeadRecord:
        """Record for (team, opponent), created on first access."""
        return self._rows.setdefault(team, {}).setdefault(opponent, HeadToHeadRecord())

    def get(self, team: str, opponent: str) -> HeadToHeadRecord:
        """Copy-free read; returns an empty record for unseen pairs without storing it."""
        return self._rows.get(team, {}).get(opponent) or HeadToHeadRecord()

    def opponents(self, team: str) -> List[str]:
        return sorted(self._rows.get(team, {}))

    def teams(self) -> List[str]:
        return sorted(self._rows)

    def record_vs(self, team: str, opponents: Optional[Iterable[str]] = None) -> HeadToHeadRecord:
        """Aggregate record of team vs the given opponents (default: every opponent seen)."""
        row = self._rows.get(team, {})
        keys = row.keys() if opponents is None else [o for o in opponents if o in row and o != team]
        total = HeadToHeadRecord()
        for opp in keys:
            total.add(row[opp])
        return total

    def is_empty(self) -> bool:
        return not any(self._rows.values())

    def to_dict(self, teams: Optional[Iterable[str]] = None) -> Dict[str, Dict[str, Dict[str, int]]]:
        """Nested plain dict; teams limits both sides of every pair to that set."""
        keep = None if teams is None else set(teams)
        return {
            team: {
                opp: self._rows[team][opp].to_dict()
                for opp in sorted(self._rows[team])
                if keep is None or opp in keep
            }
            for team in sorted(self._rows)
            if keep is None or team in keep
        }

    def to_frame(self) -> pd.DataFrame:
        """Long frame: one row per (team, opponent) with the record columns."""
        rows = [
            {"team": team, "opponent": opp, **rec}
            for team, opps in self.to_dict().items()
            for opp, rec in opps.items()
        ]
        cols = ["team", "opponent", "wins", "losses", "ot_losses", "goals_for", "goals_against"]
        return pd.DataFrame(rows, columns=cols)

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, Dict[str, int]]]) -> "HeadToHeadMatrix":
        m = cls()
        for team, opps in (data or {}).items():
            for opp, rec in (opps or {}).items():
                m.record(team, opp).add(HeadToHeadRecord(
                    wins=int(rec.get("wins", 0) or 0),
                    losses=int(rec.get("losses", 0) or 0),
                    ot_losses=int(rec.get("ot_losses", 0) or 0),
                    goals_for=int(rec.get("goals_for", 0) or 0),
                    goals_against=int(rec.get("goals_against", 0) or 0),
                ))
        return m


class HeadToHeadReconciler:
    """
    Build the head-to-head matrix for a pool of teams from per-team schedules.

    fetch_schedule(team, season) is called once per owned team, sequentially; a
    ScheduleFetchError, or any parse problem in the fetched schedule, only drops that
    team's schedule. Games against the dropped team are still found
    in its opponents' schedules.
    """

    def __init__(
        self,
        fetch_schedule: Optional[ScheduleFetcher],
        season: str,
        config: Config = DEFAULT_CONFIG,
    ) -> None:
        self.fetch_schedule = fetch_schedule
        self.season = season
        self.config = config
        self.matrix = HeadToHeadMatrix()
        self.schedules: Dict[str, List[ScheduledGame]] = {}
        self.failed: List[str] = []
        self._pool: Set[str] = set()
        self._seen_ids: Set[str] = set()

    def reconcile(self, owned: Iterable[str], tracked: Iterable[str] = ()) -> HeadToHeadMatrix:
        """
        Fetch each owned team's schedule and fold in the qualifying games.
        tracked adds non-owned teams to the pool (their schedules are not fetched).
        """
        owned = sorted(set(owned))
        self._pool = set(owned) | set(tracked)
        if self.fetch_schedule is None:
            logger.info("No schedule fetcher configured; head-to-head matrix left empty")
            return self.matrix
        for team in owned:
            try:
                games = list(self.fetch_schedule(team, self.season))
                self._check_games(games)
            except ScheduleFetchError as e:
                logger.warning("Skipping %s head-to-head: %s", team, e)
                self.failed.append(team)
                continue
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning("Skipping %s head-to-head: bad schedule data (%s)", team, e)
                self.failed.append(team)
                continue
            self.ingest(team, games)
        logger.info(
            "Head-to-head: %d teams, %d games counted, %d schedules failed",
            len(owned), len(self._seen_ids), len(self.failed),
        )
        return self.matrix

    def set_pool(self, teams: Iterable[str]) -> None:
        """Set the pool directly (for callers that ingest schedules themselves)."""
        self._pool = set(teams)

    def ingest(self, team: str, games: Iterable[ScheduledGame]) -> int:
        """Fold one team's schedule into the matrix; returns the number of new games counted."""
        games = list(games)
        self.schedules[team] = games
        counted = 0
        for game in games:
            if self._count_game(game):
                counted += 1
        return counted

    @staticmethod
    def _check_games(games: List[ScheduledGame]) -> None:
        """Reject the whole schedule before any of it touches the matrix."""
        for game in games:
            if not isinstance(game, ScheduledGame):
                raise TypeError(f"expected ScheduledGame, got {type(game).__name__}")

    def _qualifies(self, game: ScheduledGame) -> bool:
        return (
            game.is_completed(self.config)
            and game.is_regular_season(self.config)
            and game.home_abbrev in self._pool
            and game.away_abbrev in self._pool
            and game.home_abbrev != game.away_abbrev
        )

    def _count_game(self, game: ScheduledGame) -> bool:
        if not self._qualifies(game):
            return False
        if not game.game_id:
            logger.debug("Skipping %s vs %s: no game id to deduplicate on",
                         game.home_abbrev, game.away_abbrev)
            return False
        if game.game_id in self._seen_ids:
            return False
        winner = game.winner
        if winner is None:
            logger.debug("Skipping game %s: final score is level", game.game_id)
            return False
        self._seen_ids.add(game.game_id)
        loser = game.opponent_of(winner)

        win_rec = self.matrix.record(winner, loser)
        win_rec.wins += 1
        win_rec.goals_for += game.score_for(winner)
        win_rec.goals_against += game.score_against(winner)

        loss_rec = self.matrix.record(loser, winner)
        if game.decided_outside_regulation:
            loss_rec.ot_losses += 1
        else:
            loss_rec.losses += 1
        loss_rec.goals_for += game.score_for(loser)
        loss_rec.goals_against += game.score_against(loser)
        return True
