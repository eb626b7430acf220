"""
Season-over-season history per participant.

Persisted as {season: {participant: snapshot}} through PersistentRecordStore; one
snapshot per (season, participant), overwritten on re-record, never pruned.
Read-modify-write without locking: one writer per run.
"""

import logging
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from fanstatsengine.config import Config, DEFAULT_CONFIG
from fanstatsengine.data.errors import InvalidSeasonError
from fanstatsengine.data.records import TeamRecord, _as_int
from fanstatsengine.data.store import PersistentRecordStore

logger = logging.getLogger(__name__)

_SEASON_RE = re.compile(r"^(\d{4})-(\d{4})$")

SNAPSHOT_FIELDS = [
    "team",
    "wins",
    "losses",
    "ot_losses",
    "points",
    "goals_for",
    "goals_against",
    "division_rank",
    "conference_rank",
    "league_rank",
    "playoff_wins",
    "recorded_at",
]


@dataclass(frozen=True)
class SeasonStatSnapshot:
    """One participant's end-of-season (or latest) numbers."""

    team: str
    wins: int = 0
    losses: int = 0
    ot_losses: int = 0
    points: int = 0
    goals_for: int = 0
    goals_against: int = 0
    division_rank: int = 0
    conference_rank: int = 0
    league_rank: int = 0
    playoff_wins: int = 0
    recorded_at: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SeasonStatSnapshot":
        return cls(
            team=str(raw.get("team") or ""),
            recorded_at=str(raw.get("recorded_at") or ""),
            **{k: _as_int(raw.get(k)) for k in SNAPSHOT_FIELDS if k not in ("team", "recorded_at")},
        )

    @classmethod
    def from_record(cls, rec: TeamRecord, playoff_wins: int = 0, recorded_at: str = "") -> "SeasonStatSnapshot":
        return cls(
            team=rec.abbrev,
            wins=rec.wins,
            losses=rec.losses,
            ot_losses=rec.ot_losses,
            points=rec.points,
            goals_for=rec.goals_for,
            goals_against=rec.goals_against,
            division_rank=rec.division_rank,
            conference_rank=rec.conference_rank,
            league_rank=rec.league_rank,
            playoff_wins=playoff_wins,
            recorded_at=recorded_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Improvement:
    """seasonB minus seasonA; rank_improvement > 0 means a better (lower) league rank."""

    wins_diff: int
    points_diff: int
    rank_improvement: int


def parse_season(season_id: str) -> int:
    """Start year of a "YYYY-YYYY" season id; InvalidSeasonError otherwise."""
    m = _SEASON_RE.match(str(season_id).strip())
    if not m or int(m.group(2)) != int(m.group(1)) + 1:
        raise InvalidSeasonError(f"Unparseable season id: {season_id!r}", season=str(season_id))
    return int(m.group(1))


def previous_season(season_id: str) -> str:
    start = parse_season(season_id)
    return f"{start - 1}-{start}"


def improvement_score(imp: Improvement, config: Config = DEFAULT_CONFIG) -> float:
    """Composite: 3 * wins diff + 1 * points diff + 2 * rank improvement (default weights)."""
    w_wins, w_points, w_rank = config.improvement_weights
    return w_wins * imp.wins_diff + w_points * imp.points_diff + w_rank * imp.rank_improvement


def _snapshot_input(stats: Any) -> Dict[str, Any]:
    """Accept a SeasonStatSnapshot, TeamRecord-like mapping, or plain dict of snapshot fields."""
    if isinstance(stats, SeasonStatSnapshot):
        return stats.to_dict()
    return dict(stats or {})


class HistoricalTracker:
    """Per-season, per-participant snapshots with cross-season comparisons."""

    def __init__(self, path: Optional[str] = None, config: Config = DEFAULT_CONFIG) -> None:
        self.config = config
        self.store: PersistentRecordStore[Dict[str, Dict[str, Any]]] = PersistentRecordStore(
            path or config.history_path, dict
        )
        self.store.ensure_exists()

    def load_data(self) -> Dict[str, Dict[str, Any]]:
        data = self.store.load()
        if not isinstance(data, dict):
            logger.warning("History in %s is not an object; treating as empty", self.store.path)
            return {}
        return data

    def record_season_stats(self, season: str, participant: str, team: str, stats: Any) -> SeasonStatSnapshot:
        """Upsert the (season, participant) snapshot; replaces any earlier one."""
        raw = _snapshot_input(stats)
        raw["team"] = team
        raw.setdefault("playoff_wins", 0)
        raw["recorded_at"] = raw.get("recorded_at") or datetime.now(timezone.utc).isoformat(timespec="seconds")
        snapshot = SeasonStatSnapshot.from_dict(raw)

        data = self.load_data()
        data.setdefault(season, {})[participant] = snapshot.to_dict()
        self.store.save(data)
        logger.info("Recorded %s stats for %s (%s)", season, participant, team)
        return snapshot

    def get_season_stats(self, season: str, participant: str) -> Optional[SeasonStatSnapshot]:
        raw = (self.load_data().get(season) or {}).get(participant)
        return SeasonStatSnapshot.from_dict(raw) if isinstance(raw, dict) else None

    def get_participant_seasons(self, participant: str) -> List[str]:
        return sorted(s for s, fans in self.load_data().items() if participant in (fans or {}))

    def get_participant_history(self, participant: str) -> Dict[str, SeasonStatSnapshot]:
        """season -> snapshot, seasons sorted."""
        data = self.load_data()
        return {
            season: SeasonStatSnapshot.from_dict(data[season][participant])
            for season in sorted(data)
            if isinstance((data[season] or {}).get(participant), dict)
        }

    def history_frame(self, participant: str) -> pd.DataFrame:
        """One row per season (index) with the snapshot columns."""
        history = self.get_participant_history(participant)
        rows = [{"season": s, **snap.to_dict()} for s, snap in history.items()]
        return pd.DataFrame(rows, columns=["season", *SNAPSHOT_FIELDS]).set_index("season")

    def all_participants(self) -> List[str]:
        return sorted({p for fans in self.load_data().values() for p in (fans or {})})

    def total_playoff_wins(self, participant: str) -> int:
        return sum(s.playoff_wins for s in self.get_participant_history(participant).values())

    def calculate_improvement(self, participant: str, season_a: str, season_b: str) -> Optional[Improvement]:
        """season_b relative to season_a; None if either snapshot is missing."""
        a = self.get_season_stats(season_a, participant)
        b = self.get_season_stats(season_b, participant)
        if a is None or b is None:
            return None
        return Improvement(
            wins_diff=b.wins - a.wins,
            points_diff=b.points - a.points,
            rank_improvement=a.league_rank - b.league_rank,
        )

    def championships(
        self,
        participant: str,
        lookback: Optional[int] = None,
        current: Optional[str] = None,
    ) -> List[str]:
        """
        Seasons where playoff_wins reached the championship threshold.
        With lookback, only seasons starting within `lookback` years of `current`
        (current inclusive); seasons with unparseable ids are ignored then.
        """
        threshold = self.config.championship_playoff_wins
        won = [s for s, snap in self.get_participant_history(participant).items() if snap.playoff_wins >= threshold]
        if lookback is None or current is None:
            return won
        newest = parse_season(current)
        out = []
        for season in won:
            try:
                start = parse_season(season)
            except InvalidSeasonError:
                logger.debug("Ignoring unparseable season %r in hall-of-fame window", season)
                continue
            if newest - lookback < start <= newest:
                out.append(season)
        return out
