"""
Typed standings records and the owned-team standings frame.

TeamRecord.from_api accepts one entry of the upstream standings payload. Missing,
null or non-numeric fields become 0 / "" so category code never has to nil-guard.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from fanstatsengine.config import UNASSIGNED
from fanstatsengine.utils.math import safe_div

logger = logging.getLogger(__name__)

FanAssignment = Mapping[str, str]

_STREAK_DIGITS = re.compile(r"\d+")

# Frame columns in display order; per-game columns are NaN when games_played == 0
STANDINGS_COLUMNS = [
    "abbrev",
    "participant",
    "team",
    "wins",
    "losses",
    "ot_losses",
    "games_played",
    "points",
    "goals_for",
    "goals_against",
    "division_rank",
    "conference_rank",
    "league_rank",
    "point_pctg",
    "streak_code",
    "streak_type",
    "streak_length",
    "ot_wins",
    "gf_per_game",
    "ga_per_game",
    "diff_per_game",
    "win_pct",
]


def _default_text(value: Any) -> str:
    """Upstream names come either as plain strings or as {"default": "..."}."""
    if isinstance(value, dict):
        value = value.get("default")
    return "" if value is None else str(value)


def _as_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return 0


def _as_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


@dataclass(frozen=True)
class TeamRecord:
    """One team's standings snapshot for a single refresh cycle."""

    abbrev: str
    name: str = ""
    wins: int = 0
    losses: int = 0
    ot_losses: int = 0
    explicit_games_played: int = 0
    points: int = 0
    goals_for: int = 0
    goals_against: int = 0
    division_rank: int = 0
    conference_rank: int = 0
    league_rank: int = 0
    point_pctg: float = 0.0
    streak_code: str = ""
    streak_count: int = 0
    regulation_wins: Optional[int] = None

    @classmethod
    def from_api(cls, entry: Mapping[str, Any]) -> "TeamRecord":
        """Build from an upstream standings entry (teamAbbrev, goalFor, divisionSequence, ...)."""
        reg_wins = entry.get("regulationWins")
        return cls(
            abbrev=_default_text(entry.get("teamAbbrev")),
            name=_default_text(entry.get("teamName")),
            wins=_as_int(entry.get("wins")),
            losses=_as_int(entry.get("losses")),
            ot_losses=_as_int(entry.get("otLosses")),
            explicit_games_played=_as_int(entry.get("gamesPlayed")),
            points=_as_int(entry.get("points")),
            goals_for=_as_int(entry.get("goalFor")),
            goals_against=_as_int(entry.get("goalAgainst")),
            division_rank=_as_int(entry.get("divisionSequence")),
            conference_rank=_as_int(entry.get("conferenceSequence")),
            league_rank=_as_int(entry.get("leagueSequence")),
            point_pctg=_as_float(entry.get("pointPctg")),
            streak_code=_default_text(entry.get("streakCode")).strip(),
            streak_count=_as_int(entry.get("streakCount")),
            regulation_wins=None if reg_wins is None else _as_int(reg_wins),
        )

    @property
    def games_played(self) -> int:
        """Explicit gamesPlayed when supplied, else wins + losses + OT losses."""
        if self.explicit_games_played > 0:
            return self.explicit_games_played
        return self.wins + self.losses + self.ot_losses

    @property
    def streak_type(self) -> str:
        """"W", "L", "O" or "" when no streak is known."""
        return self.streak_code[:1].upper()

    @property
    def streak_length(self) -> int:
        """Explicit streakCount, else the digits in the code; absent or zero reads as 1."""
        n = self.streak_count
        if n <= 0:
            m = _STREAK_DIGITS.search(self.streak_code)
            n = int(m.group()) if m else 0
        return n if n > 0 else 1

    @property
    def ot_wins(self) -> int:
        """Wins outside regulation; 0 when regulation wins are unknown."""
        if self.regulation_wins is None:
            return 0
        return max(self.wins - self.regulation_wins, 0)

    @property
    def goals_for_per_game(self) -> Optional[float]:
        gp = self.games_played
        return self.goals_for / gp if gp else None

    @property
    def goals_against_per_game(self) -> Optional[float]:
        gp = self.games_played
        return self.goals_against / gp if gp else None

    @property
    def goal_differential_per_game(self) -> Optional[float]:
        gp = self.games_played
        return (self.goals_for - self.goals_against) / gp if gp else None

    @property
    def win_pct(self) -> Optional[float]:
        """Win percentage 0-100; None with no games played."""
        gp = self.games_played
        return 100.0 * safe_div(self.wins, gp) if gp else None


def parse_standings(payload: Any) -> List[TeamRecord]:
    """
    Parse the upstream standings payload ({"standings": [...]} or a bare list).
    Entries without an abbreviation are skipped.
    """
    entries = payload.get("standings") if isinstance(payload, dict) else payload
    if not isinstance(entries, list):
        return []
    records: List[TeamRecord] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        rec = TeamRecord.from_api(entry)
        if not rec.abbrev:
            logger.warning("Skipping standings entry without teamAbbrev")
            continue
        records.append(rec)
    return records


def is_owned(assignment: FanAssignment, abbrev: str, unassigned: str = UNASSIGNED) -> bool:
    fan = assignment.get(abbrev)
    return bool(fan) and fan != unassigned


def owned_teams(assignment: FanAssignment, unassigned: str = UNASSIGNED) -> List[str]:
    """Abbreviations with a participant, sorted."""
    return sorted(a for a in assignment if is_owned(assignment, a, unassigned))


def participants(assignment: FanAssignment, unassigned: str = UNASSIGNED) -> List[str]:
    """Distinct participants in the assignment, sorted."""
    return sorted({f for a, f in assignment.items() if is_owned(assignment, a, unassigned)})


def teams_by_participant(assignment: FanAssignment, unassigned: str = UNASSIGNED) -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for abbrev in owned_teams(assignment, unassigned):
        out.setdefault(assignment[abbrev], []).append(abbrev)
    return out


def _record_row(rec: TeamRecord, participant: str) -> Dict[str, Any]:
    gp = rec.games_played
    gf = rec.goals_for_per_game
    ga = rec.goals_against_per_game
    return {
        "abbrev": rec.abbrev,
        "participant": participant,
        "team": rec.name or rec.abbrev,
        "wins": rec.wins,
        "losses": rec.losses,
        "ot_losses": rec.ot_losses,
        "games_played": gp,
        "points": rec.points,
        "goals_for": rec.goals_for,
        "goals_against": rec.goals_against,
        "division_rank": rec.division_rank,
        "conference_rank": rec.conference_rank,
        "league_rank": rec.league_rank,
        "point_pctg": rec.point_pctg,
        "streak_code": rec.streak_code,
        "streak_type": rec.streak_type,
        "streak_length": rec.streak_length,
        "ot_wins": rec.ot_wins,
        "gf_per_game": gf,
        "ga_per_game": ga,
        "diff_per_game": rec.goal_differential_per_game,
        "win_pct": rec.win_pct,
    }


def build_standings_frame(
    records: Iterable[TeamRecord],
    assignment: FanAssignment,
    *,
    unassigned: str = UNASSIGNED,
) -> pd.DataFrame:
    """
    One row per owned team (participant != unassigned), sorted by abbreviation.
    Returns STANDINGS_COLUMNS; empty frame (same columns) when nobody owns a team.
    """
    rows = [
        _record_row(rec, assignment[rec.abbrev])
        for rec in records
        if is_owned(assignment, rec.abbrev, unassigned)
    ]
    df = pd.DataFrame(rows, columns=STANDINGS_COLUMNS)
    if df.empty:
        return df
    for col in ("gf_per_game", "ga_per_game", "diff_per_game", "win_pct"):
        df[col] = pd.to_numeric(df[col], errors="coerce")
    return df.sort_values("abbrev", kind="mergesort").reset_index(drop=True)
