"""
Cup odds: heuristic championship-likelihood scores normalized to percentages.

Two mutually exclusive periods:
- regular season: standings position (league / division / conference rank, point %)
- in playoffs: surviving teams by round reached and series wins, because standings
  fields stop meaning anything once elimination starts.
Both normalize to two decimals summing to 100.00 (see utils.math.normalize_percentages).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

from fanstatsengine.config import Config, DEFAULT_CONFIG, UNASSIGNED
from fanstatsengine.data.records import TeamRecord, _as_int, _default_text
from fanstatsengine.utils.math import normalize_percentages

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayoffSeries:
    """One playoff series: round number and both sides' series wins."""

    round: int
    top_abbrev: str
    top_wins: int
    bottom_abbrev: str
    bottom_wins: int


def regular_season_score(rec: TeamRecord, config: Config = DEFAULT_CONFIG) -> float:
    """
    base + divisionBonus + conferenceBonus + pointBonus.

    base = 100 / leagueRank for leagueRank 1..16, else 0.1
    divisionBonus = 20 / 15 / 10 for divisionRank 1 / 2 / 3
    conferenceBonus = (9 - conferenceRank) * 5 for conferenceRank 1..8
    pointBonus = pointPctg * 25
    Missing ranks (0) earn no rank-based bonus, so a conference rank of 0 scores 0
    rather than the 45 the bare formula would give.
    """
    lr = rec.league_rank
    base = 100.0 / lr if 1 <= lr <= config.playoff_base_cutoff else config.non_playoff_base
    dr = rec.division_rank
    division_bonus = config.division_bonus[dr - 1] if 1 <= dr <= len(config.division_bonus) else 0.0
    cr = rec.conference_rank
    if 1 <= cr <= config.conference_bonus_cutoff:
        conference_bonus = (config.conference_bonus_cutoff + 1 - cr) * config.conference_bonus_step
    else:
        conference_bonus = 0.0
    point_bonus = rec.point_pctg * config.point_pctg_weight
    return base + division_bonus + conference_bonus + point_bonus


def regular_season_cup_odds(
    records: Iterable[TeamRecord],
    config: Config = DEFAULT_CONFIG,
) -> Dict[str, float]:
    """Pre-playoff odds for every team in the league; {} when the raw total is 0."""
    scores = {rec.abbrev: regular_season_score(rec, config) for rec in records if rec.abbrev}
    odds = normalize_percentages(scores)
    if not odds and scores:
        logger.warning("Cup odds unavailable: raw scores sum to zero for %d teams", len(scores))
    return odds


def _series_from_rounds(payload: Mapping[str, Any]) -> List[PlayoffSeries]:
    """rounds[].series[].matchupTeams[] shape (homeRoad H/R or seed order)."""
    out: List[PlayoffSeries] = []
    for rnd in payload.get("rounds") or []:
        number = _as_int(rnd.get("roundNumber"))
        for series in rnd.get("series") or []:
            teams = [t for t in series.get("matchupTeams") or [] if t.get("teamAbbrev")]
            if len(teams) != 2:
                continue
            a, b = teams
            out.append(PlayoffSeries(
                round=number,
                top_abbrev=_default_text(a.get("teamAbbrev")),
                top_wins=_as_int(a.get("seriesWins")),
                bottom_abbrev=_default_text(b.get("teamAbbrev")),
                bottom_wins=_as_int(b.get("seriesWins")),
            ))
    return out


def _series_from_bracket(payload: Mapping[str, Any]) -> List[PlayoffSeries]:
    """series[] shape with topSeedTeam / bottomSeedTeam (placeholders skipped)."""
    out: List[PlayoffSeries] = []
    for series in payload.get("series") or []:
        top, bottom = series.get("topSeedTeam"), series.get("bottomSeedTeam")
        if not top or not bottom:
            continue
        out.append(PlayoffSeries(
            round=_as_int(series.get("playoffRound")),
            top_abbrev=_default_text(top.get("abbrev")),
            top_wins=_as_int(series.get("topSeedWins")),
            bottom_abbrev=_default_text(bottom.get("abbrev")),
            bottom_wins=_as_int(series.get("bottomSeedWins")),
        ))
    return out


def parse_playoff_bracket(payload: Any) -> List[PlayoffSeries]:
    """Parse either upstream playoff shape; anything else yields []."""
    if not isinstance(payload, dict):
        return []
    if payload.get("rounds"):
        return _series_from_rounds(payload)
    return _series_from_bracket(payload)


def surviving_teams(
    bracket: Iterable[PlayoffSeries],
    config: Config = DEFAULT_CONFIG,
) -> Dict[str, tuple[int, int]]:
    """
    abbrev -> (latest round, series wins in that round) for teams not yet eliminated.
    A team is eliminated once its opponent in any series reaches series_wins_to_advance.
    """
    latest: Dict[str, tuple[int, int]] = {}
    eliminated = set()
    need = config.series_wins_to_advance
    for s in bracket:
        for team, wins, opp_wins in (
            (s.top_abbrev, s.top_wins, s.bottom_wins),
            (s.bottom_abbrev, s.bottom_wins, s.top_wins),
        ):
            if not team:
                continue
            if opp_wins >= need:
                eliminated.add(team)
            if team not in latest or s.round >= latest[team][0]:
                latest[team] = (s.round, wins)
    return {t: v for t, v in latest.items() if t not in eliminated}


def playoff_cup_odds(
    bracket: Iterable[PlayoffSeries],
    config: Config = DEFAULT_CONFIG,
) -> Dict[str, float]:
    """In-playoff odds: round * 10 + series wins * 3 over surviving teams, normalized."""
    alive = surviving_teams(bracket, config)
    scores = {
        team: rnd * config.playoff_round_weight + wins * config.playoff_series_win_weight
        for team, (rnd, wins) in alive.items()
    }
    return normalize_percentages(scores)


def participant_cup_odds(
    odds: Mapping[str, float],
    assignment: Mapping[str, str],
    unassigned: str = UNASSIGNED,
) -> Dict[str, float]:
    """Per-participant sum of owned teams' odds (1 decimal), highest first."""
    owned = pd.Series(
        {abbrev: fan for abbrev, fan in assignment.items() if fan and fan != unassigned},
        dtype=object,
    )
    if owned.empty or not odds:
        return {}
    team_odds = pd.Series(dict(odds), dtype=float).reindex(owned.index).fillna(0.0)
    totals = team_odds.groupby(owned).sum().round(1)
    ordered = sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
    return {fan: float(v) for fan, v in ordered}
