"""
Leaderboard categories over the owned-team standings frame.

Each function maps owned teams to RankedEntry rows through a small scoring rule and
hands them to top_positions. None means "no qualifying entries" (never an error).
Teams with zero games played are left out of per-game and percentage categories.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

import pandas as pd

from fanstatsengine.config import Config, DEFAULT_CONFIG
from fanstatsengine.core.ranking import RankedEntry, top_positions
from fanstatsengine.data.errors import InvalidSeasonError
from fanstatsengine.data.games import ScheduledGame
from fanstatsengine.models.head_to_head import HeadToHeadMatrix
from fanstatsengine.models.history import HistoricalTracker, improvement_score, previous_season
from fanstatsengine.models.predictions import PredictionProcessor
from fanstatsengine.models.streaks import next_game, point_streak, point_streak_from_code
from fanstatsengine.utils.math import safe_div

logger = logging.getLogger(__name__)

CategoryResult = Optional[List[RankedEntry]]


def _plural(n: float, singular: str, plural: str) -> str:
    return singular if n == 1 else plural


def _medals(entries: List[RankedEntry], higher_is_better: bool, config: Config) -> CategoryResult:
    top = top_positions(entries, higher_is_better=higher_is_better, positions=config.medal_positions)
    return top or None


def _played(frame: pd.DataFrame) -> pd.DataFrame:
    """Rows with at least one game played."""
    if frame.empty:
        return frame
    return frame[frame["games_played"] > 0]


def _participant_teams(frame: pd.DataFrame) -> Dict[str, str]:
    """participant -> comma-joined team names (abbreviation order)."""
    out: Dict[str, List[str]] = {}
    for row in frame.itertuples(index=False):
        out.setdefault(row.participant, []).append(row.team)
    return {p: ", ".join(teams) for p, teams in sorted(out.items())}


# --- Record counts -----------------------------------------------------------


def _count_category(frame: pd.DataFrame, column: str, noun: tuple[str, str], higher: bool, config: Config) -> CategoryResult:
    entries = []
    for row in frame.itertuples(index=False):
        n = int(getattr(row, column))
        entries.append(RankedEntry(row.participant, row.team, n, f"{n} {_plural(n, *noun)}"))
    return _medals(entries, higher, config)


def top_winners(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    return _count_category(frame, "wins", ("win", "wins"), True, config)


def fewest_wins(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    return _count_category(frame, "wins", ("win", "wins"), False, config)


def top_losers(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    return _count_category(frame, "losses", ("loss", "losses"), True, config)


def fewest_losses(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    return _count_category(frame, "losses", ("loss", "losses"), False, config)


# --- Streaks -----------------------------------------------------------------


def _streak_category(frame: pd.DataFrame, streak_type: str, label: str, config: Config) -> CategoryResult:
    entries = []
    for row in frame.itertuples(index=False):
        if row.streak_type != streak_type:
            continue
        n = int(row.streak_length)
        entries.append(RankedEntry(row.participant, row.team, n, f"{n} game {label} ({row.streak_code})"))
    return _medals(entries, True, config)


def longest_win_streak(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    return _streak_category(frame, "W", "winning streak", config)


def longest_lose_streak(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    return _streak_category(frame, "L", "losing streak", config)


def longest_point_streak(
    frame: pd.DataFrame,
    schedules: Mapping[str, List[ScheduledGame]],
    config: Config = DEFAULT_CONFIG,
) -> CategoryResult:
    """Active point streak from the team's schedule; W/O streak code when no schedule was fetched."""
    entries = []
    for row in frame.itertuples(index=False):
        games = schedules.get(row.abbrev)
        if games:
            n = point_streak(row.abbrev, games, config)
        else:
            n = point_streak_from_code(row.streak_type, int(row.streak_length))
        if n <= 0:
            continue
        entries.append(RankedEntry(row.participant, row.team, n, f"{n} straight {_plural(n, 'game', 'games')} with a point"))
    return _medals(entries, True, config)


# --- Per-game and percentage categories ---------------------------------------


def best_point_differential(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    entries = []
    for row in _played(frame).itertuples(index=False):
        v = round(float(row.diff_per_game), 2)
        entries.append(RankedEntry(row.participant, row.team, v, f"{v:+.2f} goals/game"))
    return _medals(entries, True, config)


def most_dominant(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    entries = []
    for row in _played(frame).itertuples(index=False):
        v = round(float(row.win_pct), 1)
        entries.append(RankedEntry(row.participant, row.team, v, f"{v}% win rate"))
    return _medals(entries, True, config)


def brick_wall(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    entries = []
    for row in _played(frame).itertuples(index=False):
        v = round(float(row.ga_per_game), 2)
        entries.append(RankedEntry(row.participant, row.team, v, f"{v:.2f} goals against/game"))
    return _medals(entries, False, config)


def exceptional_defense(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    """Goals against per game strictly below the exceptional-defense threshold."""
    limit = config.exceptional_defense_max_ga_per_game
    entries = []
    for row in _played(frame).itertuples(index=False):
        ga = float(row.ga_per_game)
        if ga >= limit:
            continue
        v = round(ga, 2)
        entries.append(RankedEntry(row.participant, row.team, v, f"{v:.2f} goals against/game (under {limit:g})"))
    return _medals(entries, False, config)


def glass_cannon(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    """Scoring at least the minimum goals per game while still being outscored."""
    entries = []
    for row in _played(frame).itertuples(index=False):
        gf, diff = float(row.gf_per_game), float(row.diff_per_game)
        if diff >= 0 or gf < config.glass_cannon_min_gf_per_game:
            continue
        v = round(gf, 2)
        entries.append(RankedEntry(
            row.participant, row.team, v, f"{v:.2f} goals/game but {diff:+.2f} differential",
        ))
    return _medals(entries, True, config)


# --- Overtime ----------------------------------------------------------------


def comeback_kid(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    entries = []
    for row in frame.itertuples(index=False):
        n = int(row.ot_wins)
        if n <= 0:
            continue
        entries.append(RankedEntry(row.participant, row.team, n, f"{n} OT/SO {_plural(n, 'win', 'wins')}"))
    return _medals(entries, True, config)


def overtimer(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    entries = []
    for row in frame.itertuples(index=False):
        n = int(row.ot_losses)
        if n <= 0:
            continue
        entries.append(RankedEntry(
            row.participant, row.team, n, f"{n} overtime {_plural(n, 'loss', 'losses')} (living on the edge!)",
        ))
    return _medals(entries, True, config)


def point_scrounger(frame: pd.DataFrame, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    """Standings points banked from OT losses (one each)."""
    entries = []
    for row in frame.itertuples(index=False):
        n = int(row.ot_losses)
        if n <= 0:
            continue
        entries.append(RankedEntry(
            row.participant, row.team, n, f"{n} pity {_plural(n, 'point', 'points')} from OT losses",
        ))
    return _medals(entries, True, config)


# --- Head-to-head ------------------------------------------------------------


def _vs_fans_entries(frame: pd.DataFrame, matrix: HeadToHeadMatrix) -> List[RankedEntry]:
    owned = list(frame["abbrev"]) if not frame.empty else []
    entries = []
    for row in frame.itertuples(index=False):
        rec = matrix.record_vs(row.abbrev, owned)
        if rec.games == 0:
            continue
        pct = round(100.0 * safe_div(rec.wins, rec.games), 1)
        entries.append(RankedEntry(
            row.participant,
            row.team,
            pct,
            f"{rec.wins}-{rec.total_losses} ({pct}% vs other fans)",
            detail={"wins": rec.wins, "losses": rec.losses, "ot_losses": rec.ot_losses},
        ))
    return entries


def fan_crusher(frame: pd.DataFrame, matrix: HeadToHeadMatrix, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    """Best win % against other owned teams."""
    return _medals(_vs_fans_entries(frame, matrix), True, config)


def fan_fodder(frame: pd.DataFrame, matrix: HeadToHeadMatrix, config: Config = DEFAULT_CONFIG) -> CategoryResult:
    """Worst win % against other owned teams."""
    return _medals(_vs_fans_entries(frame, matrix), False, config)


def victims(frame: pd.DataFrame, matrix: HeadToHeadMatrix, named_team: str) -> CategoryResult:
    """
    Every participant whose team lost to named_team this season, most losses first,
    with the aggregate goal differential of that pairing. Not medal-trimmed.
    """
    rows = []
    for row in frame.itertuples(index=False):
        if row.abbrev == named_team:
            continue
        rec = matrix.get(row.abbrev, named_team)
        if rec.total_losses <= 0:
            continue
        gd = rec.goal_differential
        rows.append((rec.total_losses, gd, RankedEntry(
            row.participant,
            row.team,
            rec.total_losses,
            f"lost {rec.total_losses} to {named_team} ({gd:+d} goal diff)",
            detail={"wins": rec.wins, "losses": rec.losses, "ot_losses": rec.ot_losses, "goal_differential": gd},
        )))
    if not rows:
        return None
    rows.sort(key=lambda r: (-r[0], r[1], r[2].participant, r[2].team))
    return [r[2] for r in rows]


def upcoming_fan_matchups(
    frame: pd.DataFrame,
    schedules: Mapping[str, List[ScheduledGame]],
    config: Config = DEFAULT_CONFIG,
) -> CategoryResult:
    """
    Next games between two different participants' teams, most interesting first.
    Interest = 100 - |standings points difference|.
    """
    if frame.empty:
        return None
    by_abbrev = {row.abbrev: row for row in frame.itertuples(index=False)}
    seen = set()
    entries = []
    for abbrev in sorted(by_abbrev):
        game = next_game(abbrev, schedules.get(abbrev) or [], config)
        if game is None:
            continue
        home, away = by_abbrev.get(game.home_abbrev), by_abbrev.get(game.away_abbrev)
        if home is None or away is None or home.participant == away.participant:
            continue
        key = game.game_id or (game.start_time, *sorted((game.home_abbrev, game.away_abbrev)))
        if key in seen:
            continue
        seen.add(key)
        interest = 100 - abs(int(home.points) - int(away.points))
        entries.append(RankedEntry(
            f"{away.participant} @ {home.participant}",
            f"{away.team} @ {home.team}",
            interest,
            f"{int(away.points)} pts @ {int(home.points)} pts",
            detail={
                "home_participant": home.participant,
                "away_participant": away.participant,
                "home_team": home.abbrev,
                "away_team": away.abbrev,
                "start_time": game.start_time,
            },
        ))
    entries.sort(key=lambda e: (e.detail["start_time"], e.participant))
    return _medals(entries, True, config)


# --- Cup odds ----------------------------------------------------------------


def _odds_entries(frame: pd.DataFrame, odds: Mapping[str, float]) -> List[RankedEntry]:
    return [
        RankedEntry(row.participant, row.team, float(odds[row.abbrev]), f"{odds[row.abbrev]:.2f}% cup odds")
        for row in frame.itertuples(index=False)
        if row.abbrev in odds
    ]


def best_cup_odds(frame: pd.DataFrame, odds: Mapping[str, float], config: Config = DEFAULT_CONFIG) -> CategoryResult:
    return _medals(_odds_entries(frame, odds), True, config)


def worst_cup_odds(frame: pd.DataFrame, odds: Mapping[str, float], config: Config = DEFAULT_CONFIG) -> CategoryResult:
    return _medals(_odds_entries(frame, odds), False, config)


# --- History -----------------------------------------------------------------


def playoff_legends(frame: pd.DataFrame, tracker: Optional[HistoricalTracker], config: Config = DEFAULT_CONFIG) -> CategoryResult:
    """All-time playoff wins per participant across recorded seasons."""
    if tracker is None:
        return None
    entries = []
    for participant, teams in _participant_teams(frame).items():
        n = tracker.total_playoff_wins(participant)
        if n <= 0:
            continue
        entries.append(RankedEntry(participant, teams, n, f"{n} all-time playoff {_plural(n, 'win', 'wins')}"))
    return _medals(entries, True, config)


def most_improved(
    frame: pd.DataFrame,
    tracker: Optional[HistoricalTracker],
    season: Optional[str],
    config: Config = DEFAULT_CONFIG,
) -> CategoryResult:
    """Composite improvement vs the previous season; only positive scores qualify."""
    if tracker is None or not season:
        return None
    try:
        prior = previous_season(season)
    except InvalidSeasonError as e:
        logger.warning("Most improved unavailable: %s", e)
        return None
    entries = []
    for participant, teams in _participant_teams(frame).items():
        imp = tracker.calculate_improvement(participant, prior, season)
        if imp is None:
            continue
        score = improvement_score(imp, config)
        if score <= 0:
            continue
        entries.append(RankedEntry(
            participant,
            teams,
            score,
            f"+{score:g} ({imp.wins_diff:+d} W, {imp.points_diff:+d} PTS, {imp.rank_improvement:+d} rank)",
            detail={
                "wins_diff": imp.wins_diff,
                "points_diff": imp.points_diff,
                "rank_improvement": imp.rank_improvement,
            },
        ))
    return _medals(entries, True, config)


def hall_of_fame(
    frame: pd.DataFrame,
    tracker: Optional[HistoricalTracker],
    season: Optional[str],
    config: Config = DEFAULT_CONFIG,
    lookback: Optional[int] = None,
) -> CategoryResult:
    """Championship seasons (playoff_wins >= threshold) within the lookback window."""
    if tracker is None:
        return None
    window = config.hall_of_fame_lookback if lookback is None else lookback
    entries = []
    for participant, teams in _participant_teams(frame).items():
        try:
            titles = tracker.championships(participant, lookback=window, current=season)
        except InvalidSeasonError as e:
            logger.warning("Hall of fame unavailable: %s", e)
            return None
        if not titles:
            continue
        n = len(titles)
        entries.append(RankedEntry(
            participant, teams, n,
            f"{n} {_plural(n, 'championship', 'championships')} ({', '.join(titles)})",
            detail={"seasons": list(titles)},
        ))
    return _medals(entries, True, config)


# --- Predictions -------------------------------------------------------------


def prediction_accuracy(
    frame: pd.DataFrame,
    processor: Optional[PredictionProcessor],
    config: Config = DEFAULT_CONFIG,
) -> CategoryResult:
    """Share of correctly picked winners among pool participants with a scored pick."""
    if processor is None:
        return None
    entries = []
    for participant, teams in _participant_teams(frame).items():
        acc = processor.calculate_accuracy(participant)
        if not acc.total:
            continue
        entries.append(RankedEntry(
            participant, teams, acc.percentage,
            f"{acc.percentage:.1f}% ({acc.correct}/{acc.total})",
            detail=acc.to_dict(),
        ))
    return _medals(entries, True, config)


def victim_key(team: str) -> str:
    return f"victims_{team.lower()}"


def victim_categories(frame: pd.DataFrame, matrix: HeadToHeadMatrix, teams: Iterable[str]) -> Dict[str, CategoryResult]:
    return {victim_key(t): victims(frame, matrix, t) for t in sorted(set(teams))}
