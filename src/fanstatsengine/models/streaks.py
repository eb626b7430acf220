"""Schedule-derived team form: active point streak and next scheduled game."""

from typing import Iterable, List, Optional

from fanstatsengine.config import Config, DEFAULT_CONFIG
from fanstatsengine.data.games import ScheduledGame


def _completed_regular(team: str, games: Iterable[ScheduledGame], config: Config) -> List[ScheduledGame]:
    played = [
        g for g in games
        if g.involves(team) and g.is_completed(config) and g.is_regular_season(config)
    ]
    return sorted(played, key=lambda g: (g.start_time, g.game_id or ""))


def point_streak(team: str, games: Iterable[ScheduledGame], config: Config = DEFAULT_CONFIG) -> int:
    """
    Consecutive most-recent completed regular-season games in which team earned a point
    (a win, or a loss outside regulation). 0 when the latest game was a regulation loss.
    """
    streak = 0
    for game in reversed(_completed_regular(team, games, config)):
        if game.winner == team or (game.winner is not None and game.decided_outside_regulation):
            streak += 1
            continue
        break
    return streak


def point_streak_from_code(streak_type: str, streak_length: int) -> int:
    """Fallback without a schedule: W and O (OT loss) streaks are point streaks."""
    return streak_length if streak_type in ("W", "O") else 0


def next_game(team: str, games: Iterable[ScheduledGame], config: Config = DEFAULT_CONFIG) -> Optional[ScheduledGame]:
    """Earliest game involving team that is not completed yet; None if the schedule is done."""
    upcoming = [g for g in games if g.involves(team) and not g.is_completed(config) and g.start_time]
    if not upcoming:
        return None
    return min(upcoming, key=lambda g: (g.start_time, g.game_id or ""))
