"""
Schedule entries: completion status, season segment and regulation/OT outcome.

Upstream schedules describe status either numerically (gameState 3/4/5) or with
text tokens ("FINAL", "OFF"); both normalize to is_completed. Game ids encode the
season segment in digits 5-6 ("02" = regular season, "01" preseason, "03" playoffs).
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from fanstatsengine.config import Config, DEFAULT_CONFIG
from fanstatsengine.data.records import _as_int, _default_text

_SEGMENT_SLICE = slice(4, 6)


def _mapping(value: Any) -> Mapping[str, Any]:
    """Nested API objects sometimes arrive as bare strings or lists; read those as empty."""
    return value if isinstance(value, Mapping) else {}


@dataclass(frozen=True)
class ScheduledGame:
    """One game from a team's season schedule."""

    game_id: Optional[str]
    state: Any
    start_time: str
    home_abbrev: str
    away_abbrev: str
    home_score: int = 0
    away_score: int = 0
    period_type: str = ""
    game_type: Optional[int] = None

    @classmethod
    def from_api(cls, game: Mapping[str, Any]) -> "ScheduledGame":
        home = _mapping(game.get("homeTeam"))
        away = _mapping(game.get("awayTeam"))
        period = _mapping(game.get("periodDescriptor"))
        outcome = _mapping(game.get("gameOutcome"))
        raw_id = game.get("id", game.get("gameId"))
        raw_type = game.get("gameType")
        return cls(
            game_id=None if raw_id in (None, "") else str(raw_id),
            state=game.get("gameState"),
            start_time=str(game.get("startTimeUTC") or game.get("gameDate") or ""),
            home_abbrev=_default_text(home.get("abbrev")),
            away_abbrev=_default_text(away.get("abbrev")),
            home_score=_as_int(home.get("score")),
            away_score=_as_int(away.get("score")),
            period_type=str(outcome.get("lastPeriodType") or period.get("periodType") or "").upper(),
            game_type=None if raw_type is None else _as_int(raw_type),
        )

    def is_completed(self, config: Config = DEFAULT_CONFIG) -> bool:
        """True only for closed/final states; live, scheduled and unknown states are False."""
        state = self.state
        if isinstance(state, bool) or state is None:
            return False
        if isinstance(state, (int, float)):
            return int(state) in config.final_game_states
        token = str(state).strip().upper()
        if token.isdigit():
            return int(token) in config.final_game_states
        return token in config.final_game_tokens

    def is_regular_season(self, config: Config = DEFAULT_CONFIG) -> bool:
        """Explicit gameType wins; otherwise the segment digits of the game id decide."""
        if self.game_type is not None:
            return self.game_type == config.regular_season_type
        if not self.game_id or len(self.game_id) < 6 or not self.game_id.isdigit():
            return False
        return int(self.game_id[_SEGMENT_SLICE]) == config.regular_season_type

    @property
    def decided_outside_regulation(self) -> bool:
        return bool(self.period_type) and self.period_type != "REG"

    def involves(self, abbrev: str) -> bool:
        return abbrev in (self.home_abbrev, self.away_abbrev)

    def opponent_of(self, abbrev: str) -> str:
        return self.away_abbrev if self.home_abbrev == abbrev else self.home_abbrev

    def score_for(self, abbrev: str) -> int:
        return self.home_score if self.home_abbrev == abbrev else self.away_score

    def score_against(self, abbrev: str) -> int:
        return self.away_score if self.home_abbrev == abbrev else self.home_score

    @property
    def winner(self) -> Optional[str]:
        if self.home_score > self.away_score:
            return self.home_abbrev
        if self.away_score > self.home_score:
            return self.away_abbrev
        return None


def parse_schedule(payload: Any) -> List[ScheduledGame]:
    """Parse {"games": [...]} (club-schedule-season) or a bare list of games."""
    games = payload.get("games") if isinstance(payload, dict) else payload
    if not isinstance(games, list):
        return []
    return [ScheduledGame.from_api(g) for g in games if isinstance(g, dict)]
