"""Configuration with defaults for FanStatsEngine."""

import json
import os
from dataclasses import dataclass, field, replace
from datetime import date
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

# Sentinel used by the fan assignment for teams nobody owns
UNASSIGNED = "N/A"


@dataclass(frozen=True)
class Config:
    """Default config: thresholds, cup-odds weights, persistence and API settings."""

    unassigned: str = UNASSIGNED
    medal_positions: int = 3

    # Category thresholds (per-game values)
    glass_cannon_min_gf_per_game: float = 2.5
    exceptional_defense_max_ga_per_game: float = 2.5

    # Regular-season cup odds
    playoff_base_cutoff: int = 16          # leagueRank 1..16 earns 100/leagueRank
    non_playoff_base: float = 0.1
    division_bonus: Tuple[float, ...] = (20.0, 15.0, 10.0)  # divisionRank 1 / 2 / 3
    conference_bonus_cutoff: int = 8
    conference_bonus_step: float = 5.0
    point_pctg_weight: float = 25.0

    # In-playoff cup odds
    playoff_round_weight: float = 10.0
    playoff_series_win_weight: float = 3.0
    series_wins_to_advance: int = 4

    # History
    championship_playoff_wins: int = 16    # four best-of-seven series
    hall_of_fame_lookback: int = 5
    improvement_weights: Tuple[float, float, float] = (3.0, 1.0, 2.0)  # wins, points, rank

    # Schedule status / game typing
    final_game_states: FrozenSet[int] = frozenset({3, 4, 5})
    final_game_tokens: FrozenSet[str] = frozenset({"FINAL", "OFF", "OFFICIAL"})
    regular_season_type: int = 2

    # Persistence
    data_dir: str = "data"
    history_file: str = "historical_stats.json"
    standings_history_file: str = "standings_history.json"
    standings_history_days: int = 365
    predictions_file: str = "predictions.json"
    prediction_results_file: str = "prediction_results.json"
    recent_predictions_limit: int = 10

    # Schedule API
    api_base: str = "https://api-web.nhle.com/v1"
    request_timeout: float = 30.0

    @property
    def history_path(self) -> Path:
        return Path(self.data_dir) / self.history_file

    @property
    def standings_history_path(self) -> Path:
        return Path(self.data_dir) / self.standings_history_file

    @property
    def predictions_path(self) -> Path:
        return Path(self.data_dir) / self.predictions_file

    @property
    def prediction_results_path(self) -> Path:
        return Path(self.data_dir) / self.prediction_results_file


def config_from_env(base: Optional[Config] = None) -> Config:
    """Apply FANSTATS_DATA_DIR on top of a config (default: DEFAULT_CONFIG)."""
    cfg = base or DEFAULT_CONFIG
    data_dir = os.environ.get("FANSTATS_DATA_DIR")
    if not data_dir:
        return cfg
    return replace(cfg, data_dir=data_dir)


# Singleton default config; override via env or explicit args in APIs
DEFAULT_CONFIG = Config()


@dataclass(frozen=True)
class LeagueConfig:
    """
    Fixed pool facts loaded once at startup: participant roster and chart colors.
    Passed by reference to the orchestrator and renderers; never mutated.
    """

    roster: Tuple[str, ...] = ()
    participant_colors: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def is_participant(self, name: str) -> bool:
        """True if name is on the roster (an empty roster accepts anyone)."""
        if not self.roster:
            return True
        return name in self.roster

    def color_for(self, participant: str, default: str = "#888888") -> str:
        return self.participant_colors.get(participant, default)


_DEFAULT_COLORS: Dict[str, str] = {
    "Brian D.": "#006D75",
    "David K.": "#FFB81C",
    "Jeff C.": "#6F263D",
    "Keith R.": "#F47A38",
    "Travis R.": "#CE1126",
    "Zak S.": "#B4975A",
    "Ryan B.": "#003087",
    "Ryan T.": "#154734",
    "Sean R.": "#111111",
    "Tyler F.": "#69B3E7",
    "Trevor R.": "#001628",
    "Mike M.": "#041E42",
    "Dan R.": "#041E42",
}

DEFAULT_LEAGUE = LeagueConfig(
    roster=tuple(_DEFAULT_COLORS),
    participant_colors=MappingProxyType(dict(_DEFAULT_COLORS)),
)


def load_league_config(path: str) -> LeagueConfig:
    """
    Build a LeagueConfig from JSON: {"roster": [...], "colors": {participant: hex}}.
    Roster defaults to the color keys when omitted.
    """
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    colors = dict(raw.get("colors") or {})
    roster = tuple(raw.get("roster") or colors.keys())
    return LeagueConfig(roster=roster, participant_colors=MappingProxyType(colors))


def current_season(today: Optional[date] = None) -> str:
    """Season id such as "2024-2025"; July onwards belongs to the season starting that year."""
    d = today or date.today()
    if d.month >= 7:
        return f"{d.year}-{d.year + 1}"
    return f"{d.year - 1}-{d.year}"


def api_season(season_id: str) -> str:
    """Upstream season form: "2024-2025" -> "20242025"."""
    return season_id.replace("-", "")
