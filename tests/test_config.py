"""Config defaults, env override, league config loading and season ids."""

import json
from datetime import date

from fanstatsengine.config import (
    DEFAULT_CONFIG,
    DEFAULT_LEAGUE,
    api_season,
    config_from_env,
    current_season,
    load_league_config,
)


def test_current_season_rolls_over_in_july():
    assert current_season(date(2025, 6, 30)) == "2024-2025"
    assert current_season(date(2025, 7, 1)) == "2025-2026"
    assert api_season("2025-2026") == "20252026"


def test_env_overrides_data_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("FANSTATS_DATA_DIR", str(tmp_path))
    cfg = config_from_env()
    assert cfg.history_path == tmp_path / "historical_stats.json"
    assert DEFAULT_CONFIG.data_dir == "data"


def test_env_unset_returns_base(monkeypatch):
    monkeypatch.delenv("FANSTATS_DATA_DIR", raising=False)
    assert config_from_env() is DEFAULT_CONFIG


def test_default_league_roster_and_colors():
    assert len(DEFAULT_LEAGUE.roster) == 13
    assert DEFAULT_LEAGUE.is_participant("Dan R.")
    assert not DEFAULT_LEAGUE.is_participant("Someone Else")
    assert DEFAULT_LEAGUE.color_for("Someone Else") == "#888888"


def test_load_league_config(tmp_path):
    p = tmp_path / "league.json"
    p.write_text(json.dumps({"colors": {"Ann": "#111111", "Bo": "#222222"}}), encoding="utf-8")
    league = load_league_config(str(p))
    assert league.roster == ("Ann", "Bo")
    assert league.color_for("Bo") == "#222222"
