"""
Generate the participant cup odds PNG.
Uses standings/assignment JSON under data/ if available, otherwise a small sample pool.
Run from repo root: python scripts/make_cup_odds_chart.py
"""

import json
import sys
from pathlib import Path

# Ensure package is on path
repo = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(repo / "src"))

from fanstatsengine.data.records import parse_standings
from fanstatsengine.models.cup_odds import participant_cup_odds, regular_season_cup_odds
from fanstatsengine.viz.cup_odds import render_cup_odds_chart

OUTPUT_PATH = "outputs/cup_odds.png"

# Sample pool matching the upstream standings shape (used if no saved data exists)
SAMPLE_STANDINGS = {
    "standings": [
        {"teamAbbrev": {"default": "WPG"}, "leagueSequence": 1, "divisionSequence": 1,
         "conferenceSequence": 1, "pointPctg": 0.707},
        {"teamAbbrev": {"default": "WSH"}, "leagueSequence": 2, "divisionSequence": 1,
         "conferenceSequence": 1, "pointPctg": 0.677},
        {"teamAbbrev": {"default": "VGK"}, "leagueSequence": 3, "divisionSequence": 1,
         "conferenceSequence": 2, "pointPctg": 0.659},
        {"teamAbbrev": {"default": "CHI"}, "leagueSequence": 31, "divisionSequence": 8,
         "conferenceSequence": 15, "pointPctg": 0.372},
    ]
}
SAMPLE_ASSIGNMENT = {"WPG": "Brian D.", "WSH": "David K.", "VGK": "Jeff C.", "CHI": "Keith R."}


def _load(name: str, fallback: dict) -> dict:
    p = repo / "data" / name
    if p.exists():
        try:
            with open(p, encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError):
            pass
    return fallback


def main() -> None:
    records = parse_standings(_load("standings.json", SAMPLE_STANDINGS))
    assignment = _load("fan_assignment.json", SAMPLE_ASSIGNMENT)
    odds = participant_cup_odds(regular_season_cup_odds(records), assignment)
    saved = render_cup_odds_chart(odds, outpath=str(repo / OUTPUT_PATH))
    print("Saved:", saved)


if __name__ == "__main__":
    main()
