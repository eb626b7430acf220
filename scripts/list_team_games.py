#!/usr/bin/env python3
"""
List a team's completed regular-season games from its club schedule: opponent, score,
and whether it went past regulation.

Use this to sanity-check head-to-head numbers: every game against another owned team
should show up here and in the opponent's schedule with the same game id.

Usage:
  python3 scripts/list_team_games.py --team TOR --season 2024-2025 [--opponent MTL]
"""

import argparse
import logging
import sys
from pathlib import Path

repo = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(repo / "src"))

from fanstatsengine.config import DEFAULT_CONFIG, current_season
from fanstatsengine.data.errors import ScheduleFetchError
from fanstatsengine.data.schedule import fetch_team_schedule


def main() -> int:
    parser = argparse.ArgumentParser(description="List completed regular-season games for one team")
    parser.add_argument("--team", required=True, help="Team abbreviation")
    parser.add_argument("--season", default=current_season(), help="Season id, e.g. 2024-2025")
    parser.add_argument("--opponent", default=None, help="Only games against this team")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    team = args.team.upper()
    try:
        games = fetch_team_schedule(team, args.season)
    except ScheduleFetchError as e:
        print("Schedule not available:", e)
        return 1

    played = [
        g for g in games
        if g.involves(team) and g.is_completed(DEFAULT_CONFIG) and g.is_regular_season(DEFAULT_CONFIG)
    ]
    if args.opponent:
        played = [g for g in played if g.opponent_of(team) == args.opponent.upper()]

    print("Completed regular-season games for %s (%s): %d" % (team, args.season, len(played)))
    for g in sorted(played, key=lambda g: g.start_time):
        result = "W" if g.winner == team else ("OTL" if g.decided_outside_regulation else "L")
        print("  %s  %s  vs %-3s  %d-%d  %-3s %s" % (
            g.game_id, g.start_time[:10], g.opponent_of(team),
            g.score_for(team), g.score_against(team), result, g.period_type,
        ))
    return 0


if __name__ == "__main__":
    sys.exit(main())
