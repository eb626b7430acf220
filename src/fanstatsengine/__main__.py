"""CLI entrypoint: python -m fanstatsengine [awards|record|chart|snapshot|predict|score]."""

import json
import logging
import sys
from pathlib import Path

# Ensure src is on path when run as python -m fanstatsengine
if __name__ == "__main__":
    src = Path(__file__).resolve().parent.parent
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

from fanstatsengine.config import DEFAULT_LEAGUE, config_from_env, current_season, load_league_config
from fanstatsengine.data.records import parse_standings
from fanstatsengine.models.history import HistoricalTracker
from fanstatsengine.models.predictions import PredictionProcessor, PredictionTracker
from fanstatsengine.models.standings_history import StandingsHistoryTracker
from fanstatsengine.stats.orchestrator import StatsOrchestrator


def _load_json(path: str):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _processor(config) -> PredictionProcessor:
    return PredictionProcessor(PredictionTracker(config=config), config=config)


def _orchestrator(args, *, with_fetcher: bool) -> StatsOrchestrator:
    config = config_from_env()
    league = load_league_config(args.league) if args.league else DEFAULT_LEAGUE
    history = args.history or (str(config.history_path) if config.history_path.exists() else None)
    tracker = HistoricalTracker(history, config=config) if history else None
    predictions = _processor(config) if config.prediction_results_path.exists() else None
    fetcher = None
    if with_fetcher and not args.offline:
        from fanstatsengine.data.schedule import HttpScheduleFetcher  # noqa: PLC0415
        fetcher = HttpScheduleFetcher(config)
    return StatsOrchestrator(
        config=config, league=league, fetch_schedule=fetcher, tracker=tracker, predictions=predictions,
    )


def _awards(args) -> int:
    orch = _orchestrator(args, with_fetcher=True)
    records = parse_standings(_load_json(args.standings))
    assignment = _load_json(args.assignment)
    report = orch.run(
        records,
        assignment,
        season=args.season,
        head_to_head=_load_json(args.head_to_head) if args.head_to_head else None,
        playoff_bracket=_load_json(args.bracket) if args.bracket else None,
        victim_teams=args.victim or (),
    )
    print(report.to_json())
    return 0


def _record(args) -> int:
    orch = _orchestrator(args, with_fetcher=False)
    if orch.tracker is None:
        orch.tracker = HistoricalTracker(config=orch.config)
    records = parse_standings(_load_json(args.standings))
    assignment = _load_json(args.assignment)
    playoff_wins = _load_json(args.playoff_wins) if args.playoff_wins else None
    written = orch.record_current_season(records, assignment, args.season, playoff_wins)
    print(f"Recorded {args.season} for {len(written)} participants -> {orch.tracker.store.path}")
    return 0


def _chart(args) -> int:
    from fanstatsengine.viz.cup_odds import render_cup_odds_chart  # noqa: PLC0415
    orch = _orchestrator(args, with_fetcher=False)
    records = parse_standings(_load_json(args.standings))
    assignment = _load_json(args.assignment)
    report = orch.run(
        records,
        assignment,
        season=args.season,
        head_to_head={},
        playoff_bracket=_load_json(args.bracket) if args.bracket else None,
    )
    saved = render_cup_odds_chart(report.participant_odds, outpath=args.out, league=orch.league)
    print("Saved:", saved)
    return 0


def _snapshot(args) -> int:
    config = config_from_env()
    tracker = StandingsHistoryTracker(args.out, config=config)
    records = parse_standings(_load_json(args.standings))
    points = tracker.record_current_standings(records, _load_json(args.assignment))
    print(f"Tracked {len(points)} participants -> {tracker.store.path}")
    return 0


def _predict(args) -> int:
    tracker = PredictionTracker(config=config_from_env())
    tracker.store_prediction(args.participant, args.game_id, args.winner)
    return 0


def _score(args) -> int:
    processor = _processor(config_from_env())
    results = processor.process_completed_game(args.game_id, args.winner)
    correct = sum(1 for r in results.values() if r["was_correct"])
    print(f"Game {args.game_id}: {correct}/{len(results)} correct")
    return 0


def main(argv=None) -> int:
    import argparse
    p = argparse.ArgumentParser(description="FanStatsEngine: fan pool leaderboards and cup odds")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    def common(sp, *, season_required: bool = False) -> None:
        sp.add_argument("--standings", required=True, help="Standings JSON ({\"standings\": [...]})")
        sp.add_argument("--assignment", required=True, help="JSON object: team abbrev -> participant")
        sp.add_argument("--season", required=season_required,
                        default=None if season_required else current_season(),
                        help="Season id, e.g. 2024-2025")
        sp.add_argument("--league", default=None, help="League JSON (roster + colors)")
        sp.add_argument("--history", default=None, help="History JSON path (default: data dir)")

    aw = sub.add_parser("awards", help="Compute every category and print the JSON report")
    common(aw)
    aw.add_argument("--bracket", default=None, help="Playoff bracket JSON")
    aw.add_argument("--head-to-head", default=None, help="Precomputed head-to-head JSON (skips fetching)")
    aw.add_argument("--victim", action="append", metavar="ABBR", help="Add a victims_<abbr> category")
    aw.add_argument("--offline", action="store_true", help="Do not fetch team schedules")

    rec = sub.add_parser("record", help="Record this season's snapshot per participant")
    common(rec, season_required=True)
    rec.add_argument("--playoff-wins", default=None, help="JSON object: team abbrev -> playoff wins")

    ch = sub.add_parser("chart", help="Render the participant cup odds chart")
    common(ch)
    ch.add_argument("--bracket", default=None, help="Playoff bracket JSON")
    ch.add_argument("--out", default="outputs/cup_odds.png")

    sn = sub.add_parser("snapshot", help="Record today's points per participant in the standings history")
    sn.add_argument("--standings", required=True, help="Standings JSON ({\"standings\": [...]})")
    sn.add_argument("--assignment", required=True, help="JSON object: team abbrev -> participant")
    sn.add_argument("--out", default=None, help="Standings history JSON path (default: data dir)")

    pr = sub.add_parser("predict", help="Store a participant's pick for a game")
    pr.add_argument("--participant", required=True)
    pr.add_argument("--game-id", required=True)
    pr.add_argument("--winner", required=True, help="Predicted winner abbrev")

    sc = sub.add_parser("score", help="Score every pick for a finished game")
    sc.add_argument("--game-id", required=True)
    sc.add_argument("--winner", required=True, help="Actual winner abbrev")

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if args.cmd == "awards":
        return _awards(args)
    if args.cmd == "record":
        return _record(args)
    if args.cmd == "snapshot":
        return _snapshot(args)
    if args.cmd == "predict":
        return _predict(args)
    if args.cmd == "score":
        return _score(args)
    return _chart(args)


if __name__ == "__main__":
    sys.exit(main())
