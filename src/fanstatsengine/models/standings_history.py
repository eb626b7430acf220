"""
Daily points snapshots per participant, for the standings-over-time view.

Persisted as a date-sorted list of {"date": "YYYY-MM-DD", "standings": {participant: points}}
through PersistentRecordStore. Recording twice on one day replaces that day's entry;
entries older than the retention window are pruned on every write.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from fanstatsengine.config import Config, DEFAULT_CONFIG
from fanstatsengine.data.records import FanAssignment, TeamRecord, is_owned
from fanstatsengine.data.store import PersistentRecordStore

logger = logging.getLogger(__name__)


def participant_points(
    records: Iterable[TeamRecord],
    assignment: FanAssignment,
    unassigned: str = DEFAULT_CONFIG.unassigned,
) -> Dict[str, int]:
    """participant -> points; with several teams, the last in abbreviation order counts."""
    points: Dict[str, int] = {}
    for rec in sorted(records, key=lambda r: r.abbrev):
        if is_owned(assignment, rec.abbrev, unassigned):
            points[assignment[rec.abbrev]] = rec.points
    return points


class StandingsHistoryTracker:
    """Upserts one standings entry per day and keeps a rolling window of them."""

    def __init__(self, path: Optional[str] = None, config: Config = DEFAULT_CONFIG) -> None:
        self.config = config
        self.store: PersistentRecordStore[List[Dict[str, Any]]] = PersistentRecordStore(
            path or config.standings_history_path, list
        )
        self.store.ensure_exists()

    def load_history(self) -> List[Dict[str, Any]]:
        data = self.store.load()
        if not isinstance(data, list):
            logger.warning("Standings history in %s is not a list; treating as empty", self.store.path)
            return []
        return [e for e in data if isinstance(e, dict) and e.get("date")]

    def record_current_standings(
        self,
        records: Iterable[TeamRecord],
        assignment: FanAssignment,
        today: Optional[date] = None,
    ) -> Dict[str, int]:
        """Write today's participant points; returns what was recorded."""
        day = today or date.today()
        points = participant_points(records, assignment, self.config.unassigned)
        key = day.isoformat()
        cutoff = (day - timedelta(days=self.config.standings_history_days)).isoformat()

        history = [e for e in self.load_history() if e["date"] != key]
        history.append({"date": key, "standings": points})
        history = sorted((e for e in history if e["date"] >= cutoff), key=lambda e: e["date"])
        self.store.save(history)
        logger.info("Standings history updated: %d participants tracked for %s", len(points), key)
        return points

    def history_frame(self) -> pd.DataFrame:
        """Dates (index) by participants (columns); NaN where a participant was not tracked."""
        rows = {e["date"]: e.get("standings") or {} for e in self.load_history()}
        frame = pd.DataFrame.from_dict(rows, orient="index")
        frame.index.name = "date"
        return frame.sort_index().reindex(sorted(frame.columns), axis=1)
