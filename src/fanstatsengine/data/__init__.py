"""Data layer: typed standings/schedule records, JSON store and schedule fetcher."""

from fanstatsengine.data.errors import InvalidSeasonError, ScheduleFetchError, StoreError
from fanstatsengine.data.games import ScheduledGame, parse_schedule
from fanstatsengine.data.records import (
    FanAssignment,
    TeamRecord,
    build_standings_frame,
    owned_teams,
    parse_standings,
    participants,
    teams_by_participant,
)
from fanstatsengine.data.schedule import HttpScheduleFetcher, fetch_team_schedule
from fanstatsengine.data.store import PersistentRecordStore

__all__ = [
    "FanAssignment",
    "HttpScheduleFetcher",
    "InvalidSeasonError",
    "PersistentRecordStore",
    "ScheduleFetchError",
    "ScheduledGame",
    "StoreError",
    "TeamRecord",
    "build_standings_frame",
    "fetch_team_schedule",
    "owned_teams",
    "parse_schedule",
    "parse_standings",
    "participants",
    "teams_by_participant",
]
