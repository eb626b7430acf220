"""Leaderboard categories and the run orchestrator."""

from fanstatsengine.stats.orchestrator import CATEGORY_KEYS, StatsOrchestrator, StatsReport

__all__ = ["CATEGORY_KEYS", "StatsOrchestrator", "StatsReport"]
