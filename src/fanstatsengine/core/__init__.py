"""Core logic: leaderboard entries and tie-aware medal positions."""

from fanstatsengine.core.ranking import RankedEntry, competition_positions, top_positions

__all__ = ["RankedEntry", "competition_positions", "top_positions"]
