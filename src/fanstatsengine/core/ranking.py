"""
Single source of truth for leaderboard tie handling (Olympic medal positions).

An entry's position is 1 + the number of entries strictly better than it, so two
entries tied for 1st are followed by 3rd place. Every entry whose position is within
the medal positions is kept, including everyone tied at the boundary.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence


@dataclass(frozen=True)
class RankedEntry:
    """One leaderboard row: who, which team, the scored value and its display text."""

    participant: str
    team: str
    value: float
    display: str
    detail: Optional[Dict[str, Any]] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "participant": self.participant,
            "team": self.team,
            "value": self.value,
            "display": self.display,
        }
        if self.detail:
            out["detail"] = dict(self.detail)
        return out


def _better(a: float, b: float, higher_is_better: bool, eps: float) -> bool:
    """True if a beats b by more than eps."""
    if higher_is_better:
        return a - b > eps
    return b - a > eps


def competition_positions(
    entries: Sequence[RankedEntry],
    *,
    higher_is_better: bool = True,
    eps: float = 1e-9,
) -> List[tuple[int, RankedEntry]]:
    """
    (position, entry) pairs, best first. Sort is stable so input order breaks
    display order among equal values.
    """
    ordered = sorted(entries, key=lambda e: -e.value if higher_is_better else e.value)
    out: List[tuple[int, RankedEntry]] = []
    position = 0
    for i, entry in enumerate(ordered):
        if i == 0 or _better(ordered[i - 1].value, entry.value, higher_is_better, eps):
            position = i + 1
        out.append((position, entry))
    return out


def top_positions(
    entries: Sequence[RankedEntry],
    *,
    higher_is_better: bool = True,
    positions: int = 3,
    eps: float = 1e-9,
) -> List[RankedEntry]:
    """
    Entries occupying the top `positions` competition positions, ties included.

    [8, 8, 6, 6, 5, 5, 5] -> [8, 8, 6, 6] (positions 1, 1, 3, 3; the 5s are 5th).
    Three or fewer entries are all returned (sorted). Empty in, empty out.
    """
    return [
        entry
        for pos, entry in competition_positions(entries, higher_is_better=higher_is_better, eps=eps)
        if pos <= positions
    ]
