"""
Cup odds chart: one horizontal bar per participant, filled with the participant's color.
"""

from pathlib import Path
from typing import Mapping

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from fanstatsengine.config import DEFAULT_LEAGUE, LeagueConfig

DEFAULT_COLOR = "#888888"


def render_cup_odds_chart(
    participant_odds: Mapping[str, float],
    outpath: str = "outputs/cup_odds.png",
    league: LeagueConfig = DEFAULT_LEAGUE,
    title: str = "Stanley Cup Odds by Fan",
) -> str:
    """
    Render participant cup odds (percent) as a PNG, highest at the top.
    Creates the output directory if missing. Returns the absolute path saved.
    """
    path = Path(outpath)
    path.parent.mkdir(parents=True, exist_ok=True)

    ordered = sorted(participant_odds.items(), key=lambda kv: (-kv[1], kv[0]))
    names = [name for name, _ in ordered]
    values = [float(v) for _, v in ordered]
    colors = [league.color_for(name, DEFAULT_COLOR) for name in names]

    fig, ax = plt.subplots(figsize=(8, max(2.5, 0.45 * len(names) + 1)))
    y = list(range(len(names)))[::-1]
    ax.barh(y, values, height=0.6, color=colors, align="center")

    top = max(values, default=0.0)
    ax.set_xlim(0, max(top * 1.15, 1.0))
    for yi, v in zip(y, values):
        ax.text(v + top * 0.01, yi, f"{v:.1f}%", ha="left", va="center", fontsize=10, fontweight="bold")

    ax.set_yticks(y)
    ax.set_yticklabels(names, fontsize=10)
    ax.set_xlabel("Cup odds (%)")
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    if not names:
        ax.text(0.5, 0.5, "No cup odds available", ha="center", va="center", transform=ax.transAxes)

    plt.tight_layout()
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)

    return str(path.resolve())
