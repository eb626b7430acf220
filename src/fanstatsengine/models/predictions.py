"""
Game-winner predictions per participant and their scoring once games finish.

Two stores, both through PersistentRecordStore:
  predictions:  {game_id: {participant: {"predicted_winner", "predicted_at"}}}
  results:      {game_id: {participant: {"was_correct", "predicted_winner",
                                         "actual_winner", "predicted_at", "processed_at"}}}

Processing a game snapshots its predictions into the results store, so later edits to
a prediction do not change an already scored game unless it is processed again.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fanstatsengine.config import Config, DEFAULT_CONFIG
from fanstatsengine.core.ranking import RankedEntry, top_positions
from fanstatsengine.data.store import PersistentRecordStore

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _require(value: Any, what: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValueError(f"{what} cannot be empty")
    return text


def _percentage(correct: int, total: int) -> float:
    return round(correct / total * 100, 1) if total else 0.0


@dataclass(frozen=True)
class PredictionAccuracy:
    participant: str
    correct: int
    total: int

    @property
    def percentage(self) -> float:
        """Share correct, 0-100 to one decimal; 0.0 with nothing scored."""
        return _percentage(self.correct, self.total)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "participant": self.participant,
            "correct": self.correct,
            "total": self.total,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class PredictionStreak:
    """current: run length of the latest outcome; best: longest run of correct picks."""

    current: int = 0
    best: int = 0
    kind: str = "none"  # "correct", "incorrect" or "none"


class PredictionTracker:
    """Stores who picked which winner for each game."""

    def __init__(self, path: Optional[str] = None, config: Config = DEFAULT_CONFIG) -> None:
        self.config = config
        self.store: PersistentRecordStore[Dict[str, Dict[str, Any]]] = PersistentRecordStore(
            path or config.predictions_path, dict
        )
        self.store.ensure_exists()

    def load_data(self) -> Dict[str, Dict[str, Any]]:
        data = self.store.load()
        if not isinstance(data, dict):
            logger.warning("Predictions in %s are not an object; treating as empty", self.store.path)
            return {}
        return data

    def store_prediction(
        self,
        participant: str,
        game_id: str,
        predicted_winner: str,
        predicted_at: Optional[str] = None,
    ) -> Dict[str, str]:
        """Upsert one participant's pick for a game. ValueError on blank inputs."""
        participant = _require(participant, "Participant")
        game_id = _require(game_id, "Game id")
        predicted_winner = _require(predicted_winner, "Predicted winner")
        entry = {"predicted_winner": predicted_winner, "predicted_at": predicted_at or _now()}

        data = self.load_data()
        data.setdefault(game_id, {})[participant] = entry
        self.store.save(data)
        logger.info("Prediction stored: %s -> %s for game %s", participant, predicted_winner, game_id)
        return entry

    def get_predictions(self, game_id: str) -> Dict[str, Dict[str, str]]:
        return dict(self.load_data().get(str(game_id)) or {})

    def get_fan_predictions(self, participant: str) -> Dict[str, Dict[str, str]]:
        """game_id -> that participant's pick."""
        return {
            game_id: picks[participant]
            for game_id, picks in self.load_data().items()
            if participant in (picks or {})
        }

    def prediction_stats(self) -> Dict[str, Dict[str, Any]]:
        """participant -> {"total": n, "games": [game ids]}."""
        stats: Dict[str, Dict[str, Any]] = {}
        for game_id, picks in self.load_data().items():
            for participant in picks or {}:
                row = stats.setdefault(participant, {"total": 0, "games": []})
                row["total"] += 1
                row["games"].append(game_id)
        return stats

    def games_with_predictions(self) -> List[str]:
        return list(self.load_data())

    def has_predicted(self, participant: str, game_id: str) -> bool:
        return participant in (self.load_data().get(str(game_id)) or {})

    def delete_prediction(self, participant: str, game_id: str) -> bool:
        """Remove one pick; a game left without picks is removed too. True if anything changed."""
        data = self.load_data()
        picks = data.get(str(game_id))
        if not picks or participant not in picks:
            return False
        del picks[participant]
        if not picks:
            del data[str(game_id)]
        self.store.save(data)
        logger.info("Prediction deleted: %s for game %s", participant, game_id)
        return True

    def prediction_counts(self) -> Dict[str, int]:
        return {game_id: len(picks or {}) for game_id, picks in self.load_data().items()}


class PredictionProcessor:
    """Scores finished games against the stored picks and ranks participants by accuracy."""

    def __init__(
        self,
        tracker: Optional[PredictionTracker] = None,
        path: Optional[str] = None,
        config: Config = DEFAULT_CONFIG,
    ) -> None:
        self.config = config
        self.tracker = tracker or PredictionTracker(config=config)
        self.store: PersistentRecordStore[Dict[str, Dict[str, Any]]] = PersistentRecordStore(
            path or config.prediction_results_path, dict
        )
        self.store.ensure_exists()

    def load_results(self) -> Dict[str, Dict[str, Any]]:
        data = self.store.load()
        if not isinstance(data, dict):
            logger.warning("Prediction results in %s are not an object; treating as empty", self.store.path)
            return {}
        return data

    def process_completed_game(
        self,
        game_id: str,
        winner: str,
        processed_at: Optional[str] = None,
    ) -> Dict[str, Dict[str, Any]]:
        """Score every pick for game_id against winner; replaces earlier results for that game."""
        game_id = _require(game_id, "Game id")
        winner = _require(winner, "Winner")
        stamp = processed_at or _now()
        results = {
            participant: {
                "was_correct": pick.get("predicted_winner") == winner,
                "predicted_winner": pick.get("predicted_winner"),
                "actual_winner": winner,
                "predicted_at": pick.get("predicted_at"),
                "processed_at": stamp,
            }
            for participant, pick in sorted(self.tracker.get_predictions(game_id).items())
        }
        data = self.load_results()
        data[game_id] = results
        self.store.save(data)
        logger.info("Processed game %s: %s won, %d predictions evaluated", game_id, winner, len(results))
        return results

    def participants(self) -> List[str]:
        """Everyone with a pick or a scored result, sorted."""
        names = set()
        for source in (self.tracker.load_data(), self.load_results()):
            for entries in source.values():
                names.update(entries or {})
        return sorted(names)

    def _fan_results(self, participant: str) -> List[Dict[str, Any]]:
        """Scored results for participant, oldest first (game id breaks timestamp ties)."""
        rows = [
            {"game_id": game_id, **results[participant]}
            for game_id, results in self.load_results().items()
            if isinstance((results or {}).get(participant), dict)
        ]
        return sorted(rows, key=lambda r: (str(r.get("processed_at") or ""), r["game_id"]))

    def calculate_accuracy(self, participant: str) -> PredictionAccuracy:
        rows = self._fan_results(participant)
        correct = sum(1 for r in rows if r.get("was_correct"))
        return PredictionAccuracy(participant, correct, len(rows))

    def leaderboard(self) -> List[PredictionAccuracy]:
        """Everyone, best percentage first, then most games scored, then name."""
        board = [self.calculate_accuracy(p) for p in self.participants()]
        return sorted(board, key=lambda a: (-a.percentage, -a.total, a.participant))

    def top_predictors(self, positions: Optional[int] = None) -> List[RankedEntry]:
        """Medal positions by accuracy among participants with at least one scored pick."""
        entries = [
            RankedEntry(
                a.participant, "", a.percentage,
                f"{a.percentage:.1f}% ({a.correct}/{a.total})",
                detail=a.to_dict(),
            )
            for a in self.leaderboard()
            if a.total
        ]
        return top_positions(entries, positions=positions or self.config.medal_positions)

    def get_fan_results(self, participant: str) -> Dict[str, Dict[str, Any]]:
        return {
            game_id: results[participant]
            for game_id, results in self.load_results().items()
            if participant in (results or {})
        }

    def get_game_results(self, game_id: str) -> Dict[str, Dict[str, Any]]:
        return dict(self.load_results().get(str(game_id)) or {})

    def game_processed(self, game_id: str) -> bool:
        return str(game_id) in self.load_results()

    def processed_games(self) -> List[str]:
        return list(self.load_results())

    def streak(self, participant: str) -> PredictionStreak:
        outcomes = [bool(r.get("was_correct")) for r in self._fan_results(participant)]
        if not outcomes:
            return PredictionStreak()
        last = outcomes[-1]
        current = 0
        for outcome in reversed(outcomes):
            if outcome != last:
                break
            current += 1
        best = run = 0
        for outcome in outcomes:
            run = run + 1 if outcome else 0
            best = max(best, run)
        return PredictionStreak(current=current, best=best, kind="correct" if last else "incorrect")

    def streaks(self) -> Dict[str, PredictionStreak]:
        return {p: self.streak(p) for p in self.participants()}

    def recent_performance(self, limit: Optional[int] = None) -> Dict[str, Dict[str, Any]]:
        """Accuracy over each participant's latest `limit` scored games, newest first."""
        limit = self.config.recent_predictions_limit if limit is None else limit
        out: Dict[str, Dict[str, Any]] = {}
        for participant in self.participants():
            recent = list(reversed(self._fan_results(participant)))[:limit]
            correct = sum(1 for r in recent if r.get("was_correct"))
            out[participant] = {
                "correct": correct,
                "total": len(recent),
                "percentage": _percentage(correct, len(recent)),
                "games": [r["game_id"] for r in recent],
            }
        return out

    def delete_game_results(self, game_id: str) -> bool:
        data = self.load_results()
        if str(game_id) not in data:
            return False
        del data[str(game_id)]
        self.store.save(data)
        logger.info("Results deleted for game %s", game_id)
        return True
