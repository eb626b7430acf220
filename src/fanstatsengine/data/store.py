"""
Generic JSON-backed record store: load with a default on missing/corrupt file,
save pretty-printed. One store per file; assumes a single writer per run.
"""

import json
import logging
from pathlib import Path
from typing import Callable, Generic, TypeVar

from fanstatsengine.data.errors import StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PersistentRecordStore(Generic[T]):
    """
    Load/save one JSON-shaped value at `path`.

    default_factory builds the value returned when the file is missing or unreadable
    (a factory, so callers never share a mutable default).
    """

    def __init__(self, path: str | Path, default_factory: Callable[[], T]) -> None:
        self.path = Path(path)
        self.default_factory = default_factory

    def load(self) -> T:
        """Parsed file contents; default when missing, default + warning when corrupt."""
        if not self.path.exists():
            logger.debug("Store %s missing; using default", self.path)
            return self.default_factory()
        try:
            with open(self.path, encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning("Error parsing %s: %s; treating as empty", self.path.name, e)
            return self.default_factory()

    def save(self, value: T) -> None:
        """Write value as indented JSON, creating parent directories."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2)
                f.write("\n")
        except (OSError, TypeError) as e:
            logger.error("Error saving %s: %s", self.path.name, e)
            raise StoreError(f"Could not save {self.path}: {e}", path=str(self.path)) from e

    def ensure_exists(self) -> None:
        """Create the file with the default value if it does not exist yet."""
        if not self.path.exists():
            self.save(self.default_factory())

    def update(self, mutate: Callable[[T], None]) -> T:
        """Load, apply mutate in place, save; returns the saved value."""
        value = self.load()
        mutate(value)
        self.save(value)
        return value
