# tsumesight/core/progress_store.py
"""JSON file store for per-record quiz progress.

Maps a record id (``GameRecord.record_id``) to a ProgressEntry holding the
replay history of the last session on that record. Restoring a session is
``QuizEngine.from_replay(record, entry.history, config, finished=entry.solved)``.

Usage:
    store = ProgressStore("progress.json")
    store.save(engine.record.record_id, ProgressEntry.from_engine(engine))
    entry = store.load(record.record_id)
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from typing import TYPE_CHECKING, Any

from tsumesight.common.typed_config import QuizConfig, safe_bool, safe_int, safe_str
from tsumesight.core.errors import ProgressStoreError

if TYPE_CHECKING:
    from tsumesight.core.quiz.engine import QuizEngine

_log = logging.getLogger(__name__)


@dataclass
class ProgressEntry:
    """Saved state of one record's last session.

    ``settings`` is the ``QuizConfig.to_dict()`` the history was played under.
    """

    history: list[bool] = field(default_factory=list)
    settings: dict[str, Any] = field(default_factory=dict)
    solved: bool = False
    accuracy: int = 0  # first-try percentage
    updated_at: str = ""  # ISO timestamp

    @classmethod
    def from_engine(cls, engine: QuizEngine) -> ProgressEntry:
        history = engine.history
        first_try = sum(1 for ok in history if ok)
        return cls(
            history=history,
            settings=engine.config.to_dict(),
            solved=engine.finished,
            accuracy=round(first_try / len(history) * 100) if history else 0,
            updated_at=datetime.now().isoformat(timespec="seconds"),
        )

    @property
    def config(self) -> QuizConfig:
        """The saved settings as a QuizConfig (defaults fill missing keys)."""
        return QuizConfig.from_dict(self.settings)

    def matches(self, config: QuizConfig) -> bool:
        """True if the history was recorded under exactly these settings."""
        return self.config == config

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ProgressEntry:
        raw_history = d.get("history")
        history = [safe_bool(v, default=False) for v in raw_history] if isinstance(raw_history, list) else []
        raw_settings = d.get("settings")
        return cls(
            history=history,
            settings=dict(raw_settings) if isinstance(raw_settings, dict) else {},
            solved=safe_bool(d.get("solved"), default=False),
            accuracy=safe_int(d.get("accuracy"), 0),
            updated_at=safe_str(d.get("updated_at"), ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "history": list(self.history),
            "settings": dict(self.settings),
            "solved": self.solved,
            "accuracy": self.accuracy,
            "updated_at": self.updated_at,
        }


class ProgressStore:
    """Thread-safe JSON file of ProgressEntry objects keyed by record id.

    Args:
        filename: Path to the JSON file (created on first save)
        indent: JSON indentation (default 2)
    """

    def __init__(self, filename: str, indent: int = 2):
        self._filename = filename
        self._indent = indent
        self._lock = Lock()
        self._data: dict[str, dict[str, Any]] = {}
        self._load()

    def __repr__(self) -> str:
        return f"ProgressStore({self._filename!r})"

    def _load(self) -> None:
        if not os.path.exists(self._filename):
            self._data = {}
            return
        try:
            with open(self._filename, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"top level is {type(data).__name__}, expected object")
        except (OSError, ValueError) as e:
            _log.warning("Corrupt progress file %s: %s", self._filename, e)
            # Preserve corrupt file for manual recovery with timestamp
            timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
            corrupt_path = f"{self._filename}.corrupt.{timestamp}"
            try:
                os.rename(self._filename, corrupt_path)
            except OSError as rename_error:
                _log.warning("Could not move corrupt progress file aside: %s", rename_error)
            self._data = {}
            return

        self._data = {}
        for key, value in data.items():
            if isinstance(value, dict):
                self._data[key] = value
            else:
                _log.warning("Progress entry %s is not an object (got %s), dropping", key, type(value).__name__)

    def _save(self, data: dict[str, dict[str, Any]]) -> None:
        """Write data atomically: temp file in the same directory + os.replace.

        Raises:
            ProgressStoreError: The file could not be written
        """
        save_dir = os.path.dirname(self._filename) or "."
        fd = None
        temp_path = None
        try:
            os.makedirs(save_dir, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(suffix=".tmp", dir=save_dir)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                fd = None  # os.fdopen took ownership
                json.dump(data, f, indent=self._indent, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self._filename)
            temp_path = None
        except OSError as e:
            raise ProgressStoreError(
                f"Cannot write progress file {self._filename}: {e}",
                user_message="Progress could not be saved",
                context={"filename": self._filename},
            ) from e
        finally:
            if fd is not None:
                os.close(fd)
            if temp_path is not None:
                with contextlib.suppress(OSError):
                    os.unlink(temp_path)

    def load(self, record_id: str) -> ProgressEntry | None:
        """The saved entry for a record, or None."""
        with self._lock:
            raw = self._data.get(record_id)
            return ProgressEntry.from_dict(raw) if raw is not None else None

    def save(self, record_id: str, entry: ProgressEntry) -> None:
        """Store (replace) the entry for a record and write the file."""
        with self._lock:
            data = dict(self._data)
            data[record_id] = entry.to_dict()
            self._save(data)
            self._data = data
        _log.debug("Saved progress for %s (%d answers)", record_id, len(entry.history))

    def delete(self, record_id: str) -> bool:
        """Remove a record's entry. Returns False if there was none."""
        with self._lock:
            if record_id not in self._data:
                return False
            data = dict(self._data)
            del data[record_id]
            self._save(data)
            self._data = data
            return True

    def __contains__(self, record_id: object) -> bool:
        with self._lock:
            return isinstance(record_id, str) and record_id in self._data

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._data))

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
