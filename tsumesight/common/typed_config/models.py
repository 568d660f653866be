# tsumesight/common/typed_config/models.py
#
# Frozen dataclass definitions and type-coercion helpers.

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

_log = logging.getLogger(__name__)

# recognised bool strings
_TRUE_STRINGS = frozenset({"true", "1", "yes"})
_FALSE_STRINGS = frozenset({"false", "0", "no"})


# =============================================================================
# Helper Functions
# =============================================================================


def safe_int(value: Any, default: int) -> int:
    """int conversion. None/bool/float/unconvertible values give default.

    Args:
        value: Value to convert
        default: Returned when conversion fails

    Returns:
        The converted int, or default

    Note:
        bool is a subclass of int but intentionally returns default, so that
        True/False never silently become 1/0. float also returns default to
        avoid implicit truncation.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def safe_bool(value: Any, default: bool = False) -> bool:
    """bool conversion. Unrecognised strings give default (typo protection).

    Args:
        value: Value to convert
        default: Returned for None or unrecognised input

    Returns:
        The converted bool
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        if not value:
            return default
        lower = value.lower()
        if lower in _TRUE_STRINGS:
            return True
        if lower in _FALSE_STRINGS:
            return False
        # "abc", "fasle" etc.
        return default
    return default


def safe_str(value: Any, default: str) -> str:
    """String conversion. None/empty/non-str give default.

    Note:
        None is handled explicitly so str(None) never leaks in as "None".
    """
    if value is None:
        return default
    if not isinstance(value, str):
        return default
    if not value:
        return default
    return value


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


# =============================================================================
# Enums
# =============================================================================


class QuizMode(Enum):
    """Which question kinds a session asks."""

    LIBERTY = "liberty"  # count the liberties of a hidden group
    MARK = "mark"  # mark every liberty of a hidden group
    COMPARISON = "comparison"  # only "which group has fewer liberties"

    @classmethod
    def parse(cls, value: Any, default: "QuizMode") -> "QuizMode":
        if isinstance(value, QuizMode):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                _log.warning("Unknown quiz mode %r, using %s", value, default.value)
        return default


# =============================================================================
# Dataclasses
# =============================================================================


@dataclass(frozen=True)
class QuizConfig:
    """Quiz settings (``quiz`` section).

    Thread-safety: Immutable (frozen=True)

    Attributes:
        mode: Question kinds asked in the session
        max_questions: Per-move cap on scheduled questions; 0 disables quizzing
        questions_on_every_move: True asks after every move, False only after
            the final move of the sequence
        ask_comparisons: Follow liberty questions with comparison questions
            (liberty and mark modes)
        liberty_ceiling: Largest reportable liberty count ("5 or more")
        comparison_max_diff: Largest liberty difference of a comparison pair (1-2)
        skip_saturated: Drop groups at the ceiling when other questions remain
        staleness_cap: Upper bound of the per-stone staleness counter
    """

    mode: QuizMode = QuizMode.LIBERTY
    max_questions: int = 3
    questions_on_every_move: bool = True
    ask_comparisons: bool = True
    liberty_ceiling: int = 5
    comparison_max_diff: int = 1
    skip_saturated: bool = True
    staleness_cap: int = 4

    def __post_init__(self) -> None:
        if self.max_questions < 0:
            raise ValueError(f"max_questions must be >= 0, got {self.max_questions}")
        if self.liberty_ceiling < 1:
            raise ValueError(f"liberty_ceiling must be >= 1, got {self.liberty_ceiling}")
        if not 1 <= self.comparison_max_diff <= 2:
            raise ValueError(f"comparison_max_diff must be 1 or 2, got {self.comparison_max_diff}")

    @property
    def quizzing_enabled(self) -> bool:
        return self.max_questions > 0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "QuizConfig":
        """Build from a dict. Missing keys use defaults, bad types are coerced safely.

        Args:
            d: Settings dict (``quiz`` section)

        Returns:
            QuizConfig instance
        """
        return cls(
            mode=QuizMode.parse(d.get("mode"), QuizMode.LIBERTY),
            max_questions=max(0, safe_int(d.get("max_questions"), 3)),
            questions_on_every_move=safe_bool(d.get("questions_on_every_move"), default=True),
            ask_comparisons=safe_bool(d.get("ask_comparisons"), default=True),
            liberty_ceiling=max(1, safe_int(d.get("liberty_ceiling"), 5)),
            comparison_max_diff=clamp(safe_int(d.get("comparison_max_diff"), 1), 1, 2),
            skip_saturated=safe_bool(d.get("skip_saturated"), default=True),
            staleness_cap=max(0, safe_int(d.get("staleness_cap"), 4)),
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe inverse of from_dict()."""
        return {
            "mode": self.mode.value,
            "max_questions": self.max_questions,
            "questions_on_every_move": self.questions_on_every_move,
            "ask_comparisons": self.ask_comparisons,
            "liberty_ceiling": self.liberty_ceiling,
            "comparison_max_diff": self.comparison_max_diff,
            "skip_saturated": self.skip_saturated,
            "staleness_cap": self.staleness_cap,
        }
