# tsumesight/core/quiz/models.py
"""Value types shared by the scorer, the scheduler and the quiz engine.

This module provides:
- QuizState / QuestionKind / ComparisonChoice enums
- GroupScore: one chain of the true board, annotated for scheduling
- ComparisonPair / Question: what the learner is asked
- InvisibleStone, MoveProgress, AdvanceSnapshot, AnswerResult
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, List, Optional, Tuple

from tsumesight.core.board import Vertex
from tsumesight.core.sgf_parser import Move

# =============================================================================
# Enums
# =============================================================================


class QuizState(Enum):
    """Phase of the engine's per-move cycle."""

    IDLE = "idle"  # before the first move, or a move's questions are exhausted
    SHOWING_MOVE = "showing_move"  # move just played, not yet quizzing
    QUESTIONING = "questioning"  # liberty or marking question pending
    COMPARING = "comparing"  # comparison question pending
    FINISHED = "finished"


class QuestionKind(Enum):
    LIBERTY = "liberty"
    MARK = "mark"
    COMPARISON = "comparison"


class ComparisonChoice(Enum):
    """Answer to "which group has fewer liberties?"."""

    FIRST = "first"
    SECOND = "second"
    EQUAL = "equal"


PROGRESS_CORRECT = "correct"
PROGRESS_FAILED = "failed"


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class GroupScore:
    """One chain of the true board after the current move.

    Attributes:
        vertices: Member vertices, sorted
        sign: Owner of the chain (1 black, -1 white)
        liberties: Liberty count (not saturated)
        liberty_set: The liberty vertices themselves
        contains_current_move: The just-played stone is a member
        libs_changed: The liberty set differs from the pre-move snapshot
        max_staleness: Largest staleness among tracked members
    """

    vertices: Tuple[Vertex, ...]
    sign: int
    liberties: int
    liberty_set: FrozenSet[Vertex]
    contains_current_move: bool = False
    libs_changed: bool = False
    max_staleness: int = 0

    def __contains__(self, vertex: object) -> bool:
        return vertex in self.vertices


@dataclass(frozen=True)
class ComparisonPair:
    """Two adjacent opposite-owner groups; the black group is the first side."""

    v1: Vertex
    v2: Vertex
    libs1: int
    libs2: int

    @property
    def diff(self) -> int:
        return abs(self.libs1 - self.libs2)

    @property
    def expected(self) -> ComparisonChoice:
        """The side with fewer liberties, or EQUAL."""
        if self.libs1 < self.libs2:
            return ComparisonChoice.FIRST
        if self.libs1 > self.libs2:
            return ComparisonChoice.SECOND
        return ComparisonChoice.EQUAL


@dataclass(frozen=True)
class Question:
    """One queued question of the current move."""

    kind: QuestionKind
    vertex: Optional[Vertex] = None  # LIBERTY / MARK
    pair: Optional[ComparisonPair] = None  # COMPARISON


@dataclass(frozen=True)
class InvisibleStone:
    """A stone on the true board that the learner has not been shown."""

    sign: int
    vertex: Vertex
    move_number: int  # 1-based index into the playable moves


@dataclass
class MoveProgress:
    """Per-move question count and first-attempt outcomes."""

    total: int
    results: List[str] = field(default_factory=list)  # PROGRESS_CORRECT / PROGRESS_FAILED

    @property
    def answered(self) -> int:
        return len(self.results)


@dataclass(frozen=True)
class AdvanceSnapshot:
    """Returned by QuizEngine.advance() when a move was played."""

    move_index: int  # 1-based number of the move just played
    total_moves: int
    current_move: Move


@dataclass(frozen=True)
class AnswerResult:
    """Outcome of one answer call.

    Attributes:
        correct: The submitted value was right
        done: No question of the current move remains
        expected: The right answer (int, frozenset of vertices or ComparisonChoice)
        penalties: Marking questions only: false positives plus false negatives
        blocked: The value had already been rejected for this question; nothing was counted
    """

    correct: bool
    done: bool
    expected: Any
    penalties: int = 0
    blocked: bool = False
