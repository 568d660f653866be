# tsumesight/core/quiz/__init__.py
"""Liberty quiz over a replayed game record.

The engine owns the true board, hides new stones, schedules questions about
groups whose liberties changed and scores the answers.
"""

from tsumesight.core.quiz.engine import QuizEngine
from tsumesight.core.quiz.models import (
    AdvanceSnapshot,
    AnswerResult,
    ComparisonChoice,
    ComparisonPair,
    GroupScore,
    InvisibleStone,
    MoveProgress,
    Question,
    QuestionKind,
    QuizState,
)
from tsumesight.core.quiz.scheduler import (
    ScheduledGroup,
    find_comparison_pairs,
    schedule_liberty_questions,
)
from tsumesight.core.quiz.scoring import diff_from_initial, schedule_key, score_groups

__all__ = [
    "QuizEngine",
    "QuizState",
    "QuestionKind",
    "ComparisonChoice",
    "ComparisonPair",
    "GroupScore",
    "InvisibleStone",
    "MoveProgress",
    "Question",
    "AdvanceSnapshot",
    "AnswerResult",
    # Scheduling helpers
    "ScheduledGroup",
    "schedule_liberty_questions",
    "find_comparison_pairs",
    "score_groups",
    "diff_from_initial",
    "schedule_key",
]
