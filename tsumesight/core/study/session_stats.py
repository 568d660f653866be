# tsumesight/core/study/session_stats.py
"""End-of-session statistics.

This module provides:
- compute_time_stats(): capped mean / standard deviation of answer times
- first_try_streaks(): runs of first-try successes
- SessionSummary / summarize_session(): aggregated figures for one engine

All figures are based on first attempts (``engine.history``); a question
answered after a retry counts as a miss here even though the engine's
``correct`` counter includes it.
"""

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from tsumesight.core.quiz.engine import QuizEngine

_log = logging.getLogger(__name__)

TIME_CAP_MS = 5000  # slower answers count as this long


def compute_time_stats(times_ms: Sequence[float], cap_ms: float = TIME_CAP_MS) -> Tuple[float, float]:
    """Mean and population standard deviation of answer times.

    Each time is capped at ``cap_ms`` first so a single distracted answer
    does not dominate.

    Returns:
        (avg, sd); (0.0, 0.0) for no times
    """
    if not times_ms:
        return 0.0, 0.0
    capped = [min(t, cap_ms) for t in times_ms]
    avg = sum(capped) / len(capped)
    variance = sum((t - avg) ** 2 for t in capped) / len(capped)
    return avg, math.sqrt(variance)


def first_try_streaks(results: Sequence[bool]) -> Tuple[List[int], int]:
    """Split first-try results into streaks.

    Returns:
        (completed, ongoing): lengths of streaks ended by a miss, and the
        length of the streak still running at the end
    """
    completed: List[int] = []
    current = 0
    for ok in results:
        if ok:
            current += 1
        else:
            if current > 0:
                completed.append(current)
            current = 0
    return completed, current


@dataclass
class SessionSummary:
    """Session statistics.

    Note: accuracy uses first attempts; ``correct`` mirrors the engine counter.
    """

    record_id: str
    questions_answered: int
    first_try_correct: int
    correct: int
    wrong: int
    errors: int
    accuracy: float  # first_try_correct / questions_answered * 100, rounded
    longest_streak: int
    moves_played: int
    total_moves: int
    finished: bool
    progress: Tuple[Tuple[int, int], ...]  # (answered, total) per played move
    avg_time_ms: Optional[float] = None
    sd_time_ms: Optional[float] = None


def summarize_session(engine: "QuizEngine", answer_times_ms: Optional[Sequence[float]] = None) -> SessionSummary:
    """Aggregate an engine's counters into a SessionSummary.

    Args:
        engine: The session, finished or not
        answer_times_ms: Optional per-question answer times

    Returns:
        SessionSummary
    """
    history = engine.history
    total = len(history)
    first_try = sum(1 for ok in history if ok)
    completed, ongoing = first_try_streaks(history)
    avg_time = sd_time = None
    if answer_times_ms:
        avg_time, sd_time = compute_time_stats(answer_times_ms)

    summary = SessionSummary(
        record_id=engine.record.record_id,
        questions_answered=total,
        first_try_correct=first_try,
        correct=engine.correct,
        wrong=engine.wrong,
        errors=engine.errors,
        accuracy=round(first_try / total * 100) if total > 0 else 0,
        longest_streak=max(completed + [ongoing]),
        moves_played=engine.move_index,
        total_moves=engine.total_moves,
        finished=engine.finished,
        progress=tuple((mp.answered, mp.total) for mp in engine.move_progress),
        avg_time_ms=avg_time,
        sd_time_ms=sd_time,
    )
    _log.debug("Session summary for %s: %s", summary.record_id, summary)
    return summary
