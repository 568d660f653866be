# tsumesight/core/study/__init__.py
"""Session statistics for completed or in-progress quiz sessions."""

from tsumesight.core.study.session_stats import (
    TIME_CAP_MS,
    SessionSummary,
    compute_time_stats,
    first_try_streaks,
    summarize_session,
)

__all__ = [
    "TIME_CAP_MS",
    "SessionSummary",
    "compute_time_stats",
    "first_try_streaks",
    "summarize_session",
]
