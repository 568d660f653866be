"""
tsumesight exception hierarchy.

Provides a base exception class with user-facing messages and debug context,
plus specialized subclasses for the different failure domains of a quiz
session.
"""

from typing import Any, Dict, Optional


class TsumesightError(Exception):
    """Base exception for tsumesight errors.

    Attributes:
        user_message: Safe, user-facing error message.
        context: Dictionary of debug information.
    """

    def __init__(
        self,
        message: str,
        *,
        user_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.user_message = user_message or message
        self.context = context or {}


class SGFError(TsumesightError):
    """SGF load/parse errors."""

    pass


class RecordError(TsumesightError):
    """The game record cannot be quizzed (empty move sequence, bad size, etc.)."""

    pass


class IllegalMoveError(TsumesightError):
    """Raised by the board when a stone cannot be placed."""

    pass


class QuizProtocolError(TsumesightError, AssertionError):
    """An answer method was called without a matching active question.

    This is a caller/engine desynchronization bug, never a user outcome.
    """

    pass


class ProgressStoreError(TsumesightError):
    """Progress file load/save errors."""

    pass


class ConfigError(TsumesightError):
    """Settings file load errors."""

    pass
