"""
Pytest configuration and shared fixtures for tsumesight tests.

Records and answer helpers live in tests/helpers_quiz.py.
"""

import pytest

from tests.helpers_quiz import FIGHT, SINGLE_CENTER
from tsumesight.common.typed_config import QuizConfig
from tsumesight.core.quiz import QuizEngine
from tsumesight.core.record import GameRecord, load_record


@pytest.fixture
def fight_record() -> GameRecord:
    return load_record(FIGHT)


@pytest.fixture
def center_engine() -> QuizEngine:
    """Single black stone at the center of an empty 9x9 board."""
    return QuizEngine.from_sgf(SINGLE_CENTER)


@pytest.fixture
def default_config() -> QuizConfig:
    return QuizConfig()


@pytest.fixture
def progress_path(tmp_path) -> str:
    return str(tmp_path / "progress.json")
