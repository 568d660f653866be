#!/usr/bin/env python
"""
Terminal liberty quiz over an SGF record.

Replays the main line of the record, hides new stones and asks about the
groups whose liberties changed.

Usage:
    python -m tsumesight problem.sgf
    python -m tsumesight game.sgf --mode mark --max-questions 2
    python -m tsumesight game.sgf --final-only --progress ~/.tsumesight.json
    python -m tsumesight game.sgf --config settings.json

Answers:
    1-5          liberty count (5 means "5 or more")
    D4 E5 ...    liberties to mark (marking mode)
    1 / 2 / =    comparison: first group fewer, second group fewer, equal
    r            reveal the hidden stones for a moment
    q            quit (progress is saved)
"""

import argparse
import json
import logging
import sys
import time
from typing import Callable, Iterable, List, Optional, Sequence

from tsumesight.common.typed_config import QuizConfig, QuizMode, TypedConfigReader
from tsumesight.core.board import Vertex
from tsumesight.core.errors import ConfigError, ProgressStoreError, TsumesightError
from tsumesight.core.progress_store import ProgressEntry, ProgressStore
from tsumesight.core.quiz import ComparisonChoice, QuestionKind, QuizEngine
from tsumesight.core.record import load_record_file
from tsumesight.core.sgf_parser import Move
from tsumesight.core.study import summarize_session

_log = logging.getLogger(__name__)

STONE_CHARS = {1: "X", -1: "O", 0: "."}
CURRENT_CHARS = {1: "x", -1: "o"}
COMPARISON_ANSWERS = {"1": ComparisonChoice.FIRST, "2": ComparisonChoice.SECOND, "=": ComparisonChoice.EQUAL}

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_board(
    sign_map: Sequence[Sequence[int]],
    current: Optional[Move] = None,
    marks: Optional[dict] = None,
) -> str:
    """ASCII board, top row first, with GTP column letters and row numbers.

    Args:
        sign_map: ``[y][x]`` signs, y = 0 is the bottom row
        current: Move drawn as a transient lowercase stone
        marks: Vertex -> single character overlay (question targets)
    """
    size = len(sign_map)
    marks = marks or {}
    header = "    " + " ".join(Move.GTP_COORD[x] for x in range(size))
    lines = [header]
    for y in range(size - 1, -1, -1):
        cells = []
        for x in range(size):
            if (x, y) in marks:
                cells.append(marks[(x, y)])
            elif current is not None and current.coords == (x, y):
                cells.append(CURRENT_CHARS[current.sign])
            else:
                cells.append(STONE_CHARS[sign_map[y][x]])
        lines.append(f"{y + 1:>3} " + " ".join(cells))
    return "\n".join(lines)


def parse_vertices(text: str, board_size: int) -> List[Vertex]:
    """Parse whitespace/comma separated GTP coordinates.

    Raises:
        ValueError: A coordinate is malformed or off the board
    """
    vertices: List[Vertex] = []
    for token in text.replace(",", " ").split():
        move = Move.from_gtp(token)
        if move.coords is None or not all(0 <= c < board_size for c in move.coords):
            raise ValueError(f"{token} is not on the board")
        vertices.append(move.coords)
    return vertices


def _prompt_for(engine: QuizEngine) -> str:
    question = engine.current_question
    assert question is not None
    if question.kind is QuestionKind.COMPARISON:
        return "Which group has fewer liberties? [1/2/=] "
    if question.kind is QuestionKind.MARK:
        return "Mark the liberties of '?' (e.g. D4 E5): "
    return f"Liberties of '?' [1-{engine.config.liberty_ceiling}]: "


def _question_marks(engine: QuizEngine) -> dict:
    pair = engine.comparison_pair
    if pair is not None:
        return {pair.v1: "1", pair.v2: "2"}
    if engine.question_vertex is not None:
        return {engine.question_vertex: "?"}
    return {}


# ---------------------------------------------------------------------------
# Session loop
# ---------------------------------------------------------------------------


def _submit(engine: QuizEngine, raw: str) -> str:
    """Answer the active question; returns the feedback line."""
    kind = engine.question_kind
    if kind is QuestionKind.COMPARISON:
        if raw not in COMPARISON_ANSWERS:
            raise ValueError("answer 1, 2 or =")
        result = engine.answer_comparison(COMPARISON_ANSWERS[raw])
    elif kind is QuestionKind.MARK:
        result = engine.answer_mark(parse_vertices(raw, engine.board_size))
    else:
        result = engine.answer(int(raw))

    if result.blocked:
        return "Already tried that one."
    if result.correct:
        return "Correct."
    if kind is QuestionKind.MARK:
        expected = " ".join(sorted(Move(v).gtp() for v in result.expected))
        return f"{result.penalties} mistakes. Liberties were: {expected}"
    return "Wrong, try again."


def run_session(
    engine: QuizEngine,
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
    answer_times_ms: Optional[List[float]] = None,
) -> bool:
    """Drive an engine until it finishes or the learner quits.

    Args:
        engine: Fresh or replayed engine
        input_fn: Prompt reader (``input`` in a terminal)
        output_fn: Line writer (``print`` in a terminal)
        answer_times_ms: Collects the time taken by each answer when given

    Returns:
        True if the session finished, False if the learner quit
    """
    while not engine.finished:
        if engine.current_question is None and not engine.showing_move:
            if engine.advance() is None:
                break
        if engine.showing_move:
            move = engine.current_move
            output_fn(f"Move {engine.move_index}/{engine.total_moves}: {move.player} {move.gtp()}")
            output_fn(render_board(engine.get_display_sign_map(), current=move))
            engine.activate_questions()
            continue

        output_fn(render_board(engine.get_display_sign_map(), marks=_question_marks(engine)))
        started = time.monotonic()
        try:
            raw = input_fn(_prompt_for(engine)).strip()
        except EOFError:
            return False
        if raw.lower() == "q":
            return False
        if raw.lower() == "r":
            with engine.revealed() as sign_map:
                output_fn(render_board(sign_map, marks=_question_marks(engine)))
            continue
        try:
            feedback = _submit(engine, raw)
        except ValueError as e:
            output_fn(f"Unrecognised answer: {e}")
            continue
        if answer_times_ms is not None:
            answer_times_ms.append((time.monotonic() - started) * 1000)
        output_fn(feedback)
    return engine.finished


def _format_summary(engine: QuizEngine, answer_times_ms: Iterable[float]) -> List[str]:
    summary = summarize_session(engine, list(answer_times_ms))
    lines = [
        "Quiz complete" if summary.finished else "Quiz paused",
        f"  Moves: {summary.moves_played}/{summary.total_moves}",
        f"  Questions: {summary.questions_answered}",
        f"  Correct: {summary.correct}  Wrong: {summary.wrong}  Errors: {summary.errors}",
        f"  First-try accuracy: {summary.accuracy}%  Longest streak: {summary.longest_streak}",
    ]
    if summary.avg_time_ms is not None:
        lines.append(f"  Answer time: {summary.avg_time_ms / 1000:.1f}s ± {summary.sd_time_ms / 1000:.1f}s")
    return lines


def load_settings(filename: str) -> QuizConfig:
    """Quiz settings from the ``quiz`` section of a JSON settings file.

    Raises:
        ConfigError: The file cannot be read or is not a JSON object
    """
    try:
        with open(filename, encoding="utf-8") as f:
            settings = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(
            f"Cannot read settings file {filename}: {e}",
            user_message="Settings could not be loaded",
            context={"filename": filename},
        ) from e
    if not isinstance(settings, dict):
        raise ConfigError(
            f"Settings file {filename} holds {type(settings).__name__}, expected object",
            user_message="Settings could not be loaded",
            context={"filename": filename},
        )
    return TypedConfigReader(settings).get_quiz()


def build_config(args: argparse.Namespace) -> QuizConfig:
    """Settings file values (or defaults), overridden by the given command-line options."""
    base = load_settings(args.config) if args.config else QuizConfig()
    values = base.to_dict()
    if args.mode is not None:
        values["mode"] = args.mode
    if args.max_questions is not None:
        values["max_questions"] = args.max_questions
    if args.final_only:
        values["questions_on_every_move"] = False
    return QuizConfig.from_dict(values)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Liberty-counting quiz over an SGF record",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Quiz after every move
    python -m tsumesight problem.sgf

    # Mark liberties instead of counting them, at most 2 questions per move
    python -m tsumesight game.sgf --mode mark --max-questions 2

    # Only quiz the final position, resuming saved progress
    python -m tsumesight game.sgf --final-only --progress progress.json

    # Read defaults from the "quiz" section of a JSON settings file
    python -m tsumesight game.sgf --config settings.json
""",
    )
    parser.add_argument("sgf", help="SGF file to replay")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in QuizMode],
        default=None,
        help="Question kind (default: liberty)",
    )
    parser.add_argument(
        "--max-questions",
        type=int,
        default=None,
        help="Questions per move, 0 to only replay (default: 3)",
    )
    parser.add_argument(
        "--final-only",
        action="store_true",
        help="Only ask questions after the final move",
    )
    parser.add_argument(
        "--config",
        default=None,
        help='JSON settings file with a "quiz" section',
    )
    parser.add_argument(
        "--progress",
        default=None,
        help="JSON file to resume from and save progress to",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
        record = load_record_file(args.sgf)
        store = ProgressStore(args.progress) if args.progress else None
        entry = store.load(record.record_id) if store else None
        if entry is not None and not entry.solved and entry.matches(config):
            print(f"Resuming after {len(entry.history)} answers")
            engine = QuizEngine.from_replay(record, entry.history, config)
        else:
            engine = QuizEngine(record, config)
    except TsumesightError as e:
        _log.debug("Cannot start quiz", exc_info=True)
        print(f"Error: {e.user_message}: {e}")
        return 1

    times: List[float] = []
    try:
        run_session(engine, answer_times_ms=times)
    except KeyboardInterrupt:
        print()

    for line in _format_summary(engine, times):
        print(line)

    if store is not None:
        try:
            store.save(record.record_id, ProgressEntry.from_engine(engine))
        except ProgressStoreError as e:
            print(f"Error: {e.user_message}: {e}")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
