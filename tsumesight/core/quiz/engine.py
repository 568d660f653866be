# tsumesight/core/quiz/engine.py
"""Quiz engine: replays a record and quizzes the learner about liberties.

State machine (one cycle per move):

    IDLE --advance()--> SHOWING_MOVE --activate_questions()--> QUESTIONING
        --> COMPARING --> IDLE --advance()--> ... --> FINISHED

``retrying`` is a sub-state of QUESTIONING/COMPARING: set by the first wrong
count or comparison answer, cleared by the right one.

Newly played stones are tracked as invisible until ``materialize()``; the
learner's view (the base sign map) only changes there. Every scheduling draw
comes from a RandomSequence seeded with the record, so ``from_replay()`` can
rebuild a session from its first-try booleans alone.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Optional, Set

from tsumesight.common.typed_config import QuizConfig, QuizMode
from tsumesight.core.board import Board, Vertex
from tsumesight.core.errors import IllegalMoveError, QuizProtocolError, RecordError
from tsumesight.core.quiz.models import (
    PROGRESS_CORRECT,
    PROGRESS_FAILED,
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
from tsumesight.core.quiz.scheduler import find_comparison_pairs, schedule_liberty_questions
from tsumesight.core.quiz.scoring import diff_from_initial, liberty_snapshot, score_groups
from tsumesight.core.random_sequence import RandomSequence
from tsumesight.core.record import GameRecord, load_record
from tsumesight.core.sgf_parser import Move

_log = logging.getLogger(__name__)

_ASKING_STATES = (QuizState.QUESTIONING, QuizState.COMPARING)


class QuizEngine:
    """Stateful quiz session over one game record.

    Args:
        record: Parsed game record
        config: Quiz settings; defaults to QuizConfig()
        precompute: Run a throwaway engine to fill questions_per_move

    Raises:
        RecordError: The record has no playable moves
    """

    def __init__(self, record: GameRecord, config: Optional[QuizConfig] = None, *, precompute: bool = True):
        self.record = record
        self.config = config or QuizConfig()
        self._moves: List[Move] = record.playable_moves
        if not self._moves:
            raise RecordError(
                "Record has no playable moves",
                user_message="This record has no moves to replay",
                context={"record_id": record.record_id},
            )
        self.board_size = record.board_size
        self.total_moves = len(self._moves)

        self.initial_board: Board = record.initial_board()
        self.true_board: Board = self.initial_board
        self._base_sign_map = self.initial_board.sign_map()
        self._invisible: Dict[Vertex, InvisibleStone] = {}
        self._staleness: Dict[Vertex, int] = {v: 0 for v in self.initial_board.occupied()}
        self._prev_liberties: Dict[Vertex, FrozenSet[Vertex]] = {}
        self._group_scores: List[GroupScore] = []
        self._rng = RandomSequence(record.seed)

        self.state = QuizState.IDLE
        self.retrying = False
        self.move_index = 0
        self.current_move: Optional[Move] = None
        self._questions: List[Question] = []
        self._question_index = 0
        self._blocked: Set[Any] = set()

        self.correct = 0
        self.wrong = 0
        self.errors = 0
        self.show_window = 1
        self._results: List[bool] = []
        self._move_progress: List[MoveProgress] = []

        self.questions_per_move: List[int] = self._precompute() if precompute else []

    def __repr__(self) -> str:
        return (
            f"QuizEngine(record={self.record.record_id}, move={self.move_index}/{self.total_moves}, "
            f"state={self.state.value}, correct={self.correct}, wrong={self.wrong})"
        )

    @classmethod
    def from_sgf(cls, text: str, config: Optional[QuizConfig] = None) -> "QuizEngine":
        """Parse SGF text and build an engine (SGFError / RecordError on bad input)."""
        return cls(load_record(text), config)

    def _precompute(self) -> List[int]:
        sim = QuizEngine(self.record, self.config, precompute=False)
        while sim.advance() is not None:
            pass
        return [mp.total for mp in sim._move_progress]

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def finished(self) -> bool:
        return self.state is QuizState.FINISHED

    @property
    def showing_move(self) -> bool:
        return self.state is QuizState.SHOWING_MOVE

    @property
    def current_question(self) -> Optional[Question]:
        if self.state not in _ASKING_STATES or self._question_index >= len(self._questions):
            return None
        return self._questions[self._question_index]

    @property
    def question_kind(self) -> Optional[QuestionKind]:
        question = self.current_question
        return question.kind if question else None

    @property
    def question_vertex(self) -> Optional[Vertex]:
        question = self.current_question
        return question.vertex if question and question.kind is not QuestionKind.COMPARISON else None

    @property
    def comparison_pair(self) -> Optional[ComparisonPair]:
        question = self.current_question
        return question.pair if question and question.kind is QuestionKind.COMPARISON else None

    @property
    def results(self) -> List[bool]:
        return list(self._results)

    @property
    def history(self) -> List[bool]:
        """First-try outcomes, one per resolved question; the input of from_replay()."""
        return list(self._results)

    @property
    def move_progress(self) -> List[MoveProgress]:
        return [MoveProgress(total=mp.total, results=list(mp.results)) for mp in self._move_progress]

    @property
    def invisible_stones(self) -> Dict[Vertex, InvisibleStone]:
        return dict(self._invisible)

    @property
    def staleness(self) -> Dict[Vertex, int]:
        return dict(self._staleness)

    @property
    def blocked_answers(self) -> FrozenSet[Any]:
        return frozenset(self._blocked)

    def get_display_sign_map(self) -> List[List[int]]:
        """What the learner sees, ``[y][x]``; never includes the current move."""
        return [list(row) for row in self._base_sign_map]

    def get_group_scores(self) -> List[GroupScore]:
        """Group Scorer output captured when the current move was played."""
        return list(self._group_scores)

    def get_window_stones(self) -> List[InvisibleStone]:
        """The ``show_window - 1`` most recent hidden stones before the current move, oldest first."""
        if self.show_window <= 1:
            return []
        current = self.current_move.coords if self.current_move else None
        stones = sorted(
            (s for v, s in self._invisible.items() if v != current),
            key=lambda s: s.move_number,
        )
        return stones[-(self.show_window - 1) :]

    # ------------------------------------------------------------------
    # Move cycle
    # ------------------------------------------------------------------

    def advance(self) -> Optional[AdvanceSnapshot]:
        """Play the next move and schedule its questions.

        Returns:
            Snapshot of the move played, or None when the sequence is exhausted
            or the next move is illegal (the engine is FINISHED either way)
        """
        if self.state is QuizState.FINISHED:
            return None
        if self.move_index >= self.total_moves:
            self._finish()
            return None

        move = self._moves[self.move_index]
        cap = self.config.staleness_cap
        for vertex, age in self._staleness.items():
            self._staleness[vertex] = min(age + 1, cap)
        self._prev_liberties = liberty_snapshot(self.true_board)

        try:
            self.true_board = self.true_board.play(move.sign, move.coords)
        except IllegalMoveError as e:
            _log.warning(
                "Record %s: move %d (%s%s) is illegal, ending the sequence early: %s",
                self.record.record_id,
                self.move_index + 1,
                move.player,
                move.gtp(),
                e,
            )
            self._finish()
            return None

        self.move_index += 1
        self.current_move = move
        self._invisible[move.coords] = InvisibleStone(sign=move.sign, vertex=move.coords, move_number=self.move_index)
        self._staleness[move.coords] = 0
        self._prune_captured()

        self._questions = self._schedule(move)
        self._question_index = 0
        self._blocked = set()
        self.retrying = False
        self._move_progress.append(MoveProgress(total=len(self._questions)))
        self.state = QuizState.SHOWING_MOVE
        _log.debug("Move %d/%d %s: %d questions", self.move_index, self.total_moves, move, len(self._questions))
        return AdvanceSnapshot(move_index=self.move_index, total_moves=self.total_moves, current_move=move)

    def activate_questions(self) -> None:
        """SHOWING_MOVE -> first pending question, or IDLE when there is none."""
        if self.state is not QuizState.SHOWING_MOVE:
            return
        self._question_index = 0
        self._enter_current_question()

    def _finish(self) -> None:
        self.state = QuizState.FINISHED
        self.retrying = False
        self._questions = []
        self._question_index = 0
        self._blocked = set()

    def _prune_captured(self) -> None:
        for vertex in [v for v in self._staleness if self.true_board.get(v) == 0]:
            del self._staleness[vertex]
        for vertex in [v for v in self._invisible if self.true_board.get(v) == 0]:
            del self._invisible[vertex]

    def _schedule(self, move: Move) -> List[Question]:
        self._group_scores = score_groups(self.true_board, move.coords, self._prev_liberties, self._staleness)
        config = self.config
        if not config.quizzing_enabled:
            return []

        if config.questions_on_every_move:
            candidate = None
        elif self.move_index == self.total_moves:
            initial = self.initial_board
            candidate = lambda group: diff_from_initial(group, initial)  # noqa: E731
        else:
            return []

        scheduled = schedule_liberty_questions(self._group_scores, self._rng, config, candidate)
        questions: List[Question] = []
        if config.mode is not QuizMode.COMPARISON:
            kind = QuestionKind.MARK if config.mode is QuizMode.MARK else QuestionKind.LIBERTY
            questions = [Question(kind=kind, vertex=s.vertex) for s in scheduled]
        if config.mode is QuizMode.COMPARISON or config.ask_comparisons:
            pairs = find_comparison_pairs(self._group_scores, scheduled, move, self._rng, config)
            questions += [Question(kind=QuestionKind.COMPARISON, pair=p) for p in pairs]

        # just-asked sentinel; aged back to 0 on the next advance
        for question in questions:
            targets = [question.vertex] if question.pair is None else [question.pair.v1, question.pair.v2]
            for target in targets:
                for member in self.true_board.chain(target):
                    if member in self._staleness:
                        self._staleness[member] = -1
        return questions

    # ------------------------------------------------------------------
    # Answers
    # ------------------------------------------------------------------

    def _enter_current_question(self) -> None:
        if self._question_index >= len(self._questions):
            self.state = QuizState.IDLE
        elif self._questions[self._question_index].kind is QuestionKind.COMPARISON:
            self.state = QuizState.COMPARING
        else:
            self.state = QuizState.QUESTIONING

    def _next_question(self) -> bool:
        """Move past the current question; True when none remain."""
        self._blocked = set()
        self.retrying = False
        self._question_index += 1
        self._enter_current_question()
        return self.state is QuizState.IDLE

    def _require(self, kind: QuestionKind) -> Question:
        question = self.current_question
        if question is None or question.kind is not kind:
            raise QuizProtocolError(
                f"No active {kind.value} question",
                context={"state": self.state.value, "active": question.kind.value if question else None},
            )
        return question

    def _record_first_attempt(self, correct: bool) -> None:
        self._results.append(correct)
        self._move_progress[-1].results.append(PROGRESS_CORRECT if correct else PROGRESS_FAILED)

    def _resolve_with_retry(self, value: Any, expected: Any) -> AnswerResult:
        if value in self._blocked:
            return AnswerResult(correct=False, done=False, expected=expected, blocked=True)

        if value != expected:
            self.errors += 1
            self._blocked.add(value)
            if not self.retrying:
                self.wrong += 1
                self.show_window += 1
                self._record_first_attempt(False)
                self.retrying = True
            return AnswerResult(correct=False, done=False, expected=expected)

        self.correct += 1
        if not self.retrying:
            self._record_first_attempt(True)
        done = self._next_question()
        return AnswerResult(correct=True, done=done, expected=expected)

    def answer(self, value: int) -> AnswerResult:
        """Answer the active liberty-count question.

        The expected value is the true liberty count saturated at
        config.liberty_ceiling. A wrong value is blocked and the same question
        stays active (``retrying``); only the first attempt is recorded in
        ``results``.

        Raises:
            QuizProtocolError: No liberty question is active
        """
        question = self._require(QuestionKind.LIBERTY)
        expected = min(len(self.true_board.liberties(question.vertex)), self.config.liberty_ceiling)
        return self._resolve_with_retry(value, expected)

    def answer_mark(self, marked: Iterable[Vertex]) -> AnswerResult:
        """Answer the active liberty-marking question. Always moves on.

        Raises:
            QuizProtocolError: No marking question is active
        """
        question = self._require(QuestionKind.MARK)
        truth = frozenset(self.true_board.liberties(question.vertex))
        marked_set = frozenset(tuple(v) for v in marked)
        penalties = len(marked_set - truth) + len(truth - marked_set)
        if penalties == 0:
            self.correct += 1
        else:
            self.wrong += 1
            self.errors += penalties
            self.show_window += 1
        self._record_first_attempt(penalties == 0)
        done = self._next_question()
        return AnswerResult(correct=penalties == 0, done=done, expected=truth, penalties=penalties)

    def answer_comparison(self, choice: ComparisonChoice) -> AnswerResult:
        """Answer the active comparison question: which side has fewer liberties.

        Raises:
            QuizProtocolError: No comparison question is active
            ValueError: ``choice`` is not a ComparisonChoice (or its value)
        """
        question = self._require(QuestionKind.COMPARISON)
        assert question.pair is not None
        return self._resolve_with_retry(ComparisonChoice(choice), question.pair.expected)

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def materialize(self) -> None:
        """Reveal every hidden stone: the learner's view becomes the true board."""
        _log.debug("Materializing %d hidden stones", len(self._invisible))
        self._base_sign_map = self.true_board.sign_map()
        self._invisible.clear()
        self._staleness.clear()

    @contextmanager
    def revealed(self) -> Iterator[List[List[int]]]:
        """Temporarily materialize; hidden stones and staleness come back on exit.

        Usage:
            with engine.revealed() as sign_map:
                render(sign_map)
        """
        saved_map = [list(row) for row in self._base_sign_map]
        saved_invisible = dict(self._invisible)
        saved_staleness = dict(self._staleness)
        self.materialize()
        try:
            yield self.get_display_sign_map()
        finally:
            self._base_sign_map = saved_map
            self._invisible = saved_invisible
            self._staleness = saved_staleness

    # ------------------------------------------------------------------
    # Replay
    # ------------------------------------------------------------------

    @classmethod
    def from_replay(
        cls,
        record: GameRecord,
        history: Iterable[bool],
        config: Optional[QuizConfig] = None,
        *,
        finished: bool = False,
    ) -> "QuizEngine":
        """Rebuild a session from its first-try booleans.

        Each entry answers the next scheduled question: right at once for True,
        one synthesized wrong value and then the right one for False. The
        engine ends on a fresh move (SHOWING_MOVE) unless it is mid-move or
        ``finished`` asks for the remaining moves to be played out.

        Args:
            record: The record of the original session
            history: ``engine.history`` of the original session
            config: The original session's settings
            finished: The original session had reached FINISHED
        """
        engine = cls(record, config)
        entries = list(history)
        for i, first_try in enumerate(entries):
            question = engine._next_replay_question()
            if question is None:
                _log.warning("Replay ran out of questions, %d history entries unused", len(entries) - i)
                break
            engine._replay_answer(question, first_try)

        if engine.state is QuizState.IDLE:
            engine.advance()
        if finished:
            while engine.advance() is not None:
                pass
        return engine

    def _next_replay_question(self) -> Optional[Question]:
        while True:
            if self.state is QuizState.SHOWING_MOVE:
                self.activate_questions()
            question = self.current_question
            if question is not None:
                return question
            if self.advance() is None:
                return None

    def _replay_answer(self, question: Question, first_try: bool) -> None:
        if question.kind is QuestionKind.MARK:
            truth = self.true_board.liberties(question.vertex)
            self.answer_mark(truth if first_try else [])
        elif question.kind is QuestionKind.LIBERTY:
            expected = min(len(self.true_board.liberties(question.vertex)), self.config.liberty_ceiling)
            if not first_try:
                self.answer(2 if expected == 1 else 1)
            self.answer(expected)
        else:
            assert question.pair is not None
            expected = question.pair.expected
            if not first_try:
                wrong = ComparisonChoice.SECOND if expected is ComparisonChoice.FIRST else ComparisonChoice.FIRST
                self.answer_comparison(wrong)
            self.answer_comparison(expected)
