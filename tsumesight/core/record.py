# tsumesight/core/record.py
"""Game records as consumed by the quiz engine.

A GameRecord is the already-parsed input of a quiz session: board size,
setup stones, and the main-line moves. The engine never re-parses text; the
record carries the seed derived from the source text so that question
scheduling is reproducible.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from tsumesight.core.board import MAX_BOARD_SIZE, MIN_BOARD_SIZE, Board, Vertex
from tsumesight.core.errors import RecordError, SGFError
from tsumesight.core.random_sequence import hash_string
from tsumesight.core.sgf_parser import SGF, Move, ParseError, SGFNode

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameRecord:
    """Parsed main line of an SGF game or problem.

    Attributes:
        board_size: Edge length of the square board
        setup_black: AB setup stones of the root node
        setup_white: AW setup stones of the root node
        moves: Main-line moves in order, passes included (coords None)
        seed: Deterministic seed for question scheduling
    """

    board_size: int
    setup_black: Tuple[Vertex, ...] = ()
    setup_white: Tuple[Vertex, ...] = ()
    moves: Tuple[Move, ...] = ()
    player_black: str = ""
    player_white: str = ""
    game_name: str = ""
    seed: int = 0
    source: str = field(default="", repr=False, compare=False)

    @property
    def playable_moves(self) -> List[Move]:
        """Moves with passes removed."""
        return [m for m in self.moves if not m.is_pass]

    @property
    def record_id(self) -> str:
        """Stable identifier used as the progress-store key."""
        return f"{self.seed & 0xFFFFFFFF:08x}"

    def initial_board(self) -> Board:
        """Board with only the setup stones placed."""
        board = Board(self.board_size)
        for vertex in self.setup_black:
            board = board.set(vertex, 1)
        for vertex in self.setup_white:
            board = board.set(vertex, -1)
        return board


def _record_from_root(root: SGFNode, text: str) -> GameRecord:
    board_size = root.board_size
    if not MIN_BOARD_SIZE <= board_size <= MAX_BOARD_SIZE:
        raise RecordError(
            f"Board size {board_size} out of range",
            user_message="Unsupported board size",
            context={"board_size": board_size},
        )

    moves: List[Move] = []
    for node in root.main_line[1:]:
        move = node.move
        if move is None:
            continue
        if move.coords is not None and not (
            0 <= move.coords[0] < board_size and 0 <= move.coords[1] < board_size
        ):
            raise RecordError(f"Move {move.player}{move.coords} is off the board", context={"move": repr(move)})
        moves.append(move)

    return GameRecord(
        board_size=board_size,
        setup_black=tuple(m.coords for m in root.placements("B") if m.coords is not None),
        setup_white=tuple(m.coords for m in root.placements("W") if m.coords is not None),
        moves=tuple(moves),
        player_black=str(root.get_property("PB", "")),
        player_white=str(root.get_property("PW", "")),
        game_name=str(root.get_property("GN", "")),
        seed=hash_string(text),
        source=text,
    )


def load_record(text: str) -> GameRecord:
    """Parse SGF text into a GameRecord.

    Raises:
        SGFError: The text is not valid SGF
        RecordError: The SGF parses but cannot be used (bad size, off-board move)
    """
    try:
        root = SGF.parse_sgf(text)
        return _record_from_root(root, text)
    except (ParseError, ValueError) as e:
        raise SGFError(f"Cannot parse SGF: {e}", user_message="Cannot load SGF") from e


def load_record_file(filename: str, encoding: str | None = None) -> GameRecord:
    """Read, decode and parse an SGF file."""
    try:
        with open(filename, "rb") as f:
            text = SGF.decode(f.read(), encoding)
    except OSError as e:
        raise SGFError(f"Cannot read {filename}: {e}", user_message="Cannot open file") from e
    _log.debug("Loaded %s (%d chars)", filename, len(text))
    return load_record(text)
