"""Tests for the immutable Board."""

import pytest

from tsumesight.core.board import Board
from tsumesight.core.errors import IllegalMoveError


def board_with(size, black=(), white=()):
    board = Board(size)
    for v in black:
        board = board.set(v, 1)
    for v in white:
        board = board.set(v, -1)
    return board


class TestQueries:
    def test_empty_board(self):
        board = Board(5)
        assert board.get((2, 2)) == 0
        assert list(board.occupied()) == []

    def test_has(self):
        board = Board(5)
        assert board.has((0, 0))
        assert board.has((4, 4))
        assert not board.has((5, 0))
        assert not board.has((0, -1))

    def test_off_board_get_is_empty(self):
        assert Board(5).get((7, 7)) == 0

    def test_neighbors_in_corner(self):
        assert sorted(Board(5).neighbors((0, 0))) == [(0, 1), (1, 0)]

    def test_chain_and_liberties(self):
        board = board_with(5, black=[(1, 1), (1, 2)], white=[(0, 1)])
        assert board.chain((1, 1)) == [(1, 1), (1, 2)]
        assert board.liberties((1, 2)) == [(0, 2), (1, 0), (1, 3), (2, 1), (2, 2)]

    def test_liberties_of_empty_point(self):
        assert Board(5).liberties((2, 2)) == []
        assert Board(5).chain((2, 2)) == []

    def test_sign_map_is_row_major_copy(self):
        board = board_with(5, black=[(3, 1)])
        grid = board.sign_map()
        assert grid[1][3] == 1
        grid[1][3] = 0
        assert board.get((3, 1)) == 1

    def test_occupied_order(self):
        board = board_with(5, black=[(4, 0), (0, 1)], white=[(1, 0)])
        assert list(board.occupied()) == [(1, 0), (4, 0), (0, 1)]

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            Board(1)
        with pytest.raises(ValueError):
            Board(53)


class TestPlay:
    def test_play_returns_new_board(self):
        board = Board(5)
        after = board.play(1, (2, 2))
        assert board.get((2, 2)) == 0
        assert after.get((2, 2)) == 1

    def test_capture(self):
        """Filling the last liberty removes the opposing chain."""
        board = board_with(5, black=[(1, 0)], white=[(0, 0)])
        after = board.play(1, (0, 1))
        assert after.get((0, 0)) == 0
        assert after.get((0, 1)) == 1

    def test_capture_of_multi_stone_chain(self):
        board = board_with(5, black=[(0, 1), (1, 1)], white=[(0, 0), (1, 0)])
        after = board.play(1, (2, 0))
        assert after.get((0, 0)) == 0
        assert after.get((1, 0)) == 0

    def test_suicide_removes_played_stone(self):
        board = board_with(5, white=[(1, 0), (0, 1)])
        after = board.play(1, (0, 0))
        assert after.get((0, 0)) == 0
        assert after == board

    def test_capture_before_suicide(self):
        """A move without liberties survives when it captures."""
        board = board_with(5, black=[(2, 0), (1, 1)], white=[(1, 0), (0, 1)])
        after = board.play(1, (0, 0))
        assert after.get((0, 0)) == 1
        assert after.get((1, 0)) == 0
        assert after.get((0, 1)) == -1

    def test_occupied_point_raises(self):
        board = board_with(5, black=[(2, 2)])
        with pytest.raises(IllegalMoveError):
            board.play(-1, (2, 2))

    def test_off_board_raises(self):
        with pytest.raises(IllegalMoveError):
            Board(5).play(1, (5, 5))

    def test_bad_sign_raises(self):
        with pytest.raises(IllegalMoveError):
            Board(5).play(0, (1, 1))


class TestValueSemantics:
    def test_equality(self):
        assert board_with(5, black=[(1, 1)]) == board_with(5, black=[(1, 1)])
        assert board_with(5, black=[(1, 1)]) != board_with(5, white=[(1, 1)])
        assert Board(5) != Board(6)

    def test_hashable(self):
        assert len({board_with(5, black=[(1, 1)]), board_with(5, black=[(1, 1)])}) == 1
