"""Tests for the Group Scorer."""

from tsumesight.core.board import Board
from tsumesight.core.quiz.scoring import diff_from_initial, liberty_snapshot, schedule_key, score_groups


def board_with(size, black=(), white=()):
    board = Board(size)
    for v in black:
        board = board.set(v, 1)
    for v in white:
        board = board.set(v, -1)
    return board


def by_first_vertex(groups):
    return {g.vertices[0]: g for g in groups}


class TestLibertySnapshot:
    def test_every_member_gets_chain_liberties(self):
        board = board_with(5, black=[(1, 1), (1, 2)])
        snapshot = liberty_snapshot(board)
        assert set(snapshot) == {(1, 1), (1, 2)}
        assert snapshot[(1, 1)] == snapshot[(1, 2)] == frozenset(board.liberties((1, 1)))

    def test_empty_board(self):
        assert liberty_snapshot(Board(5)) == {}


class TestScoreGroups:
    def test_one_entry_per_chain(self):
        board = board_with(5, black=[(1, 1), (1, 2), (4, 4)], white=[(3, 0)])
        groups = score_groups(board, None, {}, {})
        assert [g.vertices for g in groups] == [((3, 0),), ((1, 1), (1, 2)), ((4, 4),)]
        assert [g.sign for g in groups] == [-1, 1, 1]

    def test_liberties(self):
        board = board_with(5, black=[(0, 0)])
        (group,) = score_groups(board, None, {}, {})
        assert group.liberties == 2
        assert group.liberty_set == frozenset({(1, 0), (0, 1)})

    def test_current_move_group_always_changed(self):
        before = board_with(5, black=[(0, 0)])
        after = before.play(-1, (4, 4))
        groups = by_first_vertex(score_groups(after, (4, 4), liberty_snapshot(before), {}))
        assert groups[(4, 4)].contains_current_move
        assert groups[(4, 4)].libs_changed
        assert not groups[(0, 0)].contains_current_move
        assert not groups[(0, 0)].libs_changed

    def test_adjacent_group_changed(self):
        before = board_with(5, black=[(1, 1)])
        after = before.play(-1, (2, 1))
        groups = by_first_vertex(score_groups(after, (2, 1), liberty_snapshot(before), {}))
        assert groups[(1, 1)].libs_changed
        assert groups[(1, 1)].liberties == 3

    def test_same_count_different_set_counts_as_changed(self):
        """A move that trades one liberty for another changes the set, not the count."""
        before = board_with(5, black=[(2, 2)], white=[(2, 3)])
        snapshot = liberty_snapshot(before)
        board = before.set((2, 3), 0).set((1, 2), -1)
        groups = by_first_vertex(score_groups(board, None, snapshot, {}))
        assert groups[(2, 2)].liberties == 3
        assert groups[(2, 2)].libs_changed

    def test_members_missing_from_snapshot_ignored(self):
        board = board_with(5, black=[(1, 1)], white=[(2, 1)])
        groups = by_first_vertex(score_groups(board, (2, 1), {}, {}))
        assert not groups[(1, 1)].libs_changed

    def test_max_staleness(self):
        board = board_with(5, black=[(1, 1), (1, 2)])
        (group,) = score_groups(board, None, {}, {(1, 1): 1, (1, 2): 3})
        assert group.max_staleness == 3

    def test_contains(self):
        board = board_with(5, black=[(1, 1), (1, 2)])
        (group,) = score_groups(board, None, {}, {})
        assert (1, 2) in group
        assert (0, 0) not in group


class TestDiffFromInitial:
    def test_unchanged_setup_group(self):
        initial = board_with(9, black=[(2, 2)])
        board = initial.play(-1, (7, 7))
        groups = by_first_vertex(score_groups(board, (7, 7), {}, {}))
        assert not diff_from_initial(groups[(2, 2)], initial)
        assert diff_from_initial(groups[(7, 7)], initial)

    def test_liberties_reduced(self):
        initial = board_with(9, black=[(2, 2)])
        board = initial.play(-1, (2, 3))
        groups = by_first_vertex(score_groups(board, (2, 3), {}, {}))
        assert diff_from_initial(groups[(2, 2)], initial)

    def test_chain_extended(self):
        initial = board_with(9, black=[(2, 2)])
        board = initial.play(1, (2, 3))
        (group,) = score_groups(board, (2, 3), {}, {})
        assert diff_from_initial(group, initial)


class TestScheduleKey:
    def test_order(self):
        board = board_with(9, black=[(0, 0), (4, 4)], white=[(8, 8)])
        groups = by_first_vertex(score_groups(board, (4, 4), {}, {}))
        corner, center, other_corner = groups[(0, 0)], groups[(4, 4)], groups[(8, 8)]
        ordered = sorted(
            [(schedule_key(center, 0.1), "center"), (schedule_key(corner, 0.9), "corner"),
             (schedule_key(other_corner, 0.5), "other")]
        )
        assert [name for _, name in ordered] == ["other", "corner", "center"]

    def test_current_move_breaks_ties(self):
        board = board_with(9, black=[(0, 0)], white=[(8, 8)])
        groups = by_first_vertex(score_groups(board, (8, 8), {}, {}))
        assert schedule_key(groups[(8, 8)], 0.9) < schedule_key(groups[(0, 0)], 0.1)
