# tsumesight/core/quiz/scoring.py
"""Group scoring: annotate every chain of the true board for the scheduler.

Pure functions; nothing here mutates engine state.
"""

from typing import Dict, FrozenSet, List, Mapping, Optional, Set, Tuple

from tsumesight.core.board import Board, Vertex
from tsumesight.core.quiz.models import GroupScore


def liberty_snapshot(board: Board) -> Dict[Vertex, FrozenSet[Vertex]]:
    """Liberty set of every occupied vertex, taken before a move is played."""
    snapshot: Dict[Vertex, FrozenSet[Vertex]] = {}
    for vertex in board.occupied():
        if vertex in snapshot:
            continue
        libs = frozenset(board.liberties(vertex))
        for member in board.chain(vertex):
            snapshot[member] = libs
    return snapshot


def score_groups(
    board: Board,
    current_vertex: Optional[Vertex],
    prev_liberties: Mapping[Vertex, FrozenSet[Vertex]],
    staleness: Mapping[Vertex, int],
) -> List[GroupScore]:
    """Enumerate each chain once, in row-major order of its first member.

    Args:
        board: True board after the current move
        current_vertex: The stone just played, or None before any move
        prev_liberties: Liberty sets per vertex from before the move
        staleness: Per-vertex staleness; untracked vertices count as 0

    Returns:
        One GroupScore per chain
    """
    visited: Set[Vertex] = set()
    groups: List[GroupScore] = []
    for vertex in board.occupied():
        if vertex in visited:
            continue
        chain = board.chain(vertex)
        visited.update(chain)
        liberty_set = frozenset(board.liberties(vertex))
        contains_current = current_vertex is not None and current_vertex in chain

        libs_changed = contains_current
        if not libs_changed:
            for member in chain:
                prev = prev_liberties.get(member)
                if prev is not None and prev != liberty_set:
                    libs_changed = True
                    break

        groups.append(
            GroupScore(
                vertices=tuple(chain),
                sign=board.get(vertex),
                liberties=len(liberty_set),
                liberty_set=liberty_set,
                contains_current_move=contains_current,
                libs_changed=libs_changed,
                max_staleness=max((staleness.get(v, 0) for v in chain), default=0),
            )
        )
    return groups


def diff_from_initial(group: GroupScore, initial_board: Board) -> bool:
    """True when the group is not an unchanged chain of the starting position.

    A group differs when any member was empty initially, or when the chain
    through its first member had other members or other liberties before the
    first move.
    """
    if any(initial_board.get(v) == 0 for v in group.vertices):
        return True
    first = group.vertices[0]
    if tuple(initial_board.chain(first)) != group.vertices:
        return True
    return frozenset(initial_board.liberties(first)) != group.liberty_set


def schedule_key(group: GroupScore, draw: float) -> Tuple[int, int, float]:
    """Sort key: fewest liberties first, then the just-played group, then the draw."""
    return (group.liberties, 0 if group.contains_current_move else 1, draw)
