# tsumesight/core/board.py
"""Immutable Go board.

A Board is a value: ``set`` and ``play`` return a new board and leave the
receiver untouched. Vertices are ``(x, y)`` tuples with ``0 <= x, y < size``;
signs are ``1`` (black), ``-1`` (white) and ``0`` (empty).

Capture resolution on ``play``:
1. Opposing chains adjacent to the new stone that have no liberties are removed.
2. If the played chain itself has no liberties left, it is removed too.

Nothing else of the rules (ko, superko, scoring) is modelled.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Set, Tuple

from tsumesight.core.errors import IllegalMoveError

Vertex = Tuple[int, int]

MIN_BOARD_SIZE = 2
MAX_BOARD_SIZE = 52


class Board:
    """Fixed-size grid of intersections with chain and liberty queries."""

    __slots__ = ("size", "_grid")

    def __init__(self, size: int, _grid: Optional[Tuple[Tuple[int, ...], ...]] = None):
        if not MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE:
            raise ValueError(f"Board size {size} out of range [{MIN_BOARD_SIZE}, {MAX_BOARD_SIZE}]")
        self.size = size
        self._grid = _grid if _grid is not None else tuple((0,) * size for _ in range(size))

    def __repr__(self) -> str:
        stones = sum(1 for row in self._grid for s in row if s != 0)
        return f"Board(size={self.size}, stones={stones})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and self._grid == other._grid

    def __hash__(self) -> int:
        return hash((self.size, self._grid))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has(self, vertex: Vertex) -> bool:
        x, y = vertex
        return 0 <= x < self.size and 0 <= y < self.size

    def get(self, vertex: Vertex) -> int:
        """Sign at a vertex; 0 for empty (and for off-board vertices)."""
        if not self.has(vertex):
            return 0
        x, y = vertex
        return self._grid[y][x]

    def neighbors(self, vertex: Vertex) -> List[Vertex]:
        x, y = vertex
        candidates = [(x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)]
        return [v for v in candidates if self.has(v)]

    def chain(self, vertex: Vertex) -> List[Vertex]:
        """All vertices of the chain containing ``vertex`` (sorted); empty for an empty point."""
        sign = self.get(vertex)
        if sign == 0:
            return []
        seen: Set[Vertex] = {vertex}
        stack = [vertex]
        while stack:
            current = stack.pop()
            for n in self.neighbors(current):
                if n not in seen and self.get(n) == sign:
                    seen.add(n)
                    stack.append(n)
        return sorted(seen)

    def liberties(self, vertex: Vertex) -> List[Vertex]:
        """Sorted liberty vertices of the chain containing ``vertex``."""
        libs: Set[Vertex] = set()
        for v in self.chain(vertex):
            for n in self.neighbors(v):
                if self.get(n) == 0:
                    libs.add(n)
        return sorted(libs)

    def occupied(self) -> Iterator[Vertex]:
        """Occupied vertices in row-major order."""
        for y, row in enumerate(self._grid):
            for x, sign in enumerate(row):
                if sign != 0:
                    yield (x, y)

    def sign_map(self) -> List[List[int]]:
        """Fresh ``[y][x]`` grid of signs."""
        return [list(row) for row in self._grid]

    # ------------------------------------------------------------------
    # New board values
    # ------------------------------------------------------------------

    def set(self, vertex: Vertex, sign: int) -> "Board":
        """Place (or clear, with sign 0) a stone without any capture logic."""
        if not self.has(vertex):
            raise IllegalMoveError(f"Vertex {vertex} is off a {self.size}x{self.size} board")
        if sign not in (-1, 0, 1):
            raise ValueError(f"Invalid sign {sign!r}")
        rows = [list(row) for row in self._grid]
        x, y = vertex
        rows[y][x] = sign
        return Board(self.size, tuple(tuple(row) for row in rows))

    def play(self, sign: int, vertex: Vertex) -> "Board":
        """Play a move and resolve captures.

        Raises:
            IllegalMoveError: The vertex is off the board or already occupied,
                or the sign is not 1 / -1.
        """
        if sign not in (-1, 1):
            raise IllegalMoveError(f"Invalid move sign {sign!r}", context={"vertex": vertex})
        if not self.has(vertex):
            raise IllegalMoveError(
                f"Vertex {vertex} is off a {self.size}x{self.size} board", context={"vertex": vertex}
            )
        if self.get(vertex) != 0:
            raise IllegalMoveError(f"Vertex {vertex} is already occupied", context={"vertex": vertex})

        board = self.set(vertex, sign)
        rows = [list(row) for row in board._grid]

        captured = 0
        for n in board.neighbors(vertex):
            if board.get(n) == -sign and rows[n[1]][n[0]] != 0 and not board.liberties(n):
                for cx, cy in board.chain(n):
                    rows[cy][cx] = 0
                    captured += 1

        after = Board(self.size, tuple(tuple(row) for row in rows))
        if captured == 0 and not after.liberties(vertex):
            for cx, cy in after.chain(vertex):
                rows[cy][cx] = 0
            after = Board(self.size, tuple(tuple(row) for row in rows))
        return after
