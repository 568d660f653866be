import logging
import re
from collections import defaultdict
from typing import Any, Optional

import chardet

_log = logging.getLogger(__name__)


class ParseError(Exception):
    """Exception raised on a parse error"""

    pass


class Move:
    GTP_COORD = list("ABCDEFGHJKLMNOPQRSTUVWXYZ") + [
        xa + c for xa in "ABCDEFGH" for c in "ABCDEFGHJKLMNOPQRSTUVWXYZ"
    ]  # board size 52+ support
    PLAYERS = "BW"
    SGF_COORD = list("ABCDEFGHIJKLMNOPQRSTUVWXYZ".lower()) + list("ABCDEFGHIJKLMNOPQRSTUVWXYZ")  # sgf goes to 52

    @classmethod
    def from_gtp(cls, gtp_coords: str, player: str = "B") -> "Move":
        """Initialize a move from GTP coordinates (e.g. "D4", "pass").

        Raises:
            ValueError: If the coordinate format is invalid
        """
        if gtp_coords.strip().lower() == "pass":
            return cls(coords=None, player=player)
        match = re.fullmatch(r"([A-Z]+)(\d+)", gtp_coords.strip().upper())
        if not match:
            raise ValueError(f"Invalid GTP coordinate format: {gtp_coords!r}")
        col_str, row_str = match.groups()
        if col_str not in Move.GTP_COORD:
            raise ValueError(f"Invalid GTP column '{col_str}' in: {gtp_coords!r}")
        row_num = int(row_str) - 1
        if row_num < 0:
            raise ValueError(f"Invalid GTP row '{row_str}' in: {gtp_coords!r}")
        return cls(coords=(Move.GTP_COORD.index(col_str), row_num), player=player)

    @classmethod
    def from_sgf(cls, sgf_coords: str, board_size: int, player: str = "B") -> "Move":
        """Initialize a move from SGF coordinates and player.

        Raises:
            ValueError: If the coordinate letters are not valid SGF coordinates
        """
        if sgf_coords == "" or (sgf_coords == "tt" and board_size <= 19):  # [tt] is pass on <= 19x19
            return cls(coords=None, player=player)
        if len(sgf_coords) != 2:
            raise ValueError(f"Invalid SGF coordinate: {sgf_coords!r}")
        return cls(
            coords=(Move.SGF_COORD.index(sgf_coords[0]), board_size - Move.SGF_COORD.index(sgf_coords[1]) - 1),
            player=player,
        )

    def __init__(self, coords: tuple[int, int] | None = None, player: str = "B"):
        """Initialize a move from zero-based coordinates and player"""
        self.player = player
        self.coords = coords

    def __repr__(self) -> str:
        return f"Move({self.player or ''}{self.gtp()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Move):
            return NotImplemented
        return self.coords == other.coords and self.player == other.player

    def __hash__(self) -> int:
        return hash((self.coords, self.player))

    def gtp(self) -> str:
        """Returns GTP coordinates of the move"""
        if self.is_pass:
            return "pass"
        assert self.coords is not None
        return Move.GTP_COORD[self.coords[0]] + str(self.coords[1] + 1)

    @property
    def is_pass(self) -> bool:
        """Returns True if the move is a pass"""
        return self.coords is None

    @property
    def sign(self) -> int:
        """Board sign of the mover: +1 for black, -1 for white"""
        return 1 if self.player == "B" else -1


class SGFNode:
    children: list["SGFNode"]
    properties: dict[str, list[Any]]
    _parent: Optional["SGFNode"]

    def __init__(self, parent: Optional["SGFNode"] = None, properties: dict[str, Any] | None = None) -> None:
        self.children = []
        self.properties = defaultdict(list)
        if properties:
            for k, v in properties.items():
                self.set_property(k, v)
        self._parent = parent
        if parent:
            parent.children.append(self)

    def __repr__(self) -> str:
        return f"SGFNode({dict(self.properties)})"

    @staticmethod
    def _unescape_value(value: Any) -> Any:
        return re.sub(r"\\([\]\\])", r"\1", value) if isinstance(value, str) else value  # unescape \ and ]

    def add_list_property(self, property: str, values: list[Any]) -> None:
        """Add some values to the property list."""
        # SiZe[19] ==> SZ[19] etc. for old SGF
        normalized_property = re.sub("[a-z]", "", property)
        self.properties[normalized_property] += values

    def get_list_property(self, property: str, default: Any = None) -> Any:
        """Get the list of values for a property."""
        return self.properties.get(property, default)

    def set_property(self, property: str, value: Any) -> None:
        """Add some values to the property. If not a list, it will be made into a single-value list."""
        if not isinstance(value, list):
            value = [value]
        self.properties[property] = value

    def get_property(self, property: str, default: Any = None) -> Any:
        """Get the first value of the property, typically when exactly one is expected."""
        return self.properties.get(property, [default])[0]

    @property
    def parent(self) -> Optional["SGFNode"]:
        return self._parent

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def empty(self) -> bool:
        """Returns true if node has no children or properties"""
        return not self.children and not self.properties

    @property
    def board_size(self) -> int:
        """The root's SZ property, or 19 if missing.

        Raises:
            ParseError: For rectangular (``SZ[x:y]``) or non-numeric sizes
        """
        root = self
        while root.parent is not None:
            root = root.parent
        size = str(root.get_property("SZ", "19")).strip()
        if ":" in size:
            x, y = size.split(":", 1)
            if x.strip() != y.strip():
                raise ParseError(f"Rectangular boards are not supported: SZ[{size}]")
            size = x
        try:
            return int(size)
        except ValueError:
            raise ParseError(f"Invalid board size SZ[{size}]")

    @property
    def move(self) -> Move | None:
        """The single B or W move of this node, or None if there is none."""
        for player in Move.PLAYERS:
            values = self.get_list_property(player)
            if values:
                return Move.from_sgf(values[0], board_size=self.board_size, player=player)
        return None

    def placements(self, player: str) -> list[Move]:
        """Expanded AB/AW placements of this node, including compressed ``aa:cc`` ranges."""
        board_size = self.board_size
        coords: dict[tuple[int, int], None] = {}
        for value in self.get_list_property("A" + player, []):
            if ":" in value:
                from_move, to_move = [Move.from_sgf(c, board_size=board_size) for c in value.split(":")[:2]]
                assert from_move.coords is not None and to_move.coords is not None
                for y in range(from_move.coords[1], to_move.coords[1] - 1, -1):  # sgf upside down
                    for x in range(from_move.coords[0], to_move.coords[0] + 1):
                        if 0 <= x < board_size and 0 <= y < board_size:
                            coords[(x, y)] = None
            else:
                move = Move.from_sgf(value, board_size=board_size, player=player)
                if move.coords is not None:
                    coords[move.coords] = None
        return [Move(c, player=player) for c in coords]

    @property
    def main_line(self) -> list["SGFNode"]:
        """This node followed by the first child of every node below it."""
        nodes = [self]
        node = self
        while node.children:
            node = node.children[0]
            nodes.append(node)
        return nodes


class SGF:
    DEFAULT_ENCODING = "UTF-8"

    _NODE_CLASS = SGFNode
    SGFPROP_PAT = re.compile(r"\s*(?:\(|\)|;|(\w+)((\s*\[([^\]\\]|\\.)*\])+))", flags=re.DOTALL)
    SGF_PAT = re.compile(r"\(;.*\)", flags=re.DOTALL)

    @classmethod
    def parse_sgf(cls, input_str: str) -> SGFNode:
        """Parse a string as SGF."""
        match = re.search(cls.SGF_PAT, input_str)
        clipped_str = match.group() if match else input_str
        return cls(clipped_str).root

    @classmethod
    def decode(cls, bin_contents: bytes, encoding: str | None = None) -> str:
        """Decode raw SGF bytes, using CA[] or chardet when no encoding is given."""
        if not encoding:
            match = re.search(rb"CA\[(.*?)\]", bin_contents)
            if match:
                encoding = match[1].decode("ascii", errors="ignore")
            else:
                detected = chardet.detect(bin_contents[:300])["encoding"]
                # workaround for some compatibility issues for Windows-1252 and GB2312 encodings
                if detected == "Windows-1252" or detected == "GB2312":
                    encoding = "GBK"
                elif detected is not None:
                    encoding = detected
                else:
                    encoding = cls.DEFAULT_ENCODING
        try:
            return bin_contents.decode(encoding=encoding, errors="ignore")
        except LookupError:
            _log.debug("Unknown SGF encoding %r, falling back to %s", encoding, cls.DEFAULT_ENCODING)
            return bin_contents.decode(encoding=cls.DEFAULT_ENCODING, errors="ignore")

    def __init__(self, contents: str) -> None:
        self.contents = contents
        try:
            self.ix = self.contents.index("(") + 1
        except ValueError:
            raise ParseError(f"Parse error: Expected '(' at start, found {self.contents[:50]}")
        self.root = self._NODE_CLASS()
        self._parse_branch(self.root)

    def _parse_branch(self, current_move: SGFNode) -> None:
        while self.ix < len(self.contents):
            match = re.match(self.SGFPROP_PAT, self.contents[self.ix :])
            if not match:
                break
            self.ix += len(match[0])
            matched_item = match[0].strip()
            if matched_item == ")":
                return
            if matched_item == "(":
                self._parse_branch(self._NODE_CLASS(parent=current_move))
            elif matched_item == ";":
                # ignore ;) for old SGF
                useless = self.ix < len(self.contents) and self.contents[self.ix :].strip() == ")"
                # ignore ; that generate empty nodes
                if not (current_move.empty or useless):
                    current_move = self._NODE_CLASS(parent=current_move)
            else:
                property, value = match[1], match[2].strip()[1:-1]
                values = re.split(r"\]\s*\[", value)
                current_move.add_list_property(property, [SGFNode._unescape_value(v) for v in values])
        if self.ix < len(self.contents):
            raise ParseError(f"Parse Error: unexpected character at {self.contents[self.ix : self.ix + 25]}")
        raise ParseError("Parse Error: expected ')' at end of input.")
