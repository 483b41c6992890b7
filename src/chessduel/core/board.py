"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TypeAlias

from chessduel.core.enums import Color, PieceType
from chessduel.core.piece import Piece
from chessduel.core.types import Square, is_in_bounds, square_name

# Read-only copy of a board, used for history and repetition counting.
BoardSnapshot: TypeAlias = tuple[tuple[Piece | None, ...], ...]

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 8x8 grid of optional pieces. Knows nothing about legality."""

    __slots__ = ("_grid",)

    def __init__(self) -> None:
        self._grid: list[list[Piece | None]] = [[None] * 8 for _ in range(8)]

    # -- Element access -----------------------------------------------------

    def get(self, sq: Square) -> Piece | None:
        row, col = sq
        return self._grid[row][col]

    def set(self, sq: Square, piece: Piece | None) -> None:
        row, col = sq
        self._grid[row][col] = piece

    __getitem__ = get
    __setitem__ = set

    @staticmethod
    def is_in_bounds(sq: Square) -> bool:
        return is_in_bounds(sq[0], sq[1])

    def is_empty(self, sq: Square) -> bool:
        return self.get(sq) is None

    # -- Query helpers ------------------------------------------------------

    def occupied(self) -> Iterator[tuple[Square, Piece]]:
        """Yield ``(square, piece)`` for every occupied square."""
        for row, cells in enumerate(self._grid):
            for col, piece in enumerate(cells):
                if piece is not None:
                    yield (row, col), piece

    def pieces(self, color: Color) -> list[tuple[Square, Piece]]:
        """All ``(square, piece)`` pairs owned by *color*."""
        return [(sq, p) for sq, p in self.occupied() if p.color == color]

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*.

        Raises ``ValueError`` when the board holds no king or more than one
        king of that colour; every legality check depends on exactly one.
        """
        kings = [
            sq for sq, p in self.occupied() if p.color == color and p.kind == PieceType.KING
        ]
        if len(kings) != 1:
            found = ", ".join(square_name(sq) for sq in kings) or "none"
            raise ValueError(f"Expected one {color.name} king on board, found: {found}")
        return kings[0]

    def grid(self) -> list[list[Piece | None]]:
        """Fresh 8x8 list copy of the placement, row 0 first."""
        return [cells.copy() for cells in self._grid]

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._grid = [cells.copy() for cells in self._grid]
        return b

    def snapshot(self) -> BoardSnapshot:
        """Immutable, hashable copy of the placement."""
        return tuple(tuple(cells) for cells in self._grid)

    @classmethod
    def from_snapshot(cls, snapshot: BoardSnapshot) -> Board:
        b = cls()
        b._grid = [list(cells) for cells in snapshot]
        return b

    def clear(self) -> None:
        self._grid = [[None] * 8 for _ in range(8)]

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for col, kind in enumerate(_BACK_RANK):
            b[(0, col)] = Piece(Color.BLACK, kind)
            b[(1, col)] = Piece(Color.BLACK, PieceType.PAWN)
            b[(6, col)] = Piece(Color.WHITE, PieceType.PAWN)
            b[(7, col)] = Piece(Color.WHITE, kind)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        rows: list[str] = []
        for row, cells in enumerate(self._grid):
            text = " ".join(p.fen_char if p else "." for p in cells)
            rows.append(f"{8 - row} {text}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
