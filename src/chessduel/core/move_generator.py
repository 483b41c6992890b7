"""Legal and pseudo-legal move generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessduel.core.board import Board
from chessduel.core.enums import CastlingRights, Color, MoveKind, PieceType
from chessduel.core.move import Move
from chessduel.core.piece import Piece
from chessduel.core.types import Square, is_in_bounds

if TYPE_CHECKING:
    from chessduel.core.state import GameState


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

_SLIDING_DIRS: dict[PieceType, tuple[tuple[int, int], ...]] = {
    PieceType.BISHOP: BISHOP_DIRS,
    PieceType.ROOK: ROOK_DIRS,
    PieceType.QUEEN: QUEEN_DIRS,
}

# Per colour: forward row step, starting row, promotion row, en passant target row.
_PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
_PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}
_PAWN_LAST_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 7}
_EN_PASSANT_ROW: dict[Color, int] = {Color.WHITE: 2, Color.BLACK: 5}

_HOME_ROW: dict[Color, int] = {Color.WHITE: 7, Color.BLACK: 0}
_KING_HOME_COL = 4


class MoveGenerator:
    """Generates legal moves for a given :class:`GameState`.

    Legality is decided by simulating each candidate on a structurally
    independent copy of the state, so the live state is never touched.
    """

    __slots__ = ("_state",)

    def __init__(self, state: GameState) -> None:
        self._state = state

    # -- Public API ---------------------------------------------------------

    def legal_moves(self, sq: Square) -> set[Move]:
        """Strictly legal moves for the piece on *sq* (empty set if none)."""
        from chessduel.core.check import CheckDetector
        from chessduel.core.executor import MoveExecutor

        state = self._state
        piece = state.board[sq]
        if piece is None:
            return set()

        opponent = piece.color.opposite
        legal: set[Move] = set()
        for move in self.pseudo_legal_moves(
            state.board,
            sq,
            piece,
            state.castling,
            state.en_passant,
            check_castling=True,
        ):
            probe = state.copy()
            probe.side_to_move = piece.color
            MoveExecutor.apply_move(probe, move, simulate=True)
            king_sq = probe.board.king_square(piece.color)
            if not CheckDetector.is_attacked(probe.board, king_sq, opponent):
                legal.add(move)
        return legal

    def all_legal_moves(self, color: Color | None = None) -> set[Move]:
        """Every legal move for *color* (defaults to the side to move)."""
        color = self._state.side_to_move if color is None else color
        moves: set[Move] = set()
        for sq, _piece in self._state.board.pieces(color):
            moves |= self.legal_moves(sq)
        return moves

    def has_legal_move(self, color: Color | None = None) -> bool:
        """Whether *color* has at least one legal move; stops at the first."""
        color = self._state.side_to_move if color is None else color
        return any(self.legal_moves(sq) for sq, _piece in self._state.board.pieces(color))

    # -- Pseudo-legal generation -------------------------------------------

    @staticmethod
    def pseudo_legal_moves(
        board: Board,
        sq: Square,
        piece: Piece,
        castling: CastlingRights = CastlingRights.NONE,
        en_passant: Square | None = None,
        *,
        check_castling: bool = False,
    ) -> set[Move]:
        """Moves that obey the piece's pattern but may leave its king in check.

        Castling candidates are only produced with ``check_castling=True``;
        attack detection always calls with the default so that it never
        recurses into castling generation.
        """
        moves: set[Move] = set()
        kind = piece.kind
        if kind == PieceType.PAWN:
            _gen_pawn(board, sq, piece.color, en_passant, moves)
        elif kind == PieceType.KNIGHT:
            _gen_steps(board, sq, piece.color, KNIGHT_OFFSETS, moves)
        elif kind == PieceType.KING:
            _gen_steps(board, sq, piece.color, KING_OFFSETS, moves)
            if check_castling:
                _gen_castling(board, sq, piece, castling, moves)
        else:
            _gen_sliding(board, sq, piece.color, _SLIDING_DIRS[kind], moves)
        return moves


# -- Piece-specific generators (private) -----------------------------------


def _gen_pawn(
    board: Board,
    sq: Square,
    color: Color,
    en_passant: Square | None,
    moves: set[Move],
) -> None:
    row, col = sq
    step = _PAWN_DIRECTION[color]
    last_row = _PAWN_LAST_ROW[color]
    ahead = row + step

    if not is_in_bounds(ahead, col):
        return

    if board[(ahead, col)] is None:
        if ahead == last_row:
            moves.add(Move(sq, (ahead, col), MoveKind.PROMOTION))
        else:
            moves.add(Move(sq, (ahead, col)))
            two_ahead = ahead + step
            if row == _PAWN_START_ROW[color] and board[(two_ahead, col)] is None:
                moves.add(Move(sq, (two_ahead, col), MoveKind.DOUBLE_PAWN_PUSH))

    for dc in (-1, 1):
        if not is_in_bounds(ahead, col + dc):
            continue
        target_sq = (ahead, col + dc)
        target = board[target_sq]
        if target is not None:
            if target.color != color:
                kind = MoveKind.PROMOTION if ahead == last_row else MoveKind.CAPTURE
                moves.add(Move(sq, target_sq, kind))
        elif target_sq == en_passant and ahead == _EN_PASSANT_ROW[color]:
            moves.add(Move(sq, target_sq, MoveKind.EN_PASSANT))


def _gen_steps(
    board: Board,
    sq: Square,
    color: Color,
    offsets: tuple[tuple[int, int], ...],
    moves: set[Move],
) -> None:
    row, col = sq
    for dr, dc in offsets:
        to_row, to_col = row + dr, col + dc
        if not is_in_bounds(to_row, to_col):
            continue
        target = board[(to_row, to_col)]
        if target is None:
            moves.add(Move(sq, (to_row, to_col)))
        elif target.color != color:
            moves.add(Move(sq, (to_row, to_col), MoveKind.CAPTURE))


def _gen_sliding(
    board: Board,
    sq: Square,
    color: Color,
    directions: tuple[tuple[int, int], ...],
    moves: set[Move],
) -> None:
    row, col = sq
    for dr, dc in directions:
        to_row, to_col = row + dr, col + dc
        while is_in_bounds(to_row, to_col):
            target = board[(to_row, to_col)]
            if target is None:
                moves.add(Move(sq, (to_row, to_col)))
            else:
                if target.color != color:
                    moves.add(Move(sq, (to_row, to_col), MoveKind.CAPTURE))
                break
            to_row += dr
            to_col += dc


def _gen_castling(
    board: Board,
    king_sq: Square,
    king: Piece,
    castling: CastlingRights,
    moves: set[Move],
) -> None:
    from chessduel.core.check import CheckDetector

    color = king.color
    row = _HOME_ROW[color]
    if king_sq != (row, _KING_HOME_COL):
        return

    opponent = color.opposite
    if CheckDetector.is_attacked(board, king_sq, opponent):
        return

    rook = Piece(color, PieceType.ROOK)
    # (right, rook column, squares that must be empty, king transit squares, kind)
    sides = (
        (CastlingRights.kingside(color), 7, (5, 6), (5, 6), MoveKind.CASTLE_KINGSIDE),
        (CastlingRights.queenside(color), 0, (1, 2, 3), (3, 2), MoveKind.CASTLE_QUEENSIDE),
    )
    for right, rook_col, between, transit, kind in sides:
        if not castling & right:
            continue
        if board[(row, rook_col)] != rook:
            continue
        if any(board[(row, c)] is not None for c in between):
            continue
        if any(_king_attacked_on(board, king_sq, (row, c), opponent) for c in transit):
            continue
        moves.add(Move(king_sq, (row, transit[-1]), kind))


def _king_attacked_on(
    board: Board, king_sq: Square, probe_sq: Square, opponent: Color
) -> bool:
    """Place the king on *probe_sq* in a scratch copy and test for attack."""
    from chessduel.core.check import CheckDetector

    scratch = board.copy()
    scratch[probe_sq] = scratch[king_sq]
    scratch[king_sq] = None
    return CheckDetector.is_attacked(scratch, probe_sq, opponent)
