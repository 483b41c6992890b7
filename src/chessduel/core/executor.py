"""MoveExecutor — applies and reverts moves on a :class:`GameState`."""

from __future__ import annotations

from dataclasses import dataclass

from chessduel.core.board import Board
from chessduel.core.enums import (
    PROMOTION_TYPES,
    CastlingRights,
    Color,
    MoveKind,
    PieceType,
)
from chessduel.core.move import Move
from chessduel.core.piece import Piece
from chessduel.core.state import GameState, UndoRecord
from chessduel.core.types import Square, square_name

# Rook home square → castling right lost when that square is vacated or captured on.
_ROOK_CORNERS: dict[Square, CastlingRights] = {
    (7, 0): CastlingRights.WHITE_QUEENSIDE,
    (7, 7): CastlingRights.WHITE_KINGSIDE,
    (0, 0): CastlingRights.BLACK_QUEENSIDE,
    (0, 7): CastlingRights.BLACK_KINGSIDE,
}

# Castling move kind → (rook origin column, rook destination column).
_CASTLE_ROOK_COLS: dict[MoveKind, tuple[int, int]] = {
    MoveKind.CASTLE_KINGSIDE: (7, 5),
    MoveKind.CASTLE_QUEENSIDE: (0, 3),
}


@dataclass(frozen=True, slots=True)
class StagedMove:
    """A promotion move waiting for its piece choice.

    The live state stays untouched until :meth:`commit`; ``preview`` shows
    the board with the pawn already on the last rank.
    """

    state: GameState
    move: Move
    preview: Board

    @property
    def color(self) -> Color:
        return self.state.side_to_move

    def commit(self, piece_type: PieceType) -> UndoRecord:
        """Finalise the move with the chosen *piece_type*."""
        return MoveExecutor.apply_move(self.state, self.move.with_promotion(piece_type))


class MoveExecutor:
    """Static make/unmake operations. Callers are responsible for legality."""

    @staticmethod
    def apply_move(state: GameState, move: Move, *, simulate: bool = False) -> UndoRecord:
        """Apply *move* to *state* in place and return its inverse.

        With ``simulate=True`` a promotion without a chosen piece is allowed
        (the pawn stays a pawn) and nothing is pushed onto the history.
        """
        board = state.board
        piece = MoveExecutor._check_mover(state, move)

        if move.kind == MoveKind.PROMOTION and not simulate:
            if move.promotion not in PROMOTION_TYPES:
                raise ValueError(
                    f"Promotion move {move} needs a piece choice, got {move.promotion!r}"
                )

        captured_sq: Square | None = None
        if move.kind == MoveKind.EN_PASSANT:
            captured_sq = (move.from_sq[0], move.to_sq[1])
        elif board[move.to_sq] is not None:
            captured_sq = move.to_sq
        captured = board[captured_sq] if captured_sq is not None else None

        record = UndoRecord(
            move=move,
            piece=piece,
            captured=captured,
            captured_sq=captured_sq,
            castling=state.castling,
            en_passant=state.en_passant,
        )

        # 1. Castling drags the rook next to the king's destination
        if move.is_castling:
            row = move.from_sq[0]
            rook_from, rook_to = _CASTLE_ROOK_COLS[move.kind]
            rook = board[(row, rook_from)]
            assert rook is not None and rook.kind == PieceType.ROOK
            board[(row, rook_to)] = rook
            board[(row, rook_from)] = None

        # 2. Remove the captured piece (for en passant it is not on to_sq)
        if captured_sq is not None:
            board[captured_sq] = None
            assert captured is not None
            state.captured[piece.color].append(captured)

        # 3. Castling rights
        state.castling = MoveExecutor._next_castling(state.castling, move, piece)

        # 4. En passant target lives for exactly one reply
        if move.kind == MoveKind.DOUBLE_PAWN_PUSH:
            state.en_passant = ((move.from_sq[0] + move.to_sq[0]) // 2, move.from_sq[1])
        else:
            state.en_passant = None

        # 5–6. Relocate the mover, promoting if a choice is attached
        placed = piece
        if move.kind == MoveKind.PROMOTION and move.promotion is not None:
            placed = Piece(piece.color, move.promotion)
        board[move.from_sq] = None
        board[move.to_sq] = placed

        state.side_to_move = state.side_to_move.opposite

        # 7. History
        if not simulate:
            state.position_history.append(board.snapshot())
            state.undo_stack.append(record)
        return record

    @staticmethod
    def stage(state: GameState, move: Move) -> StagedMove:
        """Prepare a promotion move whose piece choice is still outstanding."""
        piece = MoveExecutor._check_mover(state, move)
        if move.kind != MoveKind.PROMOTION:
            raise ValueError(f"Only promotion moves are staged, got {move}")
        preview = state.board.copy()
        preview[move.from_sq] = None
        preview[move.to_sq] = piece
        return StagedMove(state, move, preview)

    @staticmethod
    def undo_move(state: GameState) -> Move | None:
        """Revert the last committed move. Returns it, or None if there is none."""
        if not state.undo_stack:
            return None

        record = state.undo_stack.pop()
        state.position_history.pop()
        move = record.move
        board = state.board

        board[move.to_sq] = None
        board[move.from_sq] = record.piece
        if record.captured_sq is not None:
            board[record.captured_sq] = record.captured
            taken = state.captured[record.piece.color]
            assert taken and taken[-1] == record.captured
            taken.pop()

        if move.is_castling:
            row = move.from_sq[0]
            rook_from, rook_to = _CASTLE_ROOK_COLS[move.kind]
            board[(row, rook_from)] = board[(row, rook_to)]
            board[(row, rook_to)] = None

        state.castling = record.castling
        state.en_passant = record.en_passant
        state.side_to_move = record.piece.color
        return move

    # ── Internal ─────────────────────────────────────────────────────────

    @staticmethod
    def _check_mover(state: GameState, move: Move) -> Piece:
        piece = state.board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {square_name(move.from_sq)}")
        if piece.color != state.side_to_move:
            raise ValueError(
                f"{piece.color.name} piece on {square_name(move.from_sq)} moved "
                f"while {state.side_to_move.name} is to move"
            )
        return piece

    @staticmethod
    def _next_castling(
        castling: CastlingRights, move: Move, piece: Piece
    ) -> CastlingRights:
        if piece.kind == PieceType.KING:
            castling &= ~CastlingRights.both(piece.color)
        for sq in (move.from_sq, move.to_sq):
            right = _ROOK_CORNERS.get(sq)
            if right is not None:
                castling &= ~right
        return castling
