"""Attack and check detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessduel.core.board import Board
from chessduel.core.enums import Color
from chessduel.core.move_generator import MoveGenerator
from chessduel.core.types import Square

if TYPE_CHECKING:
    from chessduel.core.state import GameState


class CheckDetector:
    """Static attack queries built on pseudo-legal generation without castling."""

    @staticmethod
    def is_attacked(board: Board, target: Square, by_color: Color) -> bool:
        """Is *target* reachable by any piece of *by_color*?"""
        for sq, piece in board.pieces(by_color):
            for move in MoveGenerator.pseudo_legal_moves(board, sq, piece):
                if move.to_sq == target:
                    return True
        return False

    @staticmethod
    def is_in_check(state: GameState, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = state.board.king_square(color)
        return CheckDetector.is_attacked(state.board, king_sq, color.opposite)
