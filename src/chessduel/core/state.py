"""GameState — the single mutable source of truth for a game in progress."""

from __future__ import annotations

from dataclasses import dataclass, field

from chessduel.core.board import Board, BoardSnapshot
from chessduel.core.enums import CastlingRights, Color, GameEndReason, GameResult
from chessduel.core.move import Move
from chessduel.core.piece import Piece
from chessduel.core.types import Square


@dataclass(frozen=True, slots=True)
class UndoRecord:
    """Minimal inverse of one applied move (Command pattern)."""

    move: Move
    piece: Piece
    captured: Piece | None
    captured_sq: Square | None
    castling: CastlingRights
    en_passant: Square | None


def _empty_captures() -> dict[Color, list[Piece]]:
    return {Color.WHITE: [], Color.BLACK: []}


@dataclass
class GameState:
    """Board plus side to move, castling rights, en passant target and history.

    ``position_history`` holds an immutable snapshot of the board after each
    committed move; ``undo_stack`` holds the matching :class:`UndoRecord`.
    ``captured`` maps the capturing colour to the pieces it has taken.
    """

    board: Board = field(default_factory=Board.initial)
    side_to_move: Color = Color.WHITE
    castling: CastlingRights = CastlingRights.ALL
    en_passant: Square | None = None
    position_history: list[BoardSnapshot] = field(default_factory=list)
    undo_stack: list[UndoRecord] = field(default_factory=list)
    result: GameResult = GameResult.IN_PROGRESS
    end_reason: GameEndReason | None = None
    captured: dict[Color, list[Piece]] = field(default_factory=_empty_captures)

    @classmethod
    def initial(cls) -> GameState:
        """Standard starting position, white to move."""
        return cls()

    @property
    def is_over(self) -> bool:
        return self.result != GameResult.IN_PROGRESS

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.undo_stack)

    def copy(self) -> GameState:
        """Structurally independent copy for simulation; history is not carried."""
        return GameState(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            result=self.result,
            end_reason=self.end_reason,
        )

    def repetition_count(self) -> int:
        """How many times the current board layout occurs in ``position_history``."""
        current = self.board.snapshot()
        return sum(1 for snap in self.position_history if snap == current)
