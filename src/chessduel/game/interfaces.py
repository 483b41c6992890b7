"""Abstract interfaces and value objects for the game layer.

The controller depends on these, not on a concrete UI: the presentation
layer supplies an :class:`IPromotionProvider` and reads :class:`GameStatus`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Future
from dataclasses import dataclass
from enum import IntEnum, auto

from chessduel.core.enums import Color, GameEndReason, GameResult, PieceType
from chessduel.core.rules import REPETITION_LIMIT

# ── Controller FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for the game controller."""

    AWAITING_SELECTION = auto()
    PIECE_SELECTED = auto()
    AWAITING_PROMOTION = auto()  # promotion choice outstanding
    GAME_OVER = auto()


@dataclass(frozen=True, slots=True)
class GameStatus:
    """What the UI needs to draw the turn / result line."""

    side_to_move: Color
    in_check: bool
    result: GameResult
    end_reason: GameEndReason | None
    phase: GamePhase

    @property
    def winner(self) -> Color | None:
        return self.result.winner


# ── Options ──────────────────────────────────────────────────────────────────


class GameOptions:
    """Immutable game configuration.

    Args:
        start_fen: Custom starting position; ``None`` for the standard one.
        repetition_limit: Occurrences of a board layout that draw the game.
        stalemate_is_draw: End the game as a draw when the side to move has
            no legal move and is not in check.
    """

    __slots__ = ("start_fen", "repetition_limit", "stalemate_is_draw")

    def __init__(
        self,
        start_fen: str | None = None,
        repetition_limit: int = REPETITION_LIMIT,
        stalemate_is_draw: bool = True,
    ) -> None:
        if repetition_limit < 1:
            raise ValueError(f"repetition_limit must be positive: {repetition_limit!r}")
        self.start_fen = start_fen
        self.repetition_limit = repetition_limit
        self.stalemate_is_draw = stalemate_is_draw

    def __repr__(self) -> str:
        return (
            f"GameOptions(start_fen={self.start_fen!r}, "
            f"repetition_limit={self.repetition_limit}, "
            f"stalemate_is_draw={self.stalemate_is_draw})"
        )


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IPromotionProvider(ABC):
    """Interface for whoever picks the piece a pawn promotes to (usually the UI)."""

    @abstractmethod
    def request_promotion(self, color: Color) -> Future[PieceType]:
        """Ask for a promotion choice for *color*.

        The returned future resolves with one of knight, bishop, rook or
        queen. Cancelling it abandons the move.
        """
