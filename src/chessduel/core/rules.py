"""High-level chess rules: check, checkmate, stalemate, repetition draw."""

from __future__ import annotations

from chessduel.core.check import CheckDetector
from chessduel.core.enums import GameEndReason, GameResult
from chessduel.core.move_generator import MoveGenerator
from chessduel.core.state import GameState

REPETITION_LIMIT = 3


class Rules:
    """Static rule-checker that classifies a :class:`GameState`."""

    # Repetition is keyed on piece placement only; side to move, castling
    # rights and en passant availability are not part of the key.
    # position_history holds the board after each committed move and not
    # the starting layout, so the start position only counts once it is
    # reached again by a move.

    @staticmethod
    def is_check(state: GameState) -> bool:
        return CheckDetector.is_in_check(state, state.side_to_move)

    @staticmethod
    def is_checkmate(state: GameState) -> bool:
        if not Rules.is_check(state):
            return False
        return not MoveGenerator(state).has_legal_move()

    @staticmethod
    def is_stalemate(state: GameState) -> bool:
        if Rules.is_check(state):
            return False
        return not MoveGenerator(state).has_legal_move()

    @staticmethod
    def is_draw_by_repetition(state: GameState, limit: int = REPETITION_LIMIT) -> bool:
        return state.repetition_count() >= limit

    @staticmethod
    def evaluate(
        state: GameState,
        *,
        repetition_limit: int = REPETITION_LIMIT,
        stalemate_is_draw: bool = True,
    ) -> tuple[GameResult, GameEndReason | None]:
        """Classify the position after a move for the side now to move."""
        in_check = Rules.is_check(state)
        if not MoveGenerator(state).has_legal_move():
            if in_check:
                winner = state.side_to_move.opposite
                return GameResult.win_for(winner), GameEndReason.CHECKMATE
            if stalemate_is_draw:
                return GameResult.DRAW, GameEndReason.STALEMATE

        if Rules.is_draw_by_repetition(state, repetition_limit):
            return GameResult.DRAW, GameEndReason.THREEFOLD_REPETITION

        return GameResult.IN_PROGRESS, None
