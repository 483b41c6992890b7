"""GameController — the central orchestrator of a local two-player game.

Coordinates: GameState, MoveGenerator, MoveExecutor, Rules and the
promotion provider supplied by the UI.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass, field

from chessduel.core.enums import (
    PROMOTION_TYPES,
    Color,
    GameEndReason,
    GameResult,
    PieceType,
)
from chessduel.core.executor import MoveExecutor, StagedMove
from chessduel.core.move import Move
from chessduel.core.move_generator import MoveGenerator
from chessduel.core.notation import state_from_fen
from chessduel.core.piece import Piece
from chessduel.core.rules import Rules
from chessduel.core.state import GameState
from chessduel.core.types import Square, is_in_bounds
from chessduel.game.interfaces import (
    GameOptions,
    GamePhase,
    GameStatus,
    IPromotionProvider,
)
from chessduel.game.promotion import DeferredPromotionProvider

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, GameState], None]
GameOverCallback = Callable[[GameResult, GameEndReason | None], None]
PhaseCallback = Callable[[GamePhase], None]
PromotionCallback = Callable[[Color], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_promotion_requested: list[PromotionCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController:
    """Turn sequencing, selection, resign / reset / undo for one local game.

    States: ``AWAITING_SELECTION → PIECE_SELECTED → (AWAITING_SELECTION |
    AWAITING_PROMOTION | GAME_OVER)``.  A promotion move is only committed
    once the provider's future resolves; until then the live state is
    untouched and every selection is ignored.

    Thread-safety: all methods, including the promotion future callback,
    are expected to run on a single (UI) thread.
    """

    __slots__ = (
        "_state",
        "_options",
        "_promotion",
        "_phase",
        "_selection",
        "_destinations",
        "_staged",
        "_pending",
        "events",
    )

    def __init__(
        self,
        promotion_provider: IPromotionProvider | None = None,
        options: GameOptions | None = None,
    ) -> None:
        self._options = options or GameOptions()
        self._promotion = promotion_provider or DeferredPromotionProvider()
        self._state = self._initial_state()
        self._phase = GamePhase.AWAITING_SELECTION
        self._selection: Square | None = None
        self._destinations: dict[Square, Move] = {}
        self._staged: StagedMove | None = None
        self._pending: Future[PieceType] | None = None
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def options(self) -> GameOptions:
        return self._options

    @property
    def pending_promotion(self) -> Move | None:
        """The staged promotion move awaiting a piece choice, if any."""
        return self._staged.move if self._staged is not None else None

    # ── Queries for the UI ───────────────────────────────────────────────

    def current_board(self) -> list[list[Piece | None]]:
        return self._state.board.grid()

    def current_selection(self) -> Square | None:
        return self._selection

    def legal_destinations(self) -> set[Square]:
        return set(self._destinations)

    def captured_pieces(self, color: Color) -> list[Piece]:
        """Pieces captured *by* ``color`` so far, in capture order."""
        return list(self._state.captured[color])

    def status(self) -> GameStatus:
        state = self._state
        return GameStatus(
            side_to_move=state.side_to_move,
            in_check=Rules.is_check(state),
            result=state.result,
            end_reason=state.end_reason,
            phase=self._phase,
        )

    # ── Commands ─────────────────────────────────────────────────────────

    def select_square(self, row: int, col: int) -> bool:
        """Handle a click on (row, col). Returns True if a move was made or staged."""
        if self._phase in (GamePhase.GAME_OVER, GamePhase.AWAITING_PROMOTION):
            _LOGGER.debug(
                "Ignoring selection (%d, %d) in phase %s", row, col, self._phase.name
            )
            return False
        if not is_in_bounds(row, col):
            return False

        sq = (row, col)
        move = self._destinations.get(sq) if self._selection is not None else None
        if move is not None:
            if move.needs_promotion_choice:
                self._stage_promotion(move)
            else:
                self._commit(move)
            return True

        piece = self._state.board[sq]
        if piece is not None and piece.color == self._state.side_to_move:
            self._select(sq)
        else:
            self._clear_selection()
            self._set_phase(GamePhase.AWAITING_SELECTION)
        return False

    def resign(self) -> None:
        """The side to move resigns; the opponent wins."""
        if self._state.is_over:
            return
        self._abandon_promotion()
        self._clear_selection()
        winner = self._state.side_to_move.opposite
        self._finish(GameResult.win_for(winner), GameEndReason.RESIGNATION)

    def reset(self) -> None:
        """Start over from the configured starting position."""
        self._abandon_promotion()
        self._clear_selection()
        self._state = self._initial_state()
        _LOGGER.info("Game reset")
        self._set_phase(GamePhase.AWAITING_SELECTION)

    def undo(self) -> bool:
        """Take back the last committed move. Returns False if there is none.

        With a promotion pending, only the staged move is dropped and the
        committed history is left alone.
        """
        if self._staged is not None:
            self._abandon_promotion()
            self._after_abandon()
            return False

        self._clear_selection()
        move = MoveExecutor.undo_move(self._state)
        if move is None:
            if not self._state.is_over:
                self._set_phase(GamePhase.AWAITING_SELECTION)
            return False

        self._state.result = GameResult.IN_PROGRESS
        self._state.end_reason = None
        _LOGGER.debug("Undid %s", move)
        self._set_phase(GamePhase.AWAITING_SELECTION)
        return True

    # ── Internal helpers ─────────────────────────────────────────────────

    def _initial_state(self) -> GameState:
        if self._options.start_fen is None:
            return GameState.initial()
        return state_from_fen(self._options.start_fen)

    def _select(self, sq: Square) -> None:
        moves = MoveGenerator(self._state).legal_moves(sq)
        self._selection = sq
        self._destinations = {m.to_sq: m for m in moves}
        self._set_phase(GamePhase.PIECE_SELECTED)

    def _clear_selection(self) -> None:
        self._selection = None
        self._destinations = {}

    def _commit(self, move: Move) -> None:
        MoveExecutor.apply_move(self._state, move)
        _LOGGER.debug("Committed %s", move)
        self._clear_selection()
        for cb in self.events.on_move:
            cb(move, self._state)

        result, reason = Rules.evaluate(
            self._state,
            repetition_limit=self._options.repetition_limit,
            stalemate_is_draw=self._options.stalemate_is_draw,
        )
        if result != GameResult.IN_PROGRESS:
            self._finish(result, reason)
        else:
            self._set_phase(GamePhase.AWAITING_SELECTION)

    def _finish(self, result: GameResult, reason: GameEndReason | None) -> None:
        self._state.result = result
        self._state.end_reason = reason
        _LOGGER.info("Game over: %s (%s)", result.name, reason.name if reason else "-")
        self._set_phase(GamePhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(result, reason)

    # ── Promotion (two-phase commit) ─────────────────────────────────────

    def _stage_promotion(self, move: Move) -> None:
        self._staged = MoveExecutor.stage(self._state, move)
        color = self._staged.color
        self._set_phase(GamePhase.AWAITING_PROMOTION)
        _LOGGER.debug("Promotion requested for %s on %s", color, move)
        for cb in self.events.on_promotion_requested:
            cb(color)

        future = self._promotion.request_promotion(color)
        self._pending = future
        future.add_done_callback(self._on_promotion_done)

    def _on_promotion_done(self, future: Future[PieceType]) -> None:
        if future is not self._pending or self._staged is None:
            return  # superseded by undo / reset / resign
        staged = self._staged
        self._pending = None
        self._staged = None

        if future.cancelled():
            _LOGGER.info("Promotion for %s abandoned", staged.move)
            self._after_abandon()
            return
        exc = future.exception()
        if exc is not None:
            _LOGGER.warning("Promotion request for %s failed: %s", staged.move, exc)
            self._after_abandon()
            return
        choice = future.result()
        if choice not in PROMOTION_TYPES:
            _LOGGER.warning("Rejected promotion choice %r for %s", choice, staged.move)
            self._after_abandon()
            return

        self._commit(staged.move.with_promotion(PieceType(choice)))

    def _after_abandon(self) -> None:
        self._clear_selection()
        self._set_phase(GamePhase.AWAITING_SELECTION)

    def _abandon_promotion(self) -> None:
        """Drop a staged promotion without committing."""
        if self._staged is None:
            return
        future = self._pending
        self._staged = None
        self._pending = None
        if future is not None and not future.done():
            future.cancel()
        _LOGGER.debug("Dropped staged promotion")

    def _set_phase(self, phase: GamePhase) -> None:
        if phase == self._phase:
            return
        self._phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)
