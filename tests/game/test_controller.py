"""Tests for GameController — the selection / turn state machine."""

from concurrent.futures import Future

from chessduel.core.enums import (
    CastlingRights,
    Color,
    GameEndReason,
    GameResult,
    PieceType,
)
from chessduel.core.piece import Piece
from chessduel.core.types import parse_square
from chessduel.game.controller import GameController
from chessduel.game.interfaces import GameOptions, GamePhase, IPromotionProvider
from chessduel.game.promotion import DeferredPromotionProvider

SCHOLARS_MATE = ("e2e4", "e7e5", "f1c4", "b8c6", "d1h5", "g8f6", "h5f7")
PROMOTION_FEN = "4k3/P7/8/8/8/8/8/4K3 w - - 0 1"


def click(ctrl: GameController, name: str) -> bool:
    row, col = parse_square(name)
    return ctrl.select_square(row, col)


def play(ctrl: GameController, *moves: str) -> None:
    for text in moves:
        click(ctrl, text[:2])
        assert click(ctrl, text[2:4]), f"{text} was not accepted"


def _make_controller(fen: str | None = None) -> tuple[GameController, DeferredPromotionProvider]:
    promotions = DeferredPromotionProvider()
    ctrl = GameController(promotions, GameOptions(start_fen=fen))
    return ctrl, promotions


class TestSelection:
    def test_initial_phase(self) -> None:
        ctrl, _ = _make_controller()
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
        assert ctrl.current_selection() is None
        assert ctrl.legal_destinations() == set()

    def test_select_own_piece(self) -> None:
        ctrl, _ = _make_controller()
        assert not click(ctrl, "g1")
        assert ctrl.phase == GamePhase.PIECE_SELECTED
        assert ctrl.current_selection() == parse_square("g1")
        assert ctrl.legal_destinations() == {parse_square("f3"), parse_square("h3")}

    def test_empty_square_is_noop(self) -> None:
        ctrl, _ = _make_controller()
        click(ctrl, "e4")
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
        assert ctrl.current_selection() is None

    def test_opponent_piece_is_noop(self) -> None:
        ctrl, _ = _make_controller()
        click(ctrl, "e7")
        assert ctrl.current_selection() is None

    def test_reselect_other_own_piece(self) -> None:
        ctrl, _ = _make_controller()
        click(ctrl, "g1")
        click(ctrl, "b1")
        assert ctrl.current_selection() == parse_square("b1")
        assert ctrl.phase == GamePhase.PIECE_SELECTED

    def test_illegal_destination_deselects(self) -> None:
        ctrl, _ = _make_controller()
        click(ctrl, "g1")
        assert not click(ctrl, "g4")
        assert ctrl.current_selection() is None
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
        assert ctrl.state.side_to_move == Color.WHITE

    def test_out_of_bounds_is_ignored(self) -> None:
        ctrl, _ = _make_controller()
        assert not ctrl.select_square(8, 0)
        assert not ctrl.select_square(-1, 3)


class TestMoves:
    def test_move_switches_turn(self) -> None:
        ctrl, _ = _make_controller()
        play(ctrl, "e2e4")
        assert ctrl.state.side_to_move == Color.BLACK
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
        board = ctrl.current_board()
        assert board[4][4] == Piece(Color.WHITE, PieceType.PAWN)
        assert board[6][4] is None

    def test_move_event_fires(self) -> None:
        ctrl, _ = _make_controller()
        seen: list[str] = []
        ctrl.events.on_move.append(lambda move, state: seen.append(str(move)))
        play(ctrl, "e2e4", "e7e5")
        assert seen == ["e2e4", "e7e5"]

    def test_phase_events(self) -> None:
        ctrl, _ = _make_controller()
        phases: list[GamePhase] = []
        ctrl.events.on_phase_changed.append(phases.append)
        play(ctrl, "e2e4")
        assert phases == [GamePhase.PIECE_SELECTED, GamePhase.AWAITING_SELECTION]

    def test_status_reports_check(self) -> None:
        ctrl, _ = _make_controller()
        play(ctrl, "e2e4", "f7f6", "d1h5")
        status = ctrl.status()
        assert status.side_to_move == Color.BLACK
        assert status.in_check
        assert status.result == GameResult.IN_PROGRESS

    def test_captured_pieces(self) -> None:
        ctrl, _ = _make_controller()
        play(ctrl, "e2e4", "d7d5", "e4d5")
        assert ctrl.captured_pieces(Color.WHITE) == [Piece(Color.BLACK, PieceType.PAWN)]
        assert ctrl.captured_pieces(Color.BLACK) == []


class TestGameOver:
    def test_scholars_mate(self) -> None:
        ctrl, _ = _make_controller()
        results: list[tuple[GameResult, GameEndReason | None]] = []
        ctrl.events.on_game_over.append(lambda r, why: results.append((r, why)))
        play(ctrl, *SCHOLARS_MATE)
        assert ctrl.phase == GamePhase.GAME_OVER
        assert results == [(GameResult.WHITE_WINS, GameEndReason.CHECKMATE)]
        status = ctrl.status()
        assert status.winner == Color.WHITE
        assert status.in_check

    def test_selection_ignored_after_game_over(self) -> None:
        ctrl, _ = _make_controller()
        play(ctrl, *SCHOLARS_MATE)
        assert not click(ctrl, "e8")
        assert ctrl.current_selection() is None

    def test_resign(self) -> None:
        ctrl, _ = _make_controller()
        play(ctrl, "e2e4")
        ctrl.resign()  # black to move resigns
        status = ctrl.status()
        assert status.result == GameResult.WHITE_WINS
        assert status.end_reason == GameEndReason.RESIGNATION
        assert ctrl.phase == GamePhase.GAME_OVER

    def test_resign_twice_keeps_first_result(self) -> None:
        ctrl, _ = _make_controller()
        ctrl.resign()
        ctrl.resign()
        assert ctrl.status().result == GameResult.BLACK_WINS

    def test_repetition_draw(self) -> None:
        ctrl, _ = _make_controller()
        shuffle = ("g1f3", "g8f6", "f3g1", "f6g8")
        play(ctrl, *shuffle, *shuffle)
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
        play(ctrl, "g1f3")
        assert ctrl.phase == GamePhase.GAME_OVER
        assert ctrl.status().result == GameResult.DRAW
        assert ctrl.status().end_reason == GameEndReason.THREEFOLD_REPETITION

    def test_stalemate_draw(self) -> None:
        ctrl, _ = _make_controller("7k/8/5K2/6Q1/8/8/8/8 w - - 0 1")
        play(ctrl, "g5g6")
        assert ctrl.status().result == GameResult.DRAW
        assert ctrl.status().end_reason == GameEndReason.STALEMATE

    def test_stalemate_not_terminal_when_disabled(self) -> None:
        promotions = DeferredPromotionProvider()
        options = GameOptions("7k/8/5K2/6Q1/8/8/8/8 w - - 0 1", stalemate_is_draw=False)
        ctrl = GameController(promotions, options)
        play(ctrl, "g5g6")
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
        assert ctrl.status().result == GameResult.IN_PROGRESS


class TestUndoReset:
    def test_undo_empty_is_noop(self) -> None:
        ctrl, _ = _make_controller()
        assert not ctrl.undo()
        assert ctrl.phase == GamePhase.AWAITING_SELECTION

    def test_undo_restores_board_side_and_rights(self) -> None:
        ctrl, _ = _make_controller("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        before = ctrl.current_board()
        play(ctrl, "e1g1")
        assert ctrl.state.castling == CastlingRights.BLACK_BOTH
        assert ctrl.undo()
        assert ctrl.current_board() == before
        assert ctrl.state.side_to_move == Color.WHITE
        assert ctrl.state.castling == CastlingRights.ALL

    def test_undo_clears_selection(self) -> None:
        ctrl, _ = _make_controller()
        play(ctrl, "e2e4")
        click(ctrl, "e7")
        assert ctrl.undo()
        assert ctrl.current_selection() is None
        assert ctrl.phase == GamePhase.AWAITING_SELECTION

    def test_undo_after_checkmate_resumes(self) -> None:
        ctrl, _ = _make_controller()
        play(ctrl, *SCHOLARS_MATE)
        assert ctrl.undo()
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
        assert ctrl.status().result == GameResult.IN_PROGRESS
        assert ctrl.state.side_to_move == Color.WHITE

    def test_reset(self) -> None:
        ctrl, _ = _make_controller()
        play(ctrl, *SCHOLARS_MATE)
        ctrl.reset()
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
        assert ctrl.state.position_history == []
        assert ctrl.state.side_to_move == Color.WHITE
        assert ctrl.status().result == GameResult.IN_PROGRESS
        assert ctrl.captured_pieces(Color.WHITE) == []


class TestPromotion:
    def test_pending_until_resolved(self) -> None:
        ctrl, promotions = _make_controller(PROMOTION_FEN)
        requested: list[Color] = []
        ctrl.events.on_promotion_requested.append(requested.append)

        play(ctrl, "a7a8")
        assert ctrl.phase == GamePhase.AWAITING_PROMOTION
        assert requested == [Color.WHITE]
        assert promotions.requests == [Color.WHITE]
        assert ctrl.pending_promotion is not None
        # Nothing committed yet
        assert ctrl.current_board()[1][0] == Piece(Color.WHITE, PieceType.PAWN)
        assert ctrl.current_board()[0][0] is None
        assert ctrl.state.side_to_move == Color.WHITE

        assert promotions.resolve(PieceType.QUEEN)
        assert ctrl.current_board()[0][0] == Piece(Color.WHITE, PieceType.QUEEN)
        assert ctrl.current_board()[1][0] is None
        assert ctrl.state.side_to_move == Color.BLACK
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
        assert ctrl.pending_promotion is None

    def test_selection_ignored_while_pending(self) -> None:
        ctrl, promotions = _make_controller(PROMOTION_FEN)
        play(ctrl, "a7a8")
        assert not click(ctrl, "e1")
        assert ctrl.phase == GamePhase.AWAITING_PROMOTION
        assert promotions.is_pending

    def test_cancel_leaves_move_uncommitted(self) -> None:
        ctrl, promotions = _make_controller(PROMOTION_FEN)
        play(ctrl, "a7a8")
        assert promotions.cancel()
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
        assert ctrl.current_board()[1][0] == Piece(Color.WHITE, PieceType.PAWN)
        assert ctrl.state.side_to_move == Color.WHITE
        assert ctrl.state.position_history == []

    def test_invalid_choice_is_rejected(self) -> None:
        ctrl, promotions = _make_controller(PROMOTION_FEN)
        play(ctrl, "a7a8")
        promotions.resolve(PieceType.KING)
        assert ctrl.current_board()[0][0] is None
        assert ctrl.phase == GamePhase.AWAITING_SELECTION

    def test_undo_while_pending_abandons(self) -> None:
        ctrl, promotions = _make_controller(PROMOTION_FEN)
        play(ctrl, "a7a8")
        assert not ctrl.undo()
        assert not promotions.is_pending
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
        assert not promotions.resolve(PieceType.QUEEN)
        assert ctrl.current_board()[0][0] is None

    def test_undo_while_pending_keeps_committed_moves(self) -> None:
        ctrl, promotions = _make_controller(PROMOTION_FEN)
        play(ctrl, "e1d1", "e8f7")
        before = ctrl.current_board()

        play(ctrl, "a7a8")
        assert ctrl.phase == GamePhase.AWAITING_PROMOTION
        assert not ctrl.undo()

        assert ctrl.current_board() == before
        assert len(ctrl.state.position_history) == 2
        assert ctrl.state.side_to_move == Color.WHITE
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
        assert not promotions.resolve(PieceType.QUEEN)
        assert ctrl.current_board()[1][0] == Piece(Color.WHITE, PieceType.PAWN)

        # A second undo takes back the last committed move as usual.
        assert ctrl.undo()
        assert ctrl.current_board()[1][5] is None
        assert ctrl.current_board()[0][4] == Piece(Color.BLACK, PieceType.KING)

    def test_reset_while_pending_abandons(self) -> None:
        ctrl, promotions = _make_controller(PROMOTION_FEN)
        play(ctrl, "a7a8")
        ctrl.reset()
        assert not promotions.resolve(PieceType.QUEEN)
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
        assert ctrl.pending_promotion is None
        assert ctrl.current_board()[0][0] is None
        assert ctrl.current_board()[1][0] == Piece(Color.WHITE, PieceType.PAWN)
        assert ctrl.state.position_history == []

    def test_resign_while_pending_abandons(self) -> None:
        ctrl, promotions = _make_controller(PROMOTION_FEN)
        play(ctrl, "a7a8")
        ctrl.resign()
        assert not promotions.resolve(PieceType.QUEEN)
        assert ctrl.phase == GamePhase.GAME_OVER
        assert ctrl.state.result == GameResult.BLACK_WINS
        assert ctrl.state.end_reason == GameEndReason.RESIGNATION
        assert ctrl.current_board()[0][0] is None
        assert ctrl.current_board()[1][0] == Piece(Color.WHITE, PieceType.PAWN)

    def test_promotion_to_knight_gives_check(self) -> None:
        ctrl, promotions = _make_controller("8/5P1k/8/8/8/8/8/4K3 w - - 0 1")
        play(ctrl, "f7f8")
        promotions.resolve(PieceType.KNIGHT)
        assert ctrl.status().in_check
        assert ctrl.current_board()[0][5] == Piece(Color.WHITE, PieceType.KNIGHT)

    def test_provider_answering_immediately(self) -> None:
        class AlwaysRook(IPromotionProvider):
            def request_promotion(self, color: Color) -> Future[PieceType]:
                future: Future[PieceType] = Future()
                future.set_result(PieceType.ROOK)
                return future

        ctrl = GameController(AlwaysRook(), GameOptions(PROMOTION_FEN))
        play(ctrl, "a7a8")
        assert ctrl.current_board()[0][0] == Piece(Color.WHITE, PieceType.ROOK)
        assert ctrl.phase == GamePhase.AWAITING_SELECTION
