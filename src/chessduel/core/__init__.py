"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chessduel.core import GameState, MoveGenerator, parse_square

    state = GameState.initial()
    for move in MoveGenerator(state).legal_moves(parse_square("e2")):
        print(move)
"""

from chessduel.core.board import Board, BoardSnapshot
from chessduel.core.check import CheckDetector
from chessduel.core.enums import (
    PROMOTION_TYPES,
    CastlingRights,
    Color,
    GameEndReason,
    GameResult,
    MoveKind,
    PieceType,
)
from chessduel.core.executor import MoveExecutor, StagedMove
from chessduel.core.move import Move
from chessduel.core.move_generator import MoveGenerator
from chessduel.core.notation import (
    STARTING_FEN,
    board_from_codes,
    board_to_codes,
    state_from_fen,
    state_from_fixture,
    state_to_fen,
    state_to_fixture,
)
from chessduel.core.piece import Piece
from chessduel.core.rules import Rules
from chessduel.core.state import GameState, UndoRecord
from chessduel.core.types import Square, parse_square, square_name

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameEndReason",
    "GameResult",
    "MoveKind",
    "PROMOTION_TYPES",
    "PieceType",
    # Types / helpers
    "Square",
    "parse_square",
    "square_name",
    # Domain objects
    "Board",
    "BoardSnapshot",
    "CheckDetector",
    "GameState",
    "Move",
    "MoveExecutor",
    "MoveGenerator",
    "Piece",
    "Rules",
    "StagedMove",
    "UndoRecord",
    # Notation
    "STARTING_FEN",
    "board_from_codes",
    "board_to_codes",
    "state_from_fen",
    "state_from_fixture",
    "state_to_fen",
    "state_to_fixture",
]
