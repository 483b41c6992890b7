"""Board codes, state fixtures and FEN parsing/serialisation."""

from __future__ import annotations

from typing import Any

from chessduel.core.board import Board
from chessduel.core.enums import CastlingRights, Color
from chessduel.core.piece import Piece
from chessduel.core.state import GameState
from chessduel.core.types import Square, parse_square, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
EMPTY_CODE = "--"

_CASTLING_CHARS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}
_SIDE_CHARS: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}


# ── Two-character board codes ────────────────────────────────────────────────


def board_to_codes(board: Board) -> list[list[str]]:
    """8 rows × 8 codes such as ``"wP"``; empty squares are ``"--"``."""
    return [
        [piece.code if piece is not None else EMPTY_CODE for piece in row]
        for row in board.grid()
    ]


def board_from_codes(rows: list[list[str]]) -> Board:
    """Inverse of :func:`board_to_codes`."""
    if len(rows) != 8 or any(len(row) != 8 for row in rows):
        raise ValueError(f"Board codes must be 8 rows of 8 entries: {rows!r}")
    board = Board()
    for r, row in enumerate(rows):
        for c, code in enumerate(row):
            if code != EMPTY_CODE:
                board[(r, c)] = Piece.from_code(code)
    return board


# ── Castling / en passant fields ─────────────────────────────────────────────


def castling_to_str(castling: CastlingRights) -> str:
    text = "".join(ch for ch, right in _CASTLING_CHARS.items() if castling & right)
    return text or "-"


def castling_from_str(text: str) -> CastlingRights:
    castling = CastlingRights.NONE
    if text == "-":
        return castling
    seen: set[str] = set()
    for ch in text:
        right = _CASTLING_CHARS.get(ch)
        if right is None or ch in seen:
            raise ValueError(f"Invalid castling field: {text!r}")
        seen.add(ch)
        castling |= right
    return castling


def _en_passant_from_str(text: str | None, side: Color) -> Square | None:
    if text in (None, "-"):
        return None
    sq = parse_square(text)
    expected_row = 2 if side == Color.WHITE else 5
    if sq[0] != expected_row:
        raise ValueError(f"Invalid en-passant square for side-to-move: {text!r}")
    return sq


def _side_from_str(text: str) -> Color:
    try:
        return _SIDE_CHARS[text]
    except KeyError:
        raise ValueError(f"Invalid side-to-move field: {text!r}") from None


# ── Fixtures ─────────────────────────────────────────────────────────────────


def state_to_fixture(state: GameState) -> dict[str, Any]:
    """Plain-data snapshot of board, side to move, castling and en passant."""
    return {
        "board": board_to_codes(state.board),
        "side_to_move": state.side_to_move.letter,
        "castling": castling_to_str(state.castling),
        "en_passant": square_name(state.en_passant) if state.en_passant else None,
    }


def state_from_fixture(data: dict[str, Any]) -> GameState:
    """Rebuild a :class:`GameState` (empty history) from :func:`state_to_fixture`."""
    try:
        rows = data["board"]
        side = _side_from_str(data["side_to_move"])
    except KeyError as exc:
        raise ValueError(f"Fixture is missing field {exc.args[0]!r}") from None
    return GameState(
        board=board_from_codes(rows),
        side_to_move=side,
        castling=castling_from_str(data.get("castling", "-")),
        en_passant=_en_passant_from_str(data.get("en_passant"), side),
    )


# ── FEN ──────────────────────────────────────────────────────────────────────


def state_from_fen(fen: str) -> GameState:
    """Parse a FEN string into a :class:`GameState`. Clock fields are ignored."""
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]

    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for row, rank_text in enumerate(ranks):
        col = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
                col += step
            else:
                if col >= 8:
                    raise ValueError(f"Invalid FEN rank width: {fen!r}")
                board[(row, col)] = Piece.from_fen_char(ch)
                col += 1
            if col > 8:
                raise ValueError(f"Invalid FEN rank width: {fen!r}")
        if col != 8:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")

    side = _side_from_str(side_part)
    return GameState(
        board=board,
        side_to_move=side,
        castling=castling_from_str(castling_part),
        en_passant=_en_passant_from_str(ep_part, side),
    )


def state_to_fen(state: GameState) -> str:
    """Serialise a :class:`GameState` to FEN (clock fields written as ``0 1``)."""
    rows: list[str] = []
    for cells in state.board.grid():
        empty = 0
        row = ""
        for piece in cells:
            if piece is None:
                empty += 1
                continue
            if empty:
                row += str(empty)
                empty = 0
            row += piece.fen_char
        if empty:
            row += str(empty)
        rows.append(row)

    ep = square_name(state.en_passant) if state.en_passant else "-"
    return (
        f"{'/'.join(rows)} {state.side_to_move.letter} "
        f"{castling_to_str(state.castling)} {ep} 0 1"
    )
