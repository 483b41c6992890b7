"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from chessduel.core.enums import Color, PieceType

_KIND_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_LETTER_KINDS: dict[str, PieceType] = {v: k for k, v in _KIND_LETTERS.items()}
_COLOR_LETTERS: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}

_UNICODE: dict[tuple[Color, PieceType], str] = {
    (Color.WHITE, PieceType.PAWN): "♙",
    (Color.WHITE, PieceType.KNIGHT): "♘",
    (Color.WHITE, PieceType.BISHOP): "♗",
    (Color.WHITE, PieceType.ROOK): "♖",
    (Color.WHITE, PieceType.QUEEN): "♕",
    (Color.WHITE, PieceType.KING): "♔",
    (Color.BLACK, PieceType.PAWN): "♟",
    (Color.BLACK, PieceType.KNIGHT): "♞",
    (Color.BLACK, PieceType.BISHOP): "♝",
    (Color.BLACK, PieceType.ROOK): "♜",
    (Color.BLACK, PieceType.QUEEN): "♛",
    (Color.BLACK, PieceType.KING): "♚",
}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece."""

    color: Color
    kind: PieceType

    # ── Serialisation ────────────────────────────────────────────────────

    @property
    def code(self) -> str:
        """Two-character tag: colour letter + kind letter, e.g. 'wN'."""
        return self.color.letter + _KIND_LETTERS[self.kind]

    @classmethod
    def from_code(cls, code: str) -> Piece:
        """Create piece from a two-character tag, e.g. 'bQ' → black queen."""
        if len(code) != 2 or code[0] not in _COLOR_LETTERS or code[1] not in _LETTER_KINDS:
            raise ValueError(f"Invalid piece code: {code!r}")
        return cls(_COLOR_LETTERS[code[0]], _LETTER_KINDS[code[1]])

    @property
    def fen_char(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        letter = _KIND_LETTERS[self.kind]
        return letter if self.color == Color.WHITE else letter.lower()

    @classmethod
    def from_fen_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        kind = _LETTER_KINDS.get(char.upper())
        if kind is None:
            raise ValueError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, kind)

    @property
    def symbol(self) -> str:
        """Unicode chess symbol, e.g. ♞."""
        return _UNICODE[(self.color, self.kind)]

    def __str__(self) -> str:
        return self.code
