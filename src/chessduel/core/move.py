"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass, replace

from chessduel.core.enums import MoveKind, PieceType
from chessduel.core.types import Square, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    Promotion moves are generated with ``promotion=None``; the chosen
    piece type is attached with :meth:`with_promotion` once known.
    """

    from_sq: Square
    to_sq: Square
    kind: MoveKind = MoveKind.NORMAL
    promotion: PieceType | None = None

    @property
    def is_castling(self) -> bool:
        return self.kind in (MoveKind.CASTLE_KINGSIDE, MoveKind.CASTLE_QUEENSIDE)

    @property
    def needs_promotion_choice(self) -> bool:
        return self.kind == MoveKind.PROMOTION and self.promotion is None

    def with_promotion(self, piece_type: PieceType) -> Move:
        """Copy of this promotion move with the chosen piece type."""
        if self.kind != MoveKind.PROMOTION:
            raise ValueError(f"Not a promotion move: {self}")
        return replace(self, promotion=piece_type)

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base
