"""Headless promotion provider."""

from __future__ import annotations

from concurrent.futures import Future

from chessduel.core.enums import Color, PieceType
from chessduel.game.interfaces import IPromotionProvider


class DeferredPromotionProvider(IPromotionProvider):
    """Keeps the outstanding request until :meth:`resolve` or :meth:`cancel`.

    Suitable for scripted play and tests; a UI would resolve the future
    from its own event loop instead.
    """

    __slots__ = ("_pending", "requests")

    def __init__(self) -> None:
        self._pending: Future[PieceType] | None = None
        self.requests: list[Color] = []

    @property
    def is_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def request_promotion(self, color: Color) -> Future[PieceType]:
        self.requests.append(color)
        self._pending = Future()
        return self._pending

    def resolve(self, piece_type: PieceType) -> bool:
        """Answer the outstanding request. Returns False if nothing is pending."""
        if not self.is_pending:
            return False
        assert self._pending is not None
        self._pending.set_result(piece_type)
        return True

    def cancel(self) -> bool:
        """Abandon the outstanding request. Returns False if nothing is pending."""
        if not self.is_pending:
            return False
        assert self._pending is not None
        return self._pending.cancel()
