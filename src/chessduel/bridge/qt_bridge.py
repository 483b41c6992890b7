"""Qt bridge that turns promotion requests into signals and slots."""

from __future__ import annotations

import logging
from concurrent.futures import Future

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from chessduel.core.enums import PROMOTION_TYPES, Color, PieceType
from chessduel.game.interfaces import IPromotionProvider

_LOGGER = logging.getLogger(__name__)


class QtPromotionProvider(QObject):
    """Promotion provider for a Qt front end.

    ``promotion_requested`` carries the promoting :class:`Color`; the UI
    shows its picker and answers through :meth:`choose` or :meth:`cancel`.
    """

    promotion_requested = pyqtSignal(object)
    promotion_resolved = pyqtSignal(object)
    promotion_cancelled = pyqtSignal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._pending: Future[PieceType] | None = None

    @property
    def is_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def request_promotion(self, color: Color) -> Future[PieceType]:
        if self.is_pending:
            assert self._pending is not None
            self._pending.cancel()
        future: Future[PieceType] = Future()
        future.add_done_callback(self._on_future_done)
        self._pending = future
        self.promotion_requested.emit(color)
        return future

    def _on_future_done(self, future: Future[PieceType]) -> None:
        # Fires for cancel() here and for the controller dropping the move.
        if future.cancelled():
            self.promotion_cancelled.emit()

    @pyqtSlot(int)
    def choose(self, piece_type: int) -> None:
        """Resolve the outstanding request with *piece_type*."""
        if not self.is_pending:
            _LOGGER.debug("Promotion choice %d with nothing pending", piece_type)
            return
        choice = PieceType(piece_type)
        if choice not in PROMOTION_TYPES:
            raise ValueError(f"Cannot promote to {choice.name}")
        assert self._pending is not None
        self._pending.set_result(choice)
        self.promotion_resolved.emit(choice)

    @pyqtSlot()
    def cancel(self) -> None:
        """Abandon the outstanding request (e.g. the picker was closed)."""
        if not self.is_pending:
            return
        assert self._pending is not None
        self._pending.cancel()


# QObject's metaclass cannot be combined with ABCMeta, so register virtually.
IPromotionProvider.register(QtPromotionProvider)
