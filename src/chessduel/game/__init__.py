"""Game management layer — controller state machine and promotion providers.

Quick start::

    from chessduel.game import DeferredPromotionProvider, GameController

    promotions = DeferredPromotionProvider()
    ctrl = GameController(promotions)
    ctrl.select_square(6, 4)  # e2
    ctrl.select_square(4, 4)  # e4
"""

from chessduel.game.controller import GameController, GameEvents
from chessduel.game.interfaces import (
    GameOptions,
    GamePhase,
    GameStatus,
    IPromotionProvider,
)
from chessduel.game.promotion import DeferredPromotionProvider

__all__ = [
    # Interfaces
    "GameOptions",
    "GamePhase",
    "GameStatus",
    "IPromotionProvider",
    # Concrete
    "DeferredPromotionProvider",
    "GameController",
    "GameEvents",
]
