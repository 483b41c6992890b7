"""PyQt6 adapters for the game layer."""

from chessduel.bridge.qt_bridge import QtPromotionProvider

__all__ = ["QtPromotionProvider"]
