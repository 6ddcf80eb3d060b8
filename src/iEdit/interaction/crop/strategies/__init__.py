"""Drag strategies for the crop tool."""

from .abstract import InteractionStrategy
from .move_strategy import MoveStrategy
from .resize_strategy import ResizeStrategy

__all__ = ["InteractionStrategy", "MoveStrategy", "ResizeStrategy"]
