"""
Crop interaction module.

This package provides the pointer-driven crop logic for the editor,
implementing Strategy and State patterns: the controller owns the
Idle/Dragging state while strategies compute the rectangle for each handle.
"""

from .controller import CropInteractionController
from .model import CropSessionModel
from .utils import CropDragState, CropHandle, cursor_for_handle

__all__ = [
    "CropDragState",
    "CropHandle",
    "CropInteractionController",
    "CropSessionModel",
    "cursor_for_handle",
]
