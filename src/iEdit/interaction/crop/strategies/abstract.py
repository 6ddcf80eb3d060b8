"""
Abstract base class for crop interaction strategies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class InteractionStrategy(ABC):
    """Strategy applied while one crop drag gesture is in flight."""

    @abstractmethod
    def on_drag(self, dx: float, dy: float) -> None:
        """Apply the total pointer delta since the drag started, in percent."""

    @abstractmethod
    def on_end(self) -> None:
        """Handle end of the interaction."""
