"""Capabilities the traversal engine needs from a presentation layer."""
from __future__ import annotations

from typing import Protocol, Sequence

from nebula.core.types import SceneId


class Presenter(Protocol):
    """Receives everything the player should see during a session."""

    def display_text(self, text: str) -> None:
        """Show a scene's narrative text."""

    def display_choices(self, labels: Sequence[str]) -> None:
        """Show the choice labels of the current scene, in menu order."""

    def display_history(self, history: Sequence[SceneId]) -> None:
        """Show the visited path once a terminal scene is reached."""


class Selector(Protocol):
    """Produces a validated 1-based menu selection."""

    def read_selection(self, max_option: int) -> int:
        ...
