"""Service-layer exceptions."""
from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from nebula.domain.graph import GraphSealedError

if TYPE_CHECKING:
    from nebula.services.story_graph_validator import Issue


class MissingSceneError(Exception):
    """Raised when the session points at a scene the graph does not hold."""

    def __init__(self, scene_id: int) -> None:
        super().__init__(f"Missing scene {scene_id}")
        self.scene_id = scene_id


class InputClosedError(Exception):
    """Raised when the input source is exhausted and the policy is to abort."""


class InvalidGraphError(Exception):
    """Raised when pre-flight validation finds errors in the scene graph."""

    def __init__(self, issues: Sequence["Issue"]) -> None:
        self.issues = list(issues)
        super().__init__(f"Scene graph failed validation with {len(self.issues)} error(s).")


__all__ = [
    "GraphSealedError",
    "InputClosedError",
    "InvalidGraphError",
    "MissingSceneError",
]
