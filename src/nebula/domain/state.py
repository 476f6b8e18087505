"""Domain-level session state tracking."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from nebula.core.types import SceneId


@dataclass
class SessionState:
    """Position and visited path of a single play session."""

    current_id: SceneId
    history: List[SceneId] = field(default_factory=list)

    @property
    def steps_taken(self) -> int:
        """Number of successful transitions made so far."""
        return max(len(self.history) - 1, 0)
