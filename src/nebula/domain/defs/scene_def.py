"""Scene definition structures used by the runtime."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from nebula.core.types import SceneId


@dataclass(frozen=True, slots=True)
class ChoiceDef:
    """Represents a selectable choice leading out of a scene."""

    label: str
    next_scene_id: SceneId


@dataclass(frozen=True, slots=True)
class SceneDef:
    """Fully parsed scene. A scene without choices is an ending."""

    id: SceneId
    text: str
    choices: Tuple[ChoiceDef, ...] = field(default_factory=tuple)

    @property
    def is_terminal(self) -> bool:
        return not self.choices
