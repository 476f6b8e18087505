"""Domain definition exports."""

from .scene_def import ChoiceDef, SceneDef

__all__ = [
    "ChoiceDef",
    "SceneDef",
]
