"""Repository exports."""

from .story_repo import DEFAULT_START_SCENE_ID, StoryRepository

__all__ = [
    "DEFAULT_START_SCENE_ID",
    "StoryRepository",
]
