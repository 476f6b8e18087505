"""Service layer exports."""

from .errors import GraphSealedError, InputClosedError, InvalidGraphError, MissingSceneError
from .input_validator import FALLBACK_SELECTION, InputValidator
from .story_service import START_SCENE_ID, SceneView, SessionOutcome, StoryService

__all__ = [
    "FALLBACK_SELECTION",
    "GraphSealedError",
    "InputClosedError",
    "InputValidator",
    "InvalidGraphError",
    "MissingSceneError",
    "START_SCENE_ID",
    "SceneView",
    "SessionOutcome",
    "StoryService",
]
