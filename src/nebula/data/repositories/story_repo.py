"""Repository for scene definitions."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from nebula.core.types import SceneId
from nebula.data.errors import DataValidationError
from nebula.data.paths import DEFAULT_STORY_FILENAME
from nebula.data.repositories.base import RepositoryBase
from nebula.domain.defs import ChoiceDef, SceneDef
from nebula.domain.graph import SceneGraph

DEFAULT_START_SCENE_ID: SceneId = 0
_DIGITS = frozenset("0123456789")


class StoryRepository(RepositoryBase[SceneId, SceneDef]):
    """Loads scenes from a story file and validates their structure.

    Expected layout::

        {
          "title": "...",
          "tagline": "...",
          "farewell": "...",
          "start": 0,
          "scenes": {
            "0": {"text": "...", "choices": [{"label": "...", "next": 1}]},
            "1": {"text": "..."}
          }
        }

    ``text`` may also be a list of lines, joined with newlines.
    """

    def __init__(self, base_path: Path | str | None = None, filename: str = DEFAULT_STORY_FILENAME) -> None:
        super().__init__(filename, base_path)
        self._start_scene_id: SceneId = DEFAULT_START_SCENE_ID
        self._title: str | None = None
        self._tagline: str | None = None
        self._farewell: str | None = None

    @classmethod
    def from_file(cls, story_path: Path | str) -> "StoryRepository":
        """Create a repository reading an arbitrary story file."""
        story_path = Path(story_path)
        return cls(base_path=story_path.parent, filename=story_path.name)

    @property
    def start_scene_id(self) -> SceneId:
        self._ensure_loaded()
        return self._start_scene_id

    @property
    def title(self) -> str | None:
        self._ensure_loaded()
        return self._title

    @property
    def tagline(self) -> str | None:
        self._ensure_loaded()
        return self._tagline

    @property
    def farewell(self) -> str | None:
        self._ensure_loaded()
        return self._farewell

    def build_graph(self) -> SceneGraph:
        """Return a fresh, unsealed graph holding every loaded scene."""
        return SceneGraph.from_scenes(self.all())

    def _build(self, raw: dict[str, object]) -> Dict[SceneId, SceneDef]:
        self._title = self._optional_str(raw.get("title"), "story title")
        self._tagline = self._optional_str(raw.get("tagline"), "story tagline")
        self._farewell = self._optional_str(raw.get("farewell"), "story farewell")
        if "start" in raw:
            self._start_scene_id = self._require_scene_id(raw["start"], "story start")
        scenes_payload = self._require_mapping(raw.get("scenes"), "story scenes")

        scenes: Dict[SceneId, SceneDef] = {}
        for raw_id, scene_payload in scenes_payload.items():
            scene_id = self._parse_scene_key(raw_id)
            if scene_id in scenes:
                raise DataValidationError(f"Duplicate scene id {scene_id} (key '{raw_id}').")
            scene_data = self._require_mapping(scene_payload, f"scene '{raw_id}'")
            text = self._parse_text(scene_data.get("text"), f"scene '{raw_id}' text")
            choices = self._parse_choices(scene_data.get("choices"), raw_id)
            scenes[scene_id] = SceneDef(id=scene_id, text=text, choices=tuple(choices))
        return scenes

    def _optional_str(self, value: object, context: str) -> str | None:
        if value is None:
            return None
        return self._require_str(value, context)

    @staticmethod
    def _parse_scene_key(raw_id: object) -> SceneId:
        if not isinstance(raw_id, str) or not raw_id or not set(raw_id) <= _DIGITS:
            raise DataValidationError(f"Scene ids must be decimal digit strings, got {raw_id!r}.")
        return int(raw_id)

    def _parse_text(self, raw_text: object, context: str) -> str:
        if isinstance(raw_text, list):
            return "\n".join(self._require_str(line, f"{context}[{index}]") for index, line in enumerate(raw_text))
        return self._require_str(raw_text, context)

    def _parse_choices(self, raw_choices: object, raw_id: str) -> List[ChoiceDef]:
        if raw_choices is None:
            return []
        if not isinstance(raw_choices, list):
            raise DataValidationError(f"scene '{raw_id}' choices must be a list if provided.")
        choices: List[ChoiceDef] = []
        for index, entry in enumerate(raw_choices):
            choice_ctx = f"scene '{raw_id}' choices[{index}]"
            choice_mapping = self._require_mapping(entry, choice_ctx)
            label = self._require_str(choice_mapping.get("label"), f"{choice_ctx} label")
            next_scene = self._require_scene_id(choice_mapping.get("next"), f"{choice_ctx} next")
            choices.append(ChoiceDef(label=label, next_scene_id=next_scene))
        return choices
