"""In-memory scene graph populated once before play begins."""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

from nebula.core.types import SceneId
from nebula.domain.defs import ChoiceDef, SceneDef


class GraphSealedError(Exception):
    """Raised when a sealed graph is asked to accept another scene."""


class SceneGraph:
    """Mapping from scene id to scene definition.

    Scenes are added while the graph is being built. After :meth:`seal` the
    graph is read-only for the rest of its life.
    """

    def __init__(self) -> None:
        self._scenes: Dict[SceneId, SceneDef] = {}
        self._sealed = False

    @classmethod
    def from_scenes(cls, scenes: Iterable[SceneDef]) -> "SceneGraph":
        """Build an unsealed graph from an iterable of scenes."""
        graph = cls()
        for scene in scenes:
            graph.add_scene(scene)
        return graph

    @classmethod
    def from_table(
        cls, rows: Iterable[Tuple[SceneId, str, Sequence[Tuple[str, SceneId]]]]
    ) -> "SceneGraph":
        """Build an unsealed graph from ``(id, text, [(label, target_id), ...])`` rows."""
        return cls.from_scenes(
            SceneDef(
                id=scene_id,
                text=text,
                choices=tuple(ChoiceDef(label=label, next_scene_id=target) for label, target in choices),
            )
            for scene_id, text, choices in rows
        )

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        """Forbid any further insertions."""
        self._sealed = True

    def add_scene(self, scene: SceneDef) -> None:
        """Insert or replace the scene keyed by its id (last write wins)."""
        if self._sealed:
            raise GraphSealedError(f"Cannot add scene {scene.id}: graph is sealed.")
        if isinstance(scene.id, bool) or not isinstance(scene.id, int) or scene.id < 0:
            raise ValueError(f"Scene ids must be non-negative integers, got {scene.id!r}.")
        self._scenes[scene.id] = scene

    def get_scene(self, scene_id: SceneId) -> SceneDef | None:
        """Return the scene for ``scene_id`` or None when it does not exist."""
        return self._scenes.get(scene_id)

    def scene_ids(self) -> List[SceneId]:
        """Return every scene id in ascending order."""
        return sorted(self._scenes)

    def scenes(self) -> List[SceneDef]:
        """Return every scene sorted deterministically by id."""
        return [self._scenes[key] for key in sorted(self._scenes)]

    def __contains__(self, scene_id: object) -> bool:
        return scene_id in self._scenes

    def __len__(self) -> int:
        return len(self._scenes)

    def __iter__(self) -> Iterator[SceneId]:
        return iter(self.scene_ids())
