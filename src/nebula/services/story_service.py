"""Story traversal services."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

from nebula.core.logging import get_logger
from nebula.core.types import SceneId
from nebula.data.repositories import StoryRepository
from nebula.domain.defs import SceneDef
from nebula.domain.graph import SceneGraph
from nebula.domain.state import SessionState
from nebula.services.errors import MissingSceneError
from nebula.services.story_graph_validator import ensure_valid

if TYPE_CHECKING:
    from nebula.presentation.adapter import Presenter, Selector

START_SCENE_ID: SceneId = 0

log = get_logger(__name__)


@dataclass(slots=True)
class SceneView:
    """Data returned to the presentation layer for rendering."""

    scene_id: SceneId
    text: str
    choices: List[str]

    @property
    def is_terminal(self) -> bool:
        return not self.choices


@dataclass(slots=True)
class SessionOutcome:
    """Result of a session that reached a terminal scene."""

    terminal_id: SceneId
    history: List[SceneId] = field(default_factory=list)


class StoryService:
    """Application service that walks the scene graph.

    The graph is sealed on construction; from then on the service only reads
    it. Each session's position and path live in a ``SessionState`` that only
    this service mutates. With ``validate=True`` a graph whose start scene or
    edges do not resolve is refused with ``InvalidGraphError``.
    """

    def __init__(
        self,
        graph: SceneGraph,
        *,
        start_scene_id: SceneId = START_SCENE_ID,
        validate: bool = False,
    ) -> None:
        graph.seal()
        if validate:
            ensure_valid(graph, [start_scene_id])
        self._graph = graph
        self._start_scene_id = start_scene_id

    @classmethod
    def from_repository(cls, story_repo: StoryRepository, *, validate: bool = False) -> "StoryService":
        """Build the service from every scene a repository holds."""
        return cls(story_repo.build_graph(), start_scene_id=story_repo.start_scene_id, validate=validate)

    @property
    def graph(self) -> SceneGraph:
        return self._graph

    @property
    def start_scene_id(self) -> SceneId:
        return self._start_scene_id

    def start_session(self, start_id: SceneId | None = None) -> SessionState:
        """Create a fresh session positioned on the start scene."""
        scene_id = self._start_scene_id if start_id is None else start_id
        log.info("session_started", start_id=scene_id)
        return SessionState(current_id=scene_id)

    def enter_scene(self, state: SessionState) -> SceneDef:
        """Resolve the current scene and record it in the session history."""
        scene = self._current_scene(state)
        state.history.append(scene.id)
        log.debug("scene_entered", scene_id=scene.id, step=len(state.history))
        return scene

    def get_scene_view(self, state: SessionState) -> SceneView:
        """Return the view model for the current scene without recording a visit."""
        scene = self._current_scene(state)
        return SceneView(
            scene_id=scene.id,
            text=scene.text,
            choices=[choice.label for choice in scene.choices],
        )

    def choose(self, state: SessionState, pick: int) -> SceneId:
        """Follow the 1-based ``pick`` edge of the current scene and return the new position."""
        scene = self._current_scene(state)
        if scene.is_terminal:
            raise ValueError(f"Scene {scene.id} is terminal and has no choices to select.")
        if not 1 <= pick <= len(scene.choices):
            raise IndexError(f"Choice {pick} is invalid for scene {scene.id}.")
        next_scene_id = scene.choices[pick - 1].next_scene_id
        log.debug("choice_taken", scene_id=scene.id, pick=pick, next_scene_id=next_scene_id)
        state.current_id = next_scene_id
        return next_scene_id

    def play(
        self,
        presenter: "Presenter",
        selector: "Selector",
        start_id: SceneId | None = None,
    ) -> SessionOutcome:
        """Run a full session until a terminal scene is reached."""
        state = self.start_session(start_id)
        while True:
            scene = self.enter_scene(state)
            presenter.display_text(scene.text)
            if scene.is_terminal:
                history = list(state.history)
                presenter.display_history(history)
                log.info("session_terminated", terminal_id=scene.id, steps=state.steps_taken)
                return SessionOutcome(terminal_id=scene.id, history=history)
            presenter.display_choices([choice.label for choice in scene.choices])
            pick = selector.read_selection(len(scene.choices))
            self.choose(state, pick)

    def _current_scene(self, state: SessionState) -> SceneDef:
        scene = self._graph.get_scene(state.current_id)
        if scene is None:
            log.info("scene_missing", scene_id=state.current_id, history=list(state.history))
            raise MissingSceneError(state.current_id)
        return scene
