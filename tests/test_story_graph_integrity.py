"""Integrity checks for the bundled story."""
from __future__ import annotations

from typing import Dict, List

import pytest

from nebula.data.repositories import StoryRepository
from nebula.services import StoryService
from nebula.services.story_graph_validator import validate_story_graph

ENDING_IDS = {8, 9, 10, 11, 12, 14, 15}


@pytest.fixture(scope="module")
def service() -> StoryService:
    return StoryService.from_repository(StoryRepository())


def _first_choice_path(service: StoryService) -> List[int]:
    graph = service.graph
    path = [service.start_scene_id]
    scene = graph.get_scene(path[-1])
    while scene is not None and not scene.is_terminal:
        path.append(scene.choices[0].next_scene_id)
        scene = graph.get_scene(path[-1])
    return path


def test_bundled_story_validates_clean(service: StoryService) -> None:
    assert validate_story_graph(service.graph, [service.start_scene_id]) == []


def test_bundled_story_has_sixteen_scenes(service: StoryService) -> None:
    assert service.graph.scene_ids() == list(range(16))
    assert service.start_scene_id == 0


def test_terminal_scenes_are_the_endings(service: StoryService) -> None:
    terminals = {scene.id for scene in service.graph.scenes() if scene.is_terminal}
    assert terminals == ENDING_IDS
    for scene_id in ENDING_IDS:
        assert "ENDING" in service.graph.get_scene(scene_id).text


def test_every_branching_scene_offers_two_choices(service: StoryService) -> None:
    for scene in service.graph.scenes():
        if scene.is_terminal:
            continue
        assert len(scene.choices) == 2, scene.id
        assert all(choice.label for choice in scene.choices), scene.id


def test_edges_match_the_story_map(service: StoryService) -> None:
    edges: Dict[int, List[int]] = {
        scene.id: [choice.next_scene_id for choice in scene.choices]
        for scene in service.graph.scenes()
        if not scene.is_terminal
    }
    assert edges == {
        0: [1, 2],
        1: [3, 4],
        2: [1, 5],
        3: [6, 7],
        4: [8, 9],
        5: [10, 1],
        6: [11, 12],
        7: [13, 14],
        13: [15, 12],
    }


def test_always_choosing_first_option_ends_at_unity(service: StoryService) -> None:
    assert _first_choice_path(service) == [0, 1, 3, 6, 11]
